"""Light device kind and its command surface."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from miotbridge.devices.base import DeviceKind, MiotDevice
from miotbridge.devices.constants import DeviceType
from miotbridge.devices.properties import PropertySpec

logger = logging.getLogger(__name__)


class LightProperties:
    BRIGHTNESS = "brightness"
    COLOR_TEMPERATURE = "color_temperature"
    NIGHT_LIGHT = "night_light"


class LightCapabilities:
    BRIGHTNESS_RANGE = "brightness_range"
    COLOR_TEMPERATURE_RANGE = "color_temperature_range"


def light_kind(
    properties: Iterable[PropertySpec],
    capabilities: Optional[Mapping[str, Any]] = None,
) -> DeviceKind:
    return DeviceKind(
        device_type=DeviceType.LIGHT,
        properties=tuple(properties),
        capabilities=dict(capabilities or {}),
    )


class LightDevice:
    """Light specific controls of a :class:`MiotDevice`. On/off is the device power."""

    def __init__(self, device: MiotDevice):
        if device.device_type is not DeviceType.LIGHT:
            logger.warning(f"{device.name} is a {device.device_type.value} device, not a light")
        self.device = device
        self._commands = device.commands

    def supports_brightness(self) -> bool:
        return self._commands.supports(LightProperties.BRIGHTNESS)

    def brightness_range(self) -> tuple:
        return self._commands.capability(LightCapabilities.BRIGHTNESS_RANGE, ())

    def supports_color_temperature(self) -> bool:
        return self._commands.supports(LightProperties.COLOR_TEMPERATURE)

    def color_temperature_range(self) -> tuple:
        return self._commands.capability(LightCapabilities.COLOR_TEMPERATURE_RANGE, ())

    def supports_night_light(self) -> bool:
        return self._commands.supports(LightProperties.NIGHT_LIGHT)

    def is_on(self) -> bool:
        return self.device.is_power_on()

    def get_brightness(self) -> int:
        return self._commands.value_of(LightProperties.BRIGHTNESS)

    def get_color_temperature(self) -> int:
        return self._commands.value_of(LightProperties.COLOR_TEMPERATURE)

    def is_night_light_enabled(self) -> bool:
        return bool(self._commands.value_of(LightProperties.NIGHT_LIGHT, False))

    async def set_on(self, on: bool) -> bool:
        return await self.device.set_power_on(on)

    async def set_brightness(self, brightness: int) -> bool:
        return await self._commands.set_clamped(
            LightProperties.BRIGHTNESS, brightness, LightCapabilities.BRIGHTNESS_RANGE
        )

    async def set_color_temperature(self, kelvin: int) -> bool:
        return await self._commands.set_clamped(
            LightProperties.COLOR_TEMPERATURE, kelvin, LightCapabilities.COLOR_TEMPERATURE_RANGE
        )

    async def set_night_light_enabled(self, enabled: bool) -> bool:
        return await self._commands.set_enabled(LightProperties.NIGHT_LIGHT, enabled)
