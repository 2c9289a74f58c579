"""Fan device kind and its command surface."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from miotbridge.devices.base import DeviceKind, MiotDevice
from miotbridge.devices.commands import clamp_to_range, in_range, level_supported
from miotbridge.devices.constants import DeviceType
from miotbridge.devices.properties import PropertySpec

logger = logging.getLogger(__name__)

COMMAND_NOT_SUPPORTED_MSG = "Command not supported by this device!"


class FanProperties:
    FAN_SPEED = "fan_speed"
    FAN_SPEED_RPM = "fan_speed_rpm"
    FAN_LEVEL = "fan_level"
    MODE = "mode"
    HORIZONTAL_SWING = "horizontal_swing"
    HORIZONTAL_SWING_ANGLE = "horizontal_swing_angle"
    VERTICAL_SWING = "vertical_swing"
    VERTICAL_SWING_ANGLE = "vertical_swing_angle"
    HORIZONTAL_MOVE = "horizontal_move"
    VERTICAL_MOVE = "vertical_move"
    ANION = "anion"


class FanCapabilities:
    FAN_SPEED_RANGE = "fan_speed_range"
    FAN_LEVELS = "fan_levels"
    HORIZONTAL_SWING_ANGLE_RANGE = "horizontal_swing_angle_range"
    HORIZONTAL_SWING_LEVELS = "horizontal_swing_levels"
    VERTICAL_SWING_ANGLE_RANGE = "vertical_swing_angle_range"
    # mode property values
    NORMAL_MODE = "normal_mode"
    NATURAL_MODE = "natural_mode"
    SLEEP_MODE = "sleep_mode"


def _log_use_time(device: MiotDevice) -> None:
    if device.supports_use_time_reporting():
        logger.info(f"Device total use time: {device.get_use_time()} minutes.")


def fan_kind(
    properties: Iterable[PropertySpec],
    capabilities: Optional[Mapping[str, Any]] = None,
) -> DeviceKind:
    """Build a fan kind from a model's property table and capabilities."""
    return DeviceKind(
        device_type=DeviceType.FAN,
        properties=tuple(properties),
        capabilities=dict(capabilities or {}),
        on_initial_fetch=_log_use_time,
    )


class FanDevice:
    """Fan specific capabilities, status and commands of a :class:`MiotDevice`.

    Common controls (power, timer, buzzer, ...) stay on ``device``.
    """

    def __init__(self, device: MiotDevice):
        if device.device_type is not DeviceType.FAN:
            logger.warning(f"{device.name} is a {device.device_type.value} device, not a fan")
        self.device = device
        self._commands = device.commands

    # ---------- capabilities ----------

    def supports_stepless_fan_speed(self) -> bool:
        return self._commands.supports(FanProperties.FAN_SPEED)

    def supports_fan_speed_rpm_reporting(self) -> bool:
        return self._commands.supports(FanProperties.FAN_SPEED_RPM)

    def supports_fan_levels(self) -> bool:
        return self._commands.capability(FanCapabilities.FAN_LEVELS) is not None

    def fan_levels(self) -> int:
        """Number of preconfigured fan levels."""
        return self._commands.capability(FanCapabilities.FAN_LEVELS, 0)

    def supports_horizontal_swing(self) -> bool:
        return self._commands.supports(FanProperties.HORIZONTAL_SWING)

    def supports_horizontal_swing_angle(self) -> bool:
        return self._commands.supports(FanProperties.HORIZONTAL_SWING_ANGLE)

    def horizontal_swing_angle_range(self) -> tuple:
        return self._commands.capability(FanCapabilities.HORIZONTAL_SWING_ANGLE_RANGE, ())

    def supports_horizontal_swing_levels(self) -> bool:
        return self._commands.capability(FanCapabilities.HORIZONTAL_SWING_LEVELS) is not None

    def horizontal_swing_levels(self) -> tuple:
        """Oscillation angles (in degree) the fan accepts."""
        return self._commands.capability(FanCapabilities.HORIZONTAL_SWING_LEVELS, ())

    def supports_vertical_swing(self) -> bool:
        return self._commands.supports(FanProperties.VERTICAL_SWING)

    def supports_vertical_swing_angle(self) -> bool:
        return self._commands.supports(FanProperties.VERTICAL_SWING_ANGLE)

    def vertical_swing_angle_range(self) -> tuple:
        return self._commands.capability(FanCapabilities.VERTICAL_SWING_ANGLE_RANGE, ())

    def supports_horizontal_move(self) -> bool:
        return self._commands.supports(FanProperties.HORIZONTAL_MOVE)

    def supports_vertical_move(self) -> bool:
        return self._commands.supports(FanProperties.VERTICAL_MOVE)

    def supports_natural_mode(self) -> bool:
        return self._supports_mode(FanCapabilities.NATURAL_MODE)

    def supports_sleep_mode(self) -> bool:
        return self._supports_mode(FanCapabilities.SLEEP_MODE)

    def supports_ioniser(self) -> bool:
        return self._commands.supports(FanProperties.ANION)

    # ---------- capability helpers ----------

    def adjust_horizontal_swing_angle_to_range(self, angle: float) -> float:
        if self.supports_horizontal_swing_angle():
            return clamp_to_range(angle, self.horizontal_swing_angle_range())
        return angle

    def check_horizontal_swing_angle_within_range(self, angle: float) -> bool:
        return self.supports_horizontal_swing_angle() and in_range(
            angle, self.horizontal_swing_angle_range()
        )

    def check_horizontal_swing_level_supported(self, angle: float) -> bool:
        return level_supported(angle, self.horizontal_swing_levels())

    # ---------- status ----------

    def get_rotation_speed(self) -> int:
        return self._commands.value_of(FanProperties.FAN_SPEED)

    def get_speed(self) -> int:
        return self._commands.value_of(FanProperties.FAN_SPEED_RPM)

    def get_fan_level(self) -> int:
        return self._commands.value_of(FanProperties.FAN_LEVEL)

    def is_horizontal_swing_enabled(self) -> bool:
        return bool(self._commands.value_of(FanProperties.HORIZONTAL_SWING, False))

    def get_horizontal_swing_angle(self) -> int:
        return self._commands.value_of(FanProperties.HORIZONTAL_SWING_ANGLE)

    def is_vertical_swing_enabled(self) -> bool:
        return bool(self._commands.value_of(FanProperties.VERTICAL_SWING, False))

    def get_vertical_swing_angle(self) -> int:
        return self._commands.value_of(FanProperties.VERTICAL_SWING_ANGLE)

    def is_natural_mode_enabled(self) -> bool:
        return self._is_mode(FanCapabilities.NATURAL_MODE)

    def is_sleep_mode_enabled(self) -> bool:
        return self._is_mode(FanCapabilities.SLEEP_MODE)

    def is_ioniser_enabled(self) -> bool:
        return bool(self._commands.value_of(FanProperties.ANION, False))

    # ---------- commands ----------

    async def set_rotation_speed(self, speed: int) -> bool:
        return await self._commands.set_clamped(
            FanProperties.FAN_SPEED, speed, FanCapabilities.FAN_SPEED_RANGE
        )

    async def set_fan_level(self, level: int) -> bool:
        levels = self.fan_levels()
        if levels and not 1 <= level <= levels:
            logger.warning(f"Fan level {level} not supported, the fan has {levels} levels")
            return False
        return await self._commands.set_value(FanProperties.FAN_LEVEL, level)

    async def set_horizontal_swing_enabled(self, enabled: bool) -> bool:
        return await self._commands.set_value(FanProperties.HORIZONTAL_SWING, bool(enabled))

    async def set_horizontal_swing_angle(self, angle: int) -> bool:
        """Set the oscillation angle.

        Fans with discrete swing levels only accept one of those levels; other
        fans get the angle clamped to their angle range.
        """
        if self.supports_horizontal_swing_levels():
            return await self._commands.set_level(
                FanProperties.HORIZONTAL_SWING_ANGLE, angle, FanCapabilities.HORIZONTAL_SWING_LEVELS
            )
        return await self._commands.set_clamped(
            FanProperties.HORIZONTAL_SWING_ANGLE, angle, FanCapabilities.HORIZONTAL_SWING_ANGLE_RANGE
        )

    async def set_vertical_swing_enabled(self, enabled: bool) -> bool:
        return await self._commands.set_value(FanProperties.VERTICAL_SWING, bool(enabled))

    async def set_vertical_swing_angle(self, angle: int) -> bool:
        return await self._commands.set_clamped(
            FanProperties.VERTICAL_SWING_ANGLE, angle, FanCapabilities.VERTICAL_SWING_ANGLE_RANGE
        )

    async def set_natural_mode_enabled(self, enabled: bool) -> bool:
        return await self._set_mode(FanCapabilities.NATURAL_MODE, enabled)

    async def set_sleep_mode_enabled(self, enabled: bool) -> bool:
        return await self._set_mode(FanCapabilities.SLEEP_MODE, enabled)

    async def move_left(self) -> bool:
        return await self._commands.set_value(FanProperties.HORIZONTAL_MOVE, "left")

    async def move_right(self) -> bool:
        return await self._commands.set_value(FanProperties.HORIZONTAL_MOVE, "right")

    async def move_up(self) -> bool:
        return await self._commands.set_value(FanProperties.VERTICAL_MOVE, "up")

    async def move_down(self) -> bool:
        return await self._commands.set_value(FanProperties.VERTICAL_MOVE, "down")

    async def set_ioniser_enabled(self, enabled: bool) -> bool:
        return await self._commands.set_value(FanProperties.ANION, bool(enabled))

    # ---------- helpers ----------

    def _supports_mode(self, mode_capability: str) -> bool:
        return (
            self._commands.supports(FanProperties.MODE)
            and self._commands.capability(mode_capability) is not None
        )

    def _is_mode(self, mode_capability: str) -> bool:
        if not self._supports_mode(mode_capability):
            return False
        return self._commands.value_of(FanProperties.MODE, None) == self._commands.capability(mode_capability)

    async def _set_mode(self, mode_capability: str, enabled: bool) -> bool:
        if not self._supports_mode(mode_capability):
            logger.warning(COMMAND_NOT_SUPPORTED_MSG)
            return False
        if enabled:
            mode = self._commands.capability(mode_capability)
        else:
            mode = self._commands.capability(FanCapabilities.NORMAL_MODE, 0)
        return await self._commands.set_value(FanProperties.MODE, mode)
