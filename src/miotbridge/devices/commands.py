"""Command pipeline: value transformation and write delegation."""

import logging
import math
from collections.abc import Sequence
from typing import Any, Optional

from miotbridge.devices.capabilities import CapabilityRegistry
from miotbridge.devices.constants import TimerUnit
from miotbridge.devices.errors import NotConnectedError, PropertyNotFoundError
from miotbridge.devices.properties import PropertyRegistry
from miotbridge.devices.protocol import ProtocolAdapter

logger = logging.getLogger(__name__)


def clamp_to_range(value: float, value_range: Sequence[float]) -> float:
    """Clamp ``value`` into ``[low, high]``. Ranges with fewer than two bounds leave it as is."""
    if len(value_range) < 2:
        return value
    low, high = value_range[0], value_range[1]
    if value > high:
        return high
    if value < low:
        return low
    return value


def in_range(value: float, value_range: Sequence[float]) -> bool:
    if len(value_range) < 2:
        return False
    return value_range[0] <= value <= value_range[1]


def level_supported(value: Any, levels: Sequence[Any]) -> bool:
    return value in levels


def minutes_from_raw(raw: float, unit: Optional[str]) -> float:
    """Convert a raw power-off timer value to minutes.

    Seconds are rounded up to whole minutes, so a raw value that is not a
    multiple of 60 does not survive a round trip.
    """
    if unit == TimerUnit.SECONDS:
        return math.ceil(raw / 60)
    if unit == TimerUnit.HOURS:
        return raw * 60
    return raw


def raw_from_minutes(minutes: float, unit: Optional[str]) -> float:
    """Convert minutes to the raw power-off timer unit.

    Hours are rounded up, a non-zero timer never becomes zero.
    """
    if unit == TimerUnit.SECONDS:
        return minutes * 60
    if unit == TimerUnit.HOURS:
        return math.ceil(minutes / 60)
    return minutes


class CommandPipeline:
    """Shared read/write path behind every public getter and setter.

    Getters are served from the property cache. Setters never raise: any
    failure is logged and reported as ``False``.
    """

    def __init__(
        self,
        properties: PropertyRegistry,
        capabilities: CapabilityRegistry,
        adapter: ProtocolAdapter,
    ):
        self._properties = properties
        self._capabilities = capabilities
        self._adapter = adapter

    def supports(self, name: str) -> bool:
        return name in self._properties

    def value_of(self, name: str, default: Any = 0) -> Any:
        return self._properties.value_of(name, default)

    def capability(self, name: str, default: Any = None) -> Any:
        return self._capabilities.get(name, default)

    async def set_value(self, name: str, value: Any) -> bool:
        descriptor = self._properties.get(name)
        if descriptor is None:
            logger.warning(str(PropertyNotFoundError(name)))
            return False

        try:
            value = descriptor.coerce(value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid value {value!r} for property {name}: {e}")
            return False

        try:
            return await self._adapter.write_one(name, value)
        except NotConnectedError:
            logger.debug(f"Cannot set property {name} to value {value}! Device not connected!")
            return False

    async def set_enabled(self, name: str, enabled: bool) -> bool:
        """Write a boolean switch, skipping the call when it is already on."""
        descriptor = self._properties.get(name)
        if descriptor is None:
            logger.warning(str(PropertyNotFoundError(name)))
            return False
        if enabled and descriptor.value is True:
            logger.debug(f"Property {name} already enabled, skipping write")
            return True
        return await self.set_value(name, bool(enabled))

    async def set_clamped(self, name: str, value: float, range_capability: str) -> bool:
        value_range = self.capability(range_capability, ())
        clamped = clamp_to_range(value, value_range)
        if clamped != value:
            logger.debug(f"Value {value} for {name} outside of {tuple(value_range)}, using {clamped}")
        return await self.set_value(name, clamped)

    async def set_level(self, name: str, value: Any, levels_capability: str) -> bool:
        levels = self.capability(levels_capability, ())
        if not level_supported(value, levels):
            logger.warning(f"Value {value} for {name} is not one of the supported levels {tuple(levels)}")
            return False
        return await self.set_value(name, value)
