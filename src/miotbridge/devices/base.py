"""MIoT device composition root and the device kind extension point."""

import asyncio
import logging
from collections.abc import Callable, Coroutine, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from miotbridge.devices.capabilities import CapabilityRegistry, CapabilityRegistryBuilder
from miotbridge.devices.commands import CommandPipeline, minutes_from_raw, raw_from_minutes
from miotbridge.devices.connection import (
    AttachResult,
    ConnectionManager,
    ConnectionState,
    Transport,
)
from miotbridge.devices.constants import (
    Capabilities,
    DeviceType,
    Properties,
    PropertyFormat,
    READ_WRITE_NOTIFY,
)
from miotbridge.devices.errors import IdentityUnresolvedError
from miotbridge.devices.events import PropertyChangeChannel
from miotbridge.devices.properties import (
    PropertyRegistry,
    PropertyRegistryBuilder,
    PropertySpec,
)
from miotbridge.devices.protocol import ProtocolAdapter

logger = logging.getLogger(__name__)

# most devices have the power control on 2,1
BASE_POWER = PropertySpec(Properties.POWER, 2, 1, PropertyFormat.BOOL, READ_WRITE_NOTIFY)


@dataclass(frozen=True)
class DeviceKind:
    """Declarative description of a device kind.

    Attributes:
        device_type: Category tag reported by the device
        properties: Property table registered on top of the base power property
        capabilities: Static limits (units, ranges, levels) of the kind
        on_initial_fetch: Hook called with the device once the first property fetch completed
    """

    device_type: DeviceType = DeviceType.UNKNOWN
    properties: tuple[PropertySpec, ...] = ()
    capabilities: Mapping[str, Any] = field(default_factory=dict)
    on_initial_fetch: Optional[Callable[["MiotDevice"], None]] = None

    def extend(
        self,
        properties: Iterable[PropertySpec] = (),
        capabilities: Optional[Mapping[str, Any]] = None,
        **changes: Any,
    ) -> "DeviceKind":
        """Return a new kind with extra properties and capabilities layered on top."""
        return replace(
            self,
            properties=self.properties + tuple(properties),
            capabilities={**self.capabilities, **(capabilities or {})},
            **changes,
        )


GENERIC = DeviceKind()


class MiotDevice:
    """A device spoken to over the MIoT get/set properties protocol.

    Wires the property and capability registries, the connection, the protocol
    adapter and the command pipeline together. Public getters read the local
    cache; public setters never raise and report success as a bool.

    Attaching a transport schedules background work on the running event
    loop, so :meth:`update_transport` (and a constructor ``transport``) must be
    used from within a coroutine.
    """

    def __init__(
        self,
        kind: DeviceKind,
        model: str,
        device_id: Optional[str] = None,
        name: Optional[str] = None,
        transport: Optional[Transport] = None,
    ):
        self.kind = kind
        self._model = model
        self._device_id = device_id
        self.name = name or model

        if not self._model:
            logger.error("Missing model information!")

        self.device_info: dict[str, Any] = {}
        self.changes = PropertyChangeChannel()
        self._tasks: set[asyncio.Task] = set()
        self._polling: Optional[Transport] = None

        logger.info(f"Initializing device properties for {self.name}")
        self.properties = self._init_properties()
        logger.debug(f"Device properties: {list(self.properties.values())}")

        logger.info(f"Initializing device capabilities for {self.name}")
        self.capabilities = self._init_capabilities()
        logger.debug(f"Device capabilities: {dict(self.capabilities)}")

        self._connection = ConnectionManager()
        self._protocol = ProtocolAdapter(
            self.properties, self._connection, self.changes, lambda: self._device_id
        )
        self.commands = CommandPipeline(self.properties, self.capabilities, self._protocol)

        if transport is not None:
            self.update_transport(transport)

    # ---------- init ----------

    def _init_properties(self) -> PropertyRegistry:
        builder = PropertyRegistryBuilder()
        own = {spec.name for spec in self.kind.properties}
        if Properties.POWER not in own:
            builder.add(BASE_POWER)
        for spec in self.kind.properties:
            builder.add(spec)
        return builder.build()

    def _init_capabilities(self) -> CapabilityRegistry:
        builder = CapabilityRegistryBuilder()
        for name, value in self.kind.capabilities.items():
            builder.set(name, value)
        return builder.build()

    # ---------- setup ----------

    def _setup(self) -> None:
        logger.info(f"Setting up device {self.name}!")

        self._schedule(self._fetch_device_info())

        if not self._device_id:
            self._device_id = self._id_from_transport()
            logger.info(f"Device id not specified. Got did: {self._device_id} from device")

        self._check_device_id()
        self._schedule(self._initial_properties_fetch())

        logger.info("Device setup finished! Device ready, you can now control your device!")

    async def _fetch_device_info(self) -> None:
        info = getattr(self._connection.transport, "info", None)
        if info is None:
            return
        logger.debug("Fetching device info.")
        try:
            self.device_info = dict(await info())
        except Exception as e:
            logger.debug(f"Could not retrieve device info: {e}")

    def _id_from_transport(self) -> Optional[str]:
        transport = self._connection.transport
        raw = getattr(transport, "id", None)
        if not raw:
            return None
        return str(raw).removeprefix("miio:") or None

    def _check_device_id(self) -> None:
        if not self._device_id:
            error = IdentityUnresolvedError(
                f"Could not find deviceId for {self.name}! This may cause issues! "
                f"Please specify a device_id in the config file!"
            )
            logger.warning(str(error))

    async def _initial_properties_fetch(self) -> None:
        logger.info("Doing initial properties fetch")
        try:
            result = await self.poll_properties()
        except Exception as e:
            logger.debug(f"Error on initial property request! {e}")
            return
        if result is None:
            return

        logger.debug(f"Got initial device properties: {self.properties.name_values()}")
        if self.kind.on_initial_fetch is not None:
            try:
                self.kind.on_initial_fetch(self)
            except Exception as e:
                logger.error(f"Initial fetch hook failed for {self.name}: {e}")

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Cannot schedule device task: no running event loop")
            coro.close()
            return
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_until_idle(self) -> None:
        """Wait for the background setup work (info fetch, initial fetch) to finish."""
        while True:
            pending = [task for task in self._tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ---------- device control ----------

    def update_transport(self, transport: Transport) -> None:
        """Attach a transport. The first attach runs the device setup."""
        result = self._connection.attach(transport)
        if result is AttachResult.FIRST_CONNECT:
            self._setup()
        elif result is AttachResult.RECONNECT:
            self._schedule(self._initial_properties_fetch())

    def disconnect(self) -> None:
        """Destroy the transport. Registries and cached values are kept."""
        self._connection.detach()

    # ---------- lifecycle ----------

    async def poll_properties(self) -> Optional[dict[str, Any]]:
        """Fetch all properties.

        Returns:
            The values that were updated, or None when a previous poll on the
            current transport is still in flight

        Raises:
            NotConnectedError: If the device has no transport
        """
        transport = self._connection.require_transport()
        if self._polling is transport:
            logger.debug(f"Previous poll of {self.name} still in flight, skipping")
            return None
        # a poll still pending on a replaced transport does not block this one
        self._polling = transport
        try:
            return await self._protocol.read_all()
        finally:
            if self._polling is transport:
                self._polling = None

    async def refresh_property(self, name: str) -> dict[str, Any]:
        """Fetch a single property value. Never raises; returns {} on failure."""
        try:
            return await self._protocol.read_one(name)
        except Exception as e:
            logger.debug(f"Error while requesting property {name}! {e}")
            return {}

    # ---------- info ----------

    def is_connected(self) -> bool:
        return self._connection.is_connected

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection.state

    @property
    def model(self) -> str:
        transport_model = getattr(self._connection.transport, "model", None)
        return transport_model or self._model

    @property
    def device_type(self) -> DeviceType:
        return self.kind.device_type

    @property
    def device_id(self) -> Optional[str]:
        if self._device_id:
            return self._device_id
        if self.is_connected():
            return self._id_from_transport()
        return None

    # ---------- capabilities ----------

    def supports_power_control(self) -> bool:
        return self.commands.supports(Properties.POWER)

    def supports_child_lock(self) -> bool:
        return self.commands.supports(Properties.CHILD_LOCK)

    def supports_power_off_timer(self) -> bool:
        return self.commands.supports(Properties.POWER_OFF_TIME)

    def power_off_timer_unit(self) -> str:
        return self.commands.capability(Capabilities.POWER_OFF_TIMER_UNIT, "")

    def power_off_timer_range(self) -> tuple:
        return self.commands.capability(Capabilities.POWER_OFF_TIMER_RANGE, ())

    def supports_buzzer_control(self) -> bool:
        return self.commands.supports(Properties.ALARM)

    def supports_led_control(self) -> bool:
        return self.commands.supports(Properties.LIGHT)

    def supports_led_brightness(self) -> bool:
        return bool(self.commands.capability(Capabilities.LED_BRIGHTNESS_CONTROL, False))

    def supports_temperature_reporting(self) -> bool:
        return self.commands.supports(Properties.TEMPERATURE)

    def supports_relative_humidity_reporting(self) -> bool:
        return self.commands.supports(Properties.RELATIVE_HUMIDITY)

    def has_built_in_battery(self) -> bool:
        return bool(self.commands.capability(Capabilities.BUILT_IN_BATTERY, False))

    def supports_battery_power_reporting(self) -> bool:
        return self.commands.supports(Properties.BATTERY_POWER)

    def supports_battery_level_reporting(self) -> bool:
        return self.commands.supports(Properties.BATTERY_LEVEL)

    def supports_ac_power_reporting(self) -> bool:
        return self.commands.supports(Properties.AC_POWER)

    def supports_use_time_reporting(self) -> bool:
        return self.commands.supports(Properties.USE_TIME)

    # ---------- status ----------

    def is_power_on(self) -> bool:
        return bool(self.commands.value_of(Properties.POWER, False))

    def is_child_lock_active(self) -> bool:
        return bool(self.commands.value_of(Properties.CHILD_LOCK, False))

    def is_buzzer_enabled(self) -> bool:
        return bool(self.commands.value_of(Properties.ALARM, False))

    def is_led_enabled(self) -> bool:
        return bool(self.commands.value_of(Properties.LIGHT, False))

    def get_led_brightness(self) -> int:
        return 100 if self.is_led_enabled() else 0

    def get_shutdown_timer(self) -> float:
        """Remaining power-off time in minutes."""
        raw = self.commands.value_of(Properties.POWER_OFF_TIME)
        return minutes_from_raw(raw, self.power_off_timer_unit())

    def is_shutdown_timer_enabled(self) -> bool:
        return self.get_shutdown_timer() > 0

    def get_temperature(self) -> float:
        return self.commands.value_of(Properties.TEMPERATURE)

    def get_relative_humidity(self) -> float:
        return self.commands.value_of(Properties.RELATIVE_HUMIDITY)

    def is_on_battery_power(self) -> bool:
        return bool(self.commands.value_of(Properties.BATTERY_POWER, False))

    def get_battery_level(self) -> int:
        return self.commands.value_of(Properties.BATTERY_LEVEL)

    def get_use_time(self) -> int:
        return self.commands.value_of(Properties.USE_TIME)

    # ---------- commands ----------

    async def set_power_on(self, power: bool) -> bool:
        return await self.commands.set_enabled(Properties.POWER, power)

    async def set_child_lock(self, active: bool) -> bool:
        return await self.commands.set_value(Properties.CHILD_LOCK, bool(active))

    async def set_buzzer_enabled(self, enabled: bool) -> bool:
        return await self.commands.set_value(Properties.ALARM, bool(enabled))

    async def set_led_enabled(self, enabled: bool) -> bool:
        return await self.commands.set_enabled(Properties.LIGHT, enabled)

    async def set_led_brightness(self, brightness: int) -> bool:
        return await self.set_led_enabled(brightness > 0)

    async def set_shutdown_timer(self, minutes: float) -> bool:
        """Set the power-off timer in minutes; the raw value is clamped to the timer range."""
        raw = raw_from_minutes(minutes, self.power_off_timer_unit())
        return await self.commands.set_clamped(
            Properties.POWER_OFF_TIME, raw, Capabilities.POWER_OFF_TIMER_RANGE
        )

    def __repr__(self) -> str:
        return (
            f"MiotDevice(name={self.name!r}, model={self.model!r}, "
            f"device_id={self.device_id!r}, state={self.connection_state.value})"
        )
