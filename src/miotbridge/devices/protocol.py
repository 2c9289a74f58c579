"""Batched get_properties / set_properties marshaling."""

import logging
from collections.abc import Callable
from typing import Any, Optional

from miotbridge.devices.connection import ConnectionManager, Transport
from miotbridge.devices.constants import Methods, SUCCESS_CODE
from miotbridge.devices.errors import ProtocolItemError, PropertyNotFoundError
from miotbridge.devices.events import (
    PropertiesUpdated,
    PropertyChangeChannel,
    SOURCE_COMMAND,
    SOURCE_POLL,
)
from miotbridge.devices.properties import PropertyRegistry

logger = logging.getLogger(__name__)


class ProtocolAdapter:
    """Translates registry entries into MIoT RPC calls and applies the results.

    Only items answered with ``code == 0`` touch the cache. Results that arrive
    after the carrying transport was detached or replaced are dropped. A read
    never overwrites a property whose write was confirmed after the read was
    sent.
    """

    def __init__(
        self,
        properties: PropertyRegistry,
        connection: ConnectionManager,
        changes: PropertyChangeChannel,
        device_id: Callable[[], Optional[str]],
    ):
        self._properties = properties
        self._connection = connection
        self._changes = changes
        self._device_id = device_id
        self._generation = 0
        self._written_at: dict[str, int] = {}

    async def read_all(self) -> dict[str, Any]:
        """Fetch every registered property in a single batched call.

        Returns:
            Mapping of property name to value for the items that succeeded

        Raises:
            NotConnectedError: If the device has no transport
        """
        return await self._read(list(self._properties))

    async def read_one(self, name: str) -> dict[str, Any]:
        """Fetch a single property.

        Raises:
            NotConnectedError: If the device has no transport
            PropertyNotFoundError: If ``name`` is not registered
        """
        if name not in self._properties:
            raise PropertyNotFoundError(name)
        return await self._read([name])

    async def write_one(self, name: str, value: Any) -> bool:
        """Write a single property value.

        Returns:
            True if the device accepted the value and the cache was updated

        Raises:
            NotConnectedError: If the device has no transport
            PropertyNotFoundError: If ``name`` is not registered
        """
        transport = self._connection.require_transport()
        descriptor = self._properties.get(name)
        if descriptor is None:
            raise PropertyNotFoundError(name)

        item = descriptor.to_protocol(self._device_id(), value)
        try:
            result = await transport.call(Methods.SET_PROPERTIES, [item])
        except Exception as e:
            logger.warning(f"Error while setting property {name} to value {value}! {e}")
            return False

        code = result[0].get("code") if result else None
        if code != SUCCESS_CODE:
            logger.warning(f"Device rejected property {name} with value {value} (code {code})")
            return False

        if not self._is_current(transport):
            logger.debug(f"Ignoring result for {name}, connection changed while the call was in flight")
            return False

        logger.debug(f"Successfully set property {name} to value {value}! Result: {result}")
        self._generation += 1
        self._written_at[name] = self._generation
        descriptor._update_value(value)
        self._changes.publish(PropertiesUpdated(self._device_id(), {name: value}, SOURCE_COMMAND))
        return True

    async def _read(self, names: list[str]) -> dict[str, Any]:
        transport = self._connection.require_transport()
        did = self._device_id()
        params = [self._properties[name].to_protocol(did) for name in names]
        issued_at = self._generation

        # transport errors propagate, the poller decides what to do with them
        results = await transport.call(Methods.GET_PROPERTIES, params)

        if not self._is_current(transport):
            logger.debug("Ignoring property values, connection changed while the call was in flight")
            return {}
        if len(results) != len(names):
            logger.debug(f"Requested {len(names)} properties but got {len(results)} results")

        return self._apply_results(names, results, issued_at)

    def _apply_results(
        self, names: list[str], results: list[dict[str, Any]], issued_at: int
    ) -> dict[str, Any]:
        updated = {}
        changed = {}
        for name, item in zip(names, results):
            code = item.get("code")
            if code != SUCCESS_CODE:
                logger.debug(str(ProtocolItemError(name, code)))
                continue
            if self._written_at.get(name, 0) > issued_at:
                logger.debug(f"Ignoring read value of {name}, it was written while the read was in flight")
                continue
            descriptor = self._properties[name]
            value = item.get("value")
            if descriptor.value != value:
                changed[name] = value
            descriptor._update_value(value)
            updated[name] = value

        if changed:
            self._changes.publish(PropertiesUpdated(self._device_id(), changed, SOURCE_POLL))
        return updated

    def _is_current(self, transport: Transport) -> bool:
        return self._connection.transport is transport
