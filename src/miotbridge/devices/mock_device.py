"""In-memory MIoT peer for development and testing."""

import asyncio
import copy
import logging
from typing import Any, Optional

from miotbridge.devices.constants import Methods, SUCCESS_CODE

logger = logging.getLogger(__name__)

# code returned for siid/piid pairs the simulated device does not know
PROPERTY_NOT_FOUND_CODE = -4003


class MockMiotTransport:
    """Simulates a MIoT device answering get_properties / set_properties.

    Values are keyed by ``(siid, piid)``. Reads of an unknown address answer
    with :data:`PROPERTY_NOT_FOUND_CODE`; writes are stored.

    Attributes:
        calls: Every ``(method, params)`` received, in order
        failing: ``(siid, piid)`` -> code to answer with instead of success
        call_error: Exception raised by the next calls instead of answering
        gate: When set, calls wait for this event before returning their answer
        destroyed: Whether :meth:`destroy` was called
    """

    def __init__(
        self,
        device_id: str = "miio:123456789",
        model: Optional[str] = None,
        values: Optional[dict[tuple[int, int], Any]] = None,
        info: Optional[dict[str, Any]] = None,
    ):
        self.id = device_id
        self.model = model
        self.values: dict[tuple[int, int], Any] = dict(values or {})
        self.failing: dict[tuple[int, int], int] = {}
        self.calls: list[tuple[str, list[dict[str, Any]]]] = []
        self.call_error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None
        self.destroyed = False
        self._info = info

    async def call(self, method: str, params: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Answer from the device state at the time the request arrives."""
        self.calls.append((method, copy.deepcopy(params)))
        error = self.call_error
        response = None
        if error is None:
            response = self._respond(method, params)
        if self.gate is not None:
            await self.gate.wait()
        if error is not None:
            raise error
        return response

    def _respond(self, method: str, params: list[dict[str, Any]]) -> list[dict[str, Any]]:
        if method == Methods.GET_PROPERTIES:
            return [self._get(item) for item in params]
        if method == Methods.SET_PROPERTIES:
            return [self._set(item) for item in params]
        raise ValueError(f"Unknown method: {method}")

    async def info(self) -> dict[str, Any]:
        if self._info is None:
            raise ConnectionError("Device info not available")
        return dict(self._info)

    def destroy(self) -> None:
        self.destroyed = True

    def fail_property(self, siid: int, piid: int, code: int = -4001) -> None:
        self.failing[(siid, piid)] = code

    def writes(self) -> list[dict[str, Any]]:
        """All items sent with set_properties."""
        return [item for method, params in self.calls if method == Methods.SET_PROPERTIES for item in params]

    def reads(self) -> list[list[dict[str, Any]]]:
        return [params for method, params in self.calls if method == Methods.GET_PROPERTIES]

    def _result(self, item: dict[str, Any], code: int, **extra: Any) -> dict[str, Any]:
        return {"did": item.get("did"), "siid": item["siid"], "piid": item["piid"], "code": code, **extra}

    def _get(self, item: dict[str, Any]) -> dict[str, Any]:
        address = (item["siid"], item["piid"])
        if address in self.failing:
            return self._result(item, self.failing[address])
        if address not in self.values:
            return self._result(item, PROPERTY_NOT_FOUND_CODE)
        return self._result(item, SUCCESS_CODE, value=self.values[address])

    def _set(self, item: dict[str, Any]) -> dict[str, Any]:
        address = (item["siid"], item["piid"])
        if address in self.failing:
            return self._result(item, self.failing[address])
        self.values[address] = item["value"]
        logger.debug(f"Mock device {self.id} set {address} = {item['value']}")
        return self._result(item, SUCCESS_CODE)
