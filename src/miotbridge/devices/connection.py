"""Transport contract and connection lifecycle of a device."""

import logging
from enum import Enum
from typing import Any, Optional, Protocol, runtime_checkable

from miotbridge.devices.errors import NotConnectedError

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Network client supplied by the environment.

    The device never creates transports; it only accepts them through
    :meth:`ConnectionManager.attach` and destroys them on teardown. A transport
    may additionally expose ``async info()`` (static device metadata) and a
    ``model`` attribute.
    """

    id: str

    async def call(self, method: str, params: list[dict[str, Any]]) -> list[dict[str, Any]]:
        ...

    def destroy(self) -> None:
        ...


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class AttachResult(str, Enum):
    """What an attach meant for the device lifecycle."""

    FIRST_CONNECT = "first_connect"  # never connected before, run setup
    RECONNECT = "reconnect"  # connected again after a teardown
    SWAP = "swap"  # transport replaced while connected


class ConnectionManager:
    """Owns the transport handle and the Disconnected/Connected state."""

    def __init__(self):
        self._transport: Optional[Transport] = None
        self._ever_connected = False

    @property
    def state(self) -> ConnectionState:
        if self._transport is None:
            return ConnectionState.DISCONNECTED
        return ConnectionState.CONNECTED

    @property
    def is_connected(self) -> bool:
        return self._transport is not None

    @property
    def transport(self) -> Optional[Transport]:
        return self._transport

    def require_transport(self) -> Transport:
        """Return the current transport.

        Raises:
            NotConnectedError: If no transport is attached
        """
        if self._transport is None:
            raise NotConnectedError("Device not connected!")
        return self._transport

    def attach(self, transport: Transport) -> AttachResult:
        if self._transport is not None:
            self._transport = transport
            logger.info("Reconnected to device!")
            return AttachResult.SWAP

        self._transport = transport
        if not self._ever_connected:
            self._ever_connected = True
            return AttachResult.FIRST_CONNECT
        logger.info("Reconnected to device!")
        return AttachResult.RECONNECT

    def detach(self) -> None:
        """Destroy the current transport, if any, and clear the handle."""
        transport, self._transport = self._transport, None
        if transport is not None:
            try:
                transport.destroy()
            except Exception as e:
                logger.warning(f"Error while destroying transport: {e}")
            logger.info("Disconnected from device")
