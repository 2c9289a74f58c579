"""MIoT device abstraction: registries, connection, protocol and commands."""

from .base import GENERIC, DeviceKind, MiotDevice
from .connection import ConnectionState, Transport
from .errors import (
    IdentityUnresolvedError,
    MiotError,
    NotConnectedError,
    PropertyNotFoundError,
    ProtocolItemError,
)
from .events import PropertiesUpdated, PropertyChangeChannel
from .fan import FanDevice, fan_kind
from .light import LightDevice, light_kind
from .mock_device import MockMiotTransport
from .properties import PropertySpec

__all__ = [
    "GENERIC",
    "DeviceKind",
    "MiotDevice",
    "ConnectionState",
    "Transport",
    "IdentityUnresolvedError",
    "MiotError",
    "NotConnectedError",
    "PropertyNotFoundError",
    "ProtocolItemError",
    "PropertiesUpdated",
    "PropertyChangeChannel",
    "FanDevice",
    "fan_kind",
    "LightDevice",
    "light_kind",
    "MockMiotTransport",
    "PropertySpec",
]
