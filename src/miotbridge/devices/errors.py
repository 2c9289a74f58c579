"""Error conditions raised or logged by the device layer."""


class MiotError(Exception):
    """Base class for device layer errors."""


class NotConnectedError(MiotError):
    """A protocol operation was attempted without a transport."""


class PropertyNotFoundError(MiotError):
    """A command or read referenced a property the device does not have."""

    def __init__(self, name: str):
        super().__init__(f"The property {name} was not found on this device!")
        self.name = name


class ProtocolItemError(MiotError):
    """A single item of a batched call came back with a non-zero code."""

    def __init__(self, name: str, code: int):
        super().__init__(f"Property {name} failed with code {code}")
        self.name = name
        self.code = code


class IdentityUnresolvedError(MiotError):
    """The device id could not be determined during setup."""
