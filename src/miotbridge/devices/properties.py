"""MIoT property descriptors and the per-device property registry."""

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from miotbridge.devices.constants import Access, PropertyFormat, READ_WRITE_NOTIFY
from miotbridge.devices.errors import PropertyNotFoundError

logger = logging.getLogger(__name__)

_NO_VALUE = object()


@dataclass(frozen=True)
class PropertySpec:
    """Declarative entry of a device kind's property table."""

    name: str
    siid: int
    piid: int
    format: PropertyFormat = PropertyFormat.BOOL
    access: frozenset[Access] = READ_WRITE_NOTIFY


class PropertyDescriptor:
    """One addressable property of a device.

    The address (siid/piid), format and access rights are fixed at
    construction. ``value`` holds the last value confirmed by the device and is
    ``None`` until the first successful round trip.
    """

    __slots__ = ("_spec", "_value")

    def __init__(self, spec: PropertySpec):
        self._spec = spec
        self._value: Any = None

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def siid(self) -> int:
        return self._spec.siid

    @property
    def piid(self) -> int:
        return self._spec.piid

    @property
    def format(self) -> PropertyFormat:
        return self._spec.format

    @property
    def access(self) -> frozenset[Access]:
        return self._spec.access

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_writable(self) -> bool:
        return Access.WRITE in self._spec.access

    def _update_value(self, value: Any) -> None:
        # written by ProtocolAdapter after a confirmed round trip only
        self._value = value

    def coerce(self, value: Any) -> Any:
        """Convert ``value`` to this property's wire format.

        Raises:
            ValueError: If the value cannot be represented in the format
        """
        fmt = self._spec.format
        if fmt is PropertyFormat.BOOL:
            return bool(value)
        if fmt is PropertyFormat.INT:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"{self.name} expects an integer, got {value}")
            return int(value)
        if fmt is PropertyFormat.FLOAT:
            return float(value)
        return str(value)

    def to_protocol(self, did: Optional[str], value: Any = _NO_VALUE) -> dict[str, Any]:
        """Build the wire item for this property, with ``value`` for writes."""
        item = {"did": did, "siid": self.siid, "piid": self.piid}
        if value is not _NO_VALUE:
            item["value"] = value
        return item

    def __repr__(self) -> str:
        return (
            f"PropertyDescriptor({self.name!r}, siid={self.siid}, piid={self.piid}, "
            f"format={self.format.value}, value={self._value!r})"
        )


class PropertyRegistry(Mapping[str, PropertyDescriptor]):
    """Read-only mapping of property name to descriptor.

    Produced by :class:`PropertyRegistryBuilder`; there is no way to add or
    remove properties once built. Iteration order is registration order, which
    is also the order of items in a batched read.
    """

    def __init__(self, descriptors: dict[str, PropertyDescriptor]):
        self._descriptors = dict(descriptors)

    def __getitem__(self, name: str) -> PropertyDescriptor:
        return self._descriptors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def value_of(self, name: str, default: Any = 0) -> Any:
        """Return the cached value of ``name``.

        Returns ``default`` when the property is not registered on this device
        (a warning is logged) or has not been fetched yet.
        """
        descriptor = self._descriptors.get(name)
        if descriptor is None:
            logger.warning(str(PropertyNotFoundError(name)))
            return default
        if descriptor.value is None:
            return default
        return descriptor.value

    def name_values(self) -> dict[str, Any]:
        return {name: d.value for name, d in self._descriptors.items()}


class PropertyRegistryBuilder:
    """Collects property registrations while a device is being initialized."""

    def __init__(self):
        self._descriptors: dict[str, PropertyDescriptor] = {}
        self._built = False

    def register(
        self,
        name: str,
        siid: int,
        piid: int,
        format: PropertyFormat = PropertyFormat.BOOL,
        access: Iterable[Access] = READ_WRITE_NOTIFY,
    ) -> "PropertyRegistryBuilder":
        """Register a property.

        Raises:
            ValueError: If ``name`` is already registered or the builder was already built
        """
        return self.add(PropertySpec(name, siid, piid, PropertyFormat(format), frozenset(access)))

    def add(self, spec: PropertySpec) -> "PropertyRegistryBuilder":
        if self._built:
            raise ValueError("Properties can only be registered during device initialization")
        if spec.name in self._descriptors:
            raise ValueError(f"Property already registered: {spec.name}")
        self._descriptors[spec.name] = PropertyDescriptor(spec)
        return self

    def __contains__(self, name: str) -> bool:
        return name in self._descriptors

    def build(self) -> PropertyRegistry:
        self._built = True
        return PropertyRegistry(self._descriptors)
