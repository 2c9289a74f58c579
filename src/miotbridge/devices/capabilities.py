"""Static device limits (ranges, units, levels) known at construction time."""

from collections.abc import Iterator, Mapping
from typing import Any


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(value)
    return value


class CapabilityRegistry(Mapping[str, Any]):
    """Read-only mapping of capability name to value."""

    def __init__(self, values: dict[str, Any]):
        self._values = dict(values)

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def has(self, name: str) -> bool:
        return name in self._values


class CapabilityRegistryBuilder:
    def __init__(self):
        self._values: dict[str, Any] = {}
        self._built = False

    def set(self, name: str, value: Any) -> "CapabilityRegistryBuilder":
        """Set a capability value. Lists are stored as tuples.

        Raises:
            ValueError: If the registry was already built
        """
        if self._built:
            raise ValueError("Capabilities can only be set during device initialization")
        self._values[name] = _freeze(value)
        return self

    def build(self) -> CapabilityRegistry:
        self._built = True
        return CapabilityRegistry(self._values)
