"""Property change notifications for listeners that mirror device state."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional

logger = logging.getLogger(__name__)

SOURCE_COMMAND = "command"
SOURCE_POLL = "poll"


@dataclass(frozen=True)
class PropertiesUpdated:
    """Payload delivered to change listeners.

    Attributes:
        device_id: Id of the device the values belong to (may be None if unresolved)
        values: Mapping of property name to its new cached value
        source: ``"command"`` for a confirmed write, ``"poll"`` for a bulk fetch
    """

    device_id: Optional[str]
    values: Mapping[str, Any] = field(default_factory=dict)
    source: str = SOURCE_COMMAND

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


Listener = Callable[[PropertiesUpdated], None]


class PropertyChangeChannel:
    """Explicit publish/subscribe channel for :class:`PropertiesUpdated` events."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: PropertiesUpdated) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Property change listener {listener!r} failed: {e}")

    def __len__(self) -> int:
        return len(self._listeners)
