"""Bridge side: configuration, device registry and polling."""

from miotbridge.bridge.config import BridgeConfig, DeviceConfig, load_config
from miotbridge.bridge.device_registry import DeviceRegistry
from miotbridge.bridge.poller import PropertyPoller

__all__ = ["BridgeConfig", "DeviceConfig", "load_config", "DeviceRegistry", "PropertyPoller"]
