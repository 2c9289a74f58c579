"""Configuration loader for the MIoT bridge."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.miotbridge/config.json"
DEFAULT_POLLING_INTERVAL = 15.0


@dataclass
class DeviceConfig:
    """Settings of a single device, handed to the device at construction."""

    model: str
    device_id: Optional[str] = None
    name: Optional[str] = None
    polling_interval: float = DEFAULT_POLLING_INTERVAL

    def validate(self) -> None:
        if not self.model:
            raise ValueError(f"Device {self.name or self.device_id} has no model")
        if self.polling_interval <= 0:
            raise ValueError(f"Polling interval must be positive, got {self.polling_interval}")


@dataclass
class BridgeConfig:
    devices: list[DeviceConfig] = field(default_factory=list)

    def validate(self) -> None:
        """Validate every device and make sure device ids are unique."""
        seen = set()
        for device in self.devices:
            device.validate()
            if device.device_id is None:
                continue
            if device.device_id in seen:
                raise ValueError(f"Duplicate device id in config: {device.device_id}")
            seen.add(device.device_id)


def load_config(config_path: Optional[str] = None) -> BridgeConfig:
    """Load bridge configuration from file with environment variable overrides.

    Environment variables:
        MIOT_CONFIG_PATH: Override config file location
        MIOT_POLLING_INTERVAL: Override the polling interval of every device

    Args:
        config_path: Path to config JSON file. Defaults to ~/.miotbridge/config.json

    Returns:
        BridgeConfig with one DeviceConfig per entry of ``devices``
    """
    path_str = config_path or os.environ.get("MIOT_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    config_file = Path(path_str).expanduser()

    if not config_file.exists():
        raise FileNotFoundError(f"Bridge config not found at {config_file}.")

    with open(config_file) as f:
        data = json.load(f)

    interval_override = os.environ.get("MIOT_POLLING_INTERVAL")

    devices = []
    for entry in data.get("devices", []):
        interval = entry.get("polling_interval", DEFAULT_POLLING_INTERVAL)
        if interval_override:
            interval = interval_override
        devices.append(
            DeviceConfig(
                model=entry.get("model", ""),
                device_id=entry.get("device_id"),
                name=entry.get("name"),
                polling_interval=float(interval),
            )
        )

    config = BridgeConfig(devices=devices)
    logger.info(f"Loaded bridge config: {len(devices)} device(s) from {config_file}")
    return config
