"""Registry of the MIoT devices served by the bridge."""

import logging
from typing import Optional

from miotbridge.devices.base import MiotDevice
from miotbridge.devices.constants import DeviceType

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Devices by MIoT device id, shared by the poller and the entry script."""

    def __init__(self):
        self._devices: dict[str, MiotDevice] = {}

    def register(self, device_id: str, device: MiotDevice) -> None:
        """Register a device under ``device_id``.

        Args:
            device_id: MIoT device id (the ``did`` sent with every request)
            device: The device to register

        Raises:
            ValueError: If the id is empty or already taken
        """
        if not device_id:
            raise ValueError(f"Cannot register {device.name} without a device id")
        if device_id in self._devices:
            raise ValueError(f"Device already registered: {device_id}")
        self._devices[device_id] = device
        logger.info(f"Registered {device.model} as {device_id}")

    def add(self, device: MiotDevice) -> str:
        """Register a device under its resolved device id.

        Args:
            device: The device to register, with its device id resolved

        Returns:
            The device id it was registered under

        Raises:
            ValueError: If the device has no id or the id is already taken
        """
        self.register(device.device_id, device)
        return device.device_id

    def unregister(self, device_id: str) -> Optional[MiotDevice]:
        """Unregister a device by id.

        Args:
            device_id: ID of the device to unregister

        Returns:
            The unregistered device, or None if not found
        """
        device = self._devices.pop(device_id, None)
        if device is not None:
            logger.info(f"Unregistered {device_id}")
        return device

    def get(self, device_id: str) -> Optional[MiotDevice]:
        """Get a device by id.

        Args:
            device_id: ID of the device to retrieve

        Returns:
            The device or None if not found
        """
        return self._devices.get(device_id)

    def get_all(self) -> dict[str, MiotDevice]:
        """Get all registered devices.

        Returns:
            Copy of the mapping of device ids to devices
        """
        return dict(self._devices)

    def of_type(self, device_type: DeviceType) -> list[MiotDevice]:
        """Get the devices of one kind.

        Args:
            device_type: Device type to filter on

        Returns:
            Registered devices whose kind reports ``device_type``, in registration order
        """
        return [d for d in self._devices.values() if d.device_type is device_type]

    def connected_ids(self) -> list[str]:
        """List the ids of devices that currently have a transport.

        Returns:
            List of device ids, in registration order
        """
        return [device_id for device_id, d in self._devices.items() if d.is_connected()]

    def list_device_ids(self) -> list[str]:
        """List all registered device ids.

        Returns:
            List of device ids
        """
        return list(self._devices)

    def __len__(self) -> int:
        """Return the number of registered devices."""
        return len(self._devices)

    def __contains__(self, device_id: str) -> bool:
        """Check if a device id is registered."""
        return device_id in self._devices
