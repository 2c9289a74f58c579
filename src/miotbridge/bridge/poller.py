"""Periodic property polling for registered devices."""

import asyncio
import logging
from collections import defaultdict
from typing import Optional

from miotbridge.bridge.config import DEFAULT_POLLING_INTERVAL
from miotbridge.bridge.device_registry import DeviceRegistry
from miotbridge.devices.base import MiotDevice
from miotbridge.devices.errors import NotConnectedError

logger = logging.getLogger(__name__)

# Log an error once a device failed this many polls in a row
MAX_FAILURES = 3


class PropertyPoller:
    """Runs one polling loop per registered device.

    Each loop awaits the previous poll before sleeping. The device itself
    skips a poll while another one is still in flight.
    """

    def __init__(
        self,
        registry: DeviceRegistry,
        interval: float = DEFAULT_POLLING_INTERVAL,
        intervals: Optional[dict[str, float]] = None,
    ):
        """Initialize the poller.

        Args:
            registry: Devices to poll
            interval: Seconds between polls for devices without their own interval
            intervals: Per-device polling interval by device ID
        """
        self._registry = registry
        self._interval = interval
        self._intervals = dict(intervals or {})
        self._tasks: dict[str, asyncio.Task] = {}
        self._failures: dict[str, int] = defaultdict(int)

    def start(self) -> None:
        """Start polling every registered device. Must be called from a running loop."""
        for device_id, device in self._registry.get_all().items():
            if device_id in self._tasks:
                continue
            interval = self._intervals.get(device_id, self._interval)
            self._tasks[device_id] = asyncio.create_task(self._poll_loop(device_id, device, interval))
            logger.info(f"Polling {device_id} every {interval}s")

    async def stop(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Property polling stopped")

    async def poll_once(self, device_id: str, device: MiotDevice) -> bool:
        """Run a single poll cycle.

        Returns:
            True if the device answered, False if it was skipped or failed
        """
        try:
            result = await device.poll_properties()
        except NotConnectedError:
            logger.debug(f"Skipping poll of {device_id}, device not connected")
            return False
        except Exception as e:
            self._failures[device_id] += 1
            if self._failures[device_id] == MAX_FAILURES:
                logger.error(f"Polling {device_id} failed {MAX_FAILURES} times in a row: {e}")
            else:
                logger.warning(f"Failed to poll {device_id}: {e}")
            return False

        self._failures[device_id] = 0
        return result is not None

    def failure_count(self, device_id: str) -> int:
        return self._failures.get(device_id, 0)

    @property
    def is_running(self) -> bool:
        return any(not task.done() for task in self._tasks.values())

    async def _poll_loop(self, device_id: str, device: MiotDevice, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            await self.poll_once(device_id, device)
