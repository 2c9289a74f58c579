"""Entry point to run the MIoT bridge against simulated devices.

Usage:
    uv run python scripts/run_bridge.py
    uv run python scripts/run_bridge.py --config path/to/config.json --debug

Every configured device is backed by an in-memory MIoT peer, polled at its
configured interval, and property changes are logged as they arrive.
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from miotbridge.bridge.config import load_config
from miotbridge.bridge.device_registry import DeviceRegistry
from miotbridge.bridge.poller import PropertyPoller
from miotbridge.devices.base import MiotDevice
from miotbridge.devices.constants import Access
from miotbridge.devices.events import PropertiesUpdated
from miotbridge.devices.mock_device import MockMiotTransport
from miotbridge.devices.models import kind_for_model

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

ENV_FILE = Path.home() / ".miotbridge" / ".env"


def log_change(event: PropertiesUpdated) -> None:
    logger.info(f"[{event.device_id}] {event.source} update: {dict(event.values)}")


def create_transport(device: MiotDevice, index: int) -> MockMiotTransport:
    """Create a simulated peer seeded with a value for every readable property."""
    values = {}
    for descriptor in device.properties.values():
        if Access.READ not in descriptor.access:
            continue
        values[(descriptor.siid, descriptor.piid)] = descriptor.coerce(0)
    return MockMiotTransport(
        device_id=f"miio:{100000 + index}",
        model=device.model,
        values=values,
    )


async def main(args: argparse.Namespace) -> int:
    """Main entry point."""
    if ENV_FILE.exists():
        load_dotenv(ENV_FILE)

    try:
        config = load_config(args.config)
        config.validate()
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        return 1

    registry = DeviceRegistry()
    intervals = {}
    for index, device_config in enumerate(config.devices):
        device = MiotDevice(
            kind_for_model(device_config.model),
            device_config.model,
            device_id=device_config.device_id,
            name=device_config.name,
        )
        device.changes.subscribe(log_change)
        device.update_transport(create_transport(device, index))
        await device.wait_until_idle()

        device_id = registry.add(device)
        intervals[device_id] = device_config.polling_interval

    poller = PropertyPoller(registry, intervals=intervals)

    # Set up graceful shutdown
    shutdown_event = asyncio.Event()

    def handle_signal():
        logger.info("Shutdown signal received")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal)

    poller.start()
    logger.info(f"Bridge running with devices: {registry.list_device_ids()} (connected: {len(registry.connected_ids())})")
    logger.info("Press Ctrl+C to stop")

    await shutdown_event.wait()

    logger.info("Stopping bridge...")
    await poller.stop()
    for device in registry.get_all().values():
        device.disconnect()
    logger.info("Bridge stopped")

    return 0


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run the MIoT bridge against simulated devices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to bridge config file (default: ~/.miotbridge/config.json)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(asyncio.run(main(args)))
