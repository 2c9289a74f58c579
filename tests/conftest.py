"""Shared fixtures for MIoT device tests."""

import pytest
import pytest_asyncio

from miotbridge.devices import MiotDevice, MockMiotTransport
from miotbridge.devices.models import ZHIMI_FAN_ZA4

ZA4_VALUES = {
    (2, 1): False,  # power
    (2, 2): 1,  # fan level
    (2, 3): False,  # horizontal swing
    (2, 5): 60,  # swing angle
    (2, 7): 0,  # mode
    (3, 1): 0,  # power off time (seconds)
    (4, 1): True,  # alarm
    (5, 1): True,  # indicator light
    (6, 1): False,  # child lock
    (7, 1): 40,  # fan speed
    (7, 2): 1234,  # use time
    (8, 1): 24.5,  # temperature
    (8, 2): 55,  # humidity
    (9, 1): 80,  # battery level
    (9, 2): False,  # on battery
    (9, 3): True,  # ac power
}


@pytest.fixture
def transport():
    """Return a simulated zhimi.fan.za4 peer."""
    return MockMiotTransport(device_id="miio:123456789", model="zhimi.fan.za4", values=ZA4_VALUES)


@pytest.fixture
def fan_device():
    """Return a disconnected zhimi.fan.za4 device."""
    return MiotDevice(ZHIMI_FAN_ZA4, "zhimi.fan.za4", name="Living Room Fan")


@pytest_asyncio.fixture
async def connected_fan(fan_device, transport):
    """Return the za4 device attached to its peer, with the initial fetch done."""
    fan_device.update_transport(transport)
    await fan_device.wait_until_idle()
    transport.calls.clear()
    return fan_device
