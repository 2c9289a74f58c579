"""Tests for the light command surface."""

import pytest
import pytest_asyncio

from miotbridge.devices import LightDevice, MiotDevice, MockMiotTransport
from miotbridge.devices.constants import DeviceType
from miotbridge.devices.models import YEELINK_LIGHT_CEILING22


@pytest.fixture
def light_transport():
    return MockMiotTransport(
        device_id="miio:555",
        values={(2, 1): True, (2, 2): 80, (2, 3): 4000, (4, 1): False, (4, 2): 0},
    )


@pytest_asyncio.fixture
async def light(light_transport):
    device = MiotDevice(YEELINK_LIGHT_CEILING22, "yeelink.light.ceiling22", name="Ceiling")
    device.update_transport(light_transport)
    await device.wait_until_idle()
    light_transport.calls.clear()
    return LightDevice(device)


class TestLightDevice:
    def test_capabilities(self):
        light = LightDevice(MiotDevice(YEELINK_LIGHT_CEILING22, "yeelink.light.ceiling22"))

        assert light.device.device_type is DeviceType.LIGHT
        assert light.supports_brightness()
        assert light.brightness_range() == (1, 100)
        assert light.supports_color_temperature()
        assert light.color_temperature_range() == (2700, 6500)
        assert light.supports_night_light()

    @pytest.mark.asyncio
    async def test_status(self, light):
        assert light.is_on()
        assert light.get_brightness() == 80
        assert light.get_color_temperature() == 4000
        assert not light.is_night_light_enabled()

    @pytest.mark.asyncio
    async def test_turn_on_when_on_is_suppressed(self, light, light_transport):
        await light.set_on(True)

        assert light_transport.writes() == []

    @pytest.mark.asyncio
    async def test_turn_off(self, light, light_transport):
        await light.set_on(False)

        assert not light.is_on()
        assert light_transport.writes() == [{"did": "555", "siid": 2, "piid": 1, "value": False}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kelvin,expected", [(2000, 2700), (9000, 6500), (5000, 5000)])
    async def test_color_temperature_clamped(self, light, light_transport, kelvin, expected):
        await light.set_color_temperature(kelvin)

        assert light_transport.writes()[0]["value"] == expected
        assert light.get_color_temperature() == expected

    @pytest.mark.asyncio
    async def test_brightness_clamped(self, light, light_transport):
        await light.set_brightness(0)

        assert light_transport.writes()[0]["value"] == 1

    @pytest.mark.asyncio
    async def test_night_light(self, light):
        await light.set_night_light_enabled(True)

        assert light.is_night_light_enabled()

    @pytest.mark.asyncio
    async def test_shutdown_timer_minutes(self, light, light_transport):
        await light.device.set_shutdown_timer(45)

        assert light_transport.writes()[0]["value"] == 45
        assert light.device.get_shutdown_timer() == 45
