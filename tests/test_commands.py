"""Tests for the command pipeline and its value transformations."""

import logging

import pytest

from miotbridge.devices.commands import (
    clamp_to_range,
    in_range,
    level_supported,
    minutes_from_raw,
    raw_from_minutes,
)
from miotbridge.devices.constants import TimerUnit


class TestRangeHelpers:
    @pytest.mark.parametrize(
        "value,expected",
        [(-10, 30), (29, 30), (30, 30), (75, 75), (120, 120), (121, 120), (500, 120)],
    )
    def test_clamp_to_range(self, value, expected):
        assert clamp_to_range(value, (30, 120)) == expected

    def test_clamp_without_range_keeps_value(self):
        assert clamp_to_range(500, ()) == 500

    def test_in_range(self):
        assert in_range(60, (30, 120))
        assert not in_range(150, (30, 120))
        assert not in_range(60, ())

    def test_level_supported(self):
        assert level_supported(90, (30, 60, 90))
        assert not level_supported(45, (30, 60, 90))


class TestShutdownTimerConversion:
    """Tests for minutes <-> raw timer conversion."""

    def test_seconds(self):
        assert raw_from_minutes(5, TimerUnit.SECONDS) == 300
        assert minutes_from_raw(300, TimerUnit.SECONDS) == 5

    def test_seconds_read_rounds_up(self):
        assert minutes_from_raw(61, TimerUnit.SECONDS) == 2
        assert minutes_from_raw(1, TimerUnit.SECONDS) == 1

    def test_hours(self):
        assert raw_from_minutes(120, TimerUnit.HOURS) == 2
        assert minutes_from_raw(2, TimerUnit.HOURS) == 120

    def test_hours_write_rounds_up(self):
        assert raw_from_minutes(90, TimerUnit.HOURS) == 2
        assert raw_from_minutes(0, TimerUnit.HOURS) == 0

    @pytest.mark.parametrize("unit", [TimerUnit.MINUTES, "", None])
    def test_minutes_or_unknown_unit_is_identity(self, unit):
        assert raw_from_minutes(45, unit) == 45
        assert minutes_from_raw(45, unit) == 45

    def test_plain_string_unit(self):
        assert raw_from_minutes(5, "seconds") == 300


class TestCommandPipeline:
    """Tests for the pipeline on a connected device."""

    @pytest.mark.asyncio
    async def test_set_value_unknown_property_does_not_raise(self, connected_fan, transport):
        assert await connected_fan.commands.set_value("vertical_swing", True) is False
        assert transport.writes() == []

    @pytest.mark.asyncio
    async def test_set_value_invalid_value_does_not_raise(self, connected_fan, transport):
        assert await connected_fan.commands.set_value("fan_level", "fast") is False
        assert transport.writes() == []

    @pytest.mark.asyncio
    async def test_set_value_not_connected_does_not_raise(self, fan_device):
        assert await fan_device.commands.set_value("power", True) is False

    @pytest.mark.asyncio
    async def test_set_value_coerces_to_format(self, connected_fan, transport):
        await connected_fan.commands.set_value("fan_level", 2.0)

        assert transport.writes()[0]["value"] == 2
        assert isinstance(transport.writes()[0]["value"], int)

    @pytest.mark.asyncio
    async def test_set_enabled_skips_when_already_on(self, connected_fan, transport):
        # indicator light is on in the simulated peer
        assert await connected_fan.commands.set_enabled("light", True) is True
        assert transport.writes() == []

    @pytest.mark.asyncio
    async def test_set_enabled_always_writes_off(self, connected_fan, transport):
        await connected_fan.commands.set_enabled("power", False)
        await connected_fan.commands.set_enabled("power", False)

        assert len(transport.writes()) == 2

    @pytest.mark.asyncio
    async def test_set_level_without_declared_levels(self, connected_fan, transport):
        result = await connected_fan.commands.set_level("horizontal_swing_angle", 60, "horizontal_swing_levels")

        assert result is False
        assert transport.writes() == []

    @pytest.mark.asyncio
    async def test_set_enabled_unknown_property_warns_once(self, connected_fan, transport, caplog):
        with caplog.at_level(logging.WARNING):
            assert await connected_fan.commands.set_enabled("vertical_swing", True) is False

        assert caplog.text.count("vertical_swing was not found") == 1
        assert transport.writes() == []
