"""Tests for PropertyPoller."""

import asyncio
import logging

import pytest

from miotbridge.bridge.device_registry import DeviceRegistry
from miotbridge.bridge.poller import MAX_FAILURES, PropertyPoller
from miotbridge.devices import GENERIC, MiotDevice, MockMiotTransport


@pytest.fixture
def peer():
    return MockMiotTransport(values={(2, 1): True})


@pytest.fixture
def device():
    return MiotDevice(GENERIC, "chuangmi.plug.v3", device_id="1002")


@pytest.fixture
def registry(device):
    registry = DeviceRegistry()
    registry.register("1002", device)
    return registry


async def connect(device, transport):
    device.update_transport(transport)
    await device.wait_until_idle()
    transport.calls.clear()


class TestPollOnce:
    @pytest.mark.asyncio
    async def test_success(self, registry, device, peer):
        await connect(device, peer)
        poller = PropertyPoller(registry)

        assert await poller.poll_once("1002", device) is True
        assert len(peer.reads()) == 1

    @pytest.mark.asyncio
    async def test_not_connected_is_skipped(self, registry, device):
        poller = PropertyPoller(registry)

        assert await poller.poll_once("1002", device) is False
        assert poller.failure_count("1002") == 0

    @pytest.mark.asyncio
    async def test_failures_counted_and_reset(self, registry, device, peer, caplog):
        await connect(device, peer)
        poller = PropertyPoller(registry)
        peer.call_error = TimeoutError("no response")

        with caplog.at_level(logging.WARNING):
            for _ in range(MAX_FAILURES):
                assert await poller.poll_once("1002", device) is False

        assert poller.failure_count("1002") == MAX_FAILURES
        assert any(r.levelno == logging.ERROR for r in caplog.records)

        peer.call_error = None
        assert await poller.poll_once("1002", device) is True
        assert poller.failure_count("1002") == 0

    @pytest.mark.asyncio
    async def test_in_flight_poll_reports_skip(self, registry, device, peer):
        await connect(device, peer)
        poller = PropertyPoller(registry)
        peer.gate = asyncio.Event()
        first = asyncio.create_task(device.poll_properties())
        await asyncio.sleep(0)

        assert await poller.poll_once("1002", device) is False

        peer.gate.set()
        await first
        assert len(peer.reads()) == 1


class TestPollLoop:
    @pytest.mark.asyncio
    async def test_start_and_stop(self, registry, device, peer):
        await connect(device, peer)
        poller = PropertyPoller(registry, interval=0.01)

        poller.start()
        assert poller.is_running
        await asyncio.sleep(0.05)
        await poller.stop()

        assert not poller.is_running
        assert len(peer.reads()) >= 2

    @pytest.mark.asyncio
    async def test_per_device_interval(self, registry, device, peer):
        await connect(device, peer)
        poller = PropertyPoller(registry, interval=0.01, intervals={"1002": 60})

        poller.start()
        await asyncio.sleep(0.05)
        await poller.stop()

        assert peer.reads() == []

    @pytest.mark.asyncio
    async def test_poll_publishes_changes(self, registry, device, peer):
        await connect(device, peer)
        events = []
        device.changes.subscribe(events.append)
        peer.values[(2, 1)] = False
        poller = PropertyPoller(registry)

        await poller.poll_once("1002", device)

        assert [dict(e.values) for e in events] == [{"power": False}]
        assert events[0].source == "poll"
