"""
Tests for the command boundary.
"""

import asyncio

import pytest

from feedharvest.config.settings import Config
from feedharvest.engine.service import HarvestService
from feedharvest.views import StaticHTMLView

from conftest import dated_page


@pytest.fixture
def slow_config():
    """Config whose settle delay keeps a run alive until it is stopped."""
    return Config(settle_delay=30, expand_delay=0, notify_console=False)


def _view():
    return StaticHTMLView([
        dated_page("2024-01-03T00:00:00Z", "2024-01-02T00:00:00Z"),
        dated_page("2024-01-01T00:00:00Z", prefix="later"),
    ])


class TestHarvestService:
    """Test START, STOP, GET_STATUS and GET_ITEMS handling."""

    @pytest.mark.asyncio
    async def test_start_status_stop(self, slow_config, notifier):
        """Test a run can be started, inspected and stopped."""
        service = HarvestService(_view(), notifier, slow_config)

        assert await service.handle({"action": "START", "config": {"mode": "all"}}) == {"status": "started"}
        await asyncio.sleep(0.05)

        status = await service.handle({"action": "GET_STATUS"})
        assert status == {"active": True, "item_count": 2, "phase": "collecting"}

        assert await service.handle({"action": "STOP"}) == {"status": "stopped"}
        status = await service.handle({"action": "GET_STATUS"})
        assert status["active"] is False
        assert len(notifier.of("COLLECTION_COMPLETE")) == 1

    @pytest.mark.asyncio
    async def test_start_while_active(self, slow_config, notifier):
        """Test a second START is ignored while a run is active."""
        service = HarvestService(_view(), notifier, slow_config)

        await service.handle({"action": "START"})
        response = await service.handle({"action": "START", "config": {"mode": "count", "max_items": 1}})

        assert response == {"status": "ignored"}
        await service.handle({"action": "STOP"})

    @pytest.mark.asyncio
    async def test_get_items(self, fast_config, notifier):
        """Test items are returned as plain dicts."""
        service = HarvestService(_view(), notifier, fast_config)

        await service.handle({"action": "START", "config": {"mode": "count", "max_items": 2}})
        await service.wait()
        response = await service.handle({"action": "GET_ITEMS"})

        assert len(response["items"]) == 2
        assert response["items"][0]["timestamp"] == "2024-01-03T00:00:00Z"
        assert response["items"][0]["is_thread"] is False

    @pytest.mark.asyncio
    async def test_invalid_config(self, fast_config, notifier):
        """Test an inconsistent START config is reported, not raised."""
        service = HarvestService(_view(), notifier, fast_config)

        response = await service.handle({"action": "START", "config": {"mode": "count"}})

        assert response["status"] == "error"
        assert "max_items" in response["error"]
        assert service.controller.active is False

    @pytest.mark.asyncio
    async def test_unknown_action(self, fast_config, notifier):
        """Test unknown actions are reported as errors."""
        service = HarvestService(_view(), notifier, fast_config)

        response = await service.handle({"action": "PAUSE"})

        assert response == {"status": "error", "error": "Unknown action: PAUSE"}

    @pytest.mark.asyncio
    async def test_stop_when_idle(self, fast_config, notifier):
        """Test STOP without an active run is harmless."""
        service = HarvestService(_view(), notifier, fast_config)

        assert await service.handle({"action": "STOP"}) == {"status": "stopped"}
        assert notifier.events == []

    @pytest.mark.asyncio
    async def test_malformed_command(self, fast_config, notifier):
        """Test commands that are not dicts are answered with an error."""
        service = HarvestService(_view(), notifier, fast_config)

        for command in ("START", None, ["START"]):
            response = await service.handle(command)
            assert response == {"status": "error", "error": "Command must be a dict"}

        assert service.controller.state.active is False
