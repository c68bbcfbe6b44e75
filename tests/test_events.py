"""Tests for event system (dispatcher and event types)."""

import asyncio
from datetime import datetime, timezone
from typing import List
from uuid import uuid4

import pytest
from pydantic import ValidationError

from playerstore.events import EventDispatcher, EventType, PlayerJoinedEvent, PlayerLeftEvent


class TestEventDispatcher:
    """Test event dispatcher functionality."""

    @pytest.mark.asyncio
    async def test_dispatch_player_joined_event(self):
        dispatcher = EventDispatcher()
        received: List[PlayerJoinedEvent] = []

        async def handler(event: PlayerJoinedEvent) -> None:
            received.append(event)

        dispatcher.on_player_joined(handler)
        event = PlayerJoinedEvent(player_id=uuid4(), player_name="TestPlayer")

        await dispatcher.dispatch_player_joined(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_sync_and_async_handlers(self):
        dispatcher = EventDispatcher()
        async_calls = []
        sync_calls = []

        async def async_handler(event: PlayerLeftEvent) -> None:
            async_calls.append(event.player_name)

        def sync_handler(event: PlayerLeftEvent) -> None:
            sync_calls.append(event.player_name)

        dispatcher.on_player_left(async_handler)
        dispatcher.on_player_left(sync_handler)

        await dispatcher.dispatch_player_left(
            PlayerLeftEvent(player_id=uuid4(), player_name="Alex")
        )

        assert async_calls == ["Alex"]
        assert sync_calls == ["Alex"]

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self, caplog):
        dispatcher = EventDispatcher()
        calls = []

        async def failing_handler(event: PlayerJoinedEvent) -> None:
            raise RuntimeError("boom")

        async def working_handler(event: PlayerJoinedEvent) -> None:
            await asyncio.sleep(0.01)
            calls.append(event.player_name)

        dispatcher.on_player_joined(failing_handler)
        dispatcher.on_player_joined(working_handler)

        await dispatcher.dispatch_player_joined(
            PlayerJoinedEvent(player_id=uuid4(), player_name="Steve")
        )

        assert calls == ["Steve"]
        assert "failing_handler failed for event player.joined: boom" in caplog.text

    @pytest.mark.asyncio
    async def test_events_only_reach_their_handlers(self):
        dispatcher = EventDispatcher()
        joined = []

        dispatcher.on_player_joined(lambda event: joined.append(event))

        await dispatcher.dispatch_player_left(
            PlayerLeftEvent(player_id=uuid4(), player_name="Steve")
        )

        assert joined == []


def test_event_defaults():
    before = datetime.now(timezone.utc)

    event = PlayerJoinedEvent(player_id=uuid4(), player_name="Steve")

    assert event.event_type is EventType.PLAYER_JOINED
    assert event.timestamp >= before
    assert event.timestamp.tzinfo is not None


def test_naive_timestamp_rejected():
    with pytest.raises(ValidationError):
        PlayerLeftEvent(
            player_id=uuid4(),
            player_name="Steve",
            timestamp=datetime(2024, 6, 1, 20, 0, 0),
        )
