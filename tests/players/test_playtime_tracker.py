"""Tests for PlaytimeTracker login/logout handling."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from playerstore.config import ProfileDefaults
from playerstore.events import EventDispatcher, PlayerJoinedEvent, PlayerLeftEvent
from playerstore.models import Group
from playerstore.players import PlaytimeTracker

LOGIN = datetime(2024, 6, 1, 20, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def dispatcher():
    return EventDispatcher()


@pytest.fixture
def tracker(repository, dispatcher):
    return PlaytimeTracker(
        repository, dispatcher, ProfileDefaults(group="member", plot_limit=2)
    )


class TestLogin:
    @pytest.mark.asyncio
    async def test_first_login_creates_profile(self, repository, dispatcher, tracker):
        player_id = uuid4()

        await dispatcher.dispatch_player_joined(
            PlayerJoinedEvent(player_id=player_id, player_name="Newbie", timestamp=LOGIN)
        )

        data = await repository.find_by_id(player_id)
        assert data.name == "Newbie"
        assert data.group is Group.MEMBER
        assert data.plot_limit == 2
        assert data.play_time.first_login == LOGIN
        assert data.play_time.last_seen == LOGIN
        assert data.play_time.amount == timedelta(0)

    @pytest.mark.asyncio
    async def test_login_updates_last_seen_only(
        self, repository, dispatcher, tracker, make_player
    ):
        data = make_player(name="Steve")
        await repository.save(data)

        await dispatcher.dispatch_player_joined(
            PlayerJoinedEvent(player_id=data.id, player_name="Steve", timestamp=LOGIN)
        )

        stored = await repository.find_by_id(data.id)
        assert stored.play_time.last_seen == LOGIN
        assert stored.play_time.first_login == data.play_time.first_login
        assert stored.play_time.amount == data.play_time.amount
        assert stored.vote_credits == data.vote_credits

    @pytest.mark.asyncio
    async def test_login_with_new_name(self, repository, dispatcher, tracker, make_player):
        data = make_player(name="OldName")
        await repository.save(data)

        await dispatcher.dispatch_player_joined(
            PlayerJoinedEvent(player_id=data.id, player_name="NewName", timestamp=LOGIN)
        )

        stored = await repository.find_by_name("newname")
        assert stored.id == data.id
        assert stored.usernames == {"OldName", "NewName"}
        assert await repository.search_by_name("oldname") == []


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_accumulates_session(
        self, repository, dispatcher, tracker, make_player
    ):
        data = make_player(name="Steve")
        await repository.save(data)

        await dispatcher.dispatch_player_joined(
            PlayerJoinedEvent(player_id=data.id, player_name="Steve", timestamp=LOGIN)
        )
        await dispatcher.dispatch_player_left(
            PlayerLeftEvent(
                player_id=data.id,
                player_name="Steve",
                timestamp=LOGIN + timedelta(minutes=90),
            )
        )

        stored = await repository.find_by_id(data.id)
        assert stored.play_time.amount == data.play_time.amount + timedelta(minutes=90)
        assert stored.play_time.last_seen == LOGIN + timedelta(minutes=90)

    @pytest.mark.asyncio
    async def test_logout_without_profile_writes_nothing(
        self, repository, dispatcher, tracker, caplog
    ):
        await dispatcher.dispatch_player_left(
            PlayerLeftEvent(player_id=uuid4(), player_name="Ghost", timestamp=LOGIN)
        )

        assert await repository.count() == 0
        assert "No profile to update on logout: Ghost" in caplog.text

    @pytest.mark.asyncio
    async def test_out_of_order_logout_keeps_amount(
        self, repository, dispatcher, tracker, make_player
    ):
        data = make_player(name="Steve")
        await repository.save(data)

        await dispatcher.dispatch_player_left(
            PlayerLeftEvent(
                player_id=data.id,
                player_name="Steve",
                timestamp=data.play_time.last_seen - timedelta(hours=1),
            )
        )

        stored = await repository.find_by_id(data.id)
        assert stored.play_time.amount == data.play_time.amount


@pytest.mark.asyncio
async def test_store_failure_is_logged(dispatcher, caplog):
    repository = AsyncMock()
    repository.find.side_effect = RuntimeError("database is locked")
    PlaytimeTracker(repository, dispatcher)

    await dispatcher.dispatch_player_joined(
        PlayerJoinedEvent(player_id=uuid4(), player_name="Steve", timestamp=LOGIN)
    )

    repository.save.assert_not_awaited()
    assert "Error handling login of Steve: RuntimeError: database is locked" in caplog.text
