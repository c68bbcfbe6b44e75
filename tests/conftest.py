"""Shared fixtures: a temporary SQLite profile store and profile builders."""

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from playerstore.db.database import create_engine, create_session_factory, init_db
from playerstore.db.repository import SqlPlayerRepository
from playerstore.models import Group, PlayerData, PlayTime

FIRST_LOGIN = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'players.db'}"


@pytest.fixture
async def db_engine(database_url):
    """Create a temporary SQLite database with the profile table."""
    engine = create_engine(database_url)
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def repository(session_factory):
    return SqlPlayerRepository(session_factory)


@pytest.fixture
def make_player():
    """Build a fully populated profile; keyword arguments override fields."""

    def factory(name: str = "Steve", player_id: UUID | None = None, **overrides):
        fields = dict(
            id=player_id or uuid4(),
            name=name,
            usernames=frozenset({name}),
            display_name=None,
            group=Group.MEMBER,
            perks=frozenset({"fly"}),
            tier=2,
            plot_limit=3,
            vote_credits=5,
            play_time=PlayTime(
                first_login=FIRST_LOGIN,
                last_seen=FIRST_LOGIN + timedelta(days=2),
                amount=timedelta(hours=5),
            ),
        )
        fields.update(overrides)
        return PlayerData(**fields)

    return factory
