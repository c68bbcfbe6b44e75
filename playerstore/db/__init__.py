"""Persistence layer: engine setup and the profile repository."""

from .database import create_engine, create_session_factory, init_db
from .repository import PlayerRef, PlayerRepository, SqlPlayerRepository

__all__ = [
    "create_engine",
    "create_session_factory",
    "init_db",
    "PlayerRef",
    "PlayerRepository",
    "SqlPlayerRepository",
]
