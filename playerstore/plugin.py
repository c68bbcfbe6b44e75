"""Composition root wiring the store, event hooks and commands together."""

import asyncio
from typing import Optional

from .codecs import CodecRegistry, PlayerDocumentCodec
from .commands.registry import CommandRegistry, default_commands
from .config import Settings
from .db.database import create_engine, create_session_factory, init_db
from .db.repository import SqlPlayerRepository
from .events.dispatcher import EventDispatcher
from .logger import logger
from .players.tracker import PlaytimeTracker


class ProfilePlugin:
    """Everything the game server talks to, built once at startup."""

    def __init__(self, settings: Settings, codecs: Optional[CodecRegistry] = None):
        self.settings = settings
        self.engine = create_engine(settings.database_url, echo=settings.database_echo)
        self.session_factory = create_session_factory(self.engine)
        self.repository = SqlPlayerRepository(
            self.session_factory, PlayerDocumentCodec(codecs)
        )
        self.event_dispatcher = EventDispatcher()
        self.tracker = PlaytimeTracker(
            self.repository, self.event_dispatcher, settings.defaults
        )
        self.commands: CommandRegistry = default_commands(self.repository)
        self.indexes_ready = False

    async def start(self) -> None:
        """Create tables and provision indexes.

        Index provisioning is bounded by ``index_timeout_seconds``; a slow or
        failed attempt is logged and startup continues.
        """
        logger.info("Starting up and initializing the database...")
        await init_db(self.engine)
        try:
            self.indexes_ready = await asyncio.wait_for(
                self.repository.ensure_indexes(),
                timeout=self.settings.index_timeout_seconds,
            )
        except TimeoutError:
            logger.error(
                f"Index provisioning did not finish within "
                f"{self.settings.index_timeout_seconds}s, continuing without it"
            )
        logger.info(f"Startup complete. Commands: {', '.join(self.commands.names())}")

    async def stop(self) -> None:
        await self.engine.dispose()
        logger.info("Shutdown complete.")
