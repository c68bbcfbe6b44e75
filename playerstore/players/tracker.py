"""Play time tracking driven by login and logout events."""

from typing import Optional

from ..config import ProfileDefaults
from ..db.repository import PlayerRef, PlayerRepository
from ..events.base import PlayerJoinedEvent, PlayerLeftEvent
from ..events.dispatcher import EventDispatcher
from ..exceptions import PlayerNotFoundError
from ..logger import log_exception, logger
from ..models import PlayerData


class PlaytimeTracker:
    """Keeps ``last_seen`` and accumulated play time current."""

    def __init__(
        self,
        repository: PlayerRepository,
        event_dispatcher: EventDispatcher,
        defaults: Optional[ProfileDefaults] = None,
    ):
        """Initialize the tracker and register its event handlers.

        Args:
            repository: Profile store to read and write
            event_dispatcher: Event dispatcher for listening to events
            defaults: Values for profiles created on first login
        """
        self.repository = repository
        self.defaults = defaults or ProfileDefaults()

        event_dispatcher.on_player_joined(self.on_login)
        event_dispatcher.on_player_left(self.on_logout)

    @log_exception("Error handling login of {event.player_name}")
    async def on_login(self, event: PlayerJoinedEvent) -> None:
        """Create the profile on first login, else start a new session."""
        player = PlayerRef(id=event.player_id, name=event.player_name)
        try:
            data = await self.repository.find(player)
        except PlayerNotFoundError:
            data = PlayerData.new(
                event.player_id, event.player_name, event.timestamp, self.defaults
            )
            await self.repository.save(data)
            logger.info(f"Created profile for {event.player_name} ({event.player_id})")
            return

        if data.name != event.player_name:
            logger.info(f"Player {data.name} is now known as {event.player_name}")
        updated = data.renamed(event.player_name).updated(
            play_time=data.play_time.login(event.timestamp)
        )
        await self.repository.save(updated)
        logger.debug(f"Player logged in: {event.player_name}")

    @log_exception("Error handling logout of {event.player_name}")
    async def on_logout(self, event: PlayerLeftEvent) -> None:
        """Add the finished session to the player's play time."""
        player = PlayerRef(id=event.player_id, name=event.player_name)
        try:
            data = await self.repository.find(player)
        except PlayerNotFoundError:
            logger.warning(f"No profile to update on logout: {event.player_name}")
            return

        play_time = data.play_time.logout(event.timestamp)
        await self.repository.save(data.updated(play_time=play_time))
        logger.debug(
            f"Player logged out: {event.player_name} "
            f"({play_time.amount - data.play_time.amount} added)"
        )
