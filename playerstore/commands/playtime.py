"""``/playtime``: show how long a player has been online."""

from dataclasses import dataclass
from typing import Optional

from ..models import PlayerData
from .base import CommandArgumentParser, ProfileCommand


@dataclass(frozen=True)
class PlayTimeConfig:
    player: Optional[str] = None


class PlayTimeCommand(ProfileCommand[PlayTimeConfig]):
    name = "playtime"
    default = PlayTimeConfig()

    def build_parser(self) -> CommandArgumentParser:
        parser = CommandArgumentParser(f"/{self.name}")
        parser.add_argument("player", metavar="<player>", help="player to look up")
        return parser

    def apply(self, data: PlayerData, config: PlayTimeConfig) -> Optional[PlayerData]:
        return None

    def report(self, data: PlayerData, config: PlayTimeConfig) -> str:
        return data.display_play_time()
