"""``/perk``: grant, revoke or list a player's perks."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import CommandParseError
from ..models import PlayerData
from .base import CommandArgumentParser, ProfileCommand


class PerkOp(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    CLEAR = "clear"
    SHOW = "show"


def perk_operation(token: str) -> PerkOp:
    return PerkOp(token.lower())


def perk(token: str) -> str:
    """Perk ids are stored lowercased."""
    value = token.strip().lower()
    if not value:
        raise ValueError("empty perk")
    return value


@dataclass(frozen=True)
class PerkConfig:
    operation: PerkOp = PerkOp.SHOW
    player: Optional[str] = None
    perk: Optional[str] = None


class PerkCommand(ProfileCommand[PerkConfig]):
    name = "perk"
    default = PerkConfig()

    def build_parser(self) -> CommandArgumentParser:
        parser = CommandArgumentParser(f"/{self.name}")
        parser.add_argument(
            "operation",
            metavar="<operation>",
            type=perk_operation,
            help="operations: add, remove, clear, show",
        )
        parser.add_argument("player", metavar="<player>", help="player to modify")
        parser.add_argument(
            "perk", metavar="<perk>", type=perk, nargs="?", help="perk to add/remove"
        )
        return parser

    def validate(self, config: PerkConfig) -> None:
        if config.operation in (PerkOp.ADD, PerkOp.REMOVE) and config.perk is None:
            raise CommandParseError(
                f"a perk is required to {config.operation.value} perks", self.usage
            )

    def apply(self, data: PlayerData, config: PerkConfig) -> Optional[PlayerData]:
        match config.operation:
            case PerkOp.ADD:
                perks = data.perks | {config.perk}
            case PerkOp.REMOVE:
                perks = data.perks - {config.perk}
            case PerkOp.CLEAR:
                perks = frozenset()
            case _:
                return None
        return data.updated(perks=perks)

    def report(self, data: PlayerData, config: PerkConfig) -> str:
        return data.display_perks()
