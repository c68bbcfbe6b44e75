"""``/group``: move a player to another permission group."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import CommandParseError
from ..models import Group, PlayerData
from .base import CommandArgumentParser, ProfileCommand


class GroupOp(str, Enum):
    SET = "set"
    SHOW = "show"


def group_operation(token: str) -> GroupOp:
    return GroupOp(token.lower())


def group(token: str) -> Group:
    return Group.parse(token)


@dataclass(frozen=True)
class GroupConfig:
    operation: GroupOp = GroupOp.SHOW
    player: Optional[str] = None
    group: Optional[Group] = None


class GroupCommand(ProfileCommand[GroupConfig]):
    name = "group"
    default = GroupConfig()

    def build_parser(self) -> CommandArgumentParser:
        parser = CommandArgumentParser(f"/{self.name}")
        parser.add_argument(
            "operation",
            metavar="<operation>",
            type=group_operation,
            help="operations: set, show",
        )
        parser.add_argument("player", metavar="<player>", help="player to modify")
        parser.add_argument(
            "group",
            metavar="<group>",
            type=group,
            nargs="?",
            help="groups: " + ", ".join(g.name.lower() for g in Group),
        )
        return parser

    def validate(self, config: GroupConfig) -> None:
        if config.operation is GroupOp.SET and config.group is None:
            raise CommandParseError("a group is required to set a group", self.usage)

    def apply(self, data: PlayerData, config: GroupConfig) -> Optional[PlayerData]:
        if config.operation is GroupOp.SHOW:
            return None
        return data.updated(group=config.group)

    def report(self, data: PlayerData, config: GroupConfig) -> str:
        return data.display_group()
