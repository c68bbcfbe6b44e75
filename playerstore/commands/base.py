"""Shared plumbing for profile commands.

A command invocation is a linear pipeline: parse the tokens, resolve the
target profile, compute the new profile, persist it and reply to the sender.
A failure at any stage ends the pipeline with a one-line error reply.
"""

import argparse
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Generic, List, NoReturn, Optional, Protocol, Sequence, TypeVar

from ..db.repository import PlayerRepository
from ..exceptions import CommandParseError, PlayerNotFoundError
from ..logger import logger
from ..models import PlayerData

ConfigT = TypeVar("ConfigT")

INTERNAL_ERROR_MESSAGE = "Error: An internal error occurred, please contact an administrator"


class CommandSender(Protocol):
    """Whoever typed the command and receives the replies."""

    name: str

    def send_message(self, message: str) -> None: ...


class BufferedSender:
    """Sender that keeps replies in memory for the caller to relay."""

    def __init__(self, name: str = "CONSOLE"):
        self.name = name
        self.messages: List[str] = []

    def send_message(self, message: str) -> None:
        self.messages.append(message)


class CommandArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises CommandParseError instead of exiting."""

    def __init__(self, prog: str, **kwargs):
        super().__init__(
            prog=prog, add_help=False, allow_abbrev=False, exit_on_error=False, **kwargs
        )

    @property
    def usage_line(self) -> str:
        usage = self.format_usage().strip()
        return "Usage: " + usage.removeprefix("usage: ")

    def error(self, message: str) -> NoReturn:
        raise CommandParseError(message, usage=self.usage_line)


class IntOp(str, Enum):
    """Arithmetic applied to an integer profile field."""

    INCREMENT = "increment"
    DECREMENT = "decrement"
    SET = "set"
    SHOW = "show"

    def apply(self, current: int, amount: int) -> int:
        if self is IntOp.INCREMENT:
            return current + amount
        if self is IntOp.DECREMENT:
            return current - amount
        if self is IntOp.SET:
            return amount
        return current


_INT_OP_ALIASES = {
    "+": IntOp.INCREMENT,
    "add": IntOp.INCREMENT,
    "-": IntOp.DECREMENT,
    "subtract": IntOp.DECREMENT,
}


def operation(token: str) -> IntOp:
    """argparse type for ``<operation>``; the name shows in error messages."""
    key = token.lower()
    if key in _INT_OP_ALIASES:
        return _INT_OP_ALIASES[key]
    return IntOp(key)


def amount(token: str) -> int:
    return int(token)


class ProfileCommand(ABC, Generic[ConfigT]):
    """A chat command that updates or reports one player's profile.

    Subclasses declare ``name`` and ``default`` and implement the grammar
    (``build_parser``), the update (``apply``) and the reply (``report``).
    """

    name: str
    default: ConfigT

    def __init__(self, repository: PlayerRepository):
        self.repository = repository
        self.parser = self.build_parser()

    @property
    def usage(self) -> str:
        return self.parser.usage_line

    @abstractmethod
    def build_parser(self) -> CommandArgumentParser: ...

    def validate(self, config: ConfigT) -> None:
        """Reject configs the grammar alone cannot rule out."""

    def parse(self, tokens: Sequence[str]) -> ConfigT:
        """Overlay the tokens onto the default config.

        Raises:
            CommandParseError: If the tokens do not match the grammar
        """
        namespace = argparse.Namespace(**asdict(self.default))
        try:
            self.parser.parse_args(list(tokens), namespace=namespace)
        except argparse.ArgumentError as e:
            raise CommandParseError(str(e), usage=self.usage) from e
        config = replace(self.default, **vars(namespace))
        self.validate(config)
        return config

    @abstractmethod
    def apply(self, data: PlayerData, config: ConfigT) -> Optional[PlayerData]:
        """Return the updated profile, or None when nothing is written."""

    @abstractmethod
    def report(self, data: PlayerData, config: ConfigT) -> str: ...

    async def handle(self, sender: CommandSender, config: ConfigT) -> None:
        data = await self.repository.resolve(config.player)
        updated = self.apply(data, config)
        if updated is not None:
            await self.repository.save(updated)
            data = updated
        sender.send_message(self.report(data, config))

    async def execute(self, sender: CommandSender, tokens: Sequence[str]) -> bool:
        """Run the whole pipeline, replying with an error on any failure.

        Returns:
            True if the command completed, False otherwise
        """
        try:
            config = self.parse(tokens)
            await self.handle(sender, config)
        except CommandParseError as e:
            sender.send_message(f"Error: {e}. {e.usage or self.usage}")
            return False
        except PlayerNotFoundError as e:
            sender.send_message(f"Error: Player '{e.query}' was not found")
            return False
        except Exception as e:
            logger.error(
                f"/{self.name} {' '.join(tokens)} by {sender.name} failed: {e}",
                exc_info=True,
            )
            sender.send_message(INTERNAL_ERROR_MESSAGE)
            return False
        return True


@dataclass(frozen=True)
class IntFieldConfig:
    operation: IntOp = IntOp.SHOW
    player: Optional[str] = None
    amount: int = 1


class IntFieldCommand(ProfileCommand[IntFieldConfig]):
    """``<operation> <player> [<amount>]`` over one integer profile field.

    Results below ``minimum`` are clamped to it.
    """

    field: str
    minimum: int = 0
    amount_help: str = "amount to add/subtract/set"

    default = IntFieldConfig()

    def build_parser(self) -> CommandArgumentParser:
        parser = CommandArgumentParser(f"/{self.name}")
        parser.add_argument(
            "operation",
            metavar="<operation>",
            type=operation,
            help="operations: +, -, set, show",
        )
        parser.add_argument(
            "player", metavar="<player>", help="player name or id to modify"
        )
        parser.add_argument(
            "amount",
            metavar="<amount>",
            type=amount,
            nargs="?",
            default=self.default.amount,
            help=self.amount_help,
        )
        return parser

    def apply(self, data: PlayerData, config: IntFieldConfig) -> Optional[PlayerData]:
        if config.operation is IntOp.SHOW:
            return None
        current = getattr(data, self.field)
        value = max(config.operation.apply(current, config.amount), self.minimum)
        return data.updated(**{self.field: value})
