"""Lookup and dispatch of profile commands by name."""

from typing import Dict, Iterable, List, Sequence

from ..db.repository import PlayerRepository
from ..exceptions import UnknownCommandError
from ..logger import logger
from .base import CommandSender, ProfileCommand
from .credit import CreditCommand
from .group import GroupCommand
from .perk import PerkCommand
from .playtime import PlayTimeCommand
from .plots import PlotLimitCommand
from .tier import TierCommand


class CommandRegistry:
    """Commands keyed by their name."""

    def __init__(self, commands: Iterable[ProfileCommand] = ()):
        self._commands: Dict[str, ProfileCommand] = {}
        for command in commands:
            self.register(command)

    def register(self, command: ProfileCommand) -> None:
        if command.name in self._commands:
            logger.warning(f"Command {command.name} is already registered, overriding")
        self._commands[command.name] = command
        logger.debug(f"Registered command: /{command.name}")

    def get(self, name: str) -> ProfileCommand:
        """Raises UnknownCommandError if no command has that name."""
        command = self._commands.get(name.lower().lstrip("/"))
        if command is None:
            raise UnknownCommandError(name)
        return command

    def names(self) -> List[str]:
        return sorted(self._commands)

    async def dispatch(
        self, sender: CommandSender, name: str, tokens: Sequence[str]
    ) -> bool:
        try:
            command = self.get(name)
        except UnknownCommandError as e:
            sender.send_message(f"Error: {e}")
            return False
        return await command.execute(sender, tokens)


def default_commands(repository: PlayerRepository) -> CommandRegistry:
    return CommandRegistry(
        [
            CreditCommand(repository),
            TierCommand(repository),
            PlotLimitCommand(repository),
            PerkCommand(repository),
            GroupCommand(repository),
            PlayTimeCommand(repository),
        ]
    )
