"""
Chat commands that update or report a single player's profile.
"""

from .base import (
    BufferedSender,
    CommandSender,
    IntFieldCommand,
    IntOp,
    ProfileCommand,
)
from .credit import CreditCommand
from .group import GroupCommand
from .perk import PerkCommand
from .playtime import PlayTimeCommand
from .plots import PlotLimitCommand
from .registry import CommandRegistry, default_commands
from .tier import TierCommand

__all__ = [
    "BufferedSender",
    "CommandSender",
    "CommandRegistry",
    "CreditCommand",
    "GroupCommand",
    "IntFieldCommand",
    "IntOp",
    "PerkCommand",
    "PlayTimeCommand",
    "PlotLimitCommand",
    "ProfileCommand",
    "TierCommand",
    "default_commands",
]
