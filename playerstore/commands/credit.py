"""``/credit``: adjust or show a player's vote credits."""

from ..models import PlayerData
from .base import IntFieldCommand, IntFieldConfig


class CreditCommand(IntFieldCommand):
    """Vote credits never drop below zero."""

    name = "credit"
    field = "vote_credits"
    amount_help = "number of credits to add/subtract/set"

    def report(self, data: PlayerData, config: IntFieldConfig) -> str:
        return data.display_credits()
