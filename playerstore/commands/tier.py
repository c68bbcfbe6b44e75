"""``/tier``: promote, demote or show a player's tier."""

from ..models import PlayerData
from .base import IntFieldCommand, IntFieldConfig


class TierCommand(IntFieldCommand):
    name = "tier"
    field = "tier"
    amount_help = "number of tiers to add/subtract, or the tier to set"

    def report(self, data: PlayerData, config: IntFieldConfig) -> str:
        return data.display_tier()
