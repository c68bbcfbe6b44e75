"""``/plots``: adjust or show how many plots a player may claim."""

from ..models import PlayerData
from .base import IntFieldCommand, IntFieldConfig


class PlotLimitCommand(IntFieldCommand):
    name = "plots"
    field = "plot_limit"
    amount_help = "number of plots to add/subtract/set"

    def report(self, data: PlayerData, config: IntFieldConfig) -> str:
        return data.display_plot_limit()
