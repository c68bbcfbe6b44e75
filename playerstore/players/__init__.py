"""
Player lifecycle tracking for the profile store.
"""

from .tracker import PlaytimeTracker

__all__ = ["PlaytimeTracker"]
