"""
Player profile store for a Minecraft server.

Stores tiers, perks, groups, vote credits and play time per player and
exposes the chat commands that update them.
"""
