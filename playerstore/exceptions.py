"""Error taxonomy for the player profile store and its commands."""

from typing import Optional


class PlayerStoreError(Exception):
    """Base class for every error raised by playerstore."""


class PlayerNotFoundError(PlayerStoreError):
    """No profile exists for the requested id or name."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Player '{query}' was not found in the database")


class DuplicatePlayerError(PlayerStoreError):
    """An insert was attempted for an id that is already stored."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"A profile with id '{player_id}' already exists")


class DecodeError(PlayerStoreError):
    """A persisted document holds a value outside the recognized domain."""

    def __init__(self, field: str, reason: str, record_id: Optional[str] = None):
        self.field = field
        self.reason = reason
        self.record_id = record_id
        where = f" in record '{record_id}'" if record_id else ""
        super().__init__(f"Cannot decode field '{field}'{where}: {reason}")


class CommandParseError(PlayerStoreError):
    """User supplied tokens do not match a command grammar."""

    def __init__(self, message: str, usage: str = ""):
        self.usage = usage
        super().__init__(message)


class UnknownCommandError(PlayerStoreError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown command '{name}'")


class IndexProvisioningError(PlayerStoreError):
    """Creating a lookup index failed. Logged, never fatal to startup."""
