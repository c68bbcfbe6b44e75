from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy import JSON, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .config import ProfileDefaults


def truncate_to_millis(value: datetime) -> datetime:
    """Convert to UTC and drop sub-millisecond precision."""
    if value.tzinfo is None:
        raise ValueError(
            "Naive datetime is not allowed. Please provide a timezone-aware datetime."
        )
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def format_duration(duration: timedelta) -> str:
    """Render a duration as ``1d 2h 3m 4s``, omitting leading zero units."""
    total = max(int(duration.total_seconds()), 0)
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, seconds = divmod(rest, 60)
    parts = []
    for amount, unit in ((days, "d"), (hours, "h"), (minutes, "m")):
        if amount or parts:
            parts.append(f"{amount}{unit}")
    parts.append(f"{seconds}s")
    return " ".join(parts)


class Group(str, Enum):
    """Permission groups. Values equal names, as stored and served."""

    DEFAULT = "DEFAULT"
    MEMBER = "MEMBER"
    BUILDER = "BUILDER"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"
    OWNER = "OWNER"

    @classmethod
    def parse(cls, value: str) -> "Group":
        """Look up a group by name, ignoring case."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown group '{value}'") from None


class PlayTime(BaseModel):
    """Login timestamps and accumulated time spent online."""

    model_config = ConfigDict(frozen=True)

    first_login: datetime
    last_seen: datetime
    amount: timedelta = timedelta(0)

    @field_validator("first_login", "last_seen")
    @classmethod
    def _normalize_instant(cls, value: datetime) -> datetime:
        return truncate_to_millis(value)

    @field_validator("amount")
    @classmethod
    def _whole_seconds(cls, value: timedelta) -> timedelta:
        if value < timedelta(0):
            raise ValueError("Play time cannot be negative")
        return timedelta(seconds=int(value.total_seconds()))

    def login(self, now: datetime) -> "PlayTime":
        return PlayTime(first_login=self.first_login, last_seen=now, amount=self.amount)

    def logout(self, now: datetime) -> "PlayTime":
        """Close the current session, adding its length to the total."""
        elapsed = max(now - self.last_seen, timedelta(0))
        return PlayTime(
            first_login=self.first_login,
            last_seen=now,
            amount=self.amount + elapsed,
        )


_DEFAULTS = ProfileDefaults()


class PlayerData(BaseModel):
    """A player's profile. Immutable; updates produce new values."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str = Field(min_length=1)
    usernames: frozenset[str] = frozenset()
    display_name: Optional[str] = None
    group: Group = Group.parse(_DEFAULTS.group)
    perks: frozenset[str] = frozenset()
    tier: int = _DEFAULTS.tier
    plot_limit: int = _DEFAULTS.plot_limit
    vote_credits: int = Field(default=_DEFAULTS.vote_credits, ge=0)
    play_time: PlayTime

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @classmethod
    def new(
        cls,
        player_id: UUID,
        name: str,
        now: datetime,
        defaults: Optional[ProfileDefaults] = None,
    ) -> "PlayerData":
        """Build the profile of a player seen for the first time."""
        defaults = defaults or ProfileDefaults()
        return cls(
            id=player_id,
            name=name,
            usernames=frozenset({name}),
            group=Group.parse(defaults.group),
            tier=defaults.tier,
            plot_limit=defaults.plot_limit,
            vote_credits=defaults.vote_credits,
            play_time=PlayTime(first_login=now, last_seen=now),
        )

    def updated(self, **changes: Any) -> "PlayerData":
        """Copy with changes applied, re-running field validation."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def renamed(self, name: str) -> "PlayerData":
        if name == self.name and name in self.usernames:
            return self
        return self.updated(name=name, usernames=self.usernames | {name})

    # Reply text shown to command senders

    def display_credits(self) -> str:
        return f"{self.name} has {self.vote_credits} vote credit(s)"

    def display_tier(self) -> str:
        return f"{self.name} is tier {self.tier}"

    def display_plot_limit(self) -> str:
        return f"{self.name} can claim {self.plot_limit} plot(s)"

    def display_group(self) -> str:
        return f"{self.name} is in group {self.group.name}"

    def display_perks(self) -> str:
        if not self.perks:
            return f"{self.name} has no perks"
        return f"{self.name} has perks: {', '.join(sorted(self.perks))}"

    def display_play_time(self) -> str:
        pt = self.play_time
        return (
            f"{self.name} has played for {format_duration(pt.amount)} "
            f"(first login {pt.first_login:%Y-%m-%d %H:%M} UTC, "
            f"last seen {pt.last_seen:%Y-%m-%d %H:%M} UTC)"
        )


class Base(AsyncAttrs, DeclarativeBase):
    """SQLAlchemy declarative base for all ORM models with async support."""

    pass


class PlayerRecord(Base):
    """One encoded profile document per player.

    ``lower_name`` is a projection of the document used for name lookups.
    Its index is provisioned by the repository, not by ``create_all``.
    """

    __tablename__ = "player_profile"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    lower_name: Mapped[str] = mapped_column(String(64))
    document: Mapped[dict] = mapped_column(JSON)
