"""Mapping between profiles and their persisted documents.

Documents only hold JSON-compatible values: ids are strings, groups are
stored by member name, instants are epoch milliseconds and durations are
whole seconds. Scalar conversions live in a ``CodecRegistry`` that the
document codec is composed with, so a store can swap or extend them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import ValidationError

from .exceptions import DecodeError
from .models import Group, PlayerData, PlayTime

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class Codec(Generic[T]):
    encode: Callable[[T], Any]
    decode: Callable[[Any], T]


class CodecRegistry:
    """Per-type encode/decode hooks for scalar values."""

    def __init__(self):
        self._codecs: Dict[type, Codec] = {}

    def register(
        self,
        type_: type[T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> None:
        self._codecs[type_] = Codec(encode=encode, decode=decode)

    def lookup(self, type_: type) -> Optional[Codec]:
        for klass in type_.__mro__:
            if klass in self._codecs:
                return self._codecs[klass]
        return None

    def encode(self, value: Any) -> Any:
        """Encode a value with its registered codec; unregistered values pass through."""
        codec = self.lookup(type(value))
        return value if codec is None else codec.encode(value)

    def decode(self, type_: type[T], raw: Any, field: str) -> T:
        codec = self.lookup(type_)
        if codec is None:
            raise DecodeError(field, f"no codec registered for {type_.__name__}")
        try:
            return codec.decode(raw)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise DecodeError(field, str(e)) from e


def _require(raw: Any, kind: type, what: str) -> Any:
    # bool is an int subclass but never a valid stored number
    if not isinstance(raw, kind) or (kind is int and isinstance(raw, bool)):
        raise TypeError(f"expected {what}, got {type(raw).__name__}")
    return raw


def _decode_uuid(raw: Any) -> UUID:
    return UUID(_require(raw, str, "a UUID string"))


def _decode_group(raw: Any) -> Group:
    name = _require(raw, str, "a group name")
    if name not in Group.__members__:
        raise ValueError(f"unknown group '{name}'")
    return Group[name]


def _encode_instant(value: datetime) -> int:
    return (value - EPOCH) // timedelta(milliseconds=1)


def _decode_instant(raw: Any) -> datetime:
    return EPOCH + timedelta(milliseconds=_require(raw, int, "epoch milliseconds"))


def _encode_duration(value: timedelta) -> int:
    return int(value.total_seconds())


def _decode_duration(raw: Any) -> timedelta:
    seconds = _require(raw, int, "a number of seconds")
    if seconds < 0:
        raise ValueError("duration cannot be negative")
    return timedelta(seconds=seconds)


def default_registry() -> CodecRegistry:
    registry = CodecRegistry()
    registry.register(UUID, str, _decode_uuid)
    registry.register(Group, lambda group: group.name, _decode_group)
    registry.register(datetime, _encode_instant, _decode_instant)
    registry.register(timedelta, _encode_duration, _decode_duration)
    return registry


class PlayerDocumentCodec:
    """Encodes a ``PlayerData`` to exactly one document keyed by ``_id``."""

    def __init__(self, registry: Optional[CodecRegistry] = None):
        self.registry = registry or default_registry()

    def encode(self, player: PlayerData) -> dict:
        enc = self.registry.encode
        document = {
            "_id": enc(player.id),
            "name": player.name,
            "lowerName": player.lower_name,
            "usernames": sorted(player.usernames),
            "group": enc(player.group),
            "perks": sorted(player.perks),
            "tier": player.tier,
            "plotLimit": player.plot_limit,
            "voteCredits": player.vote_credits,
            "firstLogin": enc(player.play_time.first_login),
            "lastSeen": enc(player.play_time.last_seen),
            "playTime": enc(player.play_time.amount),
        }
        if player.display_name is not None:
            document["displayName"] = player.display_name
        return document

    def decode(self, document: dict) -> PlayerData:
        record_id = document.get("_id")
        try:
            return self._decode(document)
        except DecodeError as e:
            if e.record_id is None and record_id is not None:
                raise DecodeError(e.field, e.reason, str(record_id)) from e
            raise

    def _decode(self, document: dict) -> PlayerData:
        def field(key: str) -> Any:
            if key not in document:
                raise DecodeError(key, "missing required field")
            return document[key]

        def scalar(key: str, kind: type, what: str) -> Any:
            try:
                return _require(field(key), kind, what)
            except TypeError as e:
                raise DecodeError(key, str(e)) from e

        def string_set(key: str) -> frozenset[str]:
            values = document.get(key) or []
            if not isinstance(values, list) or not all(
                isinstance(v, str) for v in values
            ):
                raise DecodeError(key, "expected a list of strings")
            return frozenset(values)

        display_name = document.get("displayName")
        if display_name is not None and not isinstance(display_name, str):
            raise DecodeError("displayName", "expected a string")

        dec = self.registry.decode
        try:
            return PlayerData(
                id=dec(UUID, field("_id"), "_id"),
                name=scalar("name", str, "a string"),
                usernames=string_set("usernames"),
                display_name=display_name,
                group=dec(Group, field("group"), "group"),
                perks=string_set("perks"),
                tier=scalar("tier", int, "an integer"),
                plot_limit=scalar("plotLimit", int, "an integer"),
                vote_credits=scalar("voteCredits", int, "an integer"),
                play_time=PlayTime(
                    first_login=dec(datetime, field("firstLogin"), "firstLogin"),
                    last_seen=dec(datetime, field("lastSeen"), "lastSeen"),
                    amount=dec(timedelta, field("playTime"), "playTime"),
                ),
            )
        except ValidationError as e:
            error = e.errors()[0]
            loc = ".".join(str(part) for part in error["loc"]) or "document"
            raise DecodeError(loc, error["msg"]) from e
