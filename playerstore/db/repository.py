"""Profile store: lookup, upsert and removal of encoded player documents."""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, func, inspect, select, text
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..codecs import PlayerDocumentCodec
from ..exceptions import DuplicatePlayerError, IndexProvisioningError, PlayerNotFoundError
from ..logger import logger
from ..models import PlayerData, PlayerRecord

LOWER_NAME_INDEX = "idx_player_profile_lower_name"


@dataclass(frozen=True)
class PlayerRef:
    """A player as identified by the game server."""

    id: UUID
    name: str


def parse_player_id(token: str) -> Optional[UUID]:
    """Return the UUID a token spells, or None if it is a name."""
    try:
        return UUID(token)
    except ValueError:
        return None


class PlayerRepository(ABC):
    """Asynchronous access to stored player profiles.

    ``search_*`` methods are non-failing probes. ``find_*`` methods raise
    ``PlayerNotFoundError`` when nothing matches.
    """

    async def find(self, player: PlayerRef) -> PlayerData:
        data = await self.search_by_id(player.id)
        if data is None:
            raise PlayerNotFoundError(player.name)
        return data

    async def find_by_id(self, player_id: UUID) -> PlayerData:
        data = await self.search_by_id(player_id)
        if data is None:
            raise PlayerNotFoundError(str(player_id))
        return data

    async def find_by_name(self, name: str) -> PlayerData:
        matches = await self.search_by_name(name)
        if not matches:
            raise PlayerNotFoundError(name)
        return matches[0]

    async def resolve(self, token: str) -> PlayerData:
        """Resolve user input that is either a player id or a player name."""
        player_id = parse_player_id(token)
        if player_id is not None:
            data = await self.search_by_id(player_id)
            if data is None:
                raise PlayerNotFoundError(token)
            return data
        return await self.find_by_name(token)

    async def traverse(self, *players: PlayerRef) -> List[PlayerData]:
        return list(await asyncio.gather(*(self.find(p) for p in players)))

    async def traverse_by_id(self, *ids: UUID) -> List[PlayerData]:
        return list(await asyncio.gather(*(self.find_by_id(i) for i in ids)))

    async def traverse_by_name(self, *names: str) -> List[PlayerData]:
        return list(await asyncio.gather(*(self.find_by_name(n) for n in names)))

    @abstractmethod
    async def insert(self, data: PlayerData) -> None: ...

    @abstractmethod
    async def save(self, data: PlayerData) -> None: ...

    @abstractmethod
    async def search_by_id(self, player_id: UUID) -> Optional[PlayerData]: ...

    @abstractmethod
    async def search_by_name(self, name: str) -> List[PlayerData]: ...

    @abstractmethod
    async def delete(self, player_id: UUID) -> None: ...

    @abstractmethod
    async def ensure_indexes(self) -> bool: ...


class SqlPlayerRepository(PlayerRepository):
    """Profile store backed by a SQLAlchemy table of JSON documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        codec: Optional[PlayerDocumentCodec] = None,
    ):
        self.session_factory = session_factory
        self.codec = codec or PlayerDocumentCodec()

    def _to_record_values(self, data: PlayerData) -> dict:
        document = self.codec.encode(data)
        return {
            "id": document["_id"],
            "lower_name": document["lowerName"],
            "document": document,
        }

    async def insert(self, data: PlayerData) -> None:
        """Add a new profile. Raises DuplicatePlayerError if the id is taken."""
        async with self.session_factory() as session:
            session.add(PlayerRecord(**self._to_record_values(data)))
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                raise DuplicatePlayerError(str(data.id)) from e

    async def save(self, data: PlayerData) -> None:
        """Insert or overwrite the profile with the same id."""
        stmt = insert(PlayerRecord).values(**self._to_record_values(data))
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "lower_name": stmt.excluded.lower_name,
                "document": stmt.excluded.document,
            },
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            await session.commit()

    async def search_by_id(self, player_id: UUID) -> Optional[PlayerData]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PlayerRecord.document).where(PlayerRecord.id == str(player_id))
            )
            document = result.scalar_one_or_none()
        return None if document is None else self.codec.decode(document)

    async def search_by_name(self, name: str) -> List[PlayerData]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(PlayerRecord.document)
                .where(PlayerRecord.lower_name == name.lower())
                .order_by(PlayerRecord.id)
            )
            documents = result.scalars().all()
        return [self.codec.decode(document) for document in documents]

    async def delete(self, player_id: UUID) -> None:
        async with self.session_factory() as session:
            await session.execute(
                delete(PlayerRecord).where(PlayerRecord.id == str(player_id))
            )
            await session.commit()

    async def count(self) -> int:
        async with self.session_factory() as session:
            result = await session.execute(select(func.count(PlayerRecord.id)))
            return result.scalar_one()

    async def _provision_index(self, index_name: str, column: str) -> bool:
        """Create an index on the profile table unless it exists.

        Returns:
            True if the index was created, False if it already existed

        Raises:
            IndexProvisioningError: If inspecting or creating the index fails
        """
        table = PlayerRecord.__tablename__
        try:
            async with self.session_factory() as session:
                conn = await session.connection()
                existing = await conn.run_sync(
                    lambda sync_conn: {
                        index["name"] for index in inspect(sync_conn).get_indexes(table)
                    }
                )
                if index_name in existing:
                    return False
                await session.execute(
                    text(f"CREATE INDEX IF NOT EXISTS {index_name} ON {table} ({column})")
                )
                await session.commit()
                return True
        except SQLAlchemyError as e:
            raise IndexProvisioningError(f"Failed to create index '{index_name}'") from e

    async def ensure_indexes(self) -> bool:
        """Provision the lowercase username index.

        Failures are logged and reported as False rather than raised.
        """
        label = "Lowercase Username"
        logger.info(f"Ensuring index '{label}'...")
        try:
            created = await self._provision_index(LOWER_NAME_INDEX, "lower_name")
        except IndexProvisioningError as e:
            logger.error(f"{e}: {e.__cause__}", exc_info=True)
            return False
        if created:
            logger.info(f"Created '{label}' index")
        else:
            logger.info(f"Index '{label}' already existed")
        return True
