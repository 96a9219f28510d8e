"""SQLAlchemy implementation of the CounterStore port."""

from __future__ import annotations

import logging

from sqlalchemy import select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from livecounter.adapters.persistence.models import CounterStateModel
from livecounter.application.ports.counter_store import CounterStore
from livecounter.domain.errors import StorageUnavailableError

logger = logging.getLogger(__name__)


def counter_storage_key(counter_name: str, value_key: str) -> str:
    """Row key for one counter: the actor name scoped with the value key."""
    return f"{counter_name}:{value_key}"


class SqlCounterStore(CounterStore):
    """One row in ``counter_state``; every call commits its own transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], counter_key: str):
        self._session_factory = session_factory
        self._key = counter_key

    async def get(self) -> int:
        try:
            async with self._session_factory() as s:
                m = await self._load(s)
                if m is None:
                    m = await self._create(s, 0, overwrite=False)
                return m.value
        except SQLAlchemyError as e:
            logger.exception("Failed to read counter %s", self._key)
            raise StorageUnavailableError(f"Cannot read counter {self._key!r}") from e
        except OSError as e:
            logger.exception("Storage connection lost while reading counter %s", self._key)
            raise StorageUnavailableError(f"Cannot read counter {self._key!r}") from e

    async def put(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Counter value must be non-negative, got {value}")
        try:
            async with self._session_factory() as s:
                m = await self._load(s, for_update=True)
                if m is None:
                    await self._create(s, value, overwrite=True)
                    return
                m.value = value
                await s.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to write counter %s", self._key)
            raise StorageUnavailableError(f"Cannot write counter {self._key!r}") from e
        except OSError as e:
            logger.exception("Storage connection lost while writing counter %s", self._key)
            raise StorageUnavailableError(f"Cannot write counter {self._key!r}") from e

    async def ping(self) -> None:
        """Round-trip to the database; raises StorageUnavailableError on failure."""
        try:
            async with self._session_factory() as s:
                await s.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise StorageUnavailableError("Counter storage unreachable") from e

    async def _load(self, s: AsyncSession, for_update: bool = False) -> CounterStateModel | None:
        stmt = select(CounterStateModel).where(CounterStateModel.counter_key == self._key)
        if for_update:
            stmt = stmt.with_for_update()
        result = await s.execute(stmt)
        return result.scalar_one_or_none()

    async def _create(self, s: AsyncSession, value: int, overwrite: bool) -> CounterStateModel:
        """Insert the row; if another writer created it first, reuse that row."""
        m = CounterStateModel(counter_key=self._key, value=value)
        s.add(m)
        try:
            await s.commit()
        except IntegrityError:
            await s.rollback()
            m = await self._load(s, for_update=True)
            if overwrite:
                m.value = value
            await s.commit()
        return m
