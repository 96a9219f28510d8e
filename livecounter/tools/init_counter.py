"""Prepare the counter table and report the current value.

Usage:
    python -m livecounter.tools.init_counter
    python -m livecounter.tools.init_counter --create-schema  # create tables first
    python -m livecounter.tools.init_counter --show           # read only
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy import select

from livecounter.adapters.persistence.database import Base, async_session_factory, engine
from livecounter.adapters.persistence.models import CounterStateModel
from livecounter.adapters.persistence.repositories import SqlCounterStore, counter_storage_key
from livecounter.config import settings
from livecounter.domain.errors import StorageUnavailableError
from livecounter.logging_config import configure_logging

logger = logging.getLogger(__name__)


async def create_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ready")


async def show_value(key: str) -> int | None:
    """Current value without creating the row; None if it does not exist yet."""
    async with async_session_factory() as s:
        result = await s.execute(
            select(CounterStateModel.value).where(CounterStateModel.counter_key == key)
        )
        return result.scalar_one_or_none()


async def ensure_counter(key: str) -> int:
    """Create the counter row with value 0 if missing and return the value."""
    store = SqlCounterStore(async_session_factory, key)
    value = await store.get()
    logger.info("Counter %s = %d", key, value)
    return value


async def run(create: bool, show_only: bool) -> int:
    key = counter_storage_key(settings.counter_name, settings.counter_key)
    try:
        if show_only:
            value = await show_value(key)
            if value is None:
                logger.info("Counter %s has not been initialized", key)
            else:
                logger.info("Counter %s = %d", key, value)
            return 0
        if create:
            await create_schema()
        await ensure_counter(key)
        return 0
    except StorageUnavailableError as e:
        logger.error("%s", e)
        return 1
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Initialize the shared counter")
    parser.add_argument(
        "--create-schema", action="store_true",
        help="Create tables with metadata.create_all before initializing",
    )
    parser.add_argument(
        "--show", action="store_true",
        help="Only print the current value, don't create anything",
    )
    args = parser.parse_args()

    configure_logging(settings.log_level)
    sys.exit(asyncio.run(run(create=args.create_schema, show_only=args.show)))


if __name__ == "__main__":
    main()
