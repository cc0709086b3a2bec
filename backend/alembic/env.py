"""Alembic environment for the RunX store schema.

The target URL comes from runx.config.Settings, so DATABASE_URL (including
the postgresql:// -> postgresql+asyncpg:// rewrite) means the same thing to
migrations as to the API. Online runs go through an async engine with no pool.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

import runx.models  # noqa: F401  (registers every table on Base.metadata)
from runx.config import get_settings
from runx.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _url() -> str:
    return get_settings().database_url


def _configure_and_run(**options) -> None:
    context.configure(
        target_metadata=target_metadata, compare_type=True, **options,
    )
    with context.begin_transaction():
        context.run_migrations()


async def _run_online() -> None:
    engine = create_async_engine(_url(), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(
                lambda sync_conn: _configure_and_run(connection=sync_conn),
            )
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure_and_run(
        url=_url(), literal_binds=True, dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_run_online())
