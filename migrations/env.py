"""Alembic environment for the accounts schema.

Online runs reuse the application's async engine. SQLite gets batch mode so
that later ``ALTER`` revisions on ``accounts`` can rebuild the table.
"""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from account_server.core.config import get_settings
from account_server.infrastructure.database import models  # noqa: F401
from account_server.infrastructure.database.base import Base
from account_server.infrastructure.database.session import dispose_engine, get_engine

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

_SYNC_DRIVERS = {
    "sqlite+aiosqlite": "sqlite",
    "postgresql+asyncpg": "postgresql",
}


def _database_url() -> str:
    return get_settings().database_url


def _offline_url() -> str:
    url = _database_url()
    for async_prefix, sync_prefix in _SYNC_DRIVERS.items():
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix):]
    return url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=_database_url().startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL for the accounts revisions without connecting."""
    _configure(
        url=_offline_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync(connection: Connection) -> None:
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    engine = get_engine()
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_sync)
    finally:
        await dispose_engine()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
