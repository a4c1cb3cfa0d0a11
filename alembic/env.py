"""
Alembic environment for the usergraph tables

The database URL always comes from the application's configuration
(``USERGRAPH_DATABASE_URL`` or settings), never from ``alembic.ini``.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from usergraph.database.connection import get_database_url, to_async_url
from usergraph.dbmodels import target_metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

MIGRATION_OPTIONS = {"target_metadata": target_metadata, "compare_type": True}


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, **MIGRATION_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online(url: str) -> None:
    # NullPool: the engine lives for one command only
    engine = create_async_engine(to_async_url(url), poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate)
    finally:
        await engine.dispose()


def main() -> None:
    url = get_database_url()
    if context.is_offline_mode():
        context.configure(
            url=url,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
            **MIGRATION_OPTIONS,
        )
        with context.begin_transaction():
            context.run_migrations()
    else:
        asyncio.run(_migrate_online(url))


main()
