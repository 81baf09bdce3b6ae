"""Alembic environment configuration for the podcast discovery service."""
import asyncio
import os
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Load local .env file when present so local migrations work without manual exports.
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path, override=False)

if not os.getenv("DATABASE_URL"):
    raise RuntimeError("DATABASE_URL is required for Alembic migrations")

# Imported after .env is loaded: the app settings require DATABASE_URL.
from app.utils.db_async import (  # noqa: E402
    _prepare_asyncpg_connection,
    load_schema_modules,
)

# Import every table module so SQLModel metadata is populated.
load_schema_modules()

DB_URL, connect_args = _prepare_asyncpg_connection(os.environ["DATABASE_URL"])

config.set_main_option("sqlalchemy.url", DB_URL)

target_metadata = SQLModel.metadata

# Generated tsvector columns are created by migrations, not mapped on the models.
IGNORED_COLUMNS = {"search_vector"}


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    if type_ == "column" and name in IGNORED_COLUMNS:
        return False
    if type_ == "index" and name and name.endswith("_search_vector"):
        return False
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        include_object=include_object,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable: AsyncEngine = create_async_engine(
        DB_URL,
        poolclass=pool.NullPool,
        future=True,
        connect_args=connect_args,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
