# supportdesk/db/engine.py
"""
Async SQLModel engine and session management.
Supports SQLite (default, via aiosqlite) and any SQLAlchemy async URL set in DATABASE_URL.
"""

import os
from collections.abc import AsyncGenerator
from typing import Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import get_settings

# Table classes must be registered on SQLModel.metadata before create_all
from .. import models  # noqa: F401


def build_engine(database_url: str, **kwargs) -> AsyncEngine:
    """
    Creates an async engine. For SQLite the database directory is created
    and WAL mode is enabled on every new connection.
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    if is_sqlite:
        database_file = make_url(database_url).database
        if database_file and database_file != ":memory:":
            os.makedirs(os.path.dirname(os.path.abspath(database_file)), exist_ok=True)

    new_engine = create_async_engine(database_url, echo=False, connect_args=connect_args, **kwargs)

    if is_sqlite:
        @event.listens_for(new_engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.close()
            # SQLite's built-in lower() only folds ASCII
            dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return new_engine


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(get_settings().database_url)
async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for async SQLModel session injection.
    Usage: session: AsyncSession = Depends(get_session)
    """
    async with async_session_maker() as session:
        yield session


async def create_db_and_tables(bind: Optional[AsyncEngine] = None):
    """Creates the `tickets` and `agents` tables if missing."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
