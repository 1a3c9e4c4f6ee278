#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Task Board - Row Store
Async access to the relational task table over SQLAlchemy

The store exposes four primitives used by the API handlers:
fetch_all, fetch_one, execute_insert (generated id) and
execute (affected row count). Every call runs on its own pooled
connection and commits on success.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from taskboard.core.exceptions import StoreConnectionError, StoreQueryError

logger = logging.getLogger(__name__)

Params = Optional[Mapping[str, Any]]

# sqlite3 raises OverflowError, not a DBAPI error, for ints wider than 64 bits
QUERY_ERRORS = (SQLAlchemyError, OverflowError)


class RowStore:
    """Shared handle to the task database"""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[AsyncEngine] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    # ===== LIFECYCLE =====

    async def connect(self) -> None:
        """Create the engine and verify the database answers"""
        if self._engine is not None:
            return

        try:
            url = make_url(self.database_url)
            engine_kwargs: Dict[str, Any] = {"echo": self.echo}

            if url.get_backend_name() == "sqlite":
                if url.database in (None, "", ":memory:"):
                    # One shared connection, otherwise every checkout sees an empty database
                    engine_kwargs["poolclass"] = StaticPool
                else:
                    Path(url.database).parent.mkdir(parents=True, exist_ok=True)

            engine = create_async_engine(url, **engine_kwargs)
        except (SQLAlchemyError, OSError) as e:
            raise StoreConnectionError(f"Invalid database configuration: {e}") from e

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            await engine.dispose()
            raise StoreConnectionError(f"Cannot connect to database: {e}") from e

        self._engine = engine
        logger.info(f"✅ Connected to database {url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections"""
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("✅ Database connection closed")

    async def ping(self) -> bool:
        """True when the database answers a trivial query"""
        if self._engine is None:
            return False
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"⚠️ Database ping failed: {e}")
            return False

    def _require_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise StoreConnectionError("Row store is not connected")
        return self._engine

    # ===== PRIMITIVES =====

    async def fetch_all(self, sql: str, params: Params = None) -> List[Dict[str, Any]]:
        """Run a query and return every row as a dict"""
        engine = self._require_engine()
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                return [dict(row) for row in result.mappings()]
        except QUERY_ERRORS as e:
            raise StoreQueryError(str(e)) from e

    async def fetch_one(self, sql: str, params: Params = None) -> Optional[Dict[str, Any]]:
        """Run a query and return the first row, or None"""
        engine = self._require_engine()
        try:
            async with engine.connect() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                row = result.mappings().first()
                return dict(row) if row is not None else None
        except QUERY_ERRORS as e:
            raise StoreQueryError(str(e)) from e

    async def execute_insert(self, sql: str, params: Params = None) -> int:
        """Run an INSERT and return the generated row id"""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                row_id = result.lastrowid
        except QUERY_ERRORS as e:
            raise StoreQueryError(str(e)) from e

        if row_id is None:
            raise StoreQueryError("Database did not return a generated id")
        return int(row_id)

    async def execute(self, sql: str, params: Params = None) -> int:
        """Run an UPDATE/DELETE and return the affected row count"""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                result = await conn.execute(text(sql), dict(params or {}))
                return result.rowcount
        except QUERY_ERRORS as e:
            raise StoreQueryError(str(e)) from e

    async def execute_script(self, statements: Iterable[str]) -> None:
        """Run several DDL statements in one transaction"""
        engine = self._require_engine()
        try:
            async with engine.begin() as conn:
                for statement in statements:
                    await conn.execute(text(statement))
        except QUERY_ERRORS as e:
            raise StoreQueryError(str(e)) from e
