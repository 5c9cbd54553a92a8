from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

import aiosqlite

from maintenance_alerts.domain.common.errors import database_error


class Database:
    """
    Async SQLite helper:
    - opens a new connection per operation
    - rows come back as aiosqlite.Row
    - foreign keys on
    - driver errors surface as DatabaseError
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[aiosqlite.Connection]:
        try:
            async with aiosqlite.connect(self._path) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys=ON;")
                yield db
        except aiosqlite.Error as e:
            raise database_error(e) from e

    async def executescript(self, sql: str) -> None:
        async with self.connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.executescript(sql)
            await db.commit()

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run one statement and commit. Returns the affected row count."""
        async with self.connect() as db:
            cur = await db.execute(sql, params)
            await db.commit()
            return cur.rowcount

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[aiosqlite.Row]:
        async with self.connect() as db:
            cur = await db.execute(sql, params)
            return await cur.fetchone()

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with self.connect() as db:
            cur = await db.execute(sql, params)
            return list(await cur.fetchall())
