"""
SQLite content store for launcher databases.

Each locator maps to a launcher database file (``launcher.db``) whose
table is named by the locator's path, typically ``favorites``. A locator
with no configured database, or whose file does not exist, is unavailable.
"""

import re
from pathlib import Path
from typing import Any, AsyncIterator, Sequence

import aiosqlite
from loguru import logger

from onetimeinit.storage.base import ContentStore, Cursor, Row
from onetimeinit.storage.locators import ContentLocator, resolve_locator

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _quote_identifier(name: str) -> str:
    if not _IDENTIFIER_RE.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f'"{name}"'


class SQLiteCursor(Cursor):
    """
    Cursor over an aiosqlite result set.

    Rows are fetched in full on first iteration so that updates issued on
    the same connection while iterating do not disturb the read.
    """

    def __init__(self, cursor: aiosqlite.Cursor, count_sql: str, db: aiosqlite.Connection) -> None:
        self._cursor = cursor
        self._count_sql = count_sql
        self._db = db
        self._closed = False

    async def count(self) -> int:
        async with self._db.execute(self._count_sql) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def __aiter__(self) -> AsyncIterator[Row]:
        rows = await self._cursor.fetchall()
        for row in rows:
            yield tuple(row)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            await self._cursor.close()


class SQLiteContentStore(ContentStore):
    """
    Content store backed by one SQLite database per locator.

    Connections are opened lazily and kept until close().

    Example:
        >>> store = SQLiteContentStore({LAUNCHER3_FAVORITES.uri: "./launcher.db"})
        >>> async with store:
        ...     cursor = await store.query(LAUNCHER3_FAVORITES, ["_id", "intent"])
    """

    def __init__(self, databases: dict[str, str | Path] | None = None) -> None:
        """
        Initialize the store.

        Args:
            databases: Launcher name ("launcher3") or locator URI -> database file path

        Raises:
            ValueError: If a key is neither a known launcher name nor a content URI
        """
        self.databases: dict[str, Path] = {
            resolve_locator(name).uri: Path(path) for name, path in (databases or {}).items()
        }
        self._connections: dict[Path, aiosqlite.Connection] = {}

    def database_for(self, locator: ContentLocator) -> Path | None:
        """Return the database file configured for a locator, if any."""
        return self.databases.get(locator.uri)

    async def _connect(self, locator: ContentLocator) -> aiosqlite.Connection | None:
        path = self.database_for(locator)
        if path is None:
            logger.debug(f"No database configured for {locator}")
            return None
        if not path.exists():
            logger.debug(f"Launcher database {path} does not exist")
            return None

        db = self._connections.get(path)
        if db is None:
            db = await aiosqlite.connect(str(path))
            self._connections[path] = db
        return db

    async def _has_table(self, db: aiosqlite.Connection, table: str) -> bool:
        async with db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table,)
        ) as cursor:
            return await cursor.fetchone() is not None

    async def query(
        self, locator: ContentLocator, projection: Sequence[str]
    ) -> Cursor | None:
        db = await self._connect(locator)
        if db is None:
            return None
        if not await self._has_table(db, locator.table):
            logger.debug(f"Launcher database has no '{locator.table}' table for {locator}")
            return None

        table = _quote_identifier(locator.table)
        columns = ", ".join(_quote_identifier(col) for col in projection)
        cursor = await db.execute(f"SELECT {columns} FROM {table}")
        return SQLiteCursor(cursor, f"SELECT COUNT(*) FROM {table}", db)

    async def update(
        self,
        locator: ContentLocator,
        values: dict[str, Any],
        where: dict[str, Any],
    ) -> int:
        if not values:
            return 0

        db = await self._connect(locator)
        if db is None:
            return 0

        assignments = ", ".join(f"{_quote_identifier(col)} = ?" for col in values)
        sql = f"UPDATE {_quote_identifier(locator.table)} SET {assignments}"
        params = list(values.values())
        if where:
            sql += " WHERE " + " AND ".join(f"{_quote_identifier(col)} = ?" for col in where)
            params.extend(where.values())

        cursor = await db.execute(sql, params)
        await db.commit()
        return cursor.rowcount

    async def close(self) -> None:
        for db in self._connections.values():
            await db.close()
        self._connections.clear()
