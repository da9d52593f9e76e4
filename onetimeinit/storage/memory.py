"""
In-memory stores for testing and dry runs.

These stores keep all data in dictionaries and are ideal for:
- Unit testing
- Dry runs against a snapshot of launcher rows
- Development and prototyping

Note: All data is lost when the process exits.
"""

import threading
from typing import Any, AsyncIterator, Sequence

from onetimeinit.exceptions import PreferenceTypeError
from onetimeinit.storage.base import ContentStore, Cursor, PreferenceStore, Row
from onetimeinit.storage.locators import ContentLocator


class InMemoryPreferenceStore(PreferenceStore):
    """
    Thread-safe in-memory preference store.

    Example:
        >>> prefs = InMemoryPreferenceStore({"mapping_version": 1})
        >>> await prefs.get_int("mapping_version")
        1
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})
        self._lock = threading.RLock()
        self.commits = 0

    async def get_int(self, key: str, default: int = 0) -> int:
        with self._lock:
            if key not in self._values:
                return default
            value = self._values[key]
            if isinstance(value, bool) or not isinstance(value, int):
                raise PreferenceTypeError(key, "int", type(value).__name__)
            return value

    async def put_int(self, key: str, value: int) -> None:
        with self._lock:
            self._values[key] = value
            self.commits += 1

    def snapshot(self) -> dict[str, Any]:
        """Return a copy of all stored values."""
        with self._lock:
            return dict(self._values)


class InMemoryCursor(Cursor):
    """Cursor over a snapshot of projected rows."""

    def __init__(self, rows: list[Row]) -> None:
        self._rows = rows
        self.closed = False

    async def count(self) -> int:
        return len(self._rows)

    async def __aiter__(self) -> AsyncIterator[Row]:
        for row in self._rows:
            if self.closed:
                raise RuntimeError("Cursor is closed")
            yield row

    async def close(self) -> None:
        self.closed = True


class InMemoryContentStore(ContentStore):
    """
    In-memory content store.

    Only locators registered via add_table() are available; query() returns
    None for any other locator.

    Example:
        >>> store = InMemoryContentStore()
        >>> store.add_table(LAUNCHER3_FAVORITES, [{"_id": 1, "intent": "#Intent;end"}])
    """

    def __init__(self) -> None:
        self._tables: dict[ContentLocator, list[dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self.queries: list[ContentLocator] = []
        self.updates: list[tuple[ContentLocator, dict[str, Any], dict[str, Any]]] = []
        self.cursors: list[InMemoryCursor] = []

    def add_table(self, locator: ContentLocator, rows: list[dict[str, Any]] | None = None) -> None:
        """Make a locator available, optionally seeded with rows."""
        with self._lock:
            self._tables[locator] = [dict(row) for row in rows or []]

    def rows(self, locator: ContentLocator) -> list[dict[str, Any]]:
        """Return a copy of the rows behind a locator."""
        with self._lock:
            return [dict(row) for row in self._tables.get(locator, [])]

    async def query(
        self, locator: ContentLocator, projection: Sequence[str]
    ) -> Cursor | None:
        with self._lock:
            self.queries.append(locator)
            table = self._tables.get(locator)
            if table is None:
                return None
            cursor = InMemoryCursor([tuple(row.get(col) for col in projection) for row in table])
            self.cursors.append(cursor)
            return cursor

    async def update(
        self,
        locator: ContentLocator,
        values: dict[str, Any],
        where: dict[str, Any],
    ) -> int:
        with self._lock:
            self.updates.append((locator, dict(values), dict(where)))
            table = self._tables.get(locator)
            if table is None:
                return 0

            count = 0
            for row in table:
                if all(row.get(col) == value for col, value in where.items()):
                    row.update(values)
                    count += 1
            return count
