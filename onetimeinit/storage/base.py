"""
Abstract base classes for the stores the initializer works against.

Two external collaborators are modelled here:
- PreferenceStore: a small durable key-value store holding the mapping version
- ContentStore: tabular launcher storage addressed by a ContentLocator

All methods are async to support both sync and async backends.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Sequence

from onetimeinit.storage.locators import ContentLocator

Row = tuple[Any, ...]


class PreferenceStore(ABC):
    """
    Abstract base class for preference stores.

    A preference store is opened once and reused for the lifetime of the
    service. Writes are durable when put_int() returns.
    """

    @abstractmethod
    async def get_int(self, key: str, default: int = 0) -> int:
        """
        Read an integer preference.

        Args:
            key: Preference key
            default: Value returned when the key is absent

        Returns:
            Stored integer, or default

        Raises:
            PreferenceTypeError: If the key holds a non-integer value
        """
        pass

    @abstractmethod
    async def put_int(self, key: str, value: int) -> None:
        """
        Write an integer preference and commit it durably.

        Args:
            key: Preference key
            value: Value to store
        """
        pass


class Cursor(ABC):
    """
    Read handle over the rows returned by ContentStore.query().

    Use it as an async context manager so it is closed on every exit path:

        async with cursor:
            async for row_id, intent in cursor:
                ...
    """

    @abstractmethod
    async def count(self) -> int:
        """Return the number of rows in the result."""
        pass

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Row]:
        """Iterate rows as tuples in projection order."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the handle. Safe to call more than once."""
        pass

    async def __aenter__(self) -> "Cursor":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()


class ContentStore(ABC):
    """
    Abstract base class for content stores.

    A content store exposes one or more tables, each addressed by a
    ContentLocator, with a minimal query/update surface.
    """

    @abstractmethod
    async def query(
        self, locator: ContentLocator, projection: Sequence[str]
    ) -> Cursor | None:
        """
        Query every row of the collection behind a locator.

        Args:
            locator: Collection to read
            projection: Column names to return, in order

        Returns:
            Cursor over the rows, or None if the collection is unavailable
        """
        pass

    @abstractmethod
    async def update(
        self,
        locator: ContentLocator,
        values: dict[str, Any],
        where: dict[str, Any],
    ) -> int:
        """
        Update rows matching an equality predicate.

        Args:
            locator: Collection to write
            values: Column -> new value
            where: Column -> value; every pair must match

        Returns:
            Number of rows updated
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the store."""
        pass

    async def __aenter__(self) -> "ContentStore":
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()
