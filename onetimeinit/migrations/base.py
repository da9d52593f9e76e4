"""
Base classes for the mapping-version migration framework.

Provides the Migration dataclass, MigrationRegistry for tracking steps, and
MigrationRunner, which applies pending steps in ascending version order and
records the highest version reached in the preference store.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable

from loguru import logger

from onetimeinit.observability.logging import migration_logging_context
from onetimeinit.storage.base import ContentStore, PreferenceStore

# Name of the preference containing the mapping version
MAPPING_VERSION_PREF = "mapping_version"


@dataclass
class Migration:
    """
    Represents a one-time migration step.

    Attributes:
        version: Integer version number (must be unique, >= 1)
        description: Human-readable description of what the step does
        up_func: Async function applying the step (receives the content store)
    """

    version: int
    description: str
    up_func: Callable[[ContentStore], Awaitable[Any]] | None = None

    def __post_init__(self) -> None:
        if self.version < 1:
            raise ValueError("Migration version must be >= 1")
        if self.up_func is None:
            raise ValueError("Migration must have an up_func")


@dataclass
class AppliedMigration:
    """
    Record of an applied migration.

    Attributes:
        version: Migration version number
        applied_at: When the migration was applied
        description: Description of the migration
        result: Whatever the step's up_func returned
    """

    version: int
    applied_at: datetime
    description: str
    result: Any = None


class MigrationRegistry:
    """
    Ordered set of migration steps keyed by version.

    Steps are returned in ascending version order regardless of the order
    they were registered in.
    """

    def __init__(self) -> None:
        self._steps: dict[int, Migration] = {}

    def register(self, migration: Migration) -> None:
        """
        Add a step.

        Raises:
            ValueError: If the version is already taken
        """
        existing = self._steps.get(migration.version)
        if existing is not None:
            raise ValueError(
                f"Migration version {migration.version} already registered ({existing.description!r})"
            )
        self._steps[migration.version] = migration

    def get_all(self) -> list[Migration]:
        return sorted(self._steps.values(), key=lambda m: m.version)

    def get_pending(self, current_version: int) -> list[Migration]:
        """Steps with a version above current_version, lowest first."""
        return [m for m in self.get_all() if m.version > current_version]

    def get_latest_version(self) -> int:
        """Highest registered version, or 0 when nothing is registered."""
        return max(self._steps, default=0)

    def get(self, version: int) -> Migration | None:
        return self._steps.get(version)


_global_registry = MigrationRegistry()


def get_global_registry() -> MigrationRegistry:
    """Registry holding the built-in steps."""
    return _global_registry


def register_migration(migration: Migration) -> None:
    _global_registry.register(migration)


def migration(version: int, description: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator registering an async function as a global migration step.

    Example:
        @migration(2, "Drop obsolete widgets")
        async def drop_widgets(store: ContentStore) -> None:
            ...
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        register_migration(Migration(version=version, description=description, up_func=func))
        return func

    return decorator


class MigrationRunner:
    """
    Applies pending migrations against a content store.

    The mapping version is read once at the start of run_migrations() and
    written once at the end with the highest version reached.
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        content_store: ContentStore,
        registry: MigrationRegistry | None = None,
    ) -> None:
        """
        Args:
            preferences: Store holding the mapping version
            content_store: Store the migration steps operate on
            registry: Migration registry to use (defaults to global registry)
        """
        self.preferences = preferences
        self.content_store = content_store
        self.registry = registry or get_global_registry()

    async def get_current_version(self) -> int:
        """Current mapping version, or 0 if none recorded."""
        return await self.preferences.get_int(MAPPING_VERSION_PREF, 0)

    async def record_version(self, version: int) -> None:
        await self.preferences.put_int(MAPPING_VERSION_PREF, version)

    async def apply_migration(self, migration: Migration) -> Any:
        """
        Apply a single migration.

        Per-record failures are handled inside the step itself; anything
        raised here propagates to run_migrations().
        """
        with migration_logging_context(migration.version, migration.description):
            logger.info(f"Updating to version {migration.version}.")
            return await migration.up_func(self.content_store)

    async def run_migrations(self) -> list[AppliedMigration]:
        """
        Apply every pending step, lowest version first.

        The highest version reached is written back as the last action,
        also when nothing was pending.

        If a step raises, the version of the last completed step is still
        written before the error propagates.

        Returns:
            List of applied migrations
        """
        current_version = await self.get_current_version()
        new_version = current_version
        applied: list[AppliedMigration] = []

        try:
            for pending in self.registry.get_pending(current_version):
                result = await self.apply_migration(pending)
                new_version = pending.version
                applied.append(
                    AppliedMigration(
                        version=pending.version,
                        applied_at=datetime.now(UTC),
                        description=pending.description,
                        result=result,
                    )
                )
        finally:
            await self.record_version(new_version)

        return applied
