"""
One-time initialization after installation.

There is no hook that runs an app right after it is installed, so the
boot-completed event is used instead. When the app is upgraded, pending
migrations therefore do not run until the device next boots.
"""

import asyncio
from pathlib import Path

from loguru import logger

from onetimeinit.config import InitializerConfig, get_config
from onetimeinit.intents import ACTION_BOOT_COMPLETED
from onetimeinit.migrations.base import AppliedMigration, MigrationRegistry, MigrationRunner
from onetimeinit.storage.base import ContentStore, PreferenceStore
from onetimeinit.storage.shared_prefs import SharedPreferencesFile
from onetimeinit.storage.sqlite import SQLiteContentStore


class OneTimeInitializerService:
    """
    Runs pending migrations when the device finishes booting.

    The preference store is opened once when the service is created and
    reused by every activation. Activations are queued: a second call to
    handle_boot_completed() waits until the first one has finished.

    Example:
        >>> service = OneTimeInitializerService.from_config()
        >>> await service.handle_boot_completed()
    """

    def __init__(
        self,
        preferences: PreferenceStore,
        content_store: ContentStore,
        registry: MigrationRegistry | None = None,
    ) -> None:
        self.preferences = preferences
        self.content_store = content_store
        self.registry = registry
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: InitializerConfig | None = None) -> "OneTimeInitializerService":
        """Build a service over the configured preference file and launcher databases."""
        config = config or get_config()
        return cls(
            preferences=SharedPreferencesFile(Path(config.shared_prefs_dir), config.prefs_name),
            content_store=SQLiteContentStore(config.launcher_databases),
        )

    async def handle_boot_completed(self) -> list[AppliedMigration]:
        """Run pending migrations and persist the new mapping version."""
        async with self._lock:
            logger.debug("OneTimeInitializerService.handle_boot_completed")
            runner = MigrationRunner(self.preferences, self.content_store, self.registry)
            return await runner.run_migrations()

    async def close(self) -> None:
        await self.content_store.close()


class BootCompletedReceiver:
    """Starts the service when the boot-completed event arrives."""

    def __init__(self, service: OneTimeInitializerService) -> None:
        self.service = service

    async def on_receive(self, action: str) -> list[AppliedMigration] | None:
        """
        Handle an inbound system event.

        Returns:
            Applied migrations, or None if the event was ignored
        """
        if action != ACTION_BOOT_COMPLETED:
            logger.debug(f"Ignoring unexpected event {action}")
            return None

        return await self.service.handle_boot_completed()
