"""
onetimeinit - one-time, boot-triggered migrations for launcher data

On the first boot after installation the initializer compares a stored
mapping version with the latest known migration and, if it is behind,
applies the pending steps in order. Version 1 rewrites launcher shortcuts
that still point at the contacts app's dialer activity so they launch the
standalone dialer instead.

Quick Start:
    >>> import onetimeinit
    >>> from onetimeinit import OneTimeInitializerService
    >>>
    >>> onetimeinit.configure(
    ...     shared_prefs_dir="./image/shared_prefs",
    ...     launcher_databases={"content://com.android.launcher3.settings/favorites?notify=true": "./image/launcher.db"},
    ... )
    >>> service = OneTimeInitializerService.from_config()
    >>> applied = await service.handle_boot_completed()
"""

__version__ = "0.1.0"

# Configuration
from onetimeinit.config import configure, get_config, load_config, reset_config

# Exceptions
from onetimeinit.exceptions import (
    ConfigurationError,
    IntentParseError,
    OneTimeInitError,
    PreferenceTypeError,
)

# Intent descriptors
from onetimeinit.intents import ComponentName, Intent, IntentExtra, parse_uri

# Migrations
from onetimeinit.migrations import (
    AppliedMigration,
    Migration,
    MigrationRegistry,
    MigrationRunner,
    RelinkStats,
    get_global_registry,
    migration,
    relink_all_launchers,
    relink_dialer_shortcuts,
)

# Service
from onetimeinit.service import BootCompletedReceiver, OneTimeInitializerService

# Storage
from onetimeinit.storage import (
    LAUNCHER2_FAVORITES,
    LAUNCHER3_FAVORITES,
    LAUNCHER_LOCATORS,
    ContentLocator,
    ContentStore,
    InMemoryContentStore,
    InMemoryPreferenceStore,
    PreferenceStore,
    SharedPreferencesFile,
    SQLiteContentStore,
)

__all__ = [
    "__version__",
    # Configuration
    "configure",
    "get_config",
    "load_config",
    "reset_config",
    # Exceptions
    "OneTimeInitError",
    "IntentParseError",
    "PreferenceTypeError",
    "ConfigurationError",
    # Intents
    "ComponentName",
    "Intent",
    "IntentExtra",
    "parse_uri",
    # Migrations
    "Migration",
    "AppliedMigration",
    "MigrationRegistry",
    "MigrationRunner",
    "RelinkStats",
    "get_global_registry",
    "migration",
    "relink_dialer_shortcuts",
    "relink_all_launchers",
    # Service
    "OneTimeInitializerService",
    "BootCompletedReceiver",
    # Storage
    "PreferenceStore",
    "ContentStore",
    "InMemoryPreferenceStore",
    "InMemoryContentStore",
    "SharedPreferencesFile",
    "SQLiteContentStore",
    "ContentLocator",
    "LAUNCHER2_FAVORITES",
    "LAUNCHER3_FAVORITES",
    "LAUNCHER_LOCATORS",
]
