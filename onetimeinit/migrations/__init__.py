"""
Mapping-version migrations.

Importing this package registers the built-in steps in the global registry.
"""

from onetimeinit.migrations.base import (
    MAPPING_VERSION_PREF,
    AppliedMigration,
    Migration,
    MigrationRegistry,
    MigrationRunner,
    get_global_registry,
    migration,
    register_migration,
)
from onetimeinit.migrations.dialer import (
    RelinkStats,
    relink_all_launchers,
    relink_dialer_shortcuts,
)

__all__ = [
    "MAPPING_VERSION_PREF",
    "AppliedMigration",
    "Migration",
    "MigrationRegistry",
    "MigrationRunner",
    "get_global_registry",
    "migration",
    "register_migration",
    "RelinkStats",
    "relink_all_launchers",
    "relink_dialer_shortcuts",
]
