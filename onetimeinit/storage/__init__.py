"""
Stores used by the one-time initializer.

Provides the preference store holding the mapping version and the content
stores holding launcher shortcut rows.
"""

from onetimeinit.storage.base import ContentStore, Cursor, PreferenceStore
from onetimeinit.storage.locators import (
    LAUNCHER2_FAVORITES,
    LAUNCHER3_FAVORITES,
    LAUNCHER_LOCATORS,
    ContentLocator,
    resolve_locator,
)
from onetimeinit.storage.memory import InMemoryContentStore, InMemoryPreferenceStore
from onetimeinit.storage.shared_prefs import SharedPreferencesFile
from onetimeinit.storage.sqlite import SQLiteContentStore

__all__ = [
    "PreferenceStore",
    "ContentStore",
    "Cursor",
    "InMemoryPreferenceStore",
    "InMemoryContentStore",
    "SharedPreferencesFile",
    "SQLiteContentStore",
    # Locators
    "ContentLocator",
    "LAUNCHER2_FAVORITES",
    "LAUNCHER3_FAVORITES",
    "LAUNCHER_LOCATORS",
    "resolve_locator",
]
