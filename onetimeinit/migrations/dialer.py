"""
Version 1: relink launcher shortcuts from the contacts app's dialer to the
standalone dialer app.

The dialer activity moved from com.android.contacts to com.android.dialer.
Home-screen shortcuts created before the move still point at the old
component; this step rewrites them in every launcher provider in place.
"""

from dataclasses import dataclass
from typing import Sequence

from loguru import logger

from onetimeinit.intents import ACTION_MAIN, CATEGORY_LAUNCHER, ComponentName, parse_uri
from onetimeinit.migrations.base import migration
from onetimeinit.observability.logging import locator_logging_context
from onetimeinit.storage.base import ContentStore
from onetimeinit.storage.locators import LAUNCHER_LOCATORS, ContentLocator

CONTACTS_PKG = "com.android.contacts"
DIALTACTS_CONTACTS_CLASS = CONTACTS_PKG + ".activities.DialtactsActivity"
DIALER_PKG = "com.android.dialer"
DIALTACTS_DIALER_CLASS = DIALER_PKG + ".DialtactsActivity"

OLD_DIALTACTS = ComponentName(CONTACTS_PKG, DIALTACTS_CONTACTS_CLASS)
NEW_DIALTACTS = ComponentName(DIALER_PKG, DIALTACTS_DIALER_CLASS)

LAUNCHER_ID_COLUMN = "_id"
LAUNCHER_INTENT_COLUMN = "intent"

# Substrings one of which must appear for a row to be worth parsing
_OLD_CLASS_MARKERS = (DIALTACTS_CONTACTS_CLASS, OLD_DIALTACTS.flatten_to_short_string())


@dataclass
class RelinkStats:
    """
    Outcome of relinking one launcher locator.

    Attributes:
        locator: Locator URI that was scanned
        available: False if the store had nothing behind the locator
        scanned: Rows read
        candidates: Rows that passed the textual pre-filter
        updated: Rows rewritten
        failed: Rows whose parse/match/update raised
    """

    locator: str
    available: bool = True
    scanned: int = 0
    candidates: int = 0
    updated: int = 0
    failed: int = 0


def might_reference_dialtacts(intent_uri: str) -> bool:
    """Cheap textual pre-filter; never sufficient on its own to rewrite a row."""
    return CATEGORY_LAUNCHER in intent_uri and any(
        marker in intent_uri for marker in _OLD_CLASS_MARKERS
    )


def relink_intent_uri(intent_uri: str) -> str | None:
    """
    Rewrite a descriptor that launches the old dialer activity.

    Returns:
        The rewritten descriptor, or None if the descriptor is not an
        exact MAIN/LAUNCHER shortcut to the old component

    Raises:
        IntentParseError: If the descriptor cannot be decoded
    """
    intent = parse_uri(intent_uri, 0)

    if (
        intent.action == ACTION_MAIN
        and intent.component is not None
        and intent.component.package == CONTACTS_PKG
        and intent.component.class_name == DIALTACTS_CONTACTS_CLASS
        and intent.has_category(CATEGORY_LAUNCHER)
    ):
        intent.component = NEW_DIALTACTS
        return intent.to_uri(0)

    return None


async def relink_dialer_shortcuts(store: ContentStore, locator: ContentLocator) -> RelinkStats:
    """
    Relink dialer shortcuts stored behind one launcher locator.

    An unavailable locator is skipped. A row that fails to parse or update
    is logged and skipped; the scan continues with the next row.

    Args:
        store: Content store holding launcher rows
        locator: Launcher collection to scan

    Returns:
        Counts for this locator
    """
    stats = RelinkStats(locator=locator.uri)

    with locator_logging_context(locator):
        cursor = await store.query(locator, [LAUNCHER_ID_COLUMN, LAUNCHER_INTENT_COLUMN])
        if cursor is None:
            logger.debug(f"Launcher provider {locator.authority} unavailable, skipping")
            stats.available = False
            return stats

        async with cursor:
            async for favorite_id, intent_uri in cursor:
                stats.scanned += 1
                intent_uri = str(intent_uri)

                # Odds are this one isn't it, skip it if possible
                if not might_reference_dialtacts(intent_uri):
                    continue
                stats.candidates += 1

                try:
                    new_uri = relink_intent_uri(intent_uri)
                    if new_uri is None:
                        continue

                    await store.update(
                        locator,
                        {LAUNCHER_INTENT_COLUMN: new_uri},
                        {LAUNCHER_ID_COLUMN: favorite_id},
                    )
                    stats.updated += 1
                    logger.info(f"Updated {OLD_DIALTACTS} to {NEW_DIALTACTS} (favorite {favorite_id})")
                except Exception:
                    stats.failed += 1
                    logger.exception(f"Problem moving Dialtacts activity (favorite {favorite_id})")

        logger.debug(f"Total launcher icons: {stats.scanned}")

    return stats


async def relink_all_launchers(
    store: ContentStore,
    locators: Sequence[ContentLocator] = LAUNCHER_LOCATORS,
) -> list[RelinkStats]:
    """Relink dialer shortcuts in every launcher locator, in the given order."""
    results = [await relink_dialer_shortcuts(store, locator) for locator in locators]

    updated = sum(s.updated for s in results)
    available = sum(1 for s in results if s.available)
    failed = sum(s.failed for s in results)
    logger.info(
        f"Relinked {updated} dialer shortcut(s) across {available} launcher provider(s), {failed} failure(s)"
    )
    return results


@migration(1, "Relink dialer shortcuts to com.android.dialer")
async def relink_dialer_migration(store: ContentStore) -> list[RelinkStats]:
    return await relink_all_launchers(store)
