"""
Integration tests for launcher databases backed by SQLite.

These run the relink step and the full boot-completed flow against real
database files and a shared preferences file on disk.
"""

import aiosqlite
import pytest

from onetimeinit.config import InitializerConfig, configure, reset_config
from onetimeinit.migrations import MAPPING_VERSION_PREF, relink_dialer_shortcuts
from onetimeinit.service import OneTimeInitializerService
from onetimeinit.storage.locators import LAUNCHER2_FAVORITES, LAUNCHER3_FAVORITES
from onetimeinit.storage.shared_prefs import SharedPreferencesFile
from onetimeinit.storage.sqlite import SQLiteContentStore

OLD = (
    "#Intent;action=android.intent.action.MAIN;"
    "category=android.intent.category.LAUNCHER;launchFlags=0x10200000;"
    "component=com.android.contacts/.activities.DialtactsActivity;end"
)
NEW = (
    "#Intent;action=android.intent.action.MAIN;"
    "category=android.intent.category.LAUNCHER;launchFlags=0x10200000;"
    "component=com.android.dialer/.DialtactsActivity;end"
)
BROWSER = (
    "#Intent;action=android.intent.action.MAIN;"
    "category=android.intent.category.LAUNCHER;launchFlags=0x10200000;"
    "component=com.android.browser/.BrowserActivity;end"
)


async def create_launcher_db(path, rows):
    async with aiosqlite.connect(str(path)) as db:
        await db.execute(
            "CREATE TABLE favorites (_id INTEGER PRIMARY KEY, title TEXT, intent TEXT)"
        )
        await db.executemany("INSERT INTO favorites VALUES (?, ?, ?)", rows)
        await db.commit()


async def read_intents(path):
    async with aiosqlite.connect(str(path)) as db:
        async with db.execute("SELECT _id, intent FROM favorites ORDER BY _id") as cursor:
            return {row[0]: row[1] for row in await cursor.fetchall()}


@pytest.fixture
async def launcher3_db(tmp_path):
    path = tmp_path / "launcher3.db"
    await create_launcher_db(
        path,
        [(1, "Phone", OLD), (2, "Browser", BROWSER), (3, "Folder", None)],
    )
    return path


class TestSQLiteContentStore:
    """Test SQLiteContentStore against real database files."""

    @pytest.mark.asyncio
    async def test_query_and_update(self, launcher3_db):
        store = SQLiteContentStore({LAUNCHER3_FAVORITES.uri: launcher3_db})
        async with store:
            cursor = await store.query(LAUNCHER3_FAVORITES, ["_id", "intent"])
            async with cursor:
                assert await cursor.count() == 3
                rows = [row async for row in cursor]

            updated = await store.update(LAUNCHER3_FAVORITES, {"intent": NEW}, {"_id": 1})

        assert rows[0] == (1, OLD)
        assert updated == 1
        assert (await read_intents(launcher3_db))[1] == NEW

    @pytest.mark.asyncio
    async def test_short_launcher_name_resolved(self, launcher3_db):
        store = SQLiteContentStore({"launcher3": launcher3_db})

        assert store.database_for(LAUNCHER3_FAVORITES) == launcher3_db
        async with store:
            assert await store.query(LAUNCHER3_FAVORITES, ["_id", "intent"]) is not None

    @pytest.mark.asyncio
    async def test_unconfigured_locator_is_unavailable(self, launcher3_db):
        store = SQLiteContentStore({LAUNCHER3_FAVORITES.uri: launcher3_db})
        async with store:
            assert await store.query(LAUNCHER2_FAVORITES, ["_id", "intent"]) is None
            assert await store.update(LAUNCHER2_FAVORITES, {"intent": NEW}, {"_id": 1}) == 0

    @pytest.mark.asyncio
    async def test_missing_file_is_unavailable(self, tmp_path):
        store = SQLiteContentStore({LAUNCHER2_FAVORITES.uri: tmp_path / "absent.db"})
        async with store:
            assert await store.query(LAUNCHER2_FAVORITES, ["_id", "intent"]) is None

        assert not (tmp_path / "absent.db").exists()

    @pytest.mark.asyncio
    async def test_missing_table_is_unavailable(self, tmp_path):
        path = tmp_path / "empty.db"
        async with aiosqlite.connect(str(path)) as db:
            await db.execute("CREATE TABLE workspaceScreens (_id INTEGER)")
            await db.commit()

        store = SQLiteContentStore({LAUNCHER2_FAVORITES.uri: path})
        async with store:
            assert await store.query(LAUNCHER2_FAVORITES, ["_id", "intent"]) is None

    @pytest.mark.asyncio
    async def test_rejects_bad_identifiers(self, launcher3_db):
        store = SQLiteContentStore({LAUNCHER3_FAVORITES.uri: launcher3_db})
        async with store:
            with pytest.raises(ValueError, match="Invalid SQL identifier"):
                await store.query(LAUNCHER3_FAVORITES, ["intent; DROP TABLE favorites"])


class TestRelinkOnSQLite:
    """Test the relink step over a real launcher database."""

    @pytest.mark.asyncio
    async def test_only_dialer_shortcut_rewritten(self, launcher3_db):
        store = SQLiteContentStore({LAUNCHER3_FAVORITES.uri: launcher3_db})
        async with store:
            stats = await relink_dialer_shortcuts(store, LAUNCHER3_FAVORITES)

        assert stats.scanned == 3
        assert stats.candidates == 1
        assert stats.updated == 1
        assert await read_intents(launcher3_db) == {1: NEW, 2: BROWSER, 3: None}


class TestBootCompletedEndToEnd:
    """Test the service built from configuration against files on disk."""

    @pytest.mark.asyncio
    async def test_first_boot_then_noop(self, tmp_path, launcher3_db):
        launcher2_db = tmp_path / "launcher2.db"
        await create_launcher_db(launcher2_db, [(10, "Phone", OLD)])
        prefs_dir = tmp_path / "shared_prefs"
        config = InitializerConfig(
            shared_prefs_dir=str(prefs_dir),
            launcher_databases={
                LAUNCHER2_FAVORITES.uri: str(launcher2_db),
                LAUNCHER3_FAVORITES.uri: str(launcher3_db),
            },
        )

        service = OneTimeInitializerService.from_config(config)
        try:
            applied = await service.handle_boot_completed()
        finally:
            await service.close()

        assert [a.version for a in applied] == [1]
        assert [s.updated for s in applied[0].result] == [1, 1]
        assert await read_intents(launcher2_db) == {10: NEW}
        assert (await read_intents(launcher3_db))[1] == NEW

        # A fresh process reads the persisted version from disk.
        prefs = SharedPreferencesFile(prefs_dir, "oti")
        assert await prefs.get_int(MAPPING_VERSION_PREF) == 1

        second = OneTimeInitializerService.from_config(config)
        try:
            assert await second.handle_boot_completed() == []
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_configure_with_short_launcher_name(self, tmp_path, monkeypatch, launcher3_db):
        """Test that a launcher configured by short name is migrated, not skipped."""
        monkeypatch.chdir(tmp_path)
        reset_config()
        try:
            configure(shared_prefs_dir=str(tmp_path / "prefs"), launcher_databases={"launcher3": str(launcher3_db)})

            service = OneTimeInitializerService.from_config()
            try:
                applied = await service.handle_boot_completed()
            finally:
                await service.close()
        finally:
            reset_config()

        launchers = {s.locator: s for s in applied[0].result}
        assert launchers[LAUNCHER3_FAVORITES.uri].available is True
        assert launchers[LAUNCHER3_FAVORITES.uri].updated == 1
        assert (await read_intents(launcher3_db))[1] == NEW
        assert await SharedPreferencesFile(tmp_path / "prefs", "oti").get_int(MAPPING_VERSION_PREF) == 1
