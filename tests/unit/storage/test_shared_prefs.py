"""Tests for the shared-preferences XML file store."""

import pytest

from onetimeinit.exceptions import PreferenceTypeError
from onetimeinit.storage.shared_prefs import SharedPreferencesFile


class TestSharedPreferencesFile:
    """Test SharedPreferencesFile."""

    @pytest.mark.asyncio
    async def test_missing_file_returns_default(self, tmp_path):
        """Test that an absent file reads as empty."""
        prefs = SharedPreferencesFile(tmp_path, "oti")

        assert await prefs.get_int("mapping_version") == 0
        assert await prefs.get_int("mapping_version", 5) == 5
        assert not prefs.path.exists()

    @pytest.mark.asyncio
    async def test_put_int_writes_xml(self, tmp_path):
        """Test that put_int commits an Android-style XML file."""
        prefs = SharedPreferencesFile(tmp_path, "oti")

        await prefs.put_int("mapping_version", 1)

        content = (tmp_path / "oti.xml").read_text(encoding="utf-8")
        assert content.startswith("<?xml version='1.0' encoding='utf-8' standalone='yes' ?>")
        assert '<int name="mapping_version" value="1" />' in content

    @pytest.mark.asyncio
    async def test_value_survives_reopen(self, tmp_path):
        """Test durability across store instances."""
        await SharedPreferencesFile(tmp_path, "oti").put_int("mapping_version", 3)

        reopened = SharedPreferencesFile(tmp_path, "oti")

        assert await reopened.get_int("mapping_version") == 3

    @pytest.mark.asyncio
    async def test_reads_existing_android_file(self, tmp_path):
        """Test reading a file written by the platform."""
        (tmp_path / "oti.xml").write_text(
            "<?xml version='1.0' encoding='utf-8' standalone='yes' ?>\n"
            "<map>\n"
            '    <int name="mapping_version" value="1" />\n'
            '    <string name="note">hello</string>\n'
            "</map>\n",
            encoding="utf-8",
        )
        prefs = SharedPreferencesFile(tmp_path, "oti")

        assert await prefs.get_int("mapping_version") == 1

    @pytest.mark.asyncio
    async def test_other_entries_preserved(self, tmp_path):
        """Test that rewriting keeps entries of other types."""
        (tmp_path / "oti.xml").write_text(
            "<map>"
            '<boolean name="seen" value="true" />'
            '<long name="stamp" value="1700000000000" />'
            '<string name="note">hello</string>'
            '<set name="tags"><string>a</string><string>b</string></set>'
            "</map>",
            encoding="utf-8",
        )
        prefs = SharedPreferencesFile(tmp_path, "oti")

        await prefs.put_int("mapping_version", 1)

        content = (tmp_path / "oti.xml").read_text(encoding="utf-8")
        assert '<boolean name="seen" value="true" />' in content
        assert '<long name="stamp" value="1700000000000" />' in content
        assert '<string name="note">hello</string>' in content
        assert "<string>a</string>" in content
        assert '<int name="mapping_version" value="1" />' in content

    @pytest.mark.asyncio
    async def test_wrong_type_raises(self, tmp_path):
        """Test that reading a non-int key as int raises."""
        (tmp_path / "oti.xml").write_text(
            '<map><string name="mapping_version">1</string></map>', encoding="utf-8"
        )
        prefs = SharedPreferencesFile(tmp_path, "oti")

        with pytest.raises(PreferenceTypeError, match="mapping_version"):
            await prefs.get_int("mapping_version")

    @pytest.mark.asyncio
    async def test_corrupt_file_treated_as_empty(self, tmp_path):
        """Test that an unreadable file falls back to defaults."""
        (tmp_path / "oti.xml").write_text("<map><int name=", encoding="utf-8")
        prefs = SharedPreferencesFile(tmp_path, "oti")

        assert await prefs.get_int("mapping_version") == 0

        await prefs.put_int("mapping_version", 1)
        assert await SharedPreferencesFile(tmp_path, "oti").get_int("mapping_version") == 1

    @pytest.mark.asyncio
    async def test_creates_directory(self, tmp_path):
        """Test that the shared_prefs directory is created on first write."""
        prefs = SharedPreferencesFile(tmp_path / "data" / "shared_prefs", "oti")

        await prefs.put_int("mapping_version", 1)

        assert (tmp_path / "data" / "shared_prefs" / "oti.xml").exists()
        assert [p.name for p in (tmp_path / "data" / "shared_prefs").iterdir()] == ["oti.xml"]

    @pytest.mark.asyncio
    async def test_null_and_unknown_entries_kept(self, tmp_path):
        """Test that <null> and unrecognised elements neither hide nor drop other keys."""
        (tmp_path / "oti.xml").write_text(
            "<map>"
            "<int name='mapping_version' value='1'/>"
            "<null name='x'/>"
            "<string name='keep'>v</string>"
            "<vendor name='odd' flavor='plum'><item>1</item></vendor>"
            "</map>",
            encoding="utf-8",
        )
        prefs = SharedPreferencesFile(tmp_path, "oti")

        assert await prefs.get_int("mapping_version") == 1
        assert await prefs.get_int("x", 7) == 7

        await prefs.put_int("mapping_version", 2)

        content = (tmp_path / "oti.xml").read_text(encoding="utf-8")
        assert '<null name="x" />' in content
        assert '<string name="keep">v</string>' in content
        assert '<vendor name="odd" flavor="plum">' in content
        assert "<item>1</item>" in content
        assert await SharedPreferencesFile(tmp_path, "oti").get_int("mapping_version") == 2
