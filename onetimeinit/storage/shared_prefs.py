"""
Shared-preferences file store.

Reads and writes the XML preference files found under an application's
``shared_prefs/`` directory:

    <?xml version='1.0' encoding='utf-8' standalone='yes' ?>
    <map>
        <int name="mapping_version" value="1" />
    </map>

Entries of other types, including <null> and any element this module
does not know, are preserved untouched when the file is rewritten.
"""

import copy
import os
import tempfile
import threading
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any

from loguru import logger

from onetimeinit.exceptions import PreferenceTypeError
from onetimeinit.storage.base import PreferenceStore

_XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' standalone='yes' ?>\n"
_VALUE_TAGS = {"int", "long", "float", "boolean"}


class SharedPreferencesFile(PreferenceStore):
    """
    Preference store backed by ``<directory>/<name>.xml``.

    The file is loaded once on first access and kept in memory; every
    put_int() rewrites the file atomically (temp file + rename).

    Example:
        >>> prefs = SharedPreferencesFile("./shared_prefs", "oti")
        >>> await prefs.get_int("mapping_version")
        0
    """

    def __init__(self, directory: str | Path, name: str) -> None:
        self.directory = Path(directory)
        self.name = name
        self.path = self.directory / f"{name}.xml"
        # name -> (tag, value); tag is the XML element name
        self._entries: dict[str, tuple[str, Any]] | None = None
        self._lock = threading.RLock()

    async def get_int(self, key: str, default: int = 0) -> int:
        with self._lock:
            entries = self._load()
            tag, value = entries.get(key, ("null", None))
            if tag == "null":
                return default
            if tag != "int":
                raise PreferenceTypeError(key, "int", tag)
            return value

    async def put_int(self, key: str, value: int) -> None:
        with self._lock:
            entries = self._load()
            entries[key] = ("int", int(value))
            self._commit(entries)

    def _load(self) -> dict[str, tuple[str, Any]]:
        if self._entries is not None:
            return self._entries

        if not self.path.exists():
            self._entries = {}
            return self._entries

        try:
            root = ET.parse(self.path).getroot()
            self._entries = {
                element.attrib["name"]: _decode_element(element) for element in root
            }
        except (ET.ParseError, KeyError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            self._entries = {}

        return self._entries

    def _commit(self, entries: dict[str, tuple[str, Any]]) -> None:
        root = ET.Element("map")
        for name, (tag, value) in entries.items():
            root.append(_encode_element(name, tag, value))
        ET.indent(root, space="    ")
        body = ET.tostring(root, encoding="unicode")

        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{self.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(_XML_DECLARATION)
                f.write(body)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        logger.debug(f"Committed {len(entries)} preference(s) to {self.path}")


def _decode_element(element: ET.Element) -> tuple[str, Any]:
    tag = element.tag
    if tag in ("int", "long"):
        return tag, int(element.attrib["value"])
    if tag == "float":
        return tag, float(element.attrib["value"])
    if tag == "boolean":
        return tag, element.attrib["value"] == "true"
    if tag == "string":
        return tag, element.text or ""
    if tag == "set":
        return tag, [child.text or "" for child in element]
    if tag == "null":
        return tag, None
    # Written back verbatim
    return tag, copy.deepcopy(element)


def _encode_element(name: str, tag: str, value: Any) -> ET.Element:
    if isinstance(value, ET.Element):
        return copy.deepcopy(value)
    element = ET.Element(tag, name=name)
    if tag == "boolean":
        element.set("value", "true" if value else "false")
    elif tag in _VALUE_TAGS:
        element.set("value", str(value))
    elif tag == "string":
        element.text = value
    elif tag == "set":
        for item in value:
            ET.SubElement(element, "string").text = item
    return element
