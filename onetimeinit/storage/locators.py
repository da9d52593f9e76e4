"""
Content locators for launcher shortcut storage.

A locator is a content URI such as
``content://com.android.launcher3.settings/favorites?notify=true``:
the authority names the provider and the first path segment names the table.
"""

from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

CONTENT_SCHEME = "content"


@dataclass(frozen=True)
class ContentLocator:
    """
    Parsed content URI.

    Attributes:
        uri: Original URI string
        authority: Provider authority (e.g. "com.android.launcher2.settings")
        table: Table addressed by the first path segment
        notify: Whether the notify=true query parameter is present
    """

    uri: str
    authority: str
    table: str
    notify: bool = False

    @classmethod
    def parse(cls, uri: str) -> "ContentLocator":
        """
        Parse a content URI.

        Raises:
            ValueError: If the URI is not content://authority/table
        """
        parts = urlsplit(uri)
        if parts.scheme != CONTENT_SCHEME:
            raise ValueError(f"Not a content URI: {uri}")
        if not parts.netloc:
            raise ValueError(f"Content URI has no authority: {uri}")

        segments = [s for s in parts.path.split("/") if s]
        if not segments:
            raise ValueError(f"Content URI has no table: {uri}")

        params = parse_qs(parts.query)
        notify = params.get("notify", ["false"])[-1].lower() == "true"

        return cls(uri=uri, authority=parts.netloc, table=segments[0], notify=notify)

    @property
    def name(self) -> str:
        """Short name, e.g. "launcher3" for com.android.launcher3.settings."""
        pieces = self.authority.split(".")
        if len(pieces) >= 3 and pieces[-1] == "settings":
            return pieces[-2]
        return self.authority

    def __str__(self) -> str:
        return self.uri


LAUNCHER2_FAVORITES = ContentLocator.parse(
    "content://com.android.launcher2.settings/favorites?notify=true"
)
LAUNCHER3_FAVORITES = ContentLocator.parse(
    "content://com.android.launcher3.settings/favorites?notify=true"
)

# Historical launcher providers, oldest first
LAUNCHER_LOCATORS: tuple[ContentLocator, ...] = (LAUNCHER2_FAVORITES, LAUNCHER3_FAVORITES)


def resolve_locator(name_or_uri: str) -> ContentLocator:
    """
    Resolve a short launcher name ("launcher2") or a full content URI.

    Raises:
        ValueError: If the name is unknown and the string is not a content URI
    """
    for locator in LAUNCHER_LOCATORS:
        if name_or_uri in (locator.name, locator.uri):
            return locator
    return ContentLocator.parse(name_or_uri)
