"""
Intent descriptors and the intent-URI string codec.

Launcher shortcut rows store the intent that an icon fires as a single
string, for example:

    #Intent;action=android.intent.action.MAIN;category=android.intent.category.LAUNCHER;
    launchFlags=0x10200000;component=com.android.contacts/.activities.DialtactsActivity;end

This module decodes such strings into an Intent dataclass and encodes them
back. Decoding followed by encoding reproduces the same segments in the
same order, so rewriting a single field leaves the rest of the string
untouched.
"""

import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, unquote

from onetimeinit.exceptions import IntentParseError

ACTION_MAIN = "android.intent.action.MAIN"
ACTION_VIEW = "android.intent.action.VIEW"
ACTION_BOOT_COMPLETED = "android.intent.action.BOOT_COMPLETED"
CATEGORY_LAUNCHER = "android.intent.category.LAUNCHER"

# Flag for parse_uri()/to_uri(): use the "intent:" scheme form
URI_INTENT_SCHEME = 1 << 0

_FRAGMENT_PREFIX = "#Intent;"
_INTENT_SCHEME_PREFIX = "intent:"
_URI_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")

# Characters left unescaped besides alphanumerics and "_.-~"
_UNRESERVED = "!'()*"

# Extra type prefix -> converter
_EXTRA_DECODERS: dict[str, Any] = {
    "S": str,
    "B": lambda v: v.lower() == "true",
    "b": int,
    "c": lambda v: v[0],
    "d": float,
    "f": float,
    "i": int,
    "l": int,
    "s": int,
}


@dataclass(frozen=True)
class ComponentName:
    """
    Identifier of a specific application component.

    Attributes:
        package: Package that owns the component
        class_name: Fully-qualified class name of the component
    """

    package: str
    class_name: str

    def flatten_to_string(self) -> str:
        """Return the unambiguous "package/class" form."""
        return f"{self.package}/{self.class_name}"

    def flatten_to_short_string(self) -> str:
        """
        Return the compact "package/.Suffix" form.

        The class is abbreviated only when it lives under the package.
        """
        if self.class_name.startswith(self.package + "."):
            return f"{self.package}/{self.class_name[len(self.package):]}"
        return self.flatten_to_string()

    @classmethod
    def unflatten_from_string(cls, value: str) -> "ComponentName | None":
        """
        Parse a flattened component name.

        Accepts both "pkg/cls" and "pkg/.Suffix". Returns None when the
        string has no "/" or an empty class part.
        """
        sep = value.find("/")
        if sep < 0 or sep + 1 >= len(value):
            return None
        package = value[:sep]
        class_name = value[sep + 1 :]
        if class_name.startswith("."):
            class_name = package + class_name
        return cls(package=package, class_name=class_name)

    def __str__(self) -> str:
        return f"ComponentInfo{{{self.flatten_to_string()}}}"


@dataclass
class IntentExtra:
    """A typed extra value; kind is one of the single-letter type prefixes."""

    kind: str
    value: Any


@dataclass
class Intent:
    """
    Structured form of an intent descriptor.

    Categories keep their original order so that re-encoding does not
    reshuffle the stored string.
    """

    action: str | None = None
    categories: list[str] = field(default_factory=list)
    component: ComponentName | None = None
    data: str | None = None
    mime_type: str | None = None
    package: str | None = None
    flags: int = 0
    source_bounds: str | None = None
    scheme: str | None = None
    extras: dict[str, IntentExtra] = field(default_factory=dict)

    def add_category(self, category: str) -> "Intent":
        if category not in self.categories:
            self.categories.append(category)
        return self

    def has_category(self, category: str) -> bool:
        return category in self.categories

    def add_flags(self, flags: int) -> "Intent":
        self.flags |= flags
        return self

    def to_uri(self, flags: int = 0) -> str:
        """
        Encode this intent as a descriptor string.

        Args:
            flags: 0 for the "data#Intent;...;end" form, or URI_INTENT_SCHEME
                for the "intent:data#Intent;scheme=...;end" form

        Returns:
            The encoded descriptor
        """
        parts: list[str] = []
        scheme = None

        if flags & URI_INTENT_SCHEME:
            data = self.data or ""
            colon = data.find(":")
            if colon > 0 and _URI_SCHEME_RE.match(data[:colon]):
                scheme = data[:colon]
                data = data[colon + 1 :]
            parts.append(_INTENT_SCHEME_PREFIX + data)
        elif self.data is not None:
            parts.append(self.data)

        parts.append(_FRAGMENT_PREFIX)
        if scheme:
            parts.append(f"scheme={_encode(scheme)};")
        if self.action is not None:
            parts.append(f"action={_encode(self.action)};")
        for category in self.categories:
            parts.append(f"category={_encode(category)};")
        if self.mime_type is not None:
            parts.append(f"type={_encode(self.mime_type, '/')};")
        if self.flags != 0:
            parts.append(f"launchFlags=0x{self.flags & 0xFFFFFFFF:X};")
        if self.package is not None:
            parts.append(f"package={_encode(self.package)};")
        if self.component is not None:
            parts.append(f"component={_encode(self.component.flatten_to_short_string(), '/')};")
        if self.source_bounds is not None:
            parts.append(f"sourceBounds={_encode(self.source_bounds)};")
        for name, extra in self.extras.items():
            parts.append(f"{extra.kind}.{_encode(name)}={_encode(_extra_to_str(extra))};")
        parts.append("end")

        return "".join(parts)


def parse_uri(uri: str, flags: int = 0) -> Intent:
    """
    Decode a descriptor string into an Intent.

    Args:
        uri: Descriptor string as stored by the launcher
        flags: 0, or URI_INTENT_SCHEME to accept the "intent:" form

    Returns:
        Decoded Intent

    Raises:
        IntentParseError: If the string is malformed, uses the legacy
            format, or contains an unknown key
    """
    intent_scheme = bool(flags & URI_INTENT_SCHEME) and uri.startswith(_INTENT_SCHEME_PREFIX)

    i = uri.rfind("#")
    if i == -1:
        if not intent_scheme:
            return Intent(action=ACTION_VIEW, data=uri)
    elif not uri.startswith(_FRAGMENT_PREFIX, i):
        if not intent_scheme:
            raise IntentParseError("Legacy intent format is not supported", uri)
        i = -1

    intent = Intent()
    if i >= 0:
        _parse_fragment(intent, uri, uri[i + len(_FRAGMENT_PREFIX) :])

    data = uri[:i] if i >= 0 else uri
    if intent_scheme:
        data = data[len(_INTENT_SCHEME_PREFIX) :]
        if data and intent.scheme:
            data = f"{intent.scheme}:{data}"
    if data:
        intent.data = data

    if intent.action is None:
        intent.action = ACTION_VIEW

    return intent


def _parse_fragment(intent: Intent, uri: str, body: str) -> None:
    pos = 0
    while not body.startswith("end", pos):
        semi = body.find(";", pos)
        if semi < 0:
            raise IntentParseError("Intent fragment is missing its 'end' terminator", uri)

        key, sep, raw = body[pos:semi].partition("=")
        value = unquote(raw) if sep else ""
        try:
            _apply_field(intent, key, value, uri)
        except IntentParseError:
            raise
        except (ValueError, IndexError) as e:
            raise IntentParseError(f"Bad value for '{key}' ({e})", uri) from e

        pos = semi + 1


def _apply_field(intent: Intent, key: str, value: str, uri: str) -> None:
    if key == "action":
        intent.action = value
    elif key == "category":
        intent.add_category(value)
    elif key == "type":
        intent.mime_type = value
    elif key == "launchFlags":
        intent.flags = _decode_int(value)
    elif key == "package":
        intent.package = value
    elif key == "component":
        intent.component = ComponentName.unflatten_from_string(value)
    elif key == "scheme":
        intent.scheme = value
    elif key == "sourceBounds":
        intent.source_bounds = value
    elif len(key) > 2 and key[1] == "." and key[0] in _EXTRA_DECODERS:
        kind = key[0]
        intent.extras[unquote(key[2:])] = IntentExtra(kind=kind, value=_EXTRA_DECODERS[kind](value))
    else:
        raise IntentParseError(f"Unknown intent key '{key}'", uri)


def _decode_int(text: str) -> int:
    """Decode an integer literal the way launcher strings write them (0x.., #.., 0.., decimal)."""
    sign = 1
    digits = text
    if digits[:1] in ("-", "+"):
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]

    if digits[:2].lower() == "0x":
        return sign * int(digits[2:], 16)
    if digits.startswith("#"):
        return sign * int(digits[1:], 16)
    if len(digits) > 1 and digits.startswith("0"):
        return sign * int(digits[1:], 8)
    return sign * int(digits, 10)


def _encode(value: str, allow: str = "") -> str:
    return quote(value, safe=_UNRESERVED + allow)


def _extra_to_str(extra: IntentExtra) -> str:
    if extra.kind == "B":
        return "true" if extra.value else "false"
    return str(extra.value)
