"""
Exception classes for onetimeinit.

Store unavailability is not an exception: a content store signals it by
returning None from query().
"""


class OneTimeInitError(Exception):
    """Base exception for all onetimeinit errors."""

    pass


class IntentParseError(OneTimeInitError, ValueError):
    """
    Raised when an intent descriptor string cannot be decoded.

    Attributes:
        uri: The descriptor string that failed to parse.
    """

    def __init__(self, message: str, uri: str | None = None) -> None:
        super().__init__(message)
        self.uri = uri

    def __str__(self) -> str:
        message = super().__str__()
        if self.uri is not None:
            return f"{message}: {self.uri!r}"
        return message


class PreferenceTypeError(OneTimeInitError, TypeError):
    """
    Raised when a preference key holds a value of the wrong type.

    Attributes:
        key: Preference key that was read
        actual: Type tag actually stored under the key
    """

    def __init__(self, key: str, expected: str, actual: str) -> None:
        super().__init__(f"Preference '{key}' holds a {actual}, expected {expected}")
        self.key = key
        self.expected = expected
        self.actual = actual


class ConfigurationError(OneTimeInitError):
    """Raised for invalid configuration (YAML file, CLI flags)."""

    pass
