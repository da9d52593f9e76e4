"""
Loguru logging configuration for onetimeinit.

Records emitted while a migration step runs carry the mapping version and
step description; records emitted while a launcher is scanned also carry
the locator. Both console and JSON output can show that context.

Unattended boot runs are configured through ONETIMEINIT_LOG_* environment
variables (see configure_logging_from_env).
"""

import json
import os
import sys
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Generator

from loguru import logger

LOG_ROTATION = "10 MB"
LOG_RETENTION = "30 days"

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> "
    "<level>{level: <8}</level> "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> "
    "<level>{message}</level>{extra[_context]}"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} {level: <8} {name}:{function}:{line} {message}{extra[_context]}"


@dataclass
class LogContext:
    """Migration context bound to a log record."""

    mapping_version: int | None = None
    migration: str | None = None
    locator: str | None = None

    @classmethod
    def from_extra(cls, extra: dict[str, Any]) -> "LogContext":
        return cls(
            mapping_version=extra.get("mapping_version"),
            migration=extra.get("migration"),
            locator=extra.get("locator"),
        )

    def as_dict(self) -> dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def render(self) -> str:
        """Short suffix for console lines, e.g. " [v1 content://...]"."""
        parts = []
        if self.mapping_version is not None:
            parts.append(f"v{self.mapping_version}")
        if self.locator is not None:
            parts.append(self.locator)
        return f" [{' '.join(parts)}]" if parts else ""


_CONTEXT_KEYS = frozenset(LogContext.__dataclass_fields__)


def _context_filter(show_context: bool) -> Callable[[dict[str, Any]], bool]:
    def add_context(record: dict[str, Any]) -> bool:
        extra = record["extra"]
        extra["_context"] = LogContext.from_extra(extra).render() if show_context else ""
        return True

    return add_context


def _create_json_filter(show_context: bool) -> Callable[[dict[str, Any]], bool]:
    def json_filter(record: dict[str, Any]) -> bool:
        record["extra"]["_json"] = _format_for_json(record, show_context)
        return True

    return json_filter


def configure_logging(
    level: str = "INFO",
    log_file: str | None = None,
    json_logs: bool = False,
    show_context: bool = True,
) -> None:
    """
    Replace all loguru sinks with onetimeinit's console (and file) sinks.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path; rotated at LOG_ROTATION
        json_logs: Emit one JSON object per line instead of text
        show_context: Include mapping version and locator in each line

    Examples:
        configure_logging(level="DEBUG", log_file="oti.log")
        configure_logging(json_logs=True)
    """
    logger.remove()

    if json_logs:
        sink_filter = _create_json_filter(show_context)
        console_format = file_format = "{extra[_json]}"
    else:
        sink_filter = _context_filter(show_context)
        console_format, file_format = _CONSOLE_FORMAT, _FILE_FORMAT

    logger.add(
        sys.stderr,
        format=console_format,
        level=level,
        colorize=not json_logs,
        filter=sink_filter,  # type: ignore[arg-type]
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            format=file_format,
            level=level,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            compression="gz",
            filter=sink_filter,  # type: ignore[arg-type]
        )

    logger.debug(f"onetimeinit logging configured at level {level}")


def _format_for_json(record: dict[str, Any], show_context: bool = True) -> str:
    """Render a record as one JSON line; private extras (leading "_") are dropped."""
    extra = {
        key: _safe_serialize(value)
        for key, value in record["extra"].items()
        if key not in _CONTEXT_KEYS and not key.startswith("_")
    }

    line: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    context = LogContext.from_extra(record["extra"]).as_dict()
    if show_context and context:
        line["context"] = context
    if extra:
        line["extra"] = extra

    exc = record["exception"]
    if exc is not None:
        line["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(line, default=str)


def _safe_serialize(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _safe_serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_safe_serialize(v) for v in value]
    return str(value)


def configure_logging_from_env() -> None:
    """
    Configure logging from ONETIMEINIT_LOG_LEVEL, ONETIMEINIT_LOG_FORMAT
    ("json" or "console"), ONETIMEINIT_LOG_FILE and ONETIMEINIT_LOG_CONTEXT.
    """
    configure_logging(
        level=os.getenv("ONETIMEINIT_LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("ONETIMEINIT_LOG_FILE") or None,
        json_logs=os.getenv("ONETIMEINIT_LOG_FORMAT", "console").lower() == "json",
        show_context=os.getenv("ONETIMEINIT_LOG_CONTEXT", "true").lower() in ("true", "1", "yes"),
    )


def get_logger(name: str | None = None) -> Any:
    """Return the loguru logger, bound to ``module=name`` when a name is given."""
    return logger.bind(module=name) if name else logger


@contextmanager
def migration_logging_context(version: int, description: str) -> Generator[None, None, None]:
    """
    Bind mapping_version and migration to all logs within scope.

    Example:
        with migration_logging_context(1, "Relink dialer shortcuts"):
            logger.info("Updating to version 1.")
    """
    with logger.contextualize(mapping_version=version, migration=description):
        yield


@contextmanager
def locator_logging_context(locator: Any) -> Generator[None, None, None]:
    with logger.contextualize(locator=str(locator)):
        yield
