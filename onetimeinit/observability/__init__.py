"""
Logging for onetimeinit.

    - configure_logging(): Configure loguru-based logging
    - configure_logging_from_env(): Configure from environment variables
    - get_logger(): Get a logger instance
    - migration_logging_context(): Context manager for a migration step
    - locator_logging_context(): Context manager for a launcher locator scan
"""

from onetimeinit.observability.logging import (
    LogContext,
    configure_logging,
    configure_logging_from_env,
    get_logger,
    locator_logging_context,
    migration_logging_context,
)

__all__ = [
    "configure_logging",
    "configure_logging_from_env",
    "get_logger",
    "migration_logging_context",
    "locator_logging_context",
    "LogContext",
]
