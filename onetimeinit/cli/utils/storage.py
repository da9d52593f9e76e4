"""Store and service factory utilities for the CLI."""

from pathlib import Path
from typing import Dict, Optional, Sequence

from loguru import logger

from onetimeinit.config import InitializerConfig, parse_launcher_databases
from onetimeinit.exceptions import ConfigurationError
from onetimeinit.service import OneTimeInitializerService
from onetimeinit.storage import SharedPreferencesFile


def parse_launcher_db_options(options: Sequence[str]) -> Dict[str, str]:
    """
    Parse repeated --launcher-db NAME=PATH options.

    Returns:
        Locator URI -> database path

    Raises:
        ConfigurationError: If an option has no "=" or names an unknown launcher
    """
    launchers: Dict[str, str] = {}
    for option in options:
        name, sep, path = option.partition("=")
        if not sep or not name or not path:
            raise ConfigurationError(f"Expected NAME=PATH for --launcher-db, got '{option}'")
        launchers[name] = path
    return parse_launcher_databases(launchers)


def resolve_config(
    config: InitializerConfig,
    prefs_dir: Optional[str] = None,
    prefs_name: Optional[str] = None,
    launcher_dbs: Sequence[str] = (),
) -> InitializerConfig:
    """
    Merge CLI flags over a loaded configuration.

    Configuration priority:
    1. CLI flags / environment variables (handled by Click)
    2. Config file
    3. Defaults
    """
    databases = dict(config.launcher_databases)
    databases.update(parse_launcher_db_options(launcher_dbs))

    resolved = InitializerConfig(
        shared_prefs_dir=prefs_dir or config.shared_prefs_dir,
        prefs_name=prefs_name or config.prefs_name,
        launcher_databases=databases,
        log_level=config.log_level,
    )

    logger.debug(
        f"Using preferences {Path(resolved.shared_prefs_dir) / resolved.prefs_name}.xml "
        f"and {len(resolved.launcher_databases)} launcher database(s)"
    )
    return resolved


def create_preferences(config: InitializerConfig) -> SharedPreferencesFile:
    return SharedPreferencesFile(Path(config.shared_prefs_dir), config.prefs_name)


def create_service(config: InitializerConfig) -> OneTimeInitializerService:
    return OneTimeInitializerService.from_config(config)
