"""
onetimeinit configuration system.

Provides global configuration for the preference file and launcher databases.

Configuration is loaded in this priority order:
1. Values set via onetimeinit.configure() (highest priority)
2. Values from onetimeinit.config.yaml in current directory
3. Default values

Usage:
    >>> import onetimeinit
    >>> onetimeinit.configure(
    ...     shared_prefs_dir="/data/data/com.android.onetimeinitializer/shared_prefs",
    ...     launcher_databases={LAUNCHER3_FAVORITES.uri: "/data/data/com.android.launcher3/databases/launcher.db"},
    ... )
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from onetimeinit.exceptions import ConfigurationError
from onetimeinit.storage.locators import resolve_locator

CONFIG_FILE_NAME = "onetimeinit.config.yaml"

# Name of the shared preferences file
DEFAULT_PREFS_NAME = "oti"


def _load_yaml_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from onetimeinit.config.yaml.

    Args:
        path: Explicit config file; defaults to the current directory's file

    Returns:
        Configuration dictionary, empty dict if file not found

    Raises:
        ConfigurationError: If the file exists but is not a YAML mapping
    """
    config_path = path or Path.cwd() / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping")
    return config


def parse_launcher_databases(launchers: Dict[str, Any]) -> Dict[str, str]:
    """
    Normalize a launchers mapping to locator URI -> database path.

    Keys may be short names ("launcher2", "launcher3") or content URIs.
    """
    databases: Dict[str, str] = {}
    for name, path in (launchers or {}).items():
        try:
            locator = resolve_locator(str(name))
        except ValueError as e:
            raise ConfigurationError(f"Unknown launcher '{name}': {e}") from e
        databases[locator.uri] = str(path)
    return databases


@dataclass
class InitializerConfig:
    """
    Global configuration for onetimeinit.

    Attributes:
        shared_prefs_dir: Directory holding the preference XML file
        prefs_name: Preference file name (without .xml)
        launcher_databases: Locator URI -> launcher SQLite database path
        log_level: Default log level for the CLI
    """

    shared_prefs_dir: str = "./shared_prefs"
    prefs_name: str = DEFAULT_PREFS_NAME
    launcher_databases: Dict[str, str] = field(default_factory=dict)
    log_level: str = "INFO"


def _config_from_yaml(path: Optional[Path] = None) -> InitializerConfig:
    """Create an InitializerConfig from YAML file settings."""
    yaml_config = _load_yaml_config(path)

    if not yaml_config:
        return InitializerConfig()

    prefs_config = yaml_config.get("shared_prefs", {}) or {}

    return InitializerConfig(
        shared_prefs_dir=str(prefs_config.get("dir", "./shared_prefs")),
        prefs_name=str(prefs_config.get("name", DEFAULT_PREFS_NAME)),
        launcher_databases=parse_launcher_databases(yaml_config.get("launchers", {})),
        log_level=str(yaml_config.get("log_level", "INFO")).upper(),
    )


# Global singleton
_config: Optional[InitializerConfig] = None


def configure(**kwargs: Any) -> None:
    """
    Configure onetimeinit defaults.

    Args:
        shared_prefs_dir: Directory holding the preference XML file
        prefs_name: Preference file name
        launcher_databases: Launcher name or locator URI -> database path
        log_level: Default log level

    Raises:
        ValueError: If an unknown option is passed
        ConfigurationError: If a launcher name cannot be resolved
    """
    global _config
    if _config is None:
        _config = InitializerConfig()

    for key, value in kwargs.items():
        if key == "launcher_databases":
            value = parse_launcher_databases(value)
        if hasattr(_config, key):
            setattr(_config, key, value)
        else:
            valid_keys = [f for f in InitializerConfig.__dataclass_fields__.keys()]
            raise ValueError(
                f"Unknown config option: {key}. Valid options: {', '.join(valid_keys)}"
            )


def load_config(path: Optional[Path] = None) -> InitializerConfig:
    """Replace the current configuration with one loaded from a YAML file."""
    global _config
    _config = _config_from_yaml(path)
    return _config


def get_config() -> InitializerConfig:
    """
    Get the current configuration.

    If not yet configured, loads from onetimeinit.config.yaml if present,
    otherwise creates default configuration.
    """
    global _config
    if _config is None:
        _config = _config_from_yaml()
    return _config


def reset_config() -> None:
    """
    Reset configuration to defaults.

    Primarily used for testing.
    """
    global _config
    _config = None
