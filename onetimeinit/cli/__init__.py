"""onetimeinit CLI - run and inspect one-time boot migrations."""

import os
from pathlib import Path
from typing import Optional, Tuple

import click
from loguru import logger

from onetimeinit import __version__
from onetimeinit.config import get_config, load_config
from onetimeinit.exceptions import ConfigurationError
from onetimeinit.observability.logging import configure_logging, configure_logging_from_env
from onetimeinit.cli.utils.storage import resolve_config


@click.group()
@click.version_option(version=__version__, prog_name="onetimeinit")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="ONETIMEINIT_CONFIG",
    help="YAML config file (default: ./onetimeinit.config.yaml)",
)
@click.option(
    "--prefs-dir",
    envvar="ONETIMEINIT_PREFS_DIR",
    help="Directory holding the shared preferences XML file",
)
@click.option(
    "--prefs-name",
    envvar="ONETIMEINIT_PREFS_NAME",
    help="Shared preferences file name (default: oti)",
)
@click.option(
    "--launcher-db",
    "launcher_dbs",
    multiple=True,
    metavar="NAME=PATH",
    help="Launcher database for a locator, e.g. launcher3=./launcher.db (repeatable)",
)
@click.option(
    "--output",
    type=click.Choice(["table", "json", "plain"], case_sensitive=False),
    default="table",
    help="Output format (default: table)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Optional[Path],
    prefs_dir: Optional[str],
    prefs_name: Optional[str],
    launcher_dbs: Tuple[str, ...],
    output: str,
    verbose: bool,
) -> None:
    """
    onetimeinit - one-time, boot-triggered launcher migrations.

    Examples:

        # Apply pending migrations to a pulled device image
        onetimeinit --prefs-dir ./image/shared_prefs \\
            --launcher-db launcher3=./image/launcher.db boot-completed

        # Show the stored mapping version
        onetimeinit --prefs-dir ./image/shared_prefs status

        # Decode a launcher intent descriptor
        onetimeinit decode "#Intent;action=android.intent.action.MAIN;end"

    Configuration:

        - CLI flags (highest priority)
        - Environment variables (ONETIMEINIT_PREFS_DIR, ONETIMEINIT_LOG_LEVEL, ...)
        - Config file (onetimeinit.config.yaml)
    """
    try:
        config = load_config(config_path) if config_path else get_config()
        config = resolve_config(config, prefs_dir, prefs_name, launcher_dbs)
    except ConfigurationError as e:
        raise click.UsageError(str(e)) from e

    if verbose:
        configure_logging(level="DEBUG")
        logger.info("Verbose logging enabled")
    elif os.getenv("ONETIMEINIT_LOG_LEVEL") or os.getenv("ONETIMEINIT_LOG_FORMAT"):
        configure_logging_from_env()
    else:
        configure_logging(level=config.log_level, show_context=False)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["output"] = output.lower()
    ctx.obj["verbose"] = verbose


# Import and register commands
from onetimeinit.cli.commands.boot import boot_completed, migrations, status
from onetimeinit.cli.commands.intents import decode

main.add_command(boot_completed)
main.add_command(status)
main.add_command(migrations)
main.add_command(decode)


__all__ = ["main"]
