"""Migration commands: run on boot, inspect the mapping version."""

from dataclasses import asdict
from typing import Any, Dict, List

import click

from onetimeinit.cli.output.formatters import (
    format_json,
    format_key_value,
    format_plain,
    format_table,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from onetimeinit.cli.utils.async_helpers import async_command
from onetimeinit.cli.utils.storage import create_preferences, create_service
from onetimeinit.migrations import (
    MAPPING_VERSION_PREF,
    AppliedMigration,
    RelinkStats,
    get_global_registry,
)


def _stats_of(applied: List[AppliedMigration]) -> List[RelinkStats]:
    stats: List[RelinkStats] = []
    for migration in applied:
        if isinstance(migration.result, list):
            stats.extend(r for r in migration.result if isinstance(r, RelinkStats))
    return stats


def _applied_to_dict(migration: AppliedMigration) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "version": migration.version,
        "description": migration.description,
        "applied_at": migration.applied_at.isoformat(),
    }
    if isinstance(migration.result, list):
        data["launchers"] = [
            asdict(r) for r in migration.result if isinstance(r, RelinkStats)
        ]
    return data


@click.command(name="boot-completed")
@click.pass_context
@async_command
async def boot_completed(ctx: click.Context) -> None:
    """
    Run pending migrations as if the device just finished booting.

    Examples:

        onetimeinit --launcher-db launcher2=./launcher.db boot-completed
    """
    config = ctx.obj["config"]
    output = ctx.obj["output"]

    service = create_service(config)
    try:
        applied = await service.handle_boot_completed()
        version = await service.preferences.get_int(MAPPING_VERSION_PREF, 0)
    except Exception as e:
        print_error(f"Migration failed: {e}")
        if ctx.obj["verbose"]:
            raise
        raise click.Abort()
    finally:
        await service.close()

    if output == "json":
        format_json(
            {
                "mapping_version": version,
                "applied": [_applied_to_dict(m) for m in applied],
            }
        )
        return

    if output == "plain":
        format_plain([str(m.version) for m in applied])
        return

    if not applied:
        print_info(f"Mapping version is {version}; nothing to migrate")
        return

    for migration in applied:
        print_success(f"Applied version {migration.version}: {migration.description}")

    stats = _stats_of(applied)
    if stats:
        format_table(
            [
                {
                    "Locator": s.locator,
                    "Available": s.available,
                    "Scanned": s.scanned,
                    "Updated": s.updated,
                    "Failed": s.failed,
                }
                for s in stats
            ],
            ["Locator", "Available", "Scanned", "Updated", "Failed"],
            title="Launcher shortcuts",
        )
        failed = sum(s.failed for s in stats)
        if failed:
            print_warning(f"{failed} shortcut(s) could not be relinked; see the error log")
    print_info(f"Mapping version is now {version}")


@click.command(name="status")
@click.pass_context
@async_command
async def status(ctx: click.Context) -> None:
    """Show the stored mapping version and any pending migrations."""
    config = ctx.obj["config"]
    output = ctx.obj["output"]

    preferences = create_preferences(config)
    try:
        version = await preferences.get_int(MAPPING_VERSION_PREF, 0)
    except Exception as e:
        print_error(f"Failed to read mapping version: {e}")
        if ctx.obj["verbose"]:
            raise
        raise click.Abort()

    registry = get_global_registry()
    pending = registry.get_pending(version)

    data = {
        "preferences": str(preferences.path),
        "mapping_version": version,
        "latest_version": registry.get_latest_version(),
        "pending": [f"{m.version}: {m.description}" for m in pending],
        "launcher_databases": dict(config.launcher_databases),
    }

    if output == "json":
        format_json(data)
    elif output == "plain":
        format_plain([str(version)])
    else:
        format_key_value(data, title="Mapping Version")


@click.command(name="migrations")
@click.pass_context
def migrations(ctx: click.Context) -> None:
    """List registered migration steps."""
    output = ctx.obj["output"]
    all_migrations = get_global_registry().get_all()

    if output == "json":
        format_json([{"version": m.version, "description": m.description} for m in all_migrations])
    elif output == "plain":
        format_plain([f"{m.version} {m.description}" for m in all_migrations])
    else:
        format_table(
            [{"Version": m.version, "Description": m.description} for m in all_migrations],
            ["Version", "Description"],
            title="Migrations",
        )
