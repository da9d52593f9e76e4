"""Intent descriptor inspection command."""

from typing import Any, Dict

import click

from onetimeinit.cli.output.formatters import (
    format_json,
    format_key_value,
    format_plain,
    print_error,
)
from onetimeinit.exceptions import IntentParseError
from onetimeinit.intents import URI_INTENT_SCHEME, Intent, parse_uri


def _intent_to_dict(intent: Intent) -> Dict[str, Any]:
    return {
        "action": intent.action,
        "categories": list(intent.categories),
        "component": intent.component.flatten_to_string() if intent.component else None,
        "data": intent.data,
        "type": intent.mime_type,
        "package": intent.package,
        "launch_flags": f"0x{intent.flags:08X}",
        "source_bounds": intent.source_bounds,
        "extras": {name: extra.value for name, extra in intent.extras.items()},
    }


@click.command(name="decode")
@click.argument("uri")
@click.option(
    "--intent-scheme",
    is_flag=True,
    help="Accept the intent:...#Intent;...;end form",
)
@click.pass_context
def decode(ctx: click.Context, uri: str, intent_scheme: bool) -> None:
    """
    Decode a launcher intent descriptor.

    Examples:

        onetimeinit decode "#Intent;action=android.intent.action.MAIN;category=android.intent.category.LAUNCHER;component=com.android.dialer/.DialtactsActivity;end"
    """
    output = ctx.obj["output"]

    try:
        intent = parse_uri(uri, URI_INTENT_SCHEME if intent_scheme else 0)
    except IntentParseError as e:
        print_error(str(e))
        raise click.Abort()

    data = _intent_to_dict(intent)
    if output == "json":
        format_json(data)
    elif output == "plain":
        format_plain([intent.to_uri(URI_INTENT_SCHEME if intent_scheme else 0)])
    else:
        format_key_value(data, title="Intent")
