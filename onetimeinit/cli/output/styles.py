"""Rich styles and themes for CLI output."""

from rich.theme import Theme

ONETIMEINIT_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "version": "bold magenta",
    "locator": "blue",
    "field": "cyan",
    "count.updated": "green",
    "count.failed": "red",
    "count.zero": "dim",
    "unavailable": "dim yellow",
})
