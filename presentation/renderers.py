"""Output renderers for activity lists."""
import json
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from processor.models import Activity

# Print options for text that must reach the terminal unmodified
PLAIN = {"markup": False, "highlight": False, "emoji": False, "soft_wrap": True}


def render_rows(activities: List[Activity]) -> str:
    return "\n".join(f"- {activity.message}" for activity in activities)


def render_json(activities: List[Activity]) -> str:
    return json.dumps([activity.to_dict() for activity in activities], indent=4)


def build_table(activities: List[Activity]) -> Table:
    """
    Build a table with index, event type and message columns.

    Args:
        activities: Activities in display order

    Returns:
        rich Table with a 1-based index column
    """
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Event", style="cyan")
    table.add_column("Message")

    for index, activity in enumerate(activities, start=1):
        # Text() keeps branch names like "[wip]" from being read as markup
        table.add_row(str(index), Text(activity.event), Text(activity.message))

    return table


def render(
    activities: List[Activity],
    format_output: str = '',
    console: Optional[Console] = None
) -> None:
    """
    Print activities in the requested format.

    Args:
        activities: Activities to print
        format_output: "json", "table", anything else prints rows
        console: Console to print to (default: stdout)
    """
    console = console or Console()

    if format_output == 'json':
        console.print(render_json(activities), **PLAIN)
    elif format_output == 'table':
        console.print(build_table(activities))
    elif activities:
        console.print(render_rows(activities), **PLAIN)
