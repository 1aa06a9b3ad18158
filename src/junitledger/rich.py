from datetime import timedelta
from typing import TYPE_CHECKING, Any, Callable, Optional

import humanize
from rich.console import Console, RenderResult
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from junitledger.models import NameAlias
    from junitledger.reader import Results

console = Console()

print = console.print
print_json = console.print_json

CASE_COLUMNS = {
    "ID": "id",
    "Name": "name",
    "Status": "status",
    "Duration": "duration",
    "Error": "error",
    "Message": "message",
    "Stdout": "systemout",
    "Stderr": "systemerr",
    "Classname": "classname",
    "Properties": "properties",
}

SUMMARY_COLUMNS = {
    "ID": "id",
    "Name": "name",
    "Package": "package",
    "Tests": "tests",
    "Totals": "totals",
    "Stdout": "systemout",
    "Stderr": "systemerr",
    "Properties": "properties",
}


def format_duration(seconds: float) -> str:
    return humanize.precisedelta(
        timedelta(seconds=seconds), minimum_unit="milliseconds"
    )


def format_error(error: dict) -> str:
    parts = [error.get("type"), error.get("message")]
    return ": ".join(p for p in parts if p)


def format_mapping(mapping: dict) -> str:
    return ", ".join(f"{k}={v}" for k, v in mapping.items())


def format_totals(totals: dict) -> str:
    counts = " ".join(f"{k}={v}" for k, v in totals.items() if k != "duration")
    return f"{counts} duration={format_duration(totals.get('duration') or 0)}"


_formatters: dict[str, Callable[[Any], str]] = {
    "duration": format_duration,
    "error": format_error,
    "properties": format_mapping,
    "tests": lambda tests: str(len(tests)),
    "totals": format_totals,
}


def format_cell(column: str, value: Any) -> str:
    if value is None:
        return ""
    formatter = _formatters.get(column)
    if formatter is not None and not isinstance(value, (str, bytes)):
        return formatter(value)
    return str(value)


def make_table(
    rows: list[dict[str, Any]],
    columns: dict[str, str],
    title: Optional[str] = None,
) -> Table:
    table = Table(*columns, title=title)
    for row in rows:
        # Text cells are not parsed as console markup.
        table.add_row(
            *(Text(format_cell(key, row.get(key))) for key in columns.values())
        )
    return table


def render_results(results: "Results") -> RenderResult:
    columns = SUMMARY_COLUMNS if results.summary else CASE_COLUMNS
    shown = results.shown_rows()
    title = results.table
    if len(shown) < len(results.rows):
        title += f" ({len(shown)} of {len(results.rows)} rows)"
    yield make_table(shown, columns, title=title)


def make_alias_table(aliases: list["NameAlias"], title: str) -> Table:
    table = Table("Suite", "Table", title=title)
    for alias in aliases:
        table.add_row(Text(alias.original_name), Text(alias.table_name))
    return table
