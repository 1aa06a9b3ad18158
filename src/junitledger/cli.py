from pathlib import Path
from typing import Annotated, Optional

import typer

from junitledger import rich
from junitledger.config import (
    DEFAULT_NAMESPACE,
    DEFAULT_SUITE_PREFIX,
    DEFAULT_SUMMARY_TABLE,
    LedgerConfig,
    make_config,
)
from junitledger.exceptions import LedgerException
from junitledger.junit import parse_files
from junitledger.log import fatal
from junitledger.models import Serializable
from junitledger.names import NameResolver
from junitledger.reader import ReadOptions, read_results
from junitledger.schema import ensure_alias_table
from junitledger.writer import ingest as ingest_suites

app = typer.Typer(rich_markup_mode="rich")


@app.callback()
def global_options(
    ctx: typer.Context,
    db_path: Annotated[
        Optional[Path],
        typer.Option(
            help=(
                "DuckDB database file. "
                "Use `:memory:` for a throwaway in-memory ledger. "
                "Defaults to junitledger.duckdb in the XDG data directory."
            ),
        ),
    ] = None,
    database: Annotated[
        str,
        typer.Option(help="Namespace (schema) holding the ledger tables."),
    ] = DEFAULT_NAMESPACE,
    summary_table: Annotated[
        str,
        typer.Option(
            help=(
                "Table used for test suite summaries, "
                "created if it doesn't exist already."
            ),
        ),
    ] = DEFAULT_SUMMARY_TABLE,
):
    ctx.obj = make_config(db_path, database, summary_table)


@app.command()
def ingest(
    ctx: typer.Context,
    files: Annotated[
        Optional[list[str]],
        typer.Argument(
            help=(
                "JUnit XML files or zip archives of them; "
                "comma-separated lists are accepted."
            ),
            show_default="junit.xml",
        ),
    ] = None,
    json: Annotated[
        bool, typer.Option(help="Print a JSON summary of what was written.")
    ] = False,
) -> None:
    """
    Parse JUnit XML reports and write their suites and test cases to the ledger.

    Each suite's test cases go to a table named after the suite; one summary row
    per suite goes to the summary table.
    """
    config: LedgerConfig = ctx.obj
    suites = parse_files(files or ["junit.xml"])
    with config.db_config.connect() as db:
        report = ingest_suites(db, suites, config)
    if json:
        _print(report, json)


@app.command()
def read(
    ctx: typer.Context,
    summary: Annotated[
        bool,
        typer.Option(help="Read the suite summary table instead of test results."),
    ] = False,
    suite_prefix: Annotated[
        str,
        typer.Option(
            help="Read the first test results table whose name contains this."
        ),
    ] = DEFAULT_SUITE_PREFIX,
    limit: Annotated[
        Optional[int],
        typer.Option(help="Maximum number of rows to display.", min=0),
    ] = None,
    json: Annotated[bool, typer.Option(help="Print rows as JSON.")] = False,
) -> None:
    """Read a table back from the ledger and print it."""
    config: LedgerConfig = ctx.obj
    options = ReadOptions(summary=summary, prefix=suite_prefix, limit=limit)
    with config.db_config.connect() as db:
        results = read_results(db, config, options)
    _print(results, json)


@app.command()
def aliases(ctx: typer.Context) -> None:
    """Show the table name recorded for each suite name."""
    config: LedgerConfig = ctx.obj
    with config.db_config.connect() as db:
        ensure_alias_table(db, config.alias_table)
        rows = NameResolver(db, config.alias_table).aliases()
    rich.print(rich.make_alias_table(rows, title=config.alias_table))


def _print(obj: Serializable, json: bool) -> None:
    if json:
        rich.print_json(data=obj.to_dict(), default=str)
    else:
        rich.print(obj)


def main():
    try:
        app()
    except LedgerException as e:
        fatal(e)
