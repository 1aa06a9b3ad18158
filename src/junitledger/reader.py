from dataclasses import dataclass
from typing import Any, Optional

import duckdb
from rich.console import Console, ConsoleOptions, RenderResult

from junitledger import codec, rich
from junitledger.config import DEFAULT_SUITE_PREFIX, LedgerConfig
from junitledger.db import DB
from junitledger.exceptions import ReadError
from junitledger.log import debug, info
from junitledger.models import Serializable
from junitledger.queries import EmptyParams, Query

_scan = Query[EmptyParams, dict[str, Any]]("SELECT * FROM {table} ORDER BY id;")


@dataclass
class ReadOptions:
    summary: bool = False
    prefix: str = DEFAULT_SUITE_PREFIX
    limit: Optional[int] = None


@dataclass
class Results(Serializable):
    table: str
    rows: list[dict[str, Any]]
    summary: bool
    limit: Optional[int] = None

    def to_dict(self) -> dict:
        return {"table": self.table, "rows": self.shown_rows()}

    def shown_rows(self) -> list[dict[str, Any]]:
        return self.rows[: self.limit] if self.limit is not None else self.rows

    def __rich_console__(
        self, console: Console, options: ConsoleOptions
    ) -> RenderResult:
        return rich.render_results(self)


def select_table(
    tables: list[str], config: LedgerConfig, options: ReadOptions
) -> str:
    """
    Pick the table to read.

    In summary mode the summary table is chosen by exact name; otherwise the
    first table whose name contains the prefix. With no match, the prefix is
    used as a literal table name.
    """
    for table in tables:
        debug(f"Found table {table}")
        if table == config.alias_table:
            continue
        if options.summary:
            if table == config.summary_table:
                return table
        elif table != config.summary_table and options.prefix in table:
            return table
    info(f"No table matched, falling back to {options.prefix!r}")
    return options.prefix


def read_table(db: DB, table: str) -> list[dict[str, Any]]:
    try:
        rows = db.query_records(_scan.render(db, table=table))
    except duckdb.Error as err:
        raise ReadError(f"failed to read table {table}: {err}") from err
    return [codec.decode_row(row) for row in rows]


def read_results(db: DB, config: LedgerConfig, options: ReadOptions) -> Results:
    info(
        f"Configuration: Summary {options.summary}, "
        f"Suite Table Name: {config.summary_table}"
    )
    try:
        tables = db.list_tables()
    except duckdb.Error as err:
        raise ReadError(f"Error reading tables of {db}: {err}") from err
    table = select_table(tables, config, options)
    info(f"Using table {table}")
    return Results(
        table=table,
        rows=read_table(db, table),
        summary=table == config.summary_table,
        limit=options.limit,
    )
