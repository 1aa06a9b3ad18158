from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Any,
    Iterator,
    Mapping,
    Optional,
)

import duckdb

from junitledger.exceptions import LedgerConnectionError
from junitledger.log import debug

CREATE_NAMESPACE_SQL = "CREATE SCHEMA IF NOT EXISTS {namespace};"

LIST_TABLES_SQL = """
SELECT table_name FROM information_schema.tables
WHERE table_schema = $namespace
ORDER BY table_name;
"""

Params = Mapping[str, Any]


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


@dataclass
class DB:
    """
    A session on the ledger database.

    All tables live in a single namespace (a DuckDB schema). Statements use
    `$name` placeholders for named parameters.
    """

    connection: duckdb.DuckDBPyConnection
    path: Optional[Path]
    namespace: str

    def table(self, name: str) -> str:
        """Qualified, quoted SQL identifier for a table in this namespace."""
        return f"{quote_identifier(self.namespace)}.{quote_identifier(name)}"

    def execute(self, sql: str, params: Optional[Params] = None) -> None:
        debug(sql)
        self.connection.execute(sql, params or None)

    def query(self, sql: str, params: Optional[Params] = None) -> list[tuple]:
        debug(sql)
        return self.connection.execute(sql, params or None).fetchall()

    def query_records(
        self, sql: str, params: Optional[Params] = None
    ) -> list[dict[str, Any]]:
        debug(sql)
        cursor = self.connection.execute(sql, params or None)
        columns = [c[0] for c in cursor.description]
        return [dict(zip(columns, row)) for row in cursor.fetchall()]

    def list_tables(self) -> list[str]:
        rows = self.query(LIST_TABLES_SQL, {"namespace": self.namespace})
        return [name for (name,) in rows]

    def __str__(self) -> str:
        return f"DuckDB({self.path or ':memory:'}, namespace={self.namespace})"


@dataclass
class DBConfig:
    path: Optional[Path]
    namespace: str = "main"

    @contextmanager
    def connect(self) -> Iterator[DB]:
        conn = self._open()
        try:
            db = DB(conn, self.path, self.namespace)
            try:
                db.execute(
                    CREATE_NAMESPACE_SQL.format(
                        namespace=quote_identifier(self.namespace)
                    )
                )
            except duckdb.Error as err:
                raise LedgerConnectionError(
                    f"Failed to use namespace {self.namespace}: {err}"
                ) from err
            yield db
        finally:
            conn.close()

    def _open(self) -> duckdb.DuckDBPyConnection:
        try:
            if not self.path:
                return duckdb.connect()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            return duckdb.connect(str(self.path))
        except (OSError, duckdb.Error) as err:
            raise LedgerConnectionError(
                f"Failed to connect to {self.path}: {err}"
            ) from err
