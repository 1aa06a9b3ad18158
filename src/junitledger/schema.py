import duckdb

from junitledger.db import DB
from junitledger.exceptions import SchemaError
from junitledger.log import debug
from junitledger.queries import EmptyParams, Query

CREATE_ALIAS_TABLE_SQL = Query[EmptyParams, None](
    """
    CREATE TABLE IF NOT EXISTS {table} (
        original_name VARCHAR PRIMARY KEY,
        table_name VARCHAR NOT NULL
    );
    """
)

CREATE_CASE_TABLE_SQL = Query[EmptyParams, None](
    """
    CREATE TABLE IF NOT EXISTS {table} (
        id INTEGER PRIMARY KEY,
        name VARCHAR,
        classname VARCHAR,
        duration BLOB,
        status BLOB,
        message VARCHAR,
        error BLOB,
        properties BLOB,
        systemout VARCHAR,
        systemerr VARCHAR
    );
    """
)

CREATE_SUMMARY_TABLE_SQL = Query[EmptyParams, None](
    """
    CREATE TABLE IF NOT EXISTS {table} (
        id INTEGER PRIMARY KEY,
        name VARCHAR,
        package BLOB,
        properties BLOB,
        tests BLOB,
        suites BLOB,
        systemout VARCHAR,
        systemerr VARCHAR,
        totals BLOB
    );
    """
)


def ensure_alias_table(db: DB, table: str) -> None:
    _ensure(db, CREATE_ALIAS_TABLE_SQL, table)


def ensure_case_table(db: DB, table: str) -> None:
    _ensure(db, CREATE_CASE_TABLE_SQL, table)


def ensure_summary_table(db: DB, table: str) -> None:
    _ensure(db, CREATE_SUMMARY_TABLE_SQL, table)


def _ensure(db: DB, query: Query[EmptyParams, None], table: str) -> None:
    debug(f"Ensuring table {table} exists in {db}")
    try:
        query.execute(db, {}, table=table)
    except duckdb.Error as err:
        raise SchemaError(f"Error creating table {table}: {err}") from err
