import pytest

from junitledger.db import DBConfig
from junitledger.exceptions import SchemaError
from junitledger.schema import (
    ensure_alias_table,
    ensure_case_table,
    ensure_summary_table,
)


def _columns(db) -> list[tuple]:
    return db.query(
        """
        SELECT table_name, column_name, data_type FROM information_schema.columns
        WHERE table_schema = $namespace
        ORDER BY table_name, ordinal_position
        """,
        {"namespace": db.namespace},
    )


def _ensure_all(db) -> None:
    ensure_alias_table(db, "junit_table_aliases")
    ensure_case_table(db, "LoginTests")
    ensure_summary_table(db, "junit_suite_summary")


def test_ensure_creates_tables(db):
    _ensure_all(db)
    assert db.list_tables() == [
        "LoginTests",
        "junit_suite_summary",
        "junit_table_aliases",
    ]


def test_ensure_is_idempotent(tmp_path):
    db_config = DBConfig(path=tmp_path / "ledger.duckdb")
    with db_config.connect() as db:
        _ensure_all(db)
        db.execute(
            f"INSERT INTO {db.table('junit_table_aliases')} VALUES ('a', 'a')"
        )
        before = _columns(db)
    with db_config.connect() as db:
        _ensure_all(db)
        assert _columns(db) == before
        assert db.query(f"SELECT * FROM {db.table('junit_table_aliases')}") == [
            ("a", "a")
        ]


def test_tables_live_in_namespace(tmp_path):
    with DBConfig(path=tmp_path / "ledger.duckdb", namespace="ci").connect() as db:
        ensure_case_table(db, "suite")
        assert db.list_tables() == ["suite"]
    with DBConfig(path=tmp_path / "ledger.duckdb").connect() as db:
        assert db.list_tables() == []


def test_schema_failure_is_fatal(db):
    with pytest.raises(SchemaError):
        ensure_case_table(db, "")
