import json

import pytest

from junitledger.exceptions import NameResolutionError, WriteError
from junitledger.junit import parse_xml
from junitledger.models import Case, Status, Suite
from junitledger.schema import ensure_case_table
from junitledger.writer import ingest, write_case_row

from .conftest import LOGIN_TESTS_XML


def test_ingest_login_tests_scenario(db, config):
    report = ingest(db, parse_xml(LOGIN_TESTS_XML), config)

    assert report.suites == 1
    assert report.cases == 2
    assert report.tables == ["LoginTests"]
    assert "LoginTests" in db.list_tables()

    [(name, totals)] = db.query(
        f"SELECT name, totals FROM {db.table(config.summary_table)}"
    )
    assert name == "Login Tests!!"
    assert json.loads(totals)["failed"] == 1

    rows = db.query(
        f"SELECT id, name, status, error FROM {db.table('LoginTests')} ORDER BY id"
    )
    assert [(r[0], r[1]) for r in rows] == [
        (1, "test_login_ok"),
        (2, "test_login_bad_password"),
    ]
    assert [json.loads(r[2]) for r in rows] == ["passed", "failed"]
    assert rows[0][3] is None
    assert json.loads(rows[1][3])["message"] == "expected 401"


def test_repeated_ingestion_appends(db, config):
    ingest(db, parse_xml(LOGIN_TESTS_XML), config)
    ingest(db, parse_xml(LOGIN_TESTS_XML), config)

    summary_ids = db.query(
        f"SELECT id FROM {db.table(config.summary_table)} ORDER BY id"
    )
    assert summary_ids == [(1,), (2,)]
    [(count,)] = db.query(f"SELECT count(*) FROM {db.table('LoginTests')}")
    assert count == 4
    [(aliases,)] = db.query(f"SELECT count(*) FROM {db.table(config.alias_table)}")
    assert aliases == 1


def test_text_fields_are_stored_as_is(db, config):
    ingest(db, parse_xml(LOGIN_TESTS_XML), config)
    rows = db.query(
        f"SELECT classname, message, systemout, systemerr FROM {db.table('LoginTests')}"
        " ORDER BY id"
    )
    assert rows == [
        ("login.LoginTest", None, "logged in", None),
        ("login.LoginTest", "expected 401", None, "warning: slow response"),
    ]


def test_colliding_suites_are_reported(db, config):
    suites = [Suite(name="ab"), Suite(name="a-b")]
    report = ingest(db, suites, config)
    assert report.tables == ["ab"]
    assert [c.original_name for c in report.conflicts] == ["a-b"]


def test_tables_differing_in_case_are_reported_once(db, config):
    report = ingest(db, [Suite(name="Login"), Suite(name="login")], config)
    assert report.tables == ["Login"]
    assert [c.original_name for c in report.conflicts] == ["login"]
    assert "Login" in db.list_tables()


def test_empty_suite_name_uses_fallback_table(db, config):
    case = Case(name="t", classname="c", duration=0.0, status=Status.PASSED)
    report = ingest(db, [Suite(name="", cases=[case])], config)
    assert report.tables == ["generic_testsuite"]


def test_rows_before_failure_stay_written(db, config):
    ok = Suite(name="first", cases=[Case("t", "c", 0.1, Status.PASSED)])
    reserved = Suite(name=config.summary_table)
    with pytest.raises(NameResolutionError):
        ingest(db, [ok, reserved], config)
    [(count,)] = db.query(f"SELECT count(*) FROM {db.table('first')}")
    assert count == 1


def test_write_failure_is_fatal(db):
    ensure_case_table(db, "suite")
    db.execute(f"DROP TABLE {db.table('suite')}")
    with pytest.raises(WriteError):
        write_case_row(db, "suite", Case("t", "c", 0.1, Status.PASSED))
