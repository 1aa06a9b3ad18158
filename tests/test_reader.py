import pytest

from junitledger.config import LedgerConfig
from junitledger.db import DBConfig
from junitledger.exceptions import ReadError
from junitledger.junit import parse_xml
from junitledger.reader import ReadOptions, read_results, read_table, select_table
from junitledger.writer import ingest

from .conftest import LOGIN_TESTS_XML

CONFIG = LedgerConfig(db_config=DBConfig(path=None))


@pytest.mark.parametrize(
    "tables, options, expected",
    [
        (
            ["junit_login", "junit_suite_summary"],
            ReadOptions(summary=True),
            "junit_suite_summary",
        ),
        (
            ["junit_suite_summary", "junit_table_aliases", "junit_login"],
            ReadOptions(),
            "junit_login",
        ),
        (
            ["api_smoke", "nightly_api"],
            ReadOptions(prefix="api"),
            "api_smoke",
        ),
        (["LoginTests"], ReadOptions(), "junit_"),
        (["LoginTests"], ReadOptions(summary=True), "junit_"),
        (["junit_table_aliases"], ReadOptions(prefix="aliases"), "aliases"),
    ],
)
def test_select_table(tables, options, expected):
    assert select_table(tables, CONFIG, options) == expected


def test_read_results_round_trip(db, config):
    [suite] = parse_xml(LOGIN_TESTS_XML)
    ingest(db, [suite], config)

    results = read_results(db, config, ReadOptions(prefix="Login"))

    assert results.table == "LoginTests"
    assert not results.summary
    passed, failed = results.rows
    assert passed["id"] == 1
    assert passed["status"] == "passed"
    assert passed["duration"] == suite.cases[0].duration
    assert passed["properties"] == suite.cases[0].properties
    assert passed["error"] is None
    assert failed["status"] == "failed"
    assert failed["error"] == suite.cases[1].error.to_dict()
    assert failed["classname"] == "login.LoginTest"


def test_read_summary(db, config):
    ingest(db, parse_xml(LOGIN_TESTS_XML), config)

    results = read_results(db, config, ReadOptions(summary=True))

    assert results.summary
    [row] = results.rows
    assert row["name"] == "Login Tests!!"
    assert row["package"] == "com.example.login"
    assert row["properties"] == {"browser": "firefox"}
    assert [t["status"] for t in row["tests"]] == ["passed", "failed"]
    assert row["totals"]["tests"] == 2
    assert row["suites"] == []


def test_summary_without_matching_table_fails_to_read(db, config):
    with pytest.raises(ReadError, match="failed to read table junit_"):
        read_results(db, config, ReadOptions(summary=True))


def test_read_missing_table(db):
    with pytest.raises(ReadError, match="failed to read table nope"):
        read_table(db, "nope")


def test_limit_caps_shown_rows(db, config):
    ingest(db, parse_xml(LOGIN_TESTS_XML), config)
    results = read_results(db, config, ReadOptions(prefix="Login", limit=1))
    assert len(results.rows) == 2
    assert [r["name"] for r in results.shown_rows()] == ["test_login_ok"]
    assert results.to_dict()["rows"] == results.shown_rows()
