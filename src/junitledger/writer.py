from dataclasses import dataclass, field
from typing import Iterable, Optional, TypedDict

import duckdb

from junitledger import codec
from junitledger.config import LedgerConfig
from junitledger.db import DB
from junitledger.exceptions import WriteError
from junitledger.log import debug, info, warn
from junitledger.models import Case, NameConflict, Serializable, Suite
from junitledger.names import NameResolver
from junitledger.queries import Query
from junitledger.schema import (
    ensure_alias_table,
    ensure_case_table,
    ensure_summary_table,
)


class SummaryRowParams(TypedDict):
    name: str
    package: Optional[bytes]
    properties: Optional[bytes]
    tests: Optional[bytes]
    suites: Optional[bytes]
    systemout: Optional[str]
    systemerr: Optional[str]
    totals: Optional[bytes]


class CaseRowParams(TypedDict):
    name: str
    classname: str
    duration: Optional[bytes]
    status: Optional[bytes]
    message: Optional[str]
    error: Optional[bytes]
    properties: Optional[bytes]
    systemout: Optional[str]
    systemerr: Optional[str]


# Rows are numbered per table; statements run one at a time so max(id) + 1
# is unique.
INSERT_SUMMARY_ROW_SQL = Query[SummaryRowParams, None](
    """
    INSERT INTO {table} (
        id,
        name,
        package,
        properties,
        tests,
        suites,
        systemout,
        systemerr,
        totals
    )
    SELECT
        (SELECT coalesce(max(id), 0) + 1 FROM {table}),
        $name,
        $package,
        $properties,
        $tests,
        $suites,
        $systemout,
        $systemerr,
        $totals;
    """
)

INSERT_CASE_ROW_SQL = Query[CaseRowParams, None](
    """
    INSERT INTO {table} (
        id,
        name,
        classname,
        duration,
        status,
        message,
        error,
        properties,
        systemout,
        systemerr
    )
    SELECT
        (SELECT coalesce(max(id), 0) + 1 FROM {table}),
        $name,
        $classname,
        $duration,
        $status,
        $message,
        $error,
        $properties,
        $systemout,
        $systemerr;
    """
)


@dataclass
class IngestReport(Serializable):
    suites: int = 0
    cases: int = 0
    tables: list[str] = field(default_factory=list)
    conflicts: list[NameConflict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "suites": self.suites,
            "cases": self.cases,
            "tables": self.tables,
            "conflicts": [str(c) for c in self.conflicts],
        }


def ingest(db: DB, suites: Iterable[Suite], config: LedgerConfig) -> IngestReport:
    """
    Write every suite to the ledger, one statement at a time.

    Any failure aborts the run. Rows written before the failure stay in the
    database.
    """
    ensure_alias_table(db, config.alias_table)
    resolver = NameResolver(db, config.alias_table, config.reserved_tables)
    report = IngestReport(conflicts=resolver.conflicts)
    for suite in suites:
        info(f"Processing suite: {suite.name!r}")
        table = resolver.resolve(suite.name)
        ensure_case_table(db, table)
        ensure_summary_table(db, config.summary_table)
        write_suite(db, table, suite, config.summary_table)
        report.suites += 1
        report.cases += len(suite.cases)
        if table.lower() not in {t.lower() for t in report.tables}:
            report.tables.append(table)
    for conflict in report.conflicts:
        warn(f"Table name conflict: {conflict}")
    info(f"Wrote {report.suites} suites and {report.cases} test cases to {db}")
    return report


def write_suite(db: DB, table: str, suite: Suite, summary_table: str) -> None:
    write_summary_row(db, summary_table, suite)
    for case in suite.cases:
        write_case_row(db, table, case)


def write_summary_row(db: DB, summary_table: str, suite: Suite) -> None:
    params: SummaryRowParams = {
        "name": suite.name,
        "package": codec.encode(suite.package),
        "properties": codec.encode(suite.properties),
        "tests": codec.encode([c.to_dict() for c in suite.cases]),
        "suites": codec.encode([s.to_dict() for s in suite.suites]),
        "systemout": suite.system_out,
        "systemerr": suite.system_err,
        "totals": codec.encode(suite.totals.to_dict()),
    }
    try:
        INSERT_SUMMARY_ROW_SQL.execute(db, params, table=summary_table)
    except duckdb.Error as err:
        raise WriteError(
            f"Error inserting summary of suite {suite.name!r} "
            f"into {summary_table}: {err}"
        ) from err


def write_case_row(db: DB, table: str, case: Case) -> None:
    debug(f"Processing test case: {case.name}")
    params: CaseRowParams = {
        "name": case.name,
        "classname": case.classname,
        "duration": codec.encode(case.duration),
        "status": codec.encode(case.status.value),
        "message": case.message,
        "error": codec.encode(case.error.to_dict() if case.error else None),
        "properties": codec.encode(case.properties),
        "systemout": case.system_out,
        "systemerr": case.system_err,
    }
    try:
        INSERT_CASE_ROW_SQL.execute(db, params, table=table)
    except duckdb.Error as err:
        raise WriteError(
            f"Error inserting test case {case.name!r} into {table}: {err}"
        ) from err
