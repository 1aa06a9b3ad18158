from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from xdg_base_dirs import xdg_data_home

from junitledger.db import DBConfig

DEFAULT_NAMESPACE = "main"
DEFAULT_SUMMARY_TABLE = "junit_suite_summary"
DEFAULT_ALIAS_TABLE = "junit_table_aliases"
DEFAULT_SUITE_PREFIX = "junit_"


@dataclass
class LedgerConfig:
    """Settings for one run, built once by the CLI and passed to every component."""

    db_config: DBConfig
    summary_table: str = DEFAULT_SUMMARY_TABLE
    alias_table: str = DEFAULT_ALIAS_TABLE

    @property
    def reserved_tables(self) -> frozenset[str]:
        return frozenset({self.summary_table.lower(), self.alias_table.lower()})


def default_db_path() -> Path:
    return Path(xdg_data_home()) / "junitledger" / "junitledger.duckdb"


def make_config(
    db_path: Optional[Path] = None,
    namespace: str = DEFAULT_NAMESPACE,
    summary_table: str = DEFAULT_SUMMARY_TABLE,
) -> LedgerConfig:
    if db_path is None:
        db_path = default_db_path()
    elif str(db_path) == ":memory:":
        db_path = None
    return LedgerConfig(
        db_config=DBConfig(path=db_path, namespace=namespace),
        summary_table=summary_table,
    )
