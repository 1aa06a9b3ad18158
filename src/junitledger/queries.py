"""
A query is a SQL template plus the named parameters it binds.

Table names are substituted into the template as qualified, quoted
identifiers; values are always bound as `$name` parameters.
"""

from dataclasses import dataclass
from textwrap import dedent
from typing import Any, Generic, Mapping, TypedDict, TypeVar

from junitledger.db import DB

P = TypeVar("P", bound=Mapping[str, Any])
R = TypeVar("R")


@dataclass
class Query(Generic[P, R]):
    sql: str

    def render(self, db: DB, **tables: str) -> str:
        return self.sql.format(**{k: db.table(v) for k, v in tables.items()})

    def execute(self, db: DB, params: P, **tables: str) -> None:
        db.execute(self.render(db, **tables), params)

    def fetchall(self, db: DB, params: P, **tables: str) -> list[R]:
        return db.query(self.render(db, **tables), params)

    def __post_init__(self):
        self.sql = dedent(self.sql).strip()


class EmptyParams(TypedDict):
    pass
