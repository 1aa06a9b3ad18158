"""
Map suite names to SQL-safe table names.

A suite's table name is derived once, the first time its original name is
seen, and recorded in the alias table. Later ingestions of the same suite
read the recorded name back instead of deriving it again, so a suite always
writes to the same table.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, TypedDict

import duckdb

from junitledger.db import DB
from junitledger.exceptions import NameResolutionError
from junitledger.log import debug, info
from junitledger.models import NameAlias, NameConflict
from junitledger.queries import EmptyParams, Query

FALLBACK_SUITE_NAME = "generic_testsuite"

_SAFE_NAME = re.compile(r"[A-Za-z0-9_\s]+", re.ASCII)
_WHITESPACE = re.compile(r"\s", re.ASCII)
_NOT_ALPHANUMERIC = re.compile(r"[^A-Za-z0-9]+")


class OriginalNameParams(TypedDict):
    original_name: str


class TableNameParams(TypedDict):
    original_name: str
    table_name: str


_lookup = Query[OriginalNameParams, tuple[str]](
    "SELECT table_name FROM {aliases} WHERE original_name = $original_name;"
).fetchall

_owners = Query[TableNameParams, tuple[str, str]](
    """
    SELECT original_name, table_name FROM {aliases}
    WHERE lower(table_name) = lower($table_name)
    AND original_name <> $original_name
    ORDER BY original_name
    LIMIT 1;
    """
).fetchall

_insert_alias = Query[TableNameParams, None](
    """
    INSERT INTO {aliases} (original_name, table_name)
    VALUES ($original_name, $table_name);
    """
).execute

_all_aliases = Query[EmptyParams, tuple[str, str]](
    "SELECT original_name, table_name FROM {aliases} ORDER BY original_name;"
).fetchall


def canonical_name(suite_name: str) -> str:
    return suite_name if suite_name.strip() else FALLBACK_SUITE_NAME


def sanitize(name: str) -> str:
    """
    Derive a table name from a suite name.

    Names made of letters, digits, underscores and whitespace keep their text,
    with inner whitespace replaced by underscores. Any other character makes
    the name unsafe, and it is reduced to its ASCII letters and digits.
    """
    if _SAFE_NAME.fullmatch(name):
        sanitized = _WHITESPACE.sub("_", name.strip())
    else:
        sanitized = _NOT_ALPHANUMERIC.sub("", name)
    return sanitized or FALLBACK_SUITE_NAME


@dataclass
class NameResolver:
    db: DB
    alias_table: str
    reserved_tables: frozenset[str] = frozenset()
    conflicts: list[NameConflict] = field(default_factory=list)

    def resolve(self, suite_name: str) -> str:
        original_name = canonical_name(suite_name)
        try:
            if (table_name := self.lookup(original_name)) is not None:
                debug(f"Suite {original_name!r} is stored in table {table_name}")
                return table_name
            return self._register(original_name)
        except duckdb.Error as err:
            raise NameResolutionError(
                f"Failed to resolve table name for suite {original_name!r}: {err}"
            ) from err

    def lookup(self, original_name: str) -> Optional[str]:
        rows = _lookup(
            self.db, {"original_name": original_name}, aliases=self.alias_table
        )
        return rows[0][0] if rows else None

    def aliases(self) -> list[NameAlias]:
        return [
            NameAlias(original_name, table_name)
            for original_name, table_name in _all_aliases(
                self.db, {}, aliases=self.alias_table
            )
        ]

    def _register(self, original_name: str) -> str:
        table_name = sanitize(original_name)
        if table_name.lower() in self.reserved_tables:
            raise NameResolutionError(
                f"Suite {original_name!r} resolves to reserved table {table_name}, "
                "consider renaming your test suite"
            )
        params: TableNameParams = {
            "original_name": original_name,
            "table_name": table_name,
        }
        if owners := _owners(self.db, params, aliases=self.alias_table):
            # Table names are case-insensitive; keep the owner's spelling.
            existing_original_name, table_name = owners[0]
            params["table_name"] = table_name
            self.conflicts.append(
                NameConflict(original_name, table_name, existing_original_name)
            )
        _insert_alias(self.db, params, aliases=self.alias_table)
        info(f"Registered table {table_name} for suite {original_name!r}")
        return table_name
