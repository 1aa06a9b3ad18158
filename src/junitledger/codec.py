"""
JSON encoding of the opaque (BLOB) columns.

The database stores these columns as bytes and never looks inside them.
"""

import json
from typing import Any, Optional

from junitledger.exceptions import CodecError

OPAQUE_COLUMNS = frozenset(
    {
        "properties",
        "package",
        "tests",
        "suites",
        "totals",
        "status",
        "duration",
        "error",
    }
)
TEXT_COLUMNS = frozenset({"name", "systemout", "systemerr", "classname", "message"})
NUMERIC_COLUMNS = frozenset({"id"})


def encode(value: Any) -> Optional[bytes]:
    if value is None:
        return None
    try:
        return json.dumps(value).encode()
    except (TypeError, ValueError) as err:
        raise CodecError(f"Failed to encode {value!r}: {err}") from err


def decode(blob: Optional[bytes]) -> Any:
    if blob is None:
        return None
    try:
        return json.loads(bytes(blob))
    except (TypeError, ValueError) as err:
        raise CodecError(f"Failed to decode {blob!r}: {err}") from err


def decode_column(column: str, value: Any) -> Any:
    if value is None:
        return None
    if column in OPAQUE_COLUMNS:
        return decode(value)
    if column in TEXT_COLUMNS:
        return str(value)
    if column in NUMERIC_COLUMNS:
        return int(value)
    return value


def decode_row(row: dict[str, Any]) -> dict[str, Any]:
    return {column: decode_column(column, value) for column, value in row.items()}
