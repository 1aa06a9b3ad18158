"""
Diagnostics for the ledger, written to stderr so stdout carries only results.

The threshold comes from JUNITLEDGER_LOG_LEVEL (debug, info, warn or error).
"""

import os
import sys
from enum import IntEnum
from typing import NoReturn

from rich.console import Console
from rich.text import Text

ENV_VAR = "JUNITLEDGER_LOG_LEVEL"


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @classmethod
    def parse(cls, value: str | None) -> "LogLevel":
        try:
            return cls[(value or "INFO").strip().upper()]
        except KeyError:
            return cls.INFO

    @classmethod
    def from_env(cls) -> "LogLevel":
        return cls.parse(os.getenv(ENV_VAR))


log_level = LogLevel.from_env()

_console = Console(stderr=True, highlight=False)

_PREFIXES = {
    LogLevel.WARN: Text("warning: ", style="yellow"),
    LogLevel.ERROR: Text("error: ", style="bold red"),
}


def _emit(level: LogLevel, args: tuple) -> None:
    if level < log_level:
        return
    message = Text(" ".join(str(a) for a in args))
    if prefix := _PREFIXES.get(level):
        message = Text.assemble(prefix, message)
    _console.print(message, soft_wrap=True)


def debug(*args) -> None:
    _emit(LogLevel.DEBUG, args)


def info(*args) -> None:
    _emit(LogLevel.INFO, args)


def warn(*args) -> None:
    _emit(LogLevel.WARN, args)


def error(*args) -> None:
    _emit(LogLevel.ERROR, args)


def fatal(*args) -> NoReturn:
    """Report an unrecoverable error and exit with status 1."""
    error(*args)
    sys.exit(1)
