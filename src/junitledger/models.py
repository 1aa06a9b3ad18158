from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Optional, Protocol


class Serializable(Protocol):
    def to_dict(self) -> dict: ...


class Status(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"
    SKIPPED = "skipped"

    @property
    def has_error(self) -> bool:
        return self in (Status.FAILED, Status.ERROR)


@dataclass
class ErrorDetail(Serializable):
    message: Optional[str]
    type: Optional[str]
    body: Optional[str]  # Stack trace or other text content of the element

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Case(Serializable):
    name: str
    classname: str
    duration: float  # seconds
    status: Status
    message: Optional[str] = None
    error: Optional[ErrorDetail] = None
    properties: dict[str, str] = field(default_factory=dict)
    system_out: Optional[str] = None
    system_err: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "classname": self.classname,
            "duration": self.duration,
            "status": self.status.value,
            "message": self.message,
            "error": self.error.to_dict() if self.error is not None else None,
            "properties": self.properties,
            "systemout": self.system_out,
            "systemerr": self.system_err,
        }


@dataclass
class Totals(Serializable):
    tests: int = 0
    passed: int = 0
    skipped: int = 0
    failed: int = 0
    error: int = 0
    duration: float = 0.0

    @classmethod
    def from_cases(
        cls, cases: list[Case], duration: Optional[float] = None
    ) -> "Totals":
        totals = cls(tests=len(cases))
        for c in cases:
            match c.status:
                case Status.PASSED:
                    totals.passed += 1
                case Status.SKIPPED:
                    totals.skipped += 1
                case Status.FAILED:
                    totals.failed += 1
                case Status.ERROR:
                    totals.error += 1
        totals.duration = (
            duration if duration is not None else sum(c.duration for c in cases)
        )
        return totals

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Suite(Serializable):
    name: str
    package: Optional[str] = None
    properties: dict[str, str] = field(default_factory=dict)
    cases: list[Case] = field(default_factory=list)
    suites: list["Suite"] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)
    system_out: Optional[str] = None
    system_err: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "package": self.package,
            "properties": self.properties,
            "tests": [c.to_dict() for c in self.cases],
            "suites": [s.to_dict() for s in self.suites],
            "totals": self.totals.to_dict(),
            "systemout": self.system_out,
            "systemerr": self.system_err,
        }


@dataclass
class NameAlias:
    original_name: str
    table_name: str


@dataclass
class NameConflict:
    """
    Two distinct original suite names that sanitize to the same table name.

    The suites share the table; the conflict is only reported.
    """

    original_name: str
    table_name: str
    existing_original_name: str

    def __str__(self) -> str:
        return (
            f"suite {self.original_name!r} shares table {self.table_name} "
            f"with suite {self.existing_original_name!r}"
        )
