"""
Parse JUnit XML reports into Suite/Case models.

Input paths may be single XML files or zip archives of XML files. Each
argument may also be a comma-separated list of paths.
"""

import zipfile
from itertools import chain
from pathlib import Path
from typing import Iterable, Iterator, Optional

import junitparser.junitparser as jup
from junitparser import JUnitXmlError

from junitledger.exceptions import InputParseError
from junitledger.log import debug, warn
from junitledger.models import Case, ErrorDetail, Status, Suite, Totals


class JUnitSuite(jup.TestSuite):
    package = jup.Attr("package")


def parse_files(paths: Iterable[str | Path]) -> list[Suite]:
    """
    Parse every input into one ordered list of top-level suites.

    Nested <testsuite> elements are kept on their parent's `suites` list.
    """
    files = list(expand_paths(paths))
    if not files:
        raise InputParseError("No input file provided")
    return list(chain.from_iterable(_read_file(f) for f in files))


def expand_paths(paths: Iterable[str | Path]) -> Iterator[Path]:
    for path in paths:
        for part in str(path).split(","):
            if part := part.strip():
                yield Path(part)


def _read_file(file_path: Path) -> Iterator[Suite]:
    if not file_path.exists():
        raise InputParseError(f"File {file_path} not found")
    match file_path.suffix.lower():
        case ".xml":
            try:
                xml = file_path.read_bytes()
            except OSError as err:
                raise InputParseError(f"Failed to read {file_path}: {err}") from err
            yield from parse_xml(xml, str(file_path))
        case ".zip":
            yield from _read_zip(file_path)
        case _:
            raise InputParseError(
                f"Unsupported file type: {file_path}. "
                "Please provide an XML or ZIP file."
            )


def _read_zip(file_path: Path) -> list[Suite]:
    try:
        with zipfile.ZipFile(file_path) as zip_file:
            return list(
                chain.from_iterable(
                    parse_xml(zip_file.read(name), f"{file_path}:{name}")
                    for name in zip_file.namelist()
                    if name.lower().endswith(".xml")
                )
            )
    except zipfile.BadZipFile as err:
        raise InputParseError(f"{file_path} is not a valid zip file") from err
    except OSError as err:
        raise InputParseError(f"Failed to read {file_path}: {err}") from err


def parse_xml(xml: bytes, source: str = "<string>") -> list[Suite]:
    if not xml.strip():
        warn(f"Skipping empty XML file {source}")
        return []
    debug(f"Parsing {source}")
    try:
        root = jup.JUnitXml.fromstring(xml)
    except (JUnitXmlError, SyntaxError, ValueError) as err:
        raise InputParseError(f"Failed to parse {source}: {err}") from err
    if isinstance(root, jup.TestSuite):
        document = jup.JUnitXml()
        document.add_testsuite(root)
        root = document
    return [_make_suite(s) for s in root.iterchildren(JUnitSuite)]


def _make_suite(test_suite: JUnitSuite) -> Suite:
    cases = [_make_case(c) for c in test_suite.iterchildren(jup.TestCase)]
    return Suite(
        name=test_suite.name or "",
        package=test_suite.package,
        properties={p.name: p.value for p in test_suite.properties()},
        cases=cases,
        suites=[_make_suite(s) for s in test_suite.iterchildren(JUnitSuite)],
        totals=Totals.from_cases(cases, duration=test_suite.time),
        system_out=_text(test_suite, jup.SystemOut),
        system_err=_text(test_suite, jup.SystemErr),
    )


def _make_case(test_case: jup.TestCase) -> Case:
    # Passed test cases have no result. A failed/skipped test case will
    # typically have a single result, but the schema permits multiple; the
    # first one decides the status.
    result = next(iter(test_case.result), None)
    status = _status(result)
    error = None
    if status.has_error:
        error = ErrorDetail(
            message=result.message, type=result.type, body=result.text
        )
    properties = test_case.child(jup.Properties)
    return Case(
        name=test_case.name or "",
        classname=test_case.classname or "",
        duration=test_case.time or 0.0,
        status=status,
        message=result.message if result is not None else None,
        error=error,
        properties=(
            {p.name: p.value for p in properties} if properties is not None else {}
        ),
        system_out=_text(test_case, jup.SystemOut),
        system_err=_text(test_case, jup.SystemErr),
    )


def _status(result: Optional[jup.Result]) -> Status:
    match result:
        case jup.Error():
            return Status.ERROR
        case jup.Failure():
            return Status.FAILED
        case jup.Skipped():
            return Status.SKIPPED
        case _:
            return Status.PASSED


def _text(element: jup.Element, child: type[jup.Element]) -> Optional[str]:
    elem = element.child(child)
    return elem.text if elem is not None else None
