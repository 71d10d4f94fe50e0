"""
Shared fixtures: parsing helpers and the ``// want "..."`` expectation
convention used by the Go fixtures under tests/testdata.
"""

import re
from pathlib import Path

import pytest

from go_parser import parse_source
from handler_check import ResponseReturnChecker

TESTDATA = Path(__file__).parent / "testdata"

MESSAGE = "response write operation must be followed by return unless it's the last statement"

WANT_RE = re.compile(r'//\s*want\s+"((?:[^"\\]|\\.)*)"')


def handler_source(body: str, params: str = "w http.ResponseWriter, r *http.Request") -> str:
    """Wrap statements in a one-handler Go file."""
    return f"package p\n\nfunc h({params}) {{\n{body}\n}}\n"


def collect_wants(go_file):
    """(line, message) pairs announced by // want comments."""
    wants = set()
    for comment in go_file.comments:
        m = WANT_RE.search(comment.text)
        if m:
            wants.add((comment.line, m.group(1).replace('\\"', '"')))
    return wants


@pytest.fixture
def check():
    """Parse Go source and return the diagnostics for it."""
    def _check(source: str, filename: str = "input.go"):
        return ResponseReturnChecker().analyze(parse_source(source, filename=filename))
    return _check


@pytest.fixture
def check_handler(check):
    def _check_handler(body: str, **kwargs):
        return check(handler_source(body, **kwargs))
    return _check_handler


@pytest.fixture
def testdata_expectations():
    """Return (expected, actual) (line, message) sets for a testdata file."""
    def _run(name: str):
        path = TESTDATA / name
        go_file = parse_source(path.read_text(encoding="utf-8"), filename=str(path))
        found = ResponseReturnChecker().analyze(go_file)
        actual = {(d.line, d.message) for d in found}
        return collect_wants(go_file), actual
    return _run
