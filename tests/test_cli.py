# tests/test_cli.py
"""
Tests for the command-line driver: path expansion, modes, exit codes.
"""

import io
import json

import pytest

import httpreturnchecker
from httpreturnchecker import EXIT_ERROR, EXIT_OK, EXIT_VIOLATION, expand_paths, main
from conftest import MESSAGE, TESTDATA, handler_source

CLEAN = handler_source('\tw.Write([]byte("ok"))')
DIRTY = handler_source('\tw.Write([]byte("ok"))\n\tlog()')


@pytest.fixture
def tree(tmp_path):
    (tmp_path / "clean.go").write_text(CLEAN)
    (tmp_path / "notes.txt").write_text("not go")
    sub = tmp_path / "api"
    sub.mkdir()
    (sub / "dirty.go").write_text(DIRTY)
    for skipped in ("testdata", "vendor", ".git", "_build"):
        d = tmp_path / skipped
        d.mkdir()
        (d / "x.go").write_text(DIRTY)
    return tmp_path


class TestExpandPaths:

    def test_single_file(self, tree):
        path = str(tree / "clean.go")
        assert list(expand_paths([path])) == [path]

    def test_directory_is_not_recursive(self, tree):
        assert [p.rsplit("/", 1)[-1] for p in expand_paths([str(tree)])] == ["clean.go"]

    def test_dots_pattern_recurses_and_skips(self, tree):
        found = sorted(p[len(str(tree)) + 1:] for p in expand_paths([f"{tree}/..."]))
        assert found == ["api/dirty.go", "clean.go"]

    def test_explicit_testdata_directory(self, tree):
        found = list(expand_paths([str(tree / "testdata")]))
        assert len(found) == 1

    def test_missing_path(self, tree):
        with pytest.raises(FileNotFoundError):
            list(expand_paths([str(tree / "nope")]))


class TestCheckMode:

    def test_clean_file(self, tree, capsys):
        assert main(["check", str(tree / "clean.go")]) == EXIT_OK
        assert capsys.readouterr().out == ""

    def test_violation(self, tree, capsys):
        path = str(tree / "api" / "dirty.go")
        assert main(["check", path]) == EXIT_VIOLATION
        assert capsys.readouterr().out == f"{path}:4:2: {MESSAGE}\n"

    def test_recursive_pattern(self, tree, capsys):
        assert main(["check", f"{tree}/..."]) == EXIT_VIOLATION
        out = capsys.readouterr().out
        assert out.count(MESSAGE) == 1

    def test_json_output(self, tree, capsys):
        assert main(["--json", "check", str(tree / "api" / "dirty.go")]) == EXIT_VIOLATION
        data = json.loads(capsys.readouterr().out)
        assert data["p"]["httpreturnchecker"][0]["message"] == MESSAGE

    def test_testdata_fixtures(self, capsys):
        assert main(["check", str(TESTDATA / "basic.go")]) == EXIT_VIOLATION
        assert capsys.readouterr().out.count(MESSAGE) == 4

    def test_parse_error_keeps_going(self, tree, capsys):
        bad = tree / "bad.go"
        bad.write_text("package p\nfunc f( {\n")
        status = main(["check", str(bad), str(tree / "api" / "dirty.go")])
        assert status == EXIT_ERROR
        assert MESSAGE in capsys.readouterr().out

    def test_undecodable_file_keeps_going(self, tree, capsys):
        bad = tree / "bad.go"
        bad.write_bytes(b"package p\n// \xff\xfe\n")
        status = main(["check", str(bad), str(tree / "api" / "dirty.go")])
        assert status == EXIT_ERROR
        assert MESSAGE in capsys.readouterr().out

    def test_truncated_file_keeps_going(self, tree, capsys):
        bad = tree / "bad.go"
        bad.write_text("package p\nfunc f() {\n\tif")
        status = main(["check", str(bad), str(tree / "api" / "dirty.go")])
        assert status == EXIT_ERROR
        assert MESSAGE in capsys.readouterr().out

    def test_missing_path(self, tree):
        assert main(["check", str(tree / "missing.go")]) == EXIT_ERROR

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr(httpreturnchecker.sys, "stdin", io.StringIO(DIRTY))
        assert main(["check"]) == EXIT_VIOLATION
        assert capsys.readouterr().out.startswith("<stdin>:4:2: ")


class TestLexMode:

    def test_prints_token_table(self, tree, capsys):
        assert main(["lex", str(tree / "clean.go")]) == EXIT_OK
        out = capsys.readouterr().out
        assert out.splitlines()[0].startswith("Line")
        assert "PACKAGE" in out

    def test_illegal_character(self, tree):
        bad = tree / "bad.go"
        bad.write_text("package p\n@\n")
        assert main(["lex", str(bad)]) == EXIT_ERROR

    def test_undecodable_file(self, tree, capsys):
        bad = tree / "bad.go"
        bad.write_bytes(b"package p\n// \xff\xfe\n")
        assert main(["lex", str(bad), str(tree / "clean.go")]) == EXIT_ERROR
        assert "PACKAGE" in capsys.readouterr().out
