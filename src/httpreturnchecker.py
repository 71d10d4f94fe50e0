import argparse
import logging
import os
import sys
from typing import Iterator, List, Optional

from go_lexer import GoLexer, LexError, print_tokens
from go_parser import ParseError, parse_source
from handler_check import ResponseReturnChecker
from reporting import Reporter
from signatures import ANALYZER_DOC, ANALYZER_NAME

__version__ = "0.1.0"

_log = logging.getLogger(ANALYZER_NAME)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_VIOLATION = 3

SKIP_DIRS = {"testdata", "vendor"}


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    # no-op when the root logger already has handlers
    logging.basicConfig(
        format="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)


def _skip_dir(name: str) -> bool:
    return name in SKIP_DIRS or name.startswith((".", "_"))


def expand_paths(patterns: List[str]) -> Iterator[str]:
    """Yield .go files named by files, directories or Go-style "dir/..." patterns."""
    for pattern in patterns:
        recursive = False
        if pattern == "..." or pattern.endswith("/..."):
            recursive = True
            pattern = pattern[:-3].rstrip("/") or "."
        if os.path.isfile(pattern):
            yield pattern
            continue
        if not os.path.isdir(pattern):
            raise FileNotFoundError(pattern)
        if not recursive:
            for name in sorted(os.listdir(pattern)):
                path = os.path.join(pattern, name)
                if name.endswith(".go") and os.path.isfile(path):
                    yield path
            continue
        for root, dirs, files in os.walk(pattern):
            dirs[:] = sorted(d for d in dirs if not _skip_dir(d))
            for name in sorted(files):
                if name.endswith(".go"):
                    yield os.path.join(root, name)


def read_input(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_lex(sources: List[Optional[str]]) -> int:
    status = EXIT_OK
    lexer = GoLexer()
    for path in sources:
        try:
            tokens = lexer.tokenize(read_input(path))
        except (OSError, UnicodeDecodeError, LexError) as e:
            _log.error("%s: %s", path or "<stdin>", e)
            status = EXIT_ERROR
            continue
        if len(sources) > 1:
            print(f"# {path}")
        print_tokens(tokens)
    return status


def cmd_check(sources: List[Optional[str]], as_json: bool) -> int:
    reporter = Reporter()
    checker = ResponseReturnChecker(reporter)
    status = EXIT_OK
    for path in sources:
        filename = path or "<stdin>"
        try:
            go_file = parse_source(read_input(path), filename=filename)
        except (OSError, UnicodeDecodeError, LexError, ParseError) as e:
            _log.error("%s: %s", filename, e)
            status = EXIT_ERROR
            continue
        found = checker.analyze(go_file)
        _log.info("%s: %d diagnostic(s)", filename, len(found))

    if as_json:
        print(reporter.render_json())
    else:
        sys.stdout.write(reporter.render_text())

    if status == EXIT_OK and len(reporter):
        status = EXIT_VIOLATION
    return status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=ANALYZER_NAME,
        description=ANALYZER_DOC,
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--json", action="store_true",
        help="emit diagnostics as JSON",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "mode", choices=("check", "lex"),
        help="check: report missing returns; lex: print the token table",
    )
    parser.add_argument(
        "paths", nargs="*",
        help="Go files, directories or dir/... patterns (stdin if omitted)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        sources: List[Optional[str]] = list(expand_paths(args.paths)) if args.paths else [None]
    except FileNotFoundError as e:
        _log.error("no such file or directory: %s", e)
        return EXIT_ERROR

    if args.mode == "lex":
        return cmd_lex(sources)
    return cmd_check(sources, args.json)


if __name__ == "__main__":
    sys.exit(main())
