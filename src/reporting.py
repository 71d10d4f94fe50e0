from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from typing import Dict, List
from go_ast import Node
from signatures import ANALYZER_NAME

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class Diagnostic:
    filename: str
    line: int
    column: int
    message: str
    package: str = ""
    analyzer: str = ANALYZER_NAME

    @property
    def posn(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def format(self) -> str:
        return f"{self.posn}: {self.message}"

class Reporter:
    """Collects diagnostics in the order they are reported."""

    def __init__(self):
        self.diagnostics: List[Diagnostic] = []

    def report(self, node: Node, message: str, filename: str = "", package: str = "") -> Diagnostic:
        diag = Diagnostic(filename=filename, line=node.line, column=node.column,
                          message=message, package=package)
        self.diagnostics.append(diag)
        logger.debug("reported %s", diag.format())
        return diag

    def __len__(self) -> int:
        return len(self.diagnostics)

    def render_text(self) -> str:
        return "".join(d.format() + "\n" for d in self.diagnostics)

    def render_json(self) -> str:
        # Same nesting as `go vet -json`: package -> analyzer -> [{posn, message}]
        tree: Dict[str, Dict[str, List[dict]]] = {}
        for d in self.diagnostics:
            by_analyzer = tree.setdefault(d.package, {})
            by_analyzer.setdefault(d.analyzer, []).append({"posn": d.posn, "message": d.message})
        return json.dumps(tree, indent=2)
