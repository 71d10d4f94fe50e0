from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from go_ast import Expr, Ident, SelectorExpr, StarExpr

ANALYZER_NAME = "httpreturnchecker"
ANALYZER_DOC = "checks for proper return statements after response writer operations in HTTP handlers"
MISSING_RETURN_MESSAGE = "response write operation must be followed by return unless it's the last statement"

@dataclass(frozen=True)
class QualifiedType:
    """A package-qualified type name, optionally behind a pointer.

    Matching is by spelling only: ``http`` is whatever identifier the file
    uses, never resolved against its imports.
    """
    package: str
    name: str
    pointer: bool = False

    def matches(self, expr: Optional[Expr]) -> bool:
        if self.pointer:
            if not isinstance(expr, StarExpr):
                return False
            expr = expr.value
        if not isinstance(expr, SelectorExpr):
            return False
        if not isinstance(expr.value, Ident) or expr.value.name != self.package:
            return False
        return expr.sel.name == self.name

RESPONSE_WRITER = QualifiedType("http", "ResponseWriter")
REQUEST = QualifiedType("http", "Request", pointer=True)

@dataclass(frozen=True)
class WriteIdiom:
    package: str
    member: str
    writer_arg: int = 0
    # json.NewEncoder(w).Encode(v) counts through the follow-up call
    chained: bool = False

_IDIOMS = (
    WriteIdiom("json", "NewEncoder", chained=True),
    WriteIdiom("fmt", "Fprintf"),
    WriteIdiom("fmt", "Fprint"),
    WriteIdiom("fmt", "Fprintln"),
    WriteIdiom("io", "Copy"),
    # github.com/go-chi/render
    WriteIdiom("render", "Render"),
)

WRITE_IDIOMS: Dict[Tuple[str, str], WriteIdiom] = {(i.package, i.member): i for i in _IDIOMS}

def lookup_idiom(package: str, member: str) -> Optional[WriteIdiom]:
    return WRITE_IDIOMS.get((package, member))
