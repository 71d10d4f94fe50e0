from __future__ import annotations
import dataclasses
import logging
from typing import Dict, Iterator, List, Optional, Tuple
from go_ast import (BlockStmt, CallExpr, CaseClause, CommClause, DeclStmt, EmptyStmt,
                    Expr, ExprStmt, File, FuncDecl, FuncType, Ident, Node,
                    ReturnStmt, SelectorExpr, Stmt)
from reporting import Diagnostic, Reporter
from signatures import (MISSING_RETURN_MESSAGE, REQUEST, RESPONSE_WRITER,
                        lookup_idiom)

logger = logging.getLogger(__name__)

# ---------- Traversal ----------
def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of node in source order."""
    for f in dataclasses.fields(node):
        value = getattr(node, f.name)
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item

def walk(node: Node) -> Iterator[Node]:
    """Pre-order walk, including function literal bodies."""
    stack = [node]
    while stack:
        cur = stack.pop()
        yield cur
        stack.extend(reversed(list(iter_child_nodes(cur))))

def statement_lists(node: Node) -> Iterator[List[Stmt]]:
    """Every sibling sequence under node: {...} blocks and case/select clause bodies."""
    for n in walk(node):
        if isinstance(n, BlockStmt):
            yield n.statements
        elif isinstance(n, (CaseClause, CommClause)):
            yield n.body

def is_empty_statement(stmt: Stmt) -> bool:
    return isinstance(stmt, (EmptyStmt, DeclStmt))

def last_non_empty_statement(stmts: List[Stmt]) -> Optional[Stmt]:
    for stmt in reversed(stmts):
        if not is_empty_statement(stmt):
            return stmt
    return None

def next_non_empty_statement(stmts: List[Stmt], pos: int) -> Optional[Stmt]:
    for stmt in stmts[pos + 1:]:
        if not is_empty_statement(stmt):
            return stmt
    return None

# ---------- HandlerDetector ----------
def flatten_params(ftype: Optional[FuncType]) -> Optional[List[Tuple[Optional[str], Expr]]]:
    """(name, type) per parameter; "a, b T" yields two entries."""
    if ftype is None:
        return None
    params = []
    for fld in ftype.params:
        if not fld.names:
            params.append((None, fld.type))
        for ident in fld.names:
            params.append((ident.name, fld.type))
    return params

def is_http_handler(fn: FuncDecl) -> bool:
    params = flatten_params(fn.type)
    if params is None or len(params) != 2:
        return False
    return RESPONSE_WRITER.matches(params[0][1]) and REQUEST.matches(params[1][1])

def writer_param_name(fn: FuncDecl) -> Optional[str]:
    name = flatten_params(fn.type)[0][0]
    if not name or name == "_":
        return None
    return name

# ---------- WriteCallClassifier ----------
def _arg_is_ident(args: List[Expr], index: int, name: str) -> bool:
    if index >= len(args):
        return False
    arg = args[index]
    return isinstance(arg, Ident) and arg.name == name

def is_idiom_call(call: CallExpr, writer: str, chained_only: bool = False) -> bool:
    fun = call.func
    if not isinstance(fun, SelectorExpr) or not isinstance(fun.value, Ident):
        return False
    idiom = lookup_idiom(fun.value.name, fun.sel.name)
    if idiom is None or (chained_only and not idiom.chained):
        return False
    return _arg_is_ident(call.args, idiom.writer_arg, writer)

def is_write_call(call: CallExpr, writer: str) -> bool:
    fun = call.func
    if not isinstance(fun, SelectorExpr):
        return False
    target = fun.value
    if isinstance(target, Ident):
        # w.Write, w.WriteHeader, ...
        if target.name == writer:
            return True
        return is_idiom_call(call, writer)
    if isinstance(target, CallExpr):
        return is_idiom_call(target, writer, chained_only=True)
    return False

def is_write_to_response_writer(stmt: Stmt, writer: str) -> bool:
    if not isinstance(stmt, ExprStmt) or not isinstance(stmt.expr, CallExpr):
        return False
    return is_write_call(stmt.expr, writer)

# ---------- ControlFlowGuard ----------
class ResponseReturnChecker:
    def __init__(self, reporter: Optional[Reporter] = None):
        self.reporter = reporter if reporter is not None else Reporter()

    def analyze(self, f: File) -> List[Diagnostic]:
        """Check every handler in f; returns the diagnostics found in this file."""
        start = len(self.reporter.diagnostics)
        for decl in f.decls:
            if isinstance(decl, FuncDecl):
                self.check_function(decl, f.filename, f.package)
        return self.reporter.diagnostics[start:]

    def check_function(self, fn: FuncDecl, filename: str = "", package: str = ""):
        if fn.body is None or not is_http_handler(fn):
            return
        writer = writer_param_name(fn)
        if writer is None:
            logger.debug("%s: handler %s has no named writer parameter, skipped", filename, fn.name)
            return

        last = last_non_empty_statement(fn.body.statements)

        # statement identity -> (owning list, position)
        owners: Dict[int, Tuple[List[Stmt], int]] = {}
        for stmts in statement_lists(fn.body):
            for pos, stmt in enumerate(stmts):
                owners[id(stmt)] = (stmts, pos)

        for node in walk(fn.body):
            if not is_write_to_response_writer(node, writer):
                continue
            if node is last:
                continue
            owner = owners.get(id(node))
            if owner is None:
                logger.debug("%s:%d: write outside a statement list, skipped", filename, node.line)
                continue
            stmts, pos = owner
            if isinstance(next_non_empty_statement(stmts, pos), ReturnStmt):
                continue
            self.reporter.report(node, MISSING_RETURN_MESSAGE, filename=filename, package=package)
