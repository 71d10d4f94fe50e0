from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

# Nodes compare by identity (eq=False): the checker asks "is this the same
# statement", never "does it look the same".

@dataclass(eq=False)
class Node:
    line: int = 0
    column: int = 0

# ---------- File / Declarations ----------
@dataclass(eq=False)
class ImportSpec(Node):
    path: str = ""
    alias: Optional[str] = None

@dataclass(eq=False)
class Field(Node):
    names: List["Ident"] = field(default_factory=list)
    type: Optional["Expr"] = None
    variadic: bool = False

@dataclass(eq=False)
class FuncType(Node):
    type_params: List[Field] = field(default_factory=list)
    params: List[Field] = field(default_factory=list)
    results: List[Field] = field(default_factory=list)

@dataclass(eq=False)
class FuncDecl(Node):
    name: str = ""
    recv: Optional[Field] = None
    type: FuncType = None
    body: Optional["BlockStmt"] = None  # None => declared without body

@dataclass(eq=False)
class GenDecl(Node):
    keyword: str = ""  # var / const / type / import
    specs: List[Node] = field(default_factory=list)

@dataclass(eq=False)
class ValueSpec(Node):
    names: List["Ident"] = field(default_factory=list)
    type: Optional["Expr"] = None
    values: List["Expr"] = field(default_factory=list)

@dataclass(eq=False)
class TypeSpec(Node):
    name: str = ""
    type_params: List[Field] = field(default_factory=list)
    type: "Expr" = None
    alias: bool = False

@dataclass(eq=False)
class File(Node):
    filename: str = ""
    package: str = ""
    imports: List[ImportSpec] = field(default_factory=list)
    decls: List[Node] = field(default_factory=list)
    comments: List["Comment"] = field(default_factory=list)

@dataclass(eq=False)
class Comment(Node):
    text: str = ""

# ---------- Statements ----------
class Stmt(Node): ...

@dataclass(eq=False)
class BlockStmt(Stmt):
    statements: List[Stmt] = field(default_factory=list)

@dataclass(eq=False)
class EmptyStmt(Stmt):
    pass

@dataclass(eq=False)
class DeclStmt(Stmt):
    decl: GenDecl = None

@dataclass(eq=False)
class ExprStmt(Stmt):
    expr: "Expr" = None

@dataclass(eq=False)
class SendStmt(Stmt):
    chan: "Expr" = None
    value: "Expr" = None

@dataclass(eq=False)
class IncDecStmt(Stmt):
    expr: "Expr" = None
    op: str = ""

@dataclass(eq=False)
class AssignStmt(Stmt):
    lhs: List["Expr"] = field(default_factory=list)
    op: str = ""
    rhs: List["Expr"] = field(default_factory=list)

@dataclass(eq=False)
class GoStmt(Stmt):
    call: "Expr" = None

@dataclass(eq=False)
class DeferStmt(Stmt):
    call: "Expr" = None

@dataclass(eq=False)
class ReturnStmt(Stmt):
    results: List["Expr"] = field(default_factory=list)

@dataclass(eq=False)
class BranchStmt(Stmt):
    keyword: str = ""  # break / continue / goto / fallthrough
    label: Optional[str] = None

@dataclass(eq=False)
class LabeledStmt(Stmt):
    label: str = ""
    stmt: Stmt = None

@dataclass(eq=False)
class IfStmt(Stmt):
    init: Optional[Stmt] = None
    cond: "Expr" = None
    then_block: BlockStmt = None
    else_branch: Optional[Stmt] = None  # BlockStmt or IfStmt

@dataclass(eq=False)
class CaseClause(Stmt):
    exprs: List["Expr"] = field(default_factory=list)  # empty => default
    body: List[Stmt] = field(default_factory=list)

@dataclass(eq=False)
class SwitchStmt(Stmt):
    init: Optional[Stmt] = None
    tag: Optional["Expr"] = None
    clauses: List[CaseClause] = field(default_factory=list)

@dataclass(eq=False)
class TypeSwitchStmt(Stmt):
    init: Optional[Stmt] = None
    assign: Stmt = None
    clauses: List[CaseClause] = field(default_factory=list)

@dataclass(eq=False)
class CommClause(Stmt):
    comm: Optional[Stmt] = None  # None => default
    body: List[Stmt] = field(default_factory=list)

@dataclass(eq=False)
class SelectStmt(Stmt):
    clauses: List[CommClause] = field(default_factory=list)

@dataclass(eq=False)
class ForStmt(Stmt):
    init: Optional[Stmt] = None
    cond: Optional["Expr"] = None
    post: Optional[Stmt] = None
    body: BlockStmt = None

@dataclass(eq=False)
class RangeStmt(Stmt):
    key: Optional["Expr"] = None
    value: Optional["Expr"] = None
    define: bool = False
    iterable: "Expr" = None
    body: BlockStmt = None

# ---------- Expressions ----------
class Expr(Node): ...

@dataclass(eq=False)
class Ident(Expr):
    name: str = ""

@dataclass(eq=False)
class BasicLit(Expr):
    kind: str = ""  # INT / FLOAT / IMAG / CHAR / STRING
    value: str = ""

@dataclass(eq=False)
class CompositeLit(Expr):
    type: Optional[Expr] = None
    elts: List[Expr] = field(default_factory=list)

@dataclass(eq=False)
class KeyValueExpr(Expr):
    key: Expr = None
    value: Expr = None

@dataclass(eq=False)
class FuncLit(Expr):
    type: FuncType = None
    body: BlockStmt = None

@dataclass(eq=False)
class ParenExpr(Expr):
    expr: Expr = None

@dataclass(eq=False)
class SelectorExpr(Expr):
    value: Expr = None
    sel: Ident = None

@dataclass(eq=False)
class IndexExpr(Expr):
    value: Expr = None
    indices: List[Expr] = field(default_factory=list)

@dataclass(eq=False)
class SliceExpr(Expr):
    value: Expr = None
    low: Optional[Expr] = None
    high: Optional[Expr] = None
    max: Optional[Expr] = None

@dataclass(eq=False)
class TypeAssertExpr(Expr):
    value: Expr = None
    type: Optional[Expr] = None  # None => x.(type)

@dataclass(eq=False)
class CallExpr(Expr):
    func: Expr = None
    args: List[Expr] = field(default_factory=list)
    ellipsis: bool = False

@dataclass(eq=False)
class StarExpr(Expr):
    value: Expr = None

@dataclass(eq=False)
class UnaryExpr(Expr):
    op: str = ""
    operand: Expr = None

@dataclass(eq=False)
class BinaryExpr(Expr):
    op: str = ""
    left: Expr = None
    right: Expr = None

# ---------- Types ----------
@dataclass(eq=False)
class ArrayType(Expr):
    length: Optional[Expr] = None  # None => slice
    elem: Expr = None

@dataclass(eq=False)
class MapType(Expr):
    key: Expr = None
    value: Expr = None

@dataclass(eq=False)
class ChanType(Expr):
    dir: str = "both"  # both / send / recv
    value: Expr = None

@dataclass(eq=False)
class FuncTypeExpr(Expr):
    type: FuncType = None

@dataclass(eq=False)
class StructType(Expr):
    fields: List[Field] = field(default_factory=list)

@dataclass(eq=False)
class InterfaceType(Expr):
    methods: List[Node] = field(default_factory=list)

@dataclass(eq=False)
class Ellipsis(Expr):
    elem: Optional[Expr] = None
