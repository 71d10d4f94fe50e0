from __future__ import annotations
import logging
from typing import List, Optional
from go_ast import *
from go_lexer import GoLexer

logger = logging.getLogger(__name__)

ASSIGN_OPS = {
    "DEFINE": ":=", "EQ": "=",
    "PLUS_EQ": "+=", "MINUS_EQ": "-=", "MULT_EQ": "*=", "DIV_EQ": "/=",
    "MOD_EQ": "%=", "AMP_EQ": "&=", "PIPE_EQ": "|=", "CARET_EQ": "^=",
    "SHL_EQ": "<<=", "SHR_EQ": ">>=", "AND_NOT_EQ": "&^=",
}

# Go binary operator precedence, 5 binds tightest
BINARY_OPS = {
    "OR": ("||", 1),
    "AND": ("&&", 2),
    "EQ_EQ": ("==", 3), "NOT_EQ": ("!=", 3),
    "LESS_THAN": ("<", 3), "LESS_EQ": ("<=", 3),
    "GREATER_THAN": (">", 3), "GREATER_EQ": (">=", 3),
    "PLUS": ("+", 4), "MINUS": ("-", 4), "PIPE": ("|", 4), "CARET": ("^", 4),
    "MULT": ("*", 5), "DIV": ("/", 5), "MOD": ("%", 5),
    "SHL": ("<<", 5), "SHR": (">>", 5), "AMP": ("&", 5), "AND_NOT": ("&^", 5),
}

UNARY_OPS = {
    "PLUS": "+", "MINUS": "-", "NOT": "!", "CARET": "^",
    "AMP": "&", "ARROW": "<-", "TILDE": "~",
}

LITERAL_TOKENS = {"INT", "FLOAT", "IMAG", "CHAR", "STRING"}

TYPE_START = {"ID", "MULT", "LSQUAREBR", "MAP", "CHAN", "FUNC",
              "STRUCT", "INTERFACE", "ARROW", "LPAREN"}

class ParseError(Exception):
    def __init__(self, message: str, line: int, col: int):
        super().__init__(f"ParseError at {line}:{col} - {message}")
        self.message = message
        self.line = line
        self.col = col

class TokenStream:
    def __init__(self, tokens: List[dict]):
        self.tokens = tokens
        self.i = 0

    def peek(self, k: int = 0) -> Optional[dict]:
        j = self.i + k
        if j >= len(self.tokens):
            return None
        return self.tokens[j]

    def peek_type(self, k: int = 0) -> Optional[str]:
        tok = self.peek(k)
        return tok["type"] if tok else None

    def require(self, what: str) -> dict:
        tok = self.peek()
        if tok is None:
            raise self.error(f"Unexpected EOF in {what}")
        return tok

    def at_end(self) -> bool:
        return self.i >= len(self.tokens)

    def advance(self) -> Optional[dict]:
        tok = self.peek()
        if tok is not None:
            self.i += 1
        return tok

    def previous(self) -> Optional[dict]:
        return self.tokens[self.i - 1] if self.i > 0 else None

    def match(self, *types: str) -> Optional[dict]:
        tok = self.peek()
        if tok and tok["type"] in types:
            return self.advance()
        return None

    def expect(self, ttype: str) -> dict:
        tok = self.peek()
        if not tok or tok["type"] != ttype:
            got = tok["type"] if tok else "EOF"
            raise self.error(f"Expected {ttype}, got {got}")
        return self.advance()

    def error(self, message: str) -> ParseError:
        tok = self.peek() or self.previous()
        line = tok["line"] if tok else -1
        col = tok["column"] if tok else -1
        return ParseError(message, line, col)

def _loc(tok: dict):
    return tok["line"], tok["column"]

def _is_type_name(x: Expr) -> bool:
    if isinstance(x, Ident):
        return True
    if isinstance(x, SelectorExpr):
        return isinstance(x.value, Ident)
    if isinstance(x, IndexExpr):
        return _is_type_name(x.value)
    return False

def _is_literal_type(x: Expr) -> bool:
    return _is_type_name(x) or isinstance(x, (ArrayType, MapType, StructType))

def _is_type_switch_guard(s: Optional[Stmt]) -> bool:
    if isinstance(s, ExprStmt):
        x = s.expr
    elif isinstance(s, AssignStmt) and s.op == ":=" and len(s.lhs) == 1 and len(s.rhs) == 1:
        x = s.rhs[0]
    else:
        return False
    return isinstance(x, TypeAssertExpr) and x.type is None

class Parser:
    def __init__(self, tokens: List[dict], filename: str = "<input>", comments: Optional[List[dict]] = None):
        self.ts = TokenStream(tokens)
        self.filename = filename
        self.comments = comments or []
        # < 0 inside if/for/switch headers, where T{...} literals are not allowed
        self.expr_lev = 0

    def parse_file(self) -> File:
        tok = self.ts.expect("PACKAGE")
        line, col = _loc(tok)
        name_tok = self.ts.expect("ID")
        self._expect_semi()
        f = File(filename=self.filename, package=name_tok["value"], line=line, column=col)
        f.comments = [Comment(text=c["text"], line=c["line"], column=c["column"]) for c in self.comments]

        while self.ts.peek_type() == "IMPORT":
            decl = self.parse_gen_decl()
            f.imports.extend(decl.specs)
            f.decls.append(decl)
            self._expect_semi()

        while not self.ts.at_end():
            if self.ts.match("SEMI_COLON"):
                continue
            ttype = self.ts.peek_type()
            if ttype == "FUNC":
                f.decls.append(self.parse_func_decl())
            elif ttype in ("VAR", "CONST", "TYPE"):
                f.decls.append(self.parse_gen_decl())
            else:
                raise self.ts.error(f"Unexpected token {ttype} at top level")
            self._expect_semi()
        return f

    def _expect_semi(self):
        if self.ts.at_end() or self.ts.peek_type() in ("RPAREN", "RCURLYEBR"):
            return
        self.ts.expect("SEMI_COLON")

    # ---------------- DECLARATIONS ----------------
    def parse_func_decl(self) -> FuncDecl:
        t_func = self.ts.expect("FUNC")
        line, col = _loc(t_func)
        recv = None
        if self.ts.peek_type() == "LPAREN":
            recv_fields = self.parse_params("LPAREN", "RPAREN")
            if len(recv_fields) != 1:
                raise ParseError("method has multiple receivers", line, col)
            recv = recv_fields[0]
        name_tok = self.ts.expect("ID")
        type_params = []
        if self.ts.peek_type() == "LSQUAREBR":
            type_params = self.parse_params("LSQUAREBR", "RSQUAREBR")
        ftype = self.parse_signature(line, col)
        ftype.type_params = type_params

        fn = FuncDecl(name=name_tok["value"], recv=recv, type=ftype, line=line, column=col)
        if self.ts.peek_type() == "LCURLYEBR":
            fn.body = self.parse_block()
        return fn

    def parse_signature(self, line: int, col: int) -> FuncType:
        params = self.parse_params("LPAREN", "RPAREN")
        results: List[Field] = []
        ttype = self.ts.peek_type()
        if ttype == "LPAREN":
            results = self.parse_params("LPAREN", "RPAREN")
        elif ttype in TYPE_START:
            typ = self.parse_type()
            results = [Field(type=typ, line=typ.line, column=typ.column)]
        return FuncType(params=params, results=results, line=line, column=col)

    def parse_params(self, open_tok: str, close_tok: str) -> List[Field]:
        self.ts.expect(open_tok)
        entries = []  # (name ident or None, type)
        while self.ts.peek_type() != close_tok:
            if self.ts.peek_type() == "ELLIPSIS":
                entries.append((None, self.parse_param_type()))
            else:
                typ = self.parse_param_type()
                if self.ts.peek_type() not in ("COMMA", close_tok):
                    if not isinstance(typ, Ident):
                        raise self.ts.error("Expected parameter name")
                    entries.append((typ, self.parse_param_type()))
                else:
                    entries.append((None, typ))
            if self.ts.match("COMMA") is None:
                break
        self.ts.expect(close_tok)

        if not any(name is not None for name, _ in entries):
            return [self._field([], typ) for _, typ in entries]

        # named form: "a, b int, c string" groups pending names onto the next type
        fields: List[Field] = []
        pending: List[Ident] = []
        for name, typ in entries:
            if name is None:
                if not isinstance(typ, Ident):
                    raise ParseError("mixed named and unnamed parameters", typ.line, typ.column)
                pending.append(typ)
            else:
                fields.append(self._field(pending + [name], typ))
                pending = []
        if pending:
            raise ParseError("mixed named and unnamed parameters", pending[0].line, pending[0].column)
        return fields

    def _field(self, names: List[Ident], typ: Expr) -> Field:
        variadic = isinstance(typ, Ellipsis)
        anchor = names[0] if names else typ
        return Field(names=names, type=typ, variadic=variadic, line=anchor.line, column=anchor.column)

    def parse_param_type(self) -> Expr:
        tok = self.ts.match("ELLIPSIS")
        if tok:
            elem = self.parse_type()
            return Ellipsis(elem=elem, line=tok["line"], column=tok["column"])
        if self.ts.peek_type() == "TILDE":
            return self.parse_constraint()
        typ = self.parse_type()
        if self.ts.peek_type() == "PIPE":
            return self._union_tail(typ)
        return typ

    def parse_gen_decl(self) -> GenDecl:
        t = self.ts.advance()
        keyword = t["value"]
        decl = GenDecl(keyword=keyword, line=t["line"], column=t["column"])
        if self.ts.match("LPAREN"):
            while self.ts.peek_type() != "RPAREN":
                decl.specs.append(self.parse_spec(keyword))
                self._expect_semi()
            self.ts.expect("RPAREN")
        else:
            decl.specs.append(self.parse_spec(keyword))
        return decl

    def parse_spec(self, keyword: str) -> Node:
        if keyword == "import":
            tok = self.ts.peek()
            alias = None
            if self.ts.match("ID", "DOT"):
                alias = tok["value"]
            path_tok = self.ts.expect("STRING")
            return ImportSpec(path=path_tok["value"][1:-1], alias=alias, line=tok["line"], column=tok["column"])

        if keyword == "type":
            name_tok = self.ts.expect("ID")
            line, col = _loc(name_tok)
            type_params = []
            if (self.ts.peek_type() == "LSQUAREBR" and self.ts.peek_type(1) == "ID"
                    and self.ts.peek_type(2) != "RSQUAREBR"):
                type_params = self.parse_params("LSQUAREBR", "RSQUAREBR")
            alias = self.ts.match("EQ") is not None
            typ = self.parse_type()
            return TypeSpec(name=name_tok["value"], type_params=type_params, type=typ,
                            alias=alias, line=line, column=col)

        # var / const
        names = self.parse_ident_list()
        spec = ValueSpec(names=names, line=names[0].line, column=names[0].column)
        if self.ts.peek_type() not in ("EQ", "SEMI_COLON", "RPAREN", None):
            spec.type = self.parse_type()
        if self.ts.match("EQ"):
            spec.values = self.parse_expr_list()
        return spec

    def parse_ident_list(self) -> List[Ident]:
        idents = []
        while True:
            tok = self.ts.expect("ID")
            idents.append(Ident(name=tok["value"], line=tok["line"], column=tok["column"]))
            if self.ts.match("COMMA") is None:
                break
        return idents

    # ---------------- TYPES ----------------
    def parse_type(self) -> Expr:
        tok = self.ts.peek()
        if not tok:
            raise self.ts.error("Unexpected EOF in type")
        line, col = _loc(tok)
        ttype = tok["type"]

        if ttype == "ID":
            return self.parse_type_name()

        if ttype == "MULT":
            self.ts.advance()
            return StarExpr(value=self.parse_type(), line=line, column=col)

        if ttype == "LSQUAREBR":
            self.ts.advance()
            length = None
            if self.ts.match("ELLIPSIS"):
                length = Ellipsis(line=line, column=col)
            elif self.ts.peek_type() != "RSQUAREBR":
                self.expr_lev += 1
                length = self.parse_expr()
                self.expr_lev -= 1
            self.ts.expect("RSQUAREBR")
            return ArrayType(length=length, elem=self.parse_type(), line=line, column=col)

        if ttype == "MAP":
            self.ts.advance()
            self.ts.expect("LSQUAREBR")
            key = self.parse_type()
            self.ts.expect("RSQUAREBR")
            return MapType(key=key, value=self.parse_type(), line=line, column=col)

        if ttype == "CHAN":
            self.ts.advance()
            direction = "send" if self.ts.match("ARROW") else "both"
            return ChanType(dir=direction, value=self.parse_type(), line=line, column=col)

        if ttype == "ARROW":
            self.ts.advance()
            self.ts.expect("CHAN")
            return ChanType(dir="recv", value=self.parse_type(), line=line, column=col)

        if ttype == "FUNC":
            self.ts.advance()
            return FuncTypeExpr(type=self.parse_signature(line, col), line=line, column=col)

        if ttype == "STRUCT":
            return self.parse_struct_type()

        if ttype == "INTERFACE":
            return self.parse_interface_type()

        if ttype == "LPAREN":
            self.ts.advance()
            typ = self.parse_type()
            self.ts.expect("RPAREN")
            return ParenExpr(expr=typ, line=line, column=col)

        raise ParseError(f"Unexpected token {ttype} in type", line, col)

    def parse_type_name(self) -> Expr:
        tok = self.ts.expect("ID")
        x: Expr = Ident(name=tok["value"], line=tok["line"], column=tok["column"])
        if self.ts.peek_type() == "DOT" and self.ts.peek_type(1) == "ID":
            self.ts.advance()
            sel = self.ts.advance()
            x = SelectorExpr(value=x, sel=Ident(name=sel["value"], line=sel["line"], column=sel["column"]),
                             line=x.line, column=x.column)
        # gofmt writes instantiations as List[T] and array types as "a [4]T"
        nxt = self.ts.peek()
        prev = self.ts.previous()
        if (nxt and nxt["type"] == "LSQUAREBR"
                and nxt["lexpos"] == prev["lexpos"] + len(prev["value"])
                and self.ts.peek_type(1) != "RSQUAREBR"):
            self.ts.advance()
            self.expr_lev += 1
            args = [self.parse_type()]
            while self.ts.match("COMMA"):
                if self.ts.peek_type() == "RSQUAREBR":
                    break
                args.append(self.parse_type())
            self.expr_lev -= 1
            self.ts.expect("RSQUAREBR")
            x = IndexExpr(value=x, indices=args, line=x.line, column=x.column)
        return x

    def parse_struct_type(self) -> StructType:
        t = self.ts.expect("STRUCT")
        st = StructType(line=t["line"], column=t["column"])
        self.ts.expect("LCURLYEBR")
        while self.ts.peek_type() != "RCURLYEBR":
            if self.ts.match("SEMI_COLON"):
                continue
            tok = self.ts.require("struct type")
            embedded = (tok["type"] == "MULT" or
                        self.ts.peek_type(1) in ("DOT", "SEMI_COLON", "RCURLYEBR", "STRING"))
            if embedded:
                typ = self.parse_type()
                st.fields.append(Field(type=typ, line=typ.line, column=typ.column))
            else:
                names = self.parse_ident_list()
                st.fields.append(self._field(names, self.parse_type()))
            self.ts.match("STRING")  # field tag
            self._expect_semi()
        self.ts.expect("RCURLYEBR")
        return st

    def parse_interface_type(self) -> InterfaceType:
        t = self.ts.expect("INTERFACE")
        it = InterfaceType(line=t["line"], column=t["column"])
        self.ts.expect("LCURLYEBR")
        while self.ts.peek_type() != "RCURLYEBR":
            self.ts.require("interface type")
            if self.ts.match("SEMI_COLON"):
                continue
            if self.ts.peek_type() == "ID" and self.ts.peek_type(1) == "LPAREN":
                name_tok = self.ts.advance()
                line, col = _loc(name_tok)
                sig = self.parse_signature(line, col)
                name = Ident(name=name_tok["value"], line=line, column=col)
                it.methods.append(Field(names=[name], type=FuncTypeExpr(type=sig, line=line, column=col),
                                        line=line, column=col))
            else:
                it.methods.append(self.parse_constraint())
            self._expect_semi()
        self.ts.expect("RCURLYEBR")
        return it

    def parse_constraint(self) -> Expr:
        tok = self.ts.match("TILDE")
        typ = self.parse_type()
        if tok:
            typ = UnaryExpr(op="~", operand=typ, line=tok["line"], column=tok["column"])
        if self.ts.peek_type() == "PIPE":
            return self._union_tail(typ)
        return typ

    def _union_tail(self, left: Expr) -> Expr:
        while self.ts.match("PIPE"):
            tok = self.ts.match("TILDE")
            right = self.parse_type()
            if tok:
                right = UnaryExpr(op="~", operand=right, line=tok["line"], column=tok["column"])
            left = BinaryExpr(op="|", left=left, right=right, line=left.line, column=left.column)
        return left

    # ---------------- BODY ----------------
    def parse_block(self) -> BlockStmt:
        t = self.ts.expect("LCURLYEBR")
        outer = self.expr_lev
        self.expr_lev = 0
        block = BlockStmt(line=t["line"], column=t["column"])
        block.statements = self.parse_stmt_list()
        self.ts.expect("RCURLYEBR")
        self.expr_lev = outer
        return block

    def parse_stmt_list(self) -> List[Stmt]:
        stmts: List[Stmt] = []
        while True:
            tok = self.ts.peek()
            if tok is None or tok["type"] in ("RCURLYEBR", "CASE", "DEFAULT"):
                break
            if tok["type"] == "SEMI_COLON":
                self.ts.advance()
                stmts.append(EmptyStmt(line=tok["line"], column=tok["column"]))
                continue
            stmts.append(self.parse_stmt())
            if self.ts.peek_type() in ("RCURLYEBR", "CASE", "DEFAULT"):
                continue
            self.ts.expect("SEMI_COLON")
        return stmts

    def parse_stmt(self) -> Stmt:
        tok = self.ts.peek()
        if not tok:
            raise self.ts.error("Unexpected EOF")
        line, col = _loc(tok)
        ttype = tok["type"]

        if ttype in ("VAR", "CONST", "TYPE"):
            return DeclStmt(decl=self.parse_gen_decl(), line=line, column=col)

        if ttype == "RETURN":
            self.ts.advance()
            results = []
            if self.ts.peek_type() not in ("SEMI_COLON", "RCURLYEBR", None):
                results = self.parse_expr_list()
            return ReturnStmt(results=results, line=line, column=col)

        if ttype == "IF":
            return self.parse_if()

        if ttype == "FOR":
            return self.parse_for()

        if ttype == "SWITCH":
            return self.parse_switch()

        if ttype == "SELECT":
            return self.parse_select()

        if ttype == "GO":
            self.ts.advance()
            return GoStmt(call=self.parse_expr(), line=line, column=col)

        if ttype == "DEFER":
            self.ts.advance()
            return DeferStmt(call=self.parse_expr(), line=line, column=col)

        if ttype in ("BREAK", "CONTINUE", "GOTO"):
            self.ts.advance()
            label = self.ts.match("ID")
            return BranchStmt(keyword=tok["value"], label=label["value"] if label else None,
                              line=line, column=col)

        if ttype == "FALLTHROUGH":
            self.ts.advance()
            return BranchStmt(keyword="fallthrough", line=line, column=col)

        if ttype == "LCURLYEBR":
            return self.parse_block()

        if ttype == "ID" and self.ts.peek_type(1) == "COLON":
            self.ts.advance()
            self.ts.advance()
            if self.ts.peek_type() in ("RCURLYEBR", None):
                inner: Stmt = EmptyStmt(line=line, column=col)
            else:
                inner = self.parse_stmt()
            return LabeledStmt(label=tok["value"], stmt=inner, line=line, column=col)

        return self.parse_simple_stmt()

    def parse_simple_stmt(self, range_ok: bool = False) -> Stmt:
        tok = self.ts.require("statement")
        line, col = _loc(tok)

        if range_ok and self.ts.match("RANGE"):
            return RangeStmt(iterable=self.parse_expr(), line=line, column=col)

        lhs = self.parse_expr_list()
        ttype = self.ts.peek_type()

        if ttype in ASSIGN_OPS:
            op = ASSIGN_OPS[self.ts.advance()["type"]]
            if range_ok and op in (":=", "=") and self.ts.match("RANGE"):
                if len(lhs) > 2:
                    raise ParseError("range clause permits at most two iteration variables", line, col)
                return RangeStmt(key=lhs[0], value=lhs[1] if len(lhs) > 1 else None,
                                 define=op == ":=", iterable=self.parse_expr(), line=line, column=col)
            rhs = self.parse_expr_list()
            return AssignStmt(lhs=lhs, op=op, rhs=rhs, line=line, column=col)

        if len(lhs) > 1:
            raise ParseError("expected 1 expression", line, col)

        if ttype == "ARROW":
            self.ts.advance()
            return SendStmt(chan=lhs[0], value=self.parse_expr(), line=line, column=col)

        if ttype in ("INC", "DEC"):
            op = self.ts.advance()["value"]
            return IncDecStmt(expr=lhs[0], op=op, line=line, column=col)

        return ExprStmt(expr=lhs[0], line=lhs[0].line, column=lhs[0].column)

    def parse_if(self) -> IfStmt:
        t = self.ts.expect("IF")
        outer = self.expr_lev
        self.expr_lev = -1
        if self.ts.peek_type() == "LCURLYEBR":
            raise self.ts.error("missing condition in if statement")
        init = None
        s = None
        if self.ts.peek_type() != "SEMI_COLON":
            s = self.parse_simple_stmt()
        if self.ts.match("SEMI_COLON"):
            init = s
            s = self.parse_simple_stmt()
        if not isinstance(s, ExprStmt):
            raise ParseError("expected condition in if statement", t["line"], t["column"])
        self.expr_lev = outer

        then_block = self.parse_block()
        else_branch = None
        if self.ts.match("ELSE"):
            if self.ts.peek_type() == "IF":
                else_branch = self.parse_if()
            elif self.ts.peek_type() == "LCURLYEBR":
                else_branch = self.parse_block()
            else:
                raise self.ts.error("expected if statement or block after else")
        return IfStmt(init=init, cond=s.expr, then_block=then_block, else_branch=else_branch,
                      line=t["line"], column=t["column"])

    def parse_for(self) -> Stmt:
        t = self.ts.expect("FOR")
        line, col = _loc(t)
        outer = self.expr_lev
        self.expr_lev = -1
        init = cond = post = None
        if self.ts.peek_type() != "LCURLYEBR":
            s1 = None
            if self.ts.peek_type() != "SEMI_COLON":
                s1 = self.parse_simple_stmt(range_ok=True)
            if isinstance(s1, RangeStmt):
                self.expr_lev = outer
                s1.body = self.parse_block()
                s1.line, s1.column = line, col
                return s1
            if self.ts.match("SEMI_COLON"):
                init = s1
                if self.ts.peek_type() != "SEMI_COLON":
                    cond = self._condition(self.parse_simple_stmt())
                self.ts.expect("SEMI_COLON")
                if self.ts.peek_type() != "LCURLYEBR":
                    post = self.parse_simple_stmt()
            else:
                cond = self._condition(s1)
        self.expr_lev = outer
        body = self.parse_block()
        return ForStmt(init=init, cond=cond, post=post, body=body, line=line, column=col)

    def _condition(self, s: Optional[Stmt]) -> Expr:
        if not isinstance(s, ExprStmt):
            raise self.ts.error("expected boolean expression")
        return s.expr

    def parse_switch(self) -> Stmt:
        t = self.ts.expect("SWITCH")
        line, col = _loc(t)
        outer = self.expr_lev
        self.expr_lev = -1
        s1 = s2 = None
        if self.ts.peek_type() != "LCURLYEBR":
            if self.ts.peek_type() != "SEMI_COLON":
                s2 = self.parse_simple_stmt()
            if self.ts.match("SEMI_COLON"):
                s1 = s2
                s2 = None
                if self.ts.peek_type() != "LCURLYEBR":
                    s2 = self.parse_simple_stmt()
        self.expr_lev = outer

        self.ts.expect("LCURLYEBR")
        clauses = []
        while self.ts.peek_type() in ("CASE", "DEFAULT"):
            clauses.append(self.parse_case_clause())
        self.ts.expect("RCURLYEBR")

        if _is_type_switch_guard(s2):
            return TypeSwitchStmt(init=s1, assign=s2, clauses=clauses, line=line, column=col)
        tag = None
        if s2 is not None:
            tag = self._condition(s2)
        return SwitchStmt(init=s1, tag=tag, clauses=clauses, line=line, column=col)

    def parse_case_clause(self) -> CaseClause:
        t = self.ts.advance()
        exprs = []
        if t["type"] == "CASE":
            exprs = self.parse_expr_list()
        self.ts.expect("COLON")
        body = self.parse_stmt_list()
        return CaseClause(exprs=exprs, body=body, line=t["line"], column=t["column"])

    def parse_select(self) -> SelectStmt:
        t = self.ts.expect("SELECT")
        sel = SelectStmt(line=t["line"], column=t["column"])
        self.ts.expect("LCURLYEBR")
        while self.ts.peek_type() in ("CASE", "DEFAULT"):
            c = self.ts.advance()
            comm = None
            if c["type"] == "CASE":
                comm = self.parse_simple_stmt()
            self.ts.expect("COLON")
            body = self.parse_stmt_list()
            sel.clauses.append(CommClause(comm=comm, body=body, line=c["line"], column=c["column"]))
        self.ts.expect("RCURLYEBR")
        return sel

    # ---------------- EXPRESSIONS (precedence) ----------------
    def parse_expr_list(self) -> List[Expr]:
        exprs = [self.parse_expr()]
        while self.ts.match("COMMA"):
            exprs.append(self.parse_expr())
        return exprs

    def parse_expr(self) -> Expr:
        return self.parse_binary(1)

    def parse_binary(self, min_prec: int) -> Expr:
        expr = self.parse_unary()
        while True:
            ttype = self.ts.peek_type()
            if ttype not in BINARY_OPS:
                break
            op, prec = BINARY_OPS[ttype]
            if prec < min_prec:
                break
            op_tok = self.ts.advance()
            rhs = self.parse_binary(prec + 1)
            expr = BinaryExpr(op=op, left=expr, right=rhs, line=op_tok["line"], column=op_tok["column"])
        return expr

    def parse_unary(self) -> Expr:
        tok = self.ts.peek()
        if not tok:
            raise self.ts.error("Unexpected EOF in expression")
        line, col = _loc(tok)
        ttype = tok["type"]

        if ttype == "ARROW" and self.ts.peek_type(1) == "CHAN":
            return self.parse_primary(self.parse_type())

        if ttype == "MULT":
            self.ts.advance()
            return StarExpr(value=self.parse_unary(), line=line, column=col)

        if ttype in UNARY_OPS:
            self.ts.advance()
            operand = self.parse_unary()
            return UnaryExpr(op=UNARY_OPS[ttype], operand=operand, line=line, column=col)

        return self.parse_primary(self.parse_operand())

    def parse_operand(self) -> Expr:
        tok = self.ts.require("operand")
        line, col = _loc(tok)
        ttype = tok["type"]

        if ttype in LITERAL_TOKENS:
            self.ts.advance()
            return BasicLit(kind=ttype, value=tok["value"], line=line, column=col)

        if ttype == "ID":
            self.ts.advance()
            return Ident(name=tok["value"], line=line, column=col)

        if ttype == "LPAREN":
            self.ts.advance()
            self.expr_lev += 1
            expr = self.parse_expr()
            self.expr_lev -= 1
            self.ts.expect("RPAREN")
            return ParenExpr(expr=expr, line=line, column=col)

        if ttype == "FUNC":
            self.ts.advance()
            ftype = self.parse_signature(line, col)
            if self.ts.peek_type() == "LCURLYEBR":
                return FuncLit(type=ftype, body=self.parse_block(), line=line, column=col)
            return FuncTypeExpr(type=ftype, line=line, column=col)

        if ttype in ("LSQUAREBR", "MAP", "CHAN", "STRUCT", "INTERFACE"):
            return self.parse_type()

        raise ParseError(f"Unexpected token {ttype} in expression", line, col)

    def parse_primary(self, expr: Expr) -> Expr:
        while True:
            ttype = self.ts.peek_type()
            if ttype == "DOT":
                self.ts.advance()
                if self.ts.match("LPAREN"):
                    typ = None
                    if self.ts.match("TYPE") is None:
                        typ = self.parse_type()
                    self.ts.expect("RPAREN")
                    expr = TypeAssertExpr(value=expr, type=typ, line=expr.line, column=expr.column)
                else:
                    sel = self.ts.expect("ID")
                    expr = SelectorExpr(value=expr,
                                        sel=Ident(name=sel["value"], line=sel["line"], column=sel["column"]),
                                        line=expr.line, column=expr.column)
            elif ttype == "LSQUAREBR":
                expr = self.parse_index_or_slice(expr)
            elif ttype == "LPAREN":
                expr = self.parse_call(expr)
            elif ttype == "LCURLYEBR" and _is_literal_type(expr) and (
                    self.expr_lev >= 0 or not _is_type_name(expr)):
                expr = self.parse_literal_value(expr)
            else:
                break
        return expr

    def parse_index_or_slice(self, base: Expr) -> Expr:
        self.ts.expect("LSQUAREBR")
        self.expr_lev += 1
        parts: List[Optional[Expr]] = [None]
        colons = 0
        if self.ts.peek_type() != "COLON":
            parts[0] = self.parse_expr()
        if self.ts.peek_type() == "COMMA":
            indices = [parts[0]]
            while self.ts.match("COMMA"):
                if self.ts.peek_type() == "RSQUAREBR":
                    break
                indices.append(self.parse_expr())
            self.expr_lev -= 1
            self.ts.expect("RSQUAREBR")
            return IndexExpr(value=base, indices=indices, line=base.line, column=base.column)
        while self.ts.match("COLON"):
            colons += 1
            parts.append(None)
            if self.ts.peek_type() not in ("COLON", "RSQUAREBR"):
                parts[-1] = self.parse_expr()
        self.expr_lev -= 1
        self.ts.expect("RSQUAREBR")
        if colons == 0:
            return IndexExpr(value=base, indices=[parts[0]], line=base.line, column=base.column)
        if colons > 2:
            raise self.ts.error("expected at most three slice indices")
        return SliceExpr(value=base, low=parts[0], high=parts[1],
                         max=parts[2] if colons == 2 else None,
                         line=base.line, column=base.column)

    def parse_call(self, func: Expr) -> CallExpr:
        self.ts.expect("LPAREN")
        self.expr_lev += 1
        call = CallExpr(func=func, line=func.line, column=func.column)
        while self.ts.peek_type() != "RPAREN":
            call.args.append(self.parse_expr())
            if self.ts.match("ELLIPSIS"):
                call.ellipsis = True
            if self.ts.match("COMMA") is None:
                break
        self.expr_lev -= 1
        self.ts.expect("RPAREN")
        return call

    def parse_literal_value(self, typ: Optional[Expr]) -> CompositeLit:
        t = self.ts.expect("LCURLYEBR")
        line, col = (typ.line, typ.column) if typ is not None else _loc(t)
        lit = CompositeLit(type=typ, line=line, column=col)
        self.expr_lev += 1
        while self.ts.peek_type() != "RCURLYEBR":
            elem = self._element()
            if self.ts.match("COLON"):
                elem = KeyValueExpr(key=elem, value=self._element(), line=elem.line, column=elem.column)
            lit.elts.append(elem)
            if self.ts.match("COMMA") is None:
                break
        self.expr_lev -= 1
        self.ts.expect("RCURLYEBR")
        return lit

    def _element(self) -> Expr:
        if self.ts.peek_type() == "LCURLYEBR":
            return self.parse_literal_value(None)
        return self.parse_expr()


def parse_source(source: str, filename: str = "<input>") -> File:
    """Tokenize and parse one Go source file into a go_ast.File."""
    lexer = GoLexer()
    tokens = lexer.tokenize(source)
    parser = Parser(tokens, filename=filename, comments=lexer.comments)
    f = parser.parse_file()
    logger.debug("parsed %s: package %s, %d declarations", filename, f.package, len(f.decls))
    return f

def parse_file(path: str) -> File:
    with open(path, "r", encoding="utf-8") as fh:
        source = fh.read()
    return parse_source(source, filename=path)
