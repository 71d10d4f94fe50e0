# tests/test_go_parser.py
"""
Tests for the Go parser: source text -> go_ast nodes.
"""

import pytest

from go_parser import ParseError, parse_file, parse_source
from conftest import TESTDATA
from go_ast import (
    ArrayType, AssignStmt, BlockStmt, CallExpr, CaseClause, CompositeLit,
    DeclStmt, EmptyStmt, ExprStmt, ForStmt, FuncDecl, FuncLit, GenDecl,
    Ident, IfStmt, IncDecStmt, IndexExpr, LabeledStmt, MapType, RangeStmt,
    ReturnStmt, SelectorExpr, SelectStmt, SliceExpr, StarExpr, SwitchStmt,
    TypeSpec, TypeSwitchStmt, UnaryExpr, BinaryExpr,
)


def parse_body(body):
    f = parse_source(f"package p\n\nfunc f() {{\n{body}\n}}\n")
    return f.decls[-1].body.statements


class TestFile:

    def test_parse_file_keeps_comments(self):
        f = parse_file(str(TESTDATA / "basic.go"))
        assert f.filename.endswith("basic.go")
        assert f.package == "handlers"
        assert any("want" in c.text for c in f.comments)

    def test_package_and_imports(self):
        f = parse_source('package api\n\nimport (\n\t"fmt"\n\tnethttp "net/http"\n)\n')
        assert f.package == "api"
        assert [(i.path, i.alias) for i in f.imports] == [("fmt", None), ("net/http", "nethttp")]

    def test_single_import(self):
        f = parse_source('package p\nimport "os"\n')
        assert f.imports[0].path == "os"

    def test_handler_signature(self):
        f = parse_source("package p\nfunc h(w http.ResponseWriter, r *http.Request) {}\n")
        fn = f.decls[0]
        assert isinstance(fn, FuncDecl)
        assert [p.names[0].name for p in fn.type.params] == ["w", "r"]
        writer, request = fn.type.params[0].type, fn.type.params[1].type
        assert isinstance(writer, SelectorExpr)
        assert (writer.value.name, writer.sel.name) == ("http", "ResponseWriter")
        assert isinstance(request, StarExpr)
        assert request.value.sel.name == "Request"

    def test_grouped_and_unnamed_params(self):
        f = parse_source("package p\nfunc a(x, y int, s string) {}\nfunc b(int, *T) (int, error)\n")
        grouped, unnamed = f.decls
        assert [[n.name for n in p.names] for p in grouped.type.params] == [["x", "y"], ["s"]]
        assert all(not p.names for p in unnamed.type.params)
        assert len(unnamed.type.results) == 2
        assert unnamed.body is None

    def test_variadic_param(self):
        f = parse_source("package p\nfunc f(format string, args ...any) {}\n")
        assert f.decls[0].type.params[1].variadic

    def test_method_with_generic_receiver(self):
        f = parse_source("package p\nfunc (s *Stack[T]) Push(v T) {}\n")
        fn = f.decls[0]
        assert fn.name == "Push"
        assert isinstance(fn.recv.type, StarExpr)
        assert isinstance(fn.recv.type.value, IndexExpr)

    def test_type_declarations(self):
        src = ("package p\n"
               "type Set[T comparable] map[T]struct{}\n"
               "type Buf [64]byte\n"
               "type Num interface{ ~int | ~float64 }\n"
               "type H = http.Handler\n"
               "type S struct {\n\tName string `json:\"name\"`\n\t*Embedded\n\tio.Reader\n}\n")
        specs = [d.specs[0] for d in parse_source(src).decls]
        assert all(isinstance(s, TypeSpec) for s in specs)
        assert specs[0].type_params and isinstance(specs[0].type, MapType)
        assert isinstance(specs[1].type, ArrayType) and not specs[1].type_params
        assert specs[3].alias
        assert len(specs[4].type.fields) == 3

    def test_top_level_var_block(self):
        f = parse_source("package p\nvar (\n\ta = 1\n\tb, c int\n)\nconst Name = \"x\"\n")
        assert isinstance(f.decls[0], GenDecl)
        assert len(f.decls[0].specs) == 2


class TestStatements:

    def test_expression_and_return(self):
        stmts = parse_body("\tw.Write(b)\n\treturn")
        assert isinstance(stmts[0], ExprStmt)
        assert isinstance(stmts[0].expr, CallExpr)
        assert isinstance(stmts[1], ReturnStmt)

    def test_expression_statement_position(self):
        stmts = parse_body("\tw.Write(b)")
        assert (stmts[0].line, stmts[0].column) == (4, 2)

    def test_explicit_semicolons_are_empty_statements(self):
        stmts = parse_body("\tx(); ;\n\t;")
        assert [type(s) for s in stmts] == [ExprStmt, EmptyStmt, EmptyStmt]

    def test_declaration_statement(self):
        stmts = parse_body("\tvar n int\n\tconst k = 1\n\ttype t struct{}")
        assert all(isinstance(s, DeclStmt) for s in stmts)

    def test_assignments(self):
        stmts = parse_body("\ta, b := f()\n\tx += 2\n\ti++")
        assert isinstance(stmts[0], AssignStmt) and stmts[0].op == ":="
        assert stmts[1].op == "+="
        assert isinstance(stmts[2], IncDecStmt)

    def test_if_else_chain(self):
        stmts = parse_body("\tif v, ok := m[k]; ok {\n\t} else if x {\n\t} else {\n\t}")
        top = stmts[0]
        assert isinstance(top, IfStmt)
        assert isinstance(top.init, AssignStmt)
        assert isinstance(top.else_branch, IfStmt)
        assert isinstance(top.else_branch.else_branch, BlockStmt)

    def test_header_braces_are_not_composite_literals(self):
        stmts = parse_body("\tif r.Method == http.MethodPost {\n\t\treturn\n\t}")
        assert isinstance(stmts[0].cond, BinaryExpr)
        assert isinstance(stmts[0].then_block.statements[0], ReturnStmt)

    def test_composite_literals(self):
        stmts = parse_body('\tm := map[string]string{"a": "b"}\n\tp := &T{Name: "x"}\n\tl := []T{{1}, {2}}')
        assert isinstance(stmts[0].rhs[0], CompositeLit)
        assert isinstance(stmts[1].rhs[0], UnaryExpr)
        assert isinstance(stmts[1].rhs[0].operand, CompositeLit)
        assert len(stmts[2].rhs[0].elts) == 2

    def test_for_forms(self):
        stmts = parse_body("\tfor {\n\t}\n\tfor i := 0; i < n; i++ {\n\t}\n"
                           "\tfor k, v := range m {\n\t}\n\tfor range ch {\n\t}\n\tfor x < 3 {\n\t}")
        assert isinstance(stmts[0], ForStmt) and stmts[0].cond is None
        assert isinstance(stmts[1].post, IncDecStmt)
        assert isinstance(stmts[2], RangeStmt) and stmts[2].define
        assert isinstance(stmts[3], RangeStmt) and stmts[3].key is None
        assert isinstance(stmts[4].cond, BinaryExpr)

    def test_switches(self):
        stmts = parse_body("\tswitch x := f(); x {\n\tcase 1, 2:\n\t\tg()\n\tdefault:\n\t}\n"
                           "\tswitch v := i.(type) {\n\tcase *T, []int:\n\t}")
        sw, ts = stmts
        assert isinstance(sw, SwitchStmt)
        assert isinstance(sw.clauses[0], CaseClause)
        assert len(sw.clauses[0].exprs) == 2
        assert sw.clauses[1].exprs == []
        assert isinstance(ts, TypeSwitchStmt)
        assert isinstance(ts.clauses[0].exprs[1], ArrayType)

    def test_select(self):
        stmts = parse_body("\tselect {\n\tcase v := <-ch:\n\t\tuse(v)\n\tcase out <- 1:\n\tdefault:\n\t}")
        sel = stmts[0]
        assert isinstance(sel, SelectStmt)
        assert len(sel.clauses) == 3
        assert sel.clauses[2].comm is None

    def test_labeled_statement(self):
        stmts = parse_body("outer:\n\tfor {\n\t\tbreak outer\n\t}")
        assert isinstance(stmts[0], LabeledStmt)
        assert isinstance(stmts[0].stmt, ForStmt)

    def test_function_literal(self):
        stmts = parse_body("\tdefer func() {\n\t\trecover()\n\t}()")
        call = stmts[0].call
        assert isinstance(call.func, FuncLit)

    def test_index_slice_and_conversion(self):
        stmts = parse_body("\t_ = a[i+1]\n\t_ = s[1:]\n\t_ = s[:n:cap(s)]\n\t_ = []byte(\"x\")")
        assert isinstance(stmts[0].rhs[0], IndexExpr)
        assert isinstance(stmts[1].rhs[0], SliceExpr)
        assert stmts[2].rhs[0].max is not None
        assert isinstance(stmts[3].rhs[0].func, ArrayType)

    def test_precedence(self):
        stmts = parse_body("\t_ = a || b && c == d + e * f")
        expr = stmts[0].rhs[0]
        assert expr.op == "||"
        assert expr.right.op == "&&"
        assert expr.right.right.right.right.op == "*"


class TestErrors:

    def test_missing_package(self):
        with pytest.raises(ParseError):
            parse_source("func f() {}\n")

    def test_unclosed_parameter_list(self):
        with pytest.raises(ParseError) as exc:
            parse_source("package p\nfunc f( {\n}\n")
        assert exc.value.line == 2

    def test_missing_separator(self):
        with pytest.raises(ParseError):
            parse_source("package p\nfunc f() { a() b() }\n")

    @pytest.mark.parametrize("src", [
        "package p\nfunc f() {\n\tif",
        "package p\nfunc f() {\n\tswitch",
        "package p\nfunc f() {\n\tfor",
        "package p\nfunc f() {\n\tx :=",
        "package p\ntype T struct {",
        "package p\ntype T interface {",
    ])
    def test_truncated_source(self, src):
        with pytest.raises(ParseError, match="Unexpected EOF"):
            parse_source(src)
