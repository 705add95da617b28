from tests.utils import parse_text
from ast_nodes import *
from diagnostics import Diagnostics
from tokens import TokenType


def test_parser_returns_statements_in_source_order():
    src = "var n; const ZERO=0; n := 3; while n > ZERO do begin ! n; n := n - 1 end."
    diagnostics = Diagnostics()
    ast = parse_text(src, diagnostics)
    assert not diagnostics.had_error
    assert ast.type == NodeType.PROGRAM
    assert [s.type for s in ast.statements] == [
        NodeType.VAR_DECL,
        NodeType.CONST_DECL,
        NodeType.ASSIGNMENT,
        NodeType.WHILE_STMT,
    ]
    loop = ast.statements[3]
    assert isinstance(loop.body, ScopeNode)
    assert [s.type for s in loop.body.statements] == [
        NodeType.PRINT,
        NodeType.ASSIGNMENT,
    ]


def test_parser_parses_block_declarations():
    src = """
    const A = 1, B = 2;
    var x, y;
    procedure p;
        var z;
        z := A;
    procedure q;
        call p;
    begin
        x := B;
        call q
    end.
    """
    diagnostics = Diagnostics()
    ast = parse_text(src, diagnostics)
    assert not diagnostics.had_error
    consts, vars_, p, q, body = ast.statements
    assert [(n.lexeme, v) for n, v in consts.constants] == [("A", 1), ("B", 2)]
    assert [n.lexeme for n in vars_.names] == ["x", "y"]
    assert isinstance(p, ProcedureDeclNode) and p.name.lexeme == "p"
    assert [s.type for s in p.body] == [NodeType.VAR_DECL, NodeType.ASSIGNMENT]
    assert isinstance(q.body[0], CallNode)
    assert isinstance(body, ScopeNode)
    assert len(body.statements) == 2


def test_expression_precedence_and_unary_prefix():
    ast = parse_text("x := -1 + 2 * (3 - 4) / 5.")
    assign = ast.statements[0]
    top = assign.value
    assert isinstance(top, BinaryOpNode) and top.operator.type == TokenType.PLUS
    assert isinstance(top.left, UnaryOpNode) and top.left.operator.type == TokenType.MINUS
    div = top.right
    assert div.operator.type == TokenType.SLASH
    assert div.left.operator.type == TokenType.STAR
    assert isinstance(div.left.right, GroupingNode)


def test_conditions_odd_and_relational():
    ast = parse_text("if odd x then ! 1; while x >= 2 do ? x.")
    cond_if = ast.statements[0].condition
    assert isinstance(cond_if, UnaryOpNode) and cond_if.operator.type == TokenType.ODD
    cond_while = ast.statements[1].condition
    assert cond_while.operator.type == TokenType.MORE_EQU
    assert isinstance(ast.statements[1].body, PrintVarNode)


def test_trailing_semicolon_before_end_is_allowed():
    diagnostics = Diagnostics()
    ast = parse_text("begin ! 1; ! 2; end.", diagnostics)
    assert not diagnostics.had_error
    assert len(ast.statements[0].statements) == 2


def test_malformed_block_is_discarded_and_parsing_resumes():
    src = "const A 5; var y; y := 2."
    diagnostics = Diagnostics()
    ast = parse_text(src, diagnostics)
    assert len(diagnostics.records) == 1
    assert diagnostics.records[0].phase == "parse"
    assert diagnostics.records[0].where == "5"
    assert [s.type for s in ast.statements] == [NodeType.VAR_DECL, NodeType.ASSIGNMENT]


def test_missing_paren_resynchronizes_at_next_block():
    src = "begin ! (1 + 2 end; var z; z := 1."
    diagnostics = Diagnostics()
    ast = parse_text(src, diagnostics)
    assert len(diagnostics.records) == 1
    assert "Missing ')'" in diagnostics.records[0].message
    assert [s.type for s in ast.statements] == [NodeType.VAR_DECL, NodeType.ASSIGNMENT]


def test_invalid_assignment_target_does_not_resynchronize():
    src = "var x; begin 1 := 2; x := 3 end."
    diagnostics = Diagnostics()
    ast = parse_text(src, diagnostics)
    assert len(diagnostics.records) == 1
    assert "Invalid assignment target" in diagnostics.records[0].message
    assert diagnostics.records[0].where == ":="
    scope = ast.statements[1]
    assert [s.type for s in scope.statements] == [
        NodeType.EXPR_STMT,
        NodeType.ASSIGNMENT,
    ]


def test_missing_final_dot_is_reported_at_the_end():
    diagnostics = Diagnostics()
    ast = parse_text("var x; x := 1", diagnostics)
    assert len(ast.statements) == 2
    assert len(diagnostics.records) == 1
    assert diagnostics.records[0].format().endswith(
        "at the end: Expected `.` at end of program"
    )


def test_tokens_after_final_dot_are_reported():
    diagnostics = Diagnostics()
    parse_text("! 1. ! 2", diagnostics)
    assert [r.message for r in diagnostics.records] == ["Unexpected tokens after `.`"]


def test_missing_relational_operator():
    diagnostics = Diagnostics()
    parse_text("if x then ! 1.", diagnostics)
    assert diagnostics.records[0].message == "Invalid comparison operator"


def test_statements_must_be_separated_at_top_level():
    diagnostics = Diagnostics()
    ast = parse_text("! 1 ! 2.", diagnostics)
    assert len(diagnostics.records) == 1
    assert [s.type for s in ast.statements] == [NodeType.PRINT]


def test_begin_block_needs_separator_after_statement():
    diagnostics = Diagnostics()
    ast = parse_text("var x; x := 1 begin ! x end.", diagnostics)
    assert [r.message for r in diagnostics.records] == [
        "Expected `;` or `.` after statement"
    ]
    assert diagnostics.records[0].where == "begin"
    assert ast.statements[-1].type == NodeType.SCOPE


def test_declaration_may_follow_statement_without_separator():
    diagnostics = Diagnostics()
    parse_text("var x; x := 1 var y; y := 2.", diagnostics)
    assert not diagnostics.had_error


def test_error_at_block_start_does_not_loop():
    diagnostics = Diagnostics()
    ast = parse_text(") ; var x; x := 1.", diagnostics)
    assert diagnostics.records[0].message == "Expected an expression"
    assert [s.type for s in ast.statements] == [NodeType.VAR_DECL, NodeType.ASSIGNMENT]


def test_parse_error_line_numbers():
    diagnostics = Diagnostics()
    parse_text("var x;\n\nx := (1.", diagnostics)
    assert diagnostics.records[0].line == 3
