from main import lex
from tokens import TokenType
from diagnostics import Diagnostics
from lexer import BAD_NUMBER


def _types(src):
    return [t.type for t in lex(src)]


def test_lexer_recognizes_keywords_and_punctuation():
    src = "const var procedure begin end if then while do call odd ( ) , ; ."
    assert _types(src) == [
        TokenType.CONST,
        TokenType.VAR,
        TokenType.PROCEDURE,
        TokenType.BEGIN,
        TokenType.END,
        TokenType.IF,
        TokenType.THEN,
        TokenType.WHILE,
        TokenType.DO,
        TokenType.CALL,
        TokenType.ODD,
        TokenType.LEFT_PAREN,
        TokenType.RIGHT_PAREN,
        TokenType.COMMA,
        TokenType.SEMICOLON,
        TokenType.DOT,
        TokenType.EOF,
    ]


def test_two_character_operators_use_maximal_munch():
    assert _types(":= == != <= >= = ! < > ?") == [
        TokenType.COLON_EQU,
        TokenType.EQU_EQU,
        TokenType.BANG_EQU,
        TokenType.LESS_EQU,
        TokenType.MORE_EQU,
        TokenType.EQU,
        TokenType.BANG,
        TokenType.LESS,
        TokenType.MORE,
        TokenType.QMARK,
        TokenType.EOF,
    ]


def test_keywords_are_case_sensitive():
    tokens = lex("Var var")
    assert tokens[0].type == TokenType.IDENTIFIER
    assert tokens[0].literal == "Var"
    assert tokens[1].type == TokenType.VAR


def test_identifiers_and_numbers_carry_literals():
    tokens = lex("_count1 42")
    assert tokens[0].type == TokenType.IDENTIFIER
    assert tokens[0].literal == "_count1"
    assert tokens[1].type == TokenType.NUMBER
    assert tokens[1].literal == 42
    assert tokens[1].lexeme == "42"


def test_comments_and_line_counting():
    src = "var x; # a comment with := and ?\nx := 1\n\n. # trailing comment"
    diagnostics = Diagnostics()
    tokens = lex(src, diagnostics)
    assert not diagnostics.had_error
    assert [t.line for t in tokens if t.type == TokenType.IDENTIFIER] == [1, 2]
    assert tokens[-2].type == TokenType.DOT
    assert tokens[-2].line == 4
    assert tokens[-1].type == TokenType.EOF


def test_unexpected_character_is_recorded_and_scanning_continues():
    diagnostics = Diagnostics()
    tokens = lex("x $ y", diagnostics)
    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER,
        TokenType.IDENTIFIER,
        TokenType.EOF,
    ]
    assert diagnostics.had_error
    assert diagnostics.records[0].format() == "1: Unexpected character: $"


def test_lone_colon_is_an_error():
    diagnostics = Diagnostics()
    tokens = lex("x : 1", diagnostics)
    assert [t.type for t in tokens] == [
        TokenType.IDENTIFIER,
        TokenType.NUMBER,
        TokenType.EOF,
    ]
    assert "Expected `:=`" in diagnostics.records[0].message


def test_overflowing_number_emits_sentinel_literal():
    diagnostics = Diagnostics()
    tokens = lex("\n99999999999", diagnostics)
    assert tokens[0].type == TokenType.NUMBER
    assert tokens[0].literal == BAD_NUMBER
    assert diagnostics.records[0].line == 2
    assert diagnostics.records[0].phase == "lex"


def test_largest_32_bit_number_is_accepted():
    diagnostics = Diagnostics()
    tokens = lex("2147483647", diagnostics)
    assert tokens[0].literal == 2147483647
    assert not diagnostics.had_error


def test_empty_source_yields_only_eof():
    tokens = lex("")
    assert len(tokens) == 1
    assert tokens[0].type == TokenType.EOF
    assert tokens[0].line == 1


def test_very_long_number_is_recorded_without_aborting():
    diagnostics = Diagnostics()
    tokens = lex("! " + "9" * 5000 + ".", diagnostics)
    assert [t.type for t in tokens] == [
        TokenType.BANG,
        TokenType.NUMBER,
        TokenType.DOT,
        TokenType.EOF,
    ]
    assert tokens[1].literal == BAD_NUMBER
    assert len(diagnostics.records) == 1
    assert "number too large" in diagnostics.records[0].message


def test_leading_zeros_do_not_count_towards_overflow():
    diagnostics = Diagnostics()
    tokens = lex("000000000000042 0", diagnostics)
    assert [t.literal for t in tokens[:2]] == [42, 0]
    assert not diagnostics.had_error
