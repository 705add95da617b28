"""
Lexer for the PL/0-style teaching language.

Overview:
- This module implements a small hand-written lexical analyzer (scanner) that
    transforms an input source string into a list of `Token` objects defined
    in `tokens.py`, always terminated by an `EOF` token.
- It recognizes keywords (`const`, `var`, `procedure`, `begin`, `end`, `if`,
    `then`, `while`, `do`, `call`, `odd`), identifiers, integer literals,
    single- and two-character operators (`:=`, `==`, `!=`, `<=`, `>=`),
    punctuation, and skips whitespace and line comments starting with `#`.

Examples:
    Input:  "var x; x := 3 * 4."
    Tokens: [VAR, IDENTIFIER('x'), SEMICOLON, IDENTIFIER('x'), COLON_EQU, ...]

Error handling:
- Lexical errors never stop the scan. They are recorded in a `Diagnostics`
    collector and the lexer moves on to the next character, so the parser
    still gets the best token stream that can be produced.
- An integer literal that does not fit in 32 bits is reported but still
    emitted as a NUMBER token carrying the sentinel value -1.
"""

from __future__ import annotations
import logging
from typing import Optional, List
from tokens import Token, TokenType, KEYWORDS
from diagnostics import Diagnostics

logger = logging.getLogger(__name__)

INT_MAX = 2**31 - 1
BAD_NUMBER = -1
MAX_DIGITS = len(str(INT_MAX))

SINGLE_CHAR_TOKENS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ".": TokenType.DOT,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "?": TokenType.QMARK,
}


class Lexer:
    def __init__(self, text: str, diagnostics: Optional[Diagnostics] = None):
        self.text = text
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.pos = 0
        self.start = 0
        self.line = 1
        self.current_char = self.text[self.pos] if self.text else None

    def error(self, message: str) -> None:
        self.diagnostics.lex_error(self.line, message)

    def advance(self) -> None:
        """Advance to next character."""
        self.pos += 1
        if self.pos < len(self.text):
            self.current_char = self.text[self.pos]
        else:
            self.current_char = None

    def peek_char(self) -> Optional[str]:
        """Look at next character without consuming it."""
        next_pos = self.pos + 1
        if next_pos < len(self.text):
            return self.text[next_pos]
        return None

    def make_token(self, token_type: TokenType, literal=None) -> Token:
        return Token(token_type, self.text[self.start : self.pos], literal, self.line)

    def skip_comment(self) -> None:
        """Skip a `#` comment up to (not including) the newline."""
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def number(self) -> Token:
        """Scan a run of decimal digits."""
        while self.current_char is not None and is_ascii_digit(self.current_char):
            self.advance()

        digits = self.text[self.start : self.pos]
        # Long runs are rejected by length; int() refuses very long strings.
        significant = digits.lstrip("0") or "0"
        value = int(significant) if len(significant) <= MAX_DIGITS else INT_MAX + 1
        if value > INT_MAX:
            self.error(f"Failed to parse number literal `{digits}`: number too large")
            value = BAD_NUMBER
        return self.make_token(TokenType.NUMBER, value)

    def identifier(self) -> Token:
        """Scan an identifier and map it to a keyword if it is one."""
        while self.current_char is not None and (
            is_ascii_alnum(self.current_char) or self.current_char == "_"
        ):
            self.advance()

        name = self.text[self.start : self.pos]
        keyword = KEYWORDS.get(name)
        if keyword is not None:
            return self.make_token(keyword)
        return self.make_token(TokenType.IDENTIFIER, name)

    def two_char(self, second: str, both: TokenType, single: TokenType) -> Token:
        # Maximal munch: take `second` if it follows, otherwise the single char.
        if self.peek_char() == second:
            self.advance()
            self.advance()
            return self.make_token(both)
        self.advance()
        return self.make_token(single)

    def get_next_token(self) -> Optional[Token]:
        """Return the next token, or None once the input is exhausted."""
        while self.current_char is not None:
            self.start = self.pos
            char = self.current_char

            match char:
                case " " | "\r" | "\t":
                    self.advance()
                    continue
                case "\n":
                    self.line += 1
                    self.advance()
                    continue
                case "#":
                    self.skip_comment()
                    continue
                case "!":
                    return self.two_char("=", TokenType.BANG_EQU, TokenType.BANG)
                case "=":
                    return self.two_char("=", TokenType.EQU_EQU, TokenType.EQU)
                case "<":
                    return self.two_char("=", TokenType.LESS_EQU, TokenType.LESS)
                case ">":
                    return self.two_char("=", TokenType.MORE_EQU, TokenType.MORE)
                case ":":
                    if self.peek_char() == "=":
                        self.advance()
                        self.advance()
                        return self.make_token(TokenType.COLON_EQU)
                    self.error("Invalid token; Expected `:=`")
                    self.advance()
                    continue

            if char in SINGLE_CHAR_TOKENS:
                self.advance()
                return self.make_token(SINGLE_CHAR_TOKENS[char])

            if is_ascii_digit(char):
                return self.number()

            if is_ascii_alpha(char) or char == "_":
                return self.identifier()

            self.error(f"Unexpected character: {char}")
            self.advance()

        return None

    def tokenize(self) -> List[Token]:
        """Return all tokens from the input string, ending with EOF."""
        tokens = []
        while True:
            token = self.get_next_token()
            if token is None:
                break
            tokens.append(token)
        tokens.append(Token(TokenType.EOF, "", None, self.line))
        logger.debug("scanned %d tokens over %d lines", len(tokens), self.line)
        return tokens


def is_ascii_digit(char: str) -> bool:
    return "0" <= char <= "9"


def is_ascii_alpha(char: str) -> bool:
    return "a" <= char <= "z" or "A" <= char <= "Z"


def is_ascii_alnum(char: str) -> bool:
    return is_ascii_digit(char) or is_ascii_alpha(char)
