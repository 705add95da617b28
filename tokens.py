"""Token definitions for the lexer.

This module defines the `TokenType` enum for all token kinds recognized by
the lexer and a small frozen `Token` dataclass holding the kind, the source
lexeme, an optional literal payload and the source line. Tokens are the
atomic units produced by the lexer and consumed by the parser.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass
from typing import Optional


class TokenType(Enum):
    # Grouping and punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    SEMICOLON = auto()
    COMMA = auto()
    DOT = auto()

    # Arithmetic operators
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()

    # Statement sigils
    BANG = auto()  # ! expression
    QMARK = auto()  # ? variable

    # Comparison and assignment
    BANG_EQU = auto()
    COLON_EQU = auto()
    EQU = auto()
    EQU_EQU = auto()
    MORE = auto()
    MORE_EQU = auto()
    LESS = auto()
    LESS_EQU = auto()

    # Literals
    IDENTIFIER = auto()
    NUMBER = auto()

    # Keywords
    CONST = auto()
    VAR = auto()
    BEGIN = auto()
    END = auto()
    WHILE = auto()
    DO = auto()
    IF = auto()
    THEN = auto()
    PROCEDURE = auto()
    CALL = auto()
    ODD = auto()

    # Special
    EOF = auto()

    def __str__(self) -> str:
        return self.name


KEYWORDS = {
    "const": TokenType.CONST,
    "var": TokenType.VAR,
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "while": TokenType.WHILE,
    "do": TokenType.DO,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "procedure": TokenType.PROCEDURE,
    "call": TokenType.CALL,
    "odd": TokenType.ODD,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str = ""
    literal: Optional[int | str] = None
    line: int = 0

    def __repr__(self) -> str:
        if self.literal is None:
            return f"Token({self.type}, {self.lexeme!r}, line={self.line})"
        return f"Token({self.type}, {self.literal!r}, line={self.line})"

    def __str__(self) -> str:
        return self.lexeme if self.lexeme else str(self.type)
