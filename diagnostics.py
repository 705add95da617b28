"""Error types and the diagnostics collector.

Lexical and syntactic problems are never fatal on their own: the lexer and
parser record them in a `Diagnostics` instance and keep going so that a
single run reports as many problems as possible. Whether interpretation is
attempted at all is decided afterwards by `Diagnostics.had_error`.

Runtime problems are raised as subclasses of `PL0RuntimeError` and stop the
run at the first one; the pipeline driver records it here for reporting.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional
from tokens import Token, TokenType

logger = logging.getLogger(__name__)


class ParseError(SyntaxError):
    """Structural parse error; unwinds to the block being parsed."""


class PL0RuntimeError(RuntimeError):
    kind = "RuntimeError"

    def __init__(self, message: str, token: Optional[Token] = None):
        super().__init__(message)
        self.message = message
        self.token = token


class DoubleDeclaration(PL0RuntimeError):
    kind = "DoubleDeclaration"


class UnboundName(PL0RuntimeError):
    kind = "UnboundName"


class ConstAssignment(PL0RuntimeError):
    kind = "ConstAssignment"


class UseOfUninitialized(PL0RuntimeError):
    kind = "UseOfUninitialized"


class UndefinedProcedure(PL0RuntimeError):
    kind = "UndefinedProcedure"


class TypeMismatch(PL0RuntimeError):
    kind = "TypeMismatch"


class ArithmeticFault(PL0RuntimeError):
    kind = "ArithmeticFault"


class CallDepthExceeded(PL0RuntimeError):
    kind = "CallDepthExceeded"


@dataclass
class Diagnostic:
    phase: str  # "lex", "parse" or "runtime"
    line: int
    message: str
    # Offending lexeme; None means the error was at end of input.
    where: Optional[str] = None

    def format(self) -> str:
        if self.phase == "lex":
            return f"{self.line}: {self.message}"
        if self.where is None:
            return f"Error @ line {self.line}, at the end: {self.message}"
        return f"Error @ line {self.line}, at `{self.where}`: {self.message}"


@dataclass
class Diagnostics:
    records: List[Diagnostic] = field(default_factory=list)

    @property
    def had_error(self) -> bool:
        return bool(self.records)

    def _add(self, record: Diagnostic) -> Diagnostic:
        self.records.append(record)
        logger.debug("recorded %s diagnostic: %s", record.phase, record.format())
        return record

    def lex_error(self, line: int, message: str) -> Diagnostic:
        return self._add(Diagnostic("lex", line, message))

    def parse_error(self, token: Token, message: str) -> Diagnostic:
        where = None if token.type == TokenType.EOF else token.lexeme
        return self._add(Diagnostic("parse", token.line, message, where))

    def runtime_error(self, error: PL0RuntimeError) -> Diagnostic:
        token = error.token
        if token is None:
            return self._add(Diagnostic("runtime", 0, error.message))
        where = None if token.type == TokenType.EOF else token.lexeme
        return self._add(Diagnostic("runtime", token.line, error.message, where))

    def by_phase(self, phase: str) -> List[Diagnostic]:
        return [r for r in self.records if r.phase == phase]

    def format(self) -> str:
        return "\n".join(r.format() for r in self.records)
