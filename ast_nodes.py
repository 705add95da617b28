"""AST node definitions for the PL/0-style teaching language.

This module defines the AST node dataclasses produced by the parser and
walked by the interpreter and the debugging printers. Each node is a
dataclass carrying the relevant tokens and child nodes. The `NodeType` enum
identifies node kinds and is used by the pretty-printer, JSON dump and
Graphviz renderer.

Conventions:
- All AST node dataclasses inherit from `ASTNode`, which records the node
    kind (`NodeType`) and the source `line` the node starts on.
- Names and operators are kept as the source `Token` so that runtime
    errors can point back at the offending source line.
- Every node exclusively owns its children; the tree is never shared.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Tuple
from tokens import Token, TokenType


class NodeType(Enum):
    # Expressions
    LITERAL = auto()
    GROUPING = auto()
    UNARY_OP = auto()
    BINARY_OP = auto()
    VARIABLE = auto()
    ASSIGN_EXPR = auto()
    # Statements
    PROC_DECL = auto()
    CONST_DECL = auto()
    VAR_DECL = auto()
    PRINT = auto()
    PRINT_VAR = auto()
    EXPR_STMT = auto()
    SCOPE = auto()
    ASSIGNMENT = auto()
    IF_STMT = auto()
    WHILE_STMT = auto()
    CALL = auto()
    PROGRAM = auto()

    def __str__(self) -> str:
        return self.name


def _ident() -> Token:
    return Token(TokenType.IDENTIFIER, "")


def _zero() -> "LiteralNode":
    return LiteralNode(token=Token(TokenType.NUMBER, "0", 0))


# Base AST Node
@dataclass
class ASTNode:
    type: NodeType
    line: int = 0


# Expression Nodes
@dataclass
class LiteralNode(ASTNode):
    type: NodeType = NodeType.LITERAL
    token: Token = field(default_factory=lambda: Token(TokenType.NUMBER, "0", 0))

    @property
    def value(self) -> int:
        return self.token.literal


@dataclass
class GroupingNode(ASTNode):
    type: NodeType = NodeType.GROUPING
    expression: ASTNode = field(default_factory=_zero)


@dataclass
class UnaryOpNode(ASTNode):
    type: NodeType = NodeType.UNARY_OP
    operator: Token = field(default_factory=lambda: Token(TokenType.MINUS, "-"))
    right: ASTNode = field(default_factory=_zero)


@dataclass
class BinaryOpNode(ASTNode):
    type: NodeType = NodeType.BINARY_OP
    left: ASTNode = field(default_factory=_zero)
    operator: Token = field(default_factory=lambda: Token(TokenType.PLUS, "+"))
    right: ASTNode = field(default_factory=_zero)


@dataclass
class VariableNode(ASTNode):
    type: NodeType = NodeType.VARIABLE
    name: Token = field(default_factory=_ident)


@dataclass
class AssignExprNode(ASTNode):
    type: NodeType = NodeType.ASSIGN_EXPR
    name: Token = field(default_factory=_ident)
    value: ASTNode = field(default_factory=_zero)


# Declaration Nodes
@dataclass
class ProcedureDeclNode(ASTNode):
    type: NodeType = NodeType.PROC_DECL
    name: Token = field(default_factory=_ident)
    body: List[ASTNode] = field(default_factory=list)


@dataclass
class ConstDeclNode(ASTNode):
    type: NodeType = NodeType.CONST_DECL
    constants: List[Tuple[Token, int]] = field(default_factory=list)


@dataclass
class VarDeclNode(ASTNode):
    type: NodeType = NodeType.VAR_DECL
    names: List[Token] = field(default_factory=list)


# Statement Nodes
@dataclass
class PrintNode(ASTNode):
    type: NodeType = NodeType.PRINT
    expression: ASTNode = field(default_factory=_zero)


@dataclass
class PrintVarNode(ASTNode):
    type: NodeType = NodeType.PRINT_VAR
    name: Token = field(default_factory=_ident)


@dataclass
class ExpressionStatementNode(ASTNode):
    type: NodeType = NodeType.EXPR_STMT
    expression: ASTNode = field(default_factory=_zero)


@dataclass
class ScopeNode(ASTNode):
    """`begin ... end`; shares the enclosing binding scope at run time."""

    type: NodeType = NodeType.SCOPE
    statements: List[ASTNode] = field(default_factory=list)


@dataclass
class AssignmentNode(ASTNode):
    type: NodeType = NodeType.ASSIGNMENT
    name: Token = field(default_factory=_ident)
    value: ASTNode = field(default_factory=_zero)


@dataclass
class IfStatementNode(ASTNode):
    type: NodeType = NodeType.IF_STMT
    condition: ASTNode = field(default_factory=_zero)
    then_branch: ASTNode = field(default_factory=ScopeNode)


@dataclass
class WhileStatementNode(ASTNode):
    type: NodeType = NodeType.WHILE_STMT
    condition: ASTNode = field(default_factory=_zero)
    body: ASTNode = field(default_factory=ScopeNode)


@dataclass
class CallNode(ASTNode):
    type: NodeType = NodeType.CALL
    name: Token = field(default_factory=_ident)


# Program Node
@dataclass
class ProgramNode(ASTNode):
    type: NodeType = NodeType.PROGRAM
    statements: List[ASTNode] = field(default_factory=list)
