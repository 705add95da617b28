"""Tree-walking interpreter for parsed programs.

The interpreter evaluates a `ProgramNode` directly, statement by statement,
against an `Environment` of scopes. Values are plain Python `int` (32-bit
range enforced) and `bool` (only produced by conditions).

Scoping rules:
- `begin ... end` runs in the scope it appears in; it opens nothing new.
- `call p` opens a child scope of the *caller's* scope, runs the body of
  `p` there and discards the child afterwards, also when the body fails.
  Free names in a procedure body are therefore resolved against the
  caller's chain at call time.

The first runtime error raised (a `PL0RuntimeError` subclass) propagates out
of `interpret_program` and ends the run.
"""

from __future__ import annotations
import logging
import sys
from dataclasses import dataclass
from typing import Optional, TextIO
from ast_nodes import *
from environment import Environment, ROOT
from diagnostics import (
    ArithmeticFault,
    CallDepthExceeded,
    TypeMismatch,
    UseOfUninitialized,
)

logger = logging.getLogger(__name__)

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
UNASSIGNED = "unassigned"
DEFAULT_MAX_CALL_DEPTH = 100
# Python frames kept free below the recursion limit when running a program.
STACK_HEADROOM = 200
# Worst case Python frames per level of statement nesting.
FRAMES_PER_LEVEL = 3


@dataclass
class ExecutionState:
    env: Environment
    output: TextIO
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH
    call_depth: int = 0
    max_nesting: int = 0
    nesting: int = 0


def _require_int(value, token: Token) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeMismatch(f"Expected a number, got {_describe(value)}", token)
    return value


def _require_bool(value, token: Token) -> bool:
    if not isinstance(value, bool):
        raise TypeMismatch(f"Expected a boolean, got {_describe(value)}", token)
    return value


def _describe(value) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "number"
    return type(value).__name__


def _checked(value: int, token: Token) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise ArithmeticFault("Integer overflow", token)
    return value


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _eval_expr(node: ASTNode, state: ExecutionState, scope: int):
    match node:
        case LiteralNode(token=token):
            return token.literal
        case GroupingNode(expression=expr):
            return _eval_expr(expr, state, scope)
        case VariableNode(name=name):
            value = state.env.lookup_value(scope, name)
            if value is None:
                raise UseOfUninitialized(
                    f"Use of unassigned variable: {name.lexeme}", name
                )
            return value
        case AssignExprNode(name=name, value=value_node):
            value = _require_int(_eval_expr(value_node, state, scope), name)
            state.env.assign_variable(scope, name, value)
            return value
        case UnaryOpNode(operator=op, right=right):
            value = _require_int(_eval_expr(right, state, scope), op)
            match op.type:
                case TokenType.MINUS:
                    return _checked(-value, op)
                case TokenType.PLUS:
                    return value
                case TokenType.ODD:
                    # Remainder truncates toward zero, so negative values are never odd.
                    return value > 0 and value % 2 == 1
                case _:
                    raise TypeMismatch(f"Unsupported unary operator: {op.lexeme}", op)
        case BinaryOpNode(left=l, operator=op, right=r):
            lv = _require_int(_eval_expr(l, state, scope), op)
            rv = _require_int(_eval_expr(r, state, scope), op)
            match op.type:
                case TokenType.PLUS:
                    return _checked(lv + rv, op)
                case TokenType.MINUS:
                    return _checked(lv - rv, op)
                case TokenType.STAR:
                    return _checked(lv * rv, op)
                case TokenType.SLASH:
                    if rv == 0:
                        raise ArithmeticFault("Division by zero", op)
                    return _checked(_truncating_div(lv, rv), op)
                case TokenType.EQU | TokenType.EQU_EQU:
                    return lv == rv
                case TokenType.BANG_EQU:
                    return lv != rv
                case TokenType.LESS:
                    return lv < rv
                case TokenType.LESS_EQU:
                    return lv <= rv
                case TokenType.MORE:
                    return lv > rv
                case TokenType.MORE_EQU:
                    return lv >= rv
                case _:
                    raise TypeMismatch(f"Unsupported binary operator: {op.lexeme}", op)
        case _:
            raise TypeError(f"Unhandled expression node type: {node}")


def _anchor_token(node: ASTNode) -> Token:
    if isinstance(node, (UnaryOpNode, BinaryOpNode)):
        return node.operator
    if isinstance(node, LiteralNode):
        return node.token
    if isinstance(node, (VariableNode, AssignmentNode, PrintVarNode, CallNode)):
        return node.name
    if isinstance(node, GroupingNode):
        return _anchor_token(node.expression)
    if isinstance(node, (IfStatementNode, WhileStatementNode)):
        return _anchor_token(node.condition)
    if isinstance(node, ScopeNode):
        return Token(TokenType.BEGIN, "begin", None, node.line)
    return Token(TokenType.EOF, "", None, node.line)


def _exec_stmt(stmt: ASTNode, state: ExecutionState, scope: int) -> None:
    if state.nesting >= state.max_nesting:
        raise CallDepthExceeded(
            "Statements nested too deeply for the host stack", _anchor_token(stmt)
        )
    state.nesting += 1
    try:
        _dispatch_stmt(stmt, state, scope)
    finally:
        state.nesting -= 1


def _dispatch_stmt(stmt: ASTNode, state: ExecutionState, scope: int) -> None:
    env = state.env
    match stmt:
        case VarDeclNode(names=names):
            for name in names:
                env.declare_variable(scope, name)
        case ConstDeclNode(constants=constants):
            for name, value in constants:
                env.declare_constant(scope, name, value)
        case ProcedureDeclNode(name=name, body=body):
            env.define_procedure(scope, name, body)
        case PrintNode(expression=expr):
            value = _require_int(
                _eval_expr(expr, state, scope), _anchor_token(expr)
            )
            print(value, file=state.output)
        case PrintVarNode(name=name):
            value = env.lookup_value(scope, name)
            print(UNASSIGNED if value is None else value, file=state.output)
        case ExpressionStatementNode(expression=expr):
            _eval_expr(expr, state, scope)
        case ScopeNode(statements=stmts):
            _exec_block(stmts, state, scope)
        case AssignmentNode(name=name, value=value_node):
            value = _require_int(_eval_expr(value_node, state, scope), name)
            env.assign_variable(scope, name, value)
        case IfStatementNode(condition=cond, then_branch=then_branch):
            token = _anchor_token(cond)
            if _require_bool(_eval_expr(cond, state, scope), token):
                _exec_stmt(then_branch, state, scope)
        case WhileStatementNode(condition=cond, body=body):
            token = _anchor_token(cond)
            while _require_bool(_eval_expr(cond, state, scope), token):
                _exec_stmt(body, state, scope)
        case CallNode(name=name):
            _call_procedure(name, state, scope)
        case _:
            raise TypeError(f"Unhandled statement node: {stmt}")


def _exec_block(stmts, state: ExecutionState, scope: int) -> None:
    for s in stmts:
        _exec_stmt(s, state, scope)


def _call_procedure(name: Token, state: ExecutionState, scope: int) -> None:
    body = state.env.get_procedure(scope, name)
    if state.call_depth >= state.max_call_depth:
        raise CallDepthExceeded(
            f"Call depth limit of {state.max_call_depth} exceeded calling {name.lexeme}",
            name,
        )

    child = state.env.push_scope(scope)
    state.call_depth += 1
    try:
        _exec_stmt(ScopeNode(statements=body, line=name.line), state, child)
    finally:
        state.call_depth -= 1
        state.env.pop_scope(child)


def _available_frames() -> int:
    depth = 0
    frame = sys._getframe()
    while frame is not None:
        depth += 1
        frame = frame.f_back
    return sys.getrecursionlimit() - depth


def interpret_program(
    prog: ProgramNode,
    output: Optional[TextIO] = None,
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
    env: Optional[Environment] = None,
) -> Environment:
    """Run a parsed program and return the environment it ran in.

    Prints go to `output` (stdout by default). Runtime errors propagate as
    `PL0RuntimeError` subclasses. Statement nesting is capped by what is left
    of the Python stack, so deep recursion ends in `CallDepthExceeded` even
    when it stays under `max_call_depth`.
    """
    state = ExecutionState(
        env=env if env is not None else Environment(),
        output=output if output is not None else sys.stdout,
        max_call_depth=max_call_depth,
        max_nesting=max(0, _available_frames() - STACK_HEADROOM) // FRAMES_PER_LEVEL,
    )
    logger.debug(
        "interpreting %d top-level statements (nesting limit %d)",
        len(prog.statements),
        state.max_nesting,
    )
    try:
        _exec_block(prog.statements, state, ROOT)
    except RecursionError:
        # Only deeply parenthesized expressions get here; statements are
        # stopped by the nesting limit above.
        raise CallDepthExceeded(
            "Expression nested too deeply for the host stack",
            Token(TokenType.EOF, "", None, prog.line),
        ) from None
    return state.env
