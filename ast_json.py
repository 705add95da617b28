"""Convert AST nodes into JSON-serializable structures.

This module provides `ast_to_json(node)` which returns a nested structure
of dicts/lists/primitives describing the AST node. It is deliberately
plain: it encodes the node type, names, operators and source lines.
"""

from typing import Any, Dict, Optional
from ast_nodes import *


def _token(token: Token) -> Dict[str, Any]:
    return {"lexeme": token.lexeme, "line": token.line}


def ast_to_json(node: Optional[ASTNode]) -> Any:
    if node is None:
        return None

    t = node.type
    # expressions
    if t == NodeType.LITERAL and isinstance(node, LiteralNode):
        return {"node_type": "Literal", "value": node.value, "line": node.line}
    if t == NodeType.VARIABLE and isinstance(node, VariableNode):
        return {"node_type": "Variable", "name": _token(node.name)}
    if t == NodeType.GROUPING and isinstance(node, GroupingNode):
        return {"node_type": "Grouping", "expression": ast_to_json(node.expression)}
    if t == NodeType.UNARY_OP and isinstance(node, UnaryOpNode):
        return {
            "node_type": "UnaryOp",
            "operator": _token(node.operator),
            "right": ast_to_json(node.right),
        }
    if t == NodeType.BINARY_OP and isinstance(node, BinaryOpNode):
        return {
            "node_type": "BinaryOp",
            "operator": _token(node.operator),
            "left": ast_to_json(node.left),
            "right": ast_to_json(node.right),
        }
    if t == NodeType.ASSIGN_EXPR and isinstance(node, AssignExprNode):
        return {
            "node_type": "AssignExpr",
            "name": _token(node.name),
            "value": ast_to_json(node.value),
        }
    # declarations
    if t == NodeType.CONST_DECL and isinstance(node, ConstDeclNode):
        return {
            "node_type": "ConstDecl",
            "constants": [
                {"name": _token(name), "value": value} for name, value in node.constants
            ],
        }
    if t == NodeType.VAR_DECL and isinstance(node, VarDeclNode):
        return {"node_type": "VarDecl", "names": [_token(n) for n in node.names]}
    if t == NodeType.PROC_DECL and isinstance(node, ProcedureDeclNode):
        return {
            "node_type": "ProcedureDecl",
            "name": _token(node.name),
            "body": [ast_to_json(s) for s in node.body],
        }
    # statements
    if t == NodeType.PRINT and isinstance(node, PrintNode):
        return {"node_type": "Print", "expression": ast_to_json(node.expression)}
    if t == NodeType.PRINT_VAR and isinstance(node, PrintVarNode):
        return {"node_type": "PrintVar", "name": _token(node.name)}
    if t == NodeType.EXPR_STMT and isinstance(node, ExpressionStatementNode):
        return {"node_type": "ExprStmt", "expression": ast_to_json(node.expression)}
    if t == NodeType.ASSIGNMENT and isinstance(node, AssignmentNode):
        return {
            "node_type": "Assignment",
            "name": _token(node.name),
            "value": ast_to_json(node.value),
        }
    if t == NodeType.IF_STMT and isinstance(node, IfStatementNode):
        return {
            "node_type": "If",
            "condition": ast_to_json(node.condition),
            "then": ast_to_json(node.then_branch),
        }
    if t == NodeType.WHILE_STMT and isinstance(node, WhileStatementNode):
        return {
            "node_type": "While",
            "condition": ast_to_json(node.condition),
            "body": ast_to_json(node.body),
        }
    if t == NodeType.CALL and isinstance(node, CallNode):
        return {"node_type": "Call", "name": _token(node.name)}
    if t == NodeType.SCOPE and isinstance(node, ScopeNode):
        return {
            "node_type": "Scope",
            "statements": [ast_to_json(s) for s in node.statements],
        }
    if t == NodeType.PROGRAM and isinstance(node, ProgramNode):
        return {
            "node_type": "Program",
            "statements": [ast_to_json(s) for s in node.statements],
        }

    raise TypeError(f"Cannot serialize node: {node!r}")
