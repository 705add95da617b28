"""Pretty-printer for the AST.

Provides `PrettyPrinter.print_ast(node, indent, prefix)` which renders an
AST into a readable multi-line string, and `PrettyPrinter.print_surface(node)`
which renders a node back into compact source-like text. Both are meant for
debugging, tests and the Graphviz renderer rather than for reformatting
programs.

Examples:
    PrettyPrinter.print_ast(program_node)
    PrettyPrinter.print_surface(assignment_node)  # "n := n - 1"
"""

from __future__ import annotations
from ast_nodes import *


class PrettyPrinter:
    @staticmethod
    def print_ast(node: ASTNode, indent: int = 0, prefix: str = "") -> str:
        """Pretty print AST and return as string."""
        lines = []
        indent_str = " " * indent

        if not isinstance(node, ASTNode):
            lines.append(f"{indent_str}{prefix}{node}")
            return "\n".join(lines)

        match node:
            case LiteralNode(token=token):
                lines.append(f"{indent_str}{prefix}Literal({token.literal})")

            case VariableNode(name=name):
                lines.append(f"{indent_str}{prefix}Variable({name.lexeme})")

            case GroupingNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Grouping")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2))

            case UnaryOpNode(operator=op, right=right):
                lines.append(f"{indent_str}{prefix}UnaryOp({op.lexeme})")
                lines.append(PrettyPrinter.print_ast(right, indent + 2))

            case BinaryOpNode(left=left, operator=op, right=right):
                lines.append(f"{indent_str}{prefix}BinaryOp({op.lexeme})")
                lines.append(PrettyPrinter.print_ast(left, indent + 2, "left: "))
                lines.append(PrettyPrinter.print_ast(right, indent + 2, "right: "))

            case AssignExprNode(name=name, value=value) | AssignmentNode(
                name=name, value=value
            ):
                lines.append(f"{indent_str}{prefix}Assignment({name.lexeme})")
                lines.append(PrettyPrinter.print_ast(value, indent + 2, "value: "))

            case ConstDeclNode(constants=constants):
                consts = ", ".join(f"{n.lexeme}={v}" for n, v in constants)
                lines.append(f"{indent_str}{prefix}ConstDecl({consts})")

            case VarDeclNode(names=names):
                lines.append(
                    f"{indent_str}{prefix}VarDecl({', '.join(n.lexeme for n in names)})"
                )

            case ProcedureDeclNode(name=name, body=body):
                lines.append(f"{indent_str}{prefix}ProcedureDecl({name.lexeme})")
                for i, stmt in enumerate(body):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"body[{i}]: "))

            case PrintNode(expression=expr):
                lines.append(f"{indent_str}{prefix}Print")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2))

            case PrintVarNode(name=name):
                lines.append(f"{indent_str}{prefix}PrintVar({name.lexeme})")

            case CallNode(name=name):
                lines.append(f"{indent_str}{prefix}Call({name.lexeme})")

            case ExpressionStatementNode(expression=expr):
                lines.append(f"{indent_str}{prefix}ExpressionStatement")
                lines.append(PrettyPrinter.print_ast(expr, indent + 2))

            case WhileStatementNode(condition=cond, body=body):
                lines.append(f"{indent_str}{prefix}WhileStatement")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(body, indent + 4, "body: "))

            case IfStatementNode(condition=cond, then_branch=then_b):
                lines.append(f"{indent_str}{prefix}IfStatement")
                lines.append(PrettyPrinter.print_ast(cond, indent + 4, "condition: "))
                lines.append(PrettyPrinter.print_ast(then_b, indent + 4, "then: "))

            case ScopeNode(statements=stmts):
                lines.append(f"{indent_str}{prefix}Scope")
                for i, stmt in enumerate(stmts):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case ProgramNode(statements=stmts):
                lines.append(f"{indent_str}{prefix}Program")
                for i, stmt in enumerate(stmts):
                    lines.append(PrettyPrinter.print_ast(stmt, indent + 4, f"stmt[{i}]: "))

            case _:
                lines.append(f"{indent_str}{prefix}Unknown node type: {type(node)}")

        return "\n".join(line for line in lines if line)

    @staticmethod
    def print_surface(node: ASTNode) -> str:
        """Return a compact, surface-syntax-like one-line representation of an AST node.

        Bodies of scopes and procedures are elided; the Graphviz renderer
        draws those as separate nodes.
        """
        if node is None:
            return ""

        def _p(n: ASTNode) -> str:
            return PrettyPrinter.print_surface(n) if isinstance(n, ASTNode) else str(n)

        match node:
            case LiteralNode(token=token):
                return str(token.literal)
            case VariableNode(name=name):
                return name.lexeme
            case GroupingNode(expression=expr):
                return f"({_p(expr)})"
            case UnaryOpNode(operator=op, right=right):
                if op.type == TokenType.ODD:
                    return f"odd {_p(right)}"
                return f"{op.lexeme}{_p(right)}"
            case BinaryOpNode(left=l, operator=op, right=r):
                return f"{_p(l)} {op.lexeme} {_p(r)}"
            case AssignExprNode(name=name, value=value) | AssignmentNode(
                name=name, value=value
            ):
                return f"{name.lexeme} := {_p(value)}"
            case ConstDeclNode(constants=constants):
                return "const " + ", ".join(f"{n.lexeme} = {v}" for n, v in constants)
            case VarDeclNode(names=names):
                return "var " + ", ".join(n.lexeme for n in names)
            case ProcedureDeclNode(name=name):
                return f"procedure {name.lexeme}"
            case PrintNode(expression=expr):
                return f"! {_p(expr)}"
            case PrintVarNode(name=name):
                return f"? {name.lexeme}"
            case CallNode(name=name):
                return f"call {name.lexeme}"
            case ExpressionStatementNode(expression=expr):
                return _p(expr)
            case IfStatementNode(condition=cond):
                return f"if {_p(cond)} then"
            case WhileStatementNode(condition=cond):
                return f"while {_p(cond)} do"
            case ScopeNode():
                return "begin ... end"
            case ProgramNode():
                return "<program>"
            case _:
                s = PrettyPrinter.print_ast(node)
                return " ".join(line.strip() for line in s.splitlines())
