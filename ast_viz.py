"""Graphviz visualization helpers for parsed programs.

Provides `render_ast_dot(program)` which returns a `graphviz.Digraph` object
(not rendered). Optionally `write_and_render` can write the file to disk.

Layout: every statement becomes one node labelled with its surface syntax
(expressions are shown inline, not as separate nodes). Edges run from a
statement to the statements it contains. Each procedure body is drawn inside
its own cluster so nested procedures are easy to spot.
"""

from typing import List, Optional
import re
import html
from graphviz import Digraph
from ast_nodes import *
from pretty_printer import PrettyPrinter


def _node_html(title: str, detail: str = "", highlight: bool = False) -> str:
    escaped = html.escape(detail) if detail else "&nbsp;"
    bgcolor = ' BGCOLOR="#efefff"' if highlight else ""
    return (
        '<<TABLE BORDER="0" CELLBORDER="1" CELLSPACING="0">'
        f'<TR><TD{bgcolor}><FONT POINT-SIZE="8"><I>{html.escape(title)}</I></FONT></TD></TR>'
        f'<TR><TD><FONT POINT-SIZE="10">{escaped}</FONT></TD></TR>'
        "</TABLE>>"
    )


class _Builder:
    def __init__(self, dot: Digraph):
        self.dot = dot
        self.counter = 0

    def fresh(self) -> str:
        name = f"n{self.counter}"
        self.counter += 1
        return name

    def statement(self, graph: Digraph, stmt: ASTNode) -> str:
        node_id = self.fresh()
        title = f"{stmt.type} (line {stmt.line})"

        if isinstance(stmt, ProcedureDeclNode):
            graph.node(
                node_id,
                label=_node_html(title, PrettyPrinter.print_surface(stmt), highlight=True),
                shape="plaintext",
            )
            cluster = f"cluster_{re.sub(r'[^0-9A-Za-z_]', '_', stmt.name.lexeme)}_{node_id}"
            with graph.subgraph(name=cluster) as c:
                c.attr(label=f"procedure: {stmt.name.lexeme}", style="rounded")
                self.children(c, stmt.body, node_id)
        else:
            graph.node(
                node_id,
                label=_node_html(title, PrettyPrinter.print_surface(stmt)),
                shape="plaintext",
            )
            match stmt:
                case ScopeNode(statements=stmts):
                    self.children(graph, stmts, node_id)
                case IfStatementNode(then_branch=then_branch):
                    self.children(graph, [then_branch], node_id, label="then")
                case WhileStatementNode(body=body):
                    self.children(graph, [body], node_id, label="do")

        return node_id

    def children(
        self,
        graph: Digraph,
        stmts: List[ASTNode],
        parent: str,
        label: Optional[str] = None,
    ) -> None:
        for stmt in stmts:
            child = self.statement(graph, stmt)
            if label:
                self.dot.edge(parent, child, label=label)
            else:
                self.dot.edge(parent, child)


def render_ast_dot(program: ProgramNode) -> Digraph:
    """Return a graphviz.Digraph for the given program.

    The caller may call `dot.source` to inspect the dot text, or call
    `dot.render(filename, format=...)` to write files (requires Graphviz installed).
    """
    dot = Digraph(format="svg")
    dot.attr("graph", rankdir="TB")

    builder = _Builder(dot)
    root = builder.fresh()
    dot.node(root, label=_node_html("PROGRAM", f"{len(program.statements)} statements"), shape="plaintext")
    with dot.subgraph(name="cluster_global") as c:
        c.attr(label="", style="rounded")
        builder.children(c, program.statements, root)
    return dot


def write_and_render(program: ProgramNode, out_path: str, fmt: str = "svg") -> str:
    """Write and render the program tree to the given path (without extension).

    Example: write_and_render(program, 'out/ast', fmt='png') will create out/ast.png
    (requires Graphviz). Returns the path of the rendered file.
    """
    dot = render_ast_dot(program)
    dot.format = fmt
    # Note: render will append extension automatically
    return dot.render(out_path, cleanup=True)
