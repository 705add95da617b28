from __future__ import annotations
import json
import logging
import sys
from typing import List, Optional, TextIO
from lexer import Lexer
from tokens import Token
from ast_nodes import ProgramNode
from parser import Parser
from diagnostics import Diagnostics, PL0RuntimeError
from ast_interpreter import interpret_program, DEFAULT_MAX_CALL_DEPTH
from pretty_printer import PrettyPrinter
from ast_json import ast_to_json
from ast_viz import write_and_render

logger = logging.getLogger("pl0")

# Exit codes follow the BSD sysexits convention.
EXIT_OK = 0
EXIT_DATAERR = 64
EXIT_NOINPUT = 66
EXIT_SOFTWARE = 70


def lex(text: str, diagnostics: Optional[Diagnostics] = None) -> List[Token]:
    """Tokenize input string."""
    lexer = Lexer(text, diagnostics)
    return lexer.tokenize()


def parse_tokens(
    tokens: List[Token], diagnostics: Optional[Diagnostics] = None
) -> ProgramNode:
    """Parse tokens into AST."""
    parser = Parser(tokens, diagnostics)
    return parser.parse()


def report(diagnostics: Diagnostics, err: TextIO) -> None:
    for record in diagnostics.records:
        print(record.format(), file=err)


def run_source(
    text: str,
    *,
    output: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    print_tokens: bool = False,
    print_ast: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
    max_call_depth: int = DEFAULT_MAX_CALL_DEPTH,
) -> int:
    """Run a single program: lex, parse and, if both were clean, interpret it.

    Returns the process exit code. Program output goes to `output`,
    diagnostics to `err` (stdout and stderr by default).
    """
    output = output if output is not None else sys.stdout
    err = err if err is not None else sys.stderr
    diagnostics = Diagnostics()

    tokens = lex(text, diagnostics)
    if print_tokens:
        print(f"Tokens ({len(tokens)}):", file=output)
        for i, token in enumerate(tokens):
            print(f"  {i:3}: {token!r}", file=output)

    ast = parse_tokens(tokens, diagnostics)
    if print_ast:
        print("AST:", file=output)
        print(PrettyPrinter.print_ast(ast), file=output)

    if dump_ast_path:
        try:
            with open(dump_ast_path, "w", encoding="utf-8") as fh:
                json.dump(ast_to_json(ast), fh, indent=2)
            logger.info("wrote AST JSON to %s", dump_ast_path)
        except OSError as e:
            print(f"Failed to write AST JSON to {dump_ast_path}: {e}", file=err)

    if viz_path:
        try:
            rendered = write_and_render(ast, viz_path, fmt=viz_format)
            logger.info("wrote AST visualization to %s", rendered)
        except Exception as e:
            # graphviz raises ExecutableNotFound / CalledProcessError when the
            # `dot` binary is missing or fails; visualization is optional.
            print(f"Failed to render AST visualization to {viz_path}: {e}", file=err)

    if diagnostics.had_error:
        report(diagnostics, err)
        logger.debug("skipping interpretation: %d errors", len(diagnostics.records))
        return EXIT_DATAERR

    try:
        interpret_program(ast, output=output, max_call_depth=max_call_depth)
    except PL0RuntimeError as e:
        diagnostics.runtime_error(e)
        report(diagnostics, err)
        return EXIT_SOFTWARE
    return EXIT_OK


def interactive_mode(max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> None:
    """Run an interpreter REPL reading one program per line from stdin."""
    print("\nInteractive PL/0 Mode (type 'quit' to exit)")
    print("=" * 80)

    while True:
        try:
            text = input("\npl0> ").strip()
            if text.lower() in ("quit", "exit", "q"):
                print("Goodbye!")
                break

            if not text:
                continue

            run_source(text, max_call_depth=max_call_depth)

        except (KeyboardInterrupt, EOFError):
            print("\n\nExiting...")
            break


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Interpret a PL/0 program from a file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("file", nargs="?", help="Path to source file to run")
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Start interactive REPL mode",
    )
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--print-ast", dest="print_ast", action="store_true", help="Print the AST"
    )
    parser.add_argument(
        "--dump-ast", dest="dump_ast", help="Path to write the AST as JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write Graphviz visualization of the AST",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--max-call-depth",
        dest="max_call_depth",
        type=int,
        default=DEFAULT_MAX_CALL_DEPTH,
        help="Maximum nesting of procedure calls before the run is aborted",
    )
    parser.add_argument(
        "--verbose", "-v", dest="verbose", action="store_true", help="Debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    # Each nested call costs a handful of interpreter frames.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), args.max_call_depth * 10 + 1000))

    if args.interactive:
        interactive_mode(max_call_depth=args.max_call_depth)
        return EXIT_OK
    if not args.file:
        parser.print_help()
        return EXIT_DATAERR

    try:
        with open(args.file, "r", encoding="utf-8") as fh:
            text = fh.read()
    except OSError as e:
        print(f"Failed to read file {args.file}: {e}", file=sys.stderr)
        return EXIT_NOINPUT

    return run_source(
        text,
        print_tokens=args.print_tokens,
        print_ast=args.print_ast,
        dump_ast_path=args.dump_ast,
        viz_path=args.viz_ast,
        viz_format=args.viz_format,
        max_call_depth=args.max_call_depth,
    )


if __name__ == "__main__":
    sys.exit(main())
