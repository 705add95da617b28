import io

from lexer import Lexer
from parser import Parser
from diagnostics import Diagnostics
from ast_interpreter import interpret_program


def lex(text: str, diagnostics=None):
    """Return a list of tokens for the given source text."""
    return Lexer(text, diagnostics).tokenize()


def parse_text(text: str, diagnostics=None):
    """Convenience: lex+parse a source text into a ProgramNode."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    return Parser(Lexer(text, diagnostics).tokenize(), diagnostics).parse()


def interpret_text(text: str, **kwargs):
    """Parse and run `text`; return (printed lines, environment).

    Fails the calling test if the source does not lex or parse cleanly.
    """
    diagnostics = Diagnostics()
    prog = parse_text(text, diagnostics)
    assert not diagnostics.had_error, diagnostics.format()
    out = io.StringIO()
    env = interpret_program(prog, output=out, **kwargs)
    return out.getvalue().splitlines(), env
