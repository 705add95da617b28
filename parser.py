"""
Parser for the PL/0-style teaching language.

Overview and approach:
- This parser is a small, hand-written recursive-descent parser with a single
    token of lookahead. It turns the token list produced by `Lexer` into a
    `ProgramNode` whose `statements` list holds the top-level declarations and
    statements in source order.

Grammar (informal):

    program      := block ( ';'? block )* '.'
    block        := ('const' constDecl)? ('var' varDecl)? ('procedure' procDecl)* statement?
    constDecl    := IDENT '=' NUMBER (',' IDENT '=' NUMBER)* ';'
    varDecl      := IDENT (',' IDENT)* ';'
    procDecl     := IDENT ';' block ';'
    statement    := 'begin' statement (';' statement)* ';'? 'end'
                  | '!' expression | '?' IDENT
                  | 'if' condition 'then' statement
                  | 'while' condition 'do' statement
                  | 'call' IDENT
                  | expression (':=' expression)?
    condition    := 'odd' expression | expression relOp expression
    expression   := ('+'|'-')? term (('+'|'-') term)*
    term         := factor (('*'|'/') factor)*
    factor       := NUMBER | IDENT | '(' expression ')'

  The trailing statement of a block may be left out when the next token
  already opens another block (`const`, `var`, `procedure`) or ends the
  program, so `var n; const ZERO = 0; n := 3.` is three blocks.

Error recovery:
- Structural errors (a required token is missing) raise `ParseError`. The
    whole top-level block being parsed is dropped and the parser skips tokens
    until one that can start a block (`const`, `var`, `procedure`, `begin`),
    then carries on. Later well-formed blocks are still returned.
- Local errors (an assignment whose target is not a plain variable) are
    reported but do not unwind; the left-hand side is kept as an expression
    statement and parsing continues in the same block.
- Every error is recorded in the shared `Diagnostics` collector; the caller
    checks `had_error` before interpreting.
"""

from __future__ import annotations
import logging
from typing import List, Optional
from tokens import Token, TokenType
from ast_nodes import *
from diagnostics import Diagnostics, ParseError

logger = logging.getLogger(__name__)

DECLARATION_START = (TokenType.CONST, TokenType.VAR, TokenType.PROCEDURE)
BLOCK_START = DECLARATION_START + (TokenType.BEGIN,)

RELATIONAL = (
    TokenType.EQU,
    TokenType.EQU_EQU,
    TokenType.BANG_EQU,
    TokenType.LESS,
    TokenType.LESS_EQU,
    TokenType.MORE,
    TokenType.MORE_EQU,
)


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Token(TokenType.EOF, "", None, line)]
        self.tokens = tokens
        self.pos = 0
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    # Token primitives

    def peek(self) -> Token:
        """Return current token without consuming it."""
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type in (TokenType.DOT, TokenType.EOF)

    def advance(self) -> Token:
        """Consume the current token and return it."""
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """Consume the current token if it is one of `token_types`."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def expect(self, expected_type: TokenType, message: str) -> Token:
        """Expect and consume token of given type."""
        if self.match(expected_type):
            return self.previous()
        raise self.error(message)

    def error(self, message: str) -> ParseError:
        self.diagnostics.parse_error(self.peek(), message)
        return ParseError(message)

    def synchronize(self, block_start: int) -> None:
        """Skip tokens until one that can start a new block."""
        if self.pos == block_start:
            self.advance()
        while not self.is_at_end() and self.peek().type not in BLOCK_START:
            self.advance()
        logger.debug("resynchronized at %r", self.peek())

    # Program structure

    def parse(self) -> ProgramNode:
        """Parse a complete program (sequence of blocks ended by `.`)."""
        statements: List[ASTNode] = []

        while not self.is_at_end():
            block_start = self.pos
            try:
                statements.extend(self.parse_block())
            except ParseError:
                self.synchronize(block_start)
                continue
            if self.match(TokenType.SEMICOLON):
                continue
            if not self.is_at_end() and self.peek().type not in DECLARATION_START:
                # Top-level blocks only run together when the next one opens
                # with a declaration keyword.
                self.error("Expected `;` or `.` after statement")
                self.synchronize(block_start)

        if self.peek().type == TokenType.DOT:
            self.pos += 1
            if self.peek().type != TokenType.EOF:
                self.error("Unexpected tokens after `.`")
        else:
            self.error("Expected `.` at end of program")

        return ProgramNode(statements=statements, line=self.tokens[0].line)

    def parse_block(self) -> List[ASTNode]:
        out: List[ASTNode] = []

        if self.match(TokenType.CONST):
            out.append(self.parse_const_declaration())
        if self.match(TokenType.VAR):
            out.append(self.parse_var_declaration())
        while self.match(TokenType.PROCEDURE):
            out.append(self.parse_procedure_declaration())

        if not self.is_at_end() and self.peek().type not in DECLARATION_START:
            out.append(self.parse_statement())
        elif not out:
            raise self.error("Expected a declaration or statement")

        return out

    def parse_const_declaration(self) -> ConstDeclNode:
        """constDecl := IDENT '=' NUMBER (',' IDENT '=' NUMBER)* ';'"""
        line = self.previous().line
        constants = []
        while True:
            name = self.expect(TokenType.IDENTIFIER, "Expected const name")
            self.expect(
                TokenType.EQU, f"Expected `=` after const name: {name.lexeme}"
            )
            value = self.expect(TokenType.NUMBER, "Expected const value")
            constants.append((name, value.literal))
            if not self.match(TokenType.COMMA):
                break
        self.expect(TokenType.SEMICOLON, "Expected `;` after const declaration")
        return ConstDeclNode(constants=constants, line=line)

    def parse_var_declaration(self) -> VarDeclNode:
        """varDecl := IDENT (',' IDENT)* ';'"""
        line = self.previous().line
        names = [self.expect(TokenType.IDENTIFIER, "Expected var name")]
        while self.match(TokenType.COMMA):
            names.append(
                self.expect(TokenType.IDENTIFIER, "Expected var name after comma")
            )
        self.expect(TokenType.SEMICOLON, "Expected `;` after var declaration")
        return VarDeclNode(names=names, line=line)

    def parse_procedure_declaration(self) -> ProcedureDeclNode:
        """procDecl := IDENT ';' block ';'"""
        line = self.previous().line
        name = self.expect(TokenType.IDENTIFIER, "Expected procedure identifier")
        self.expect(TokenType.SEMICOLON, "Expected `;` after procedure identifier")
        body = self.parse_block()
        self.expect(TokenType.SEMICOLON, "Expected `;` after procedure block")
        return ProcedureDeclNode(name=name, body=body, line=line)

    # Statements

    def parse_statement(self) -> ASTNode:
        """Parse a statement."""
        token = self.peek()

        if self.match(TokenType.BEGIN):
            return self.parse_scope()
        if self.match(TokenType.BANG):
            return PrintNode(expression=self.parse_expression(), line=token.line)
        if self.match(TokenType.QMARK):
            name = self.expect(
                TokenType.IDENTIFIER, "Expected identifier for `?` expression"
            )
            return PrintVarNode(name=name, line=token.line)
        if self.match(TokenType.IF):
            return self.parse_if_statement()
        if self.match(TokenType.WHILE):
            return self.parse_while_statement()
        if self.match(TokenType.CALL):
            name = self.expect(
                TokenType.IDENTIFIER, "Expected procedure identifier for CALL expression"
            )
            return CallNode(name=name, line=token.line)
        return self.parse_assignment_or_expression()

    def parse_scope(self) -> ScopeNode:
        """scope := 'begin' statement (';' statement)* ';'? 'end'"""
        line = self.previous().line
        statements = [self.parse_statement()]
        while True:
            if not self.match(TokenType.SEMICOLON):
                self.expect(TokenType.END, "Expected END token")
                break
            if self.match(TokenType.END):
                break
            statements.append(self.parse_statement())
        return ScopeNode(statements=statements, line=line)

    def parse_if_statement(self) -> IfStatementNode:
        """ifStmt := 'if' condition 'then' statement"""
        line = self.previous().line
        condition = self.parse_condition()
        self.expect(TokenType.THEN, "Expected THEN token after IF condition")
        then_branch = self.parse_statement()
        return IfStatementNode(condition=condition, then_branch=then_branch, line=line)

    def parse_while_statement(self) -> WhileStatementNode:
        """whileStmt := 'while' condition 'do' statement"""
        line = self.previous().line
        condition = self.parse_condition()
        self.expect(TokenType.DO, "Expected DO token after WHILE condition")
        body = self.parse_statement()
        return WhileStatementNode(condition=condition, body=body, line=line)

    def parse_assignment_or_expression(self) -> ASTNode:
        expr = self.parse_expression()

        if self.match(TokenType.COLON_EQU):
            walrus = self.previous()
            value = self.parse_expression()
            if isinstance(expr, VariableNode):
                return AssignmentNode(name=expr.name, value=value, line=expr.line)
            # Reported but not raised: no need to resynchronize.
            self.diagnostics.parse_error(
                walrus, "Invalid assignment target: not a variable"
            )
        return ExpressionStatementNode(expression=expr, line=expr.line)

    # Expressions

    def parse_condition(self) -> ASTNode:
        if self.match(TokenType.ODD):
            operator = self.previous()
            return UnaryOpNode(
                operator=operator, right=self.parse_expression(), line=operator.line
            )

        left = self.parse_expression()
        if self.match(*RELATIONAL):
            operator = self.previous()
            right = self.parse_expression()
            return BinaryOpNode(
                left=left, operator=operator, right=right, line=left.line
            )
        raise self.error("Invalid comparison operator")

    def parse_expression(self) -> ASTNode:
        """expression := ('+'|'-')? term (('+'|'-') term)*"""
        prefix = None
        if self.match(TokenType.MINUS, TokenType.PLUS):
            prefix = self.previous()

        expr = self.parse_term()
        if prefix is not None:
            expr = UnaryOpNode(operator=prefix, right=expr, line=prefix.line)

        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.parse_term()
            expr = BinaryOpNode(left=expr, operator=operator, right=right, line=expr.line)
        return expr

    def parse_term(self) -> ASTNode:
        """term := factor (('*'|'/') factor)*"""
        expr = self.parse_factor()
        while self.match(TokenType.STAR, TokenType.SLASH):
            operator = self.previous()
            right = self.parse_factor()
            expr = BinaryOpNode(left=expr, operator=operator, right=right, line=expr.line)
        return expr

    def parse_factor(self) -> ASTNode:
        """factor := NUMBER | IDENT | '(' expression ')'"""
        token = self.peek()

        match token.type:
            case TokenType.NUMBER:
                self.advance()
                return LiteralNode(token=token, line=token.line)

            case TokenType.IDENTIFIER:
                self.advance()
                return VariableNode(name=token, line=token.line)

            case TokenType.LEFT_PAREN:
                self.advance()
                expr = self.parse_expression()
                self.expect(TokenType.RIGHT_PAREN, "Missing ')' after expression")
                return GroupingNode(expression=expr, line=token.line)

            case _:
                raise self.error("Expected an expression")
