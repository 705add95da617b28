"""Runtime binding environment.

This module defines the `Scope` record and the `Environment` arena that
owns all live scopes. Each scope keeps the integer index of its parent
instead of a reference, so walking the scope chain is plain index
following. Index 0 is the program's root scope and lives for the whole run.

A scope holds three separate tables:
- variables: name -> Optional[int] (None means declared but unassigned)
- constants: name -> int, fixed once declared
- procedures: name -> list of body statements

New scopes are only created by procedure calls and are parented to the
caller's scope. Calls nest strictly, so scopes are pushed and popped like a
stack.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from tokens import Token
from diagnostics import (
    ConstAssignment,
    DoubleDeclaration,
    UnboundName,
    UndefinedProcedure,
)

logger = logging.getLogger(__name__)

ROOT = 0


@dataclass
class Scope:
    parent: Optional[int] = None
    variables: Dict[str, Optional[int]] = field(default_factory=dict)
    constants: Dict[str, int] = field(default_factory=dict)
    procedures: Dict[str, list] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"Scope(parent={self.parent}, variables={self.variables}, "
            f"constants={self.constants}, procedures={sorted(self.procedures)})"
        )


class Environment:
    def __init__(self):
        self.scopes: List[Scope] = [Scope()]

    def push_scope(self, parent: int) -> int:
        """Open a child scope of `parent` and return its index."""
        self.scopes.append(Scope(parent=parent))
        index = len(self.scopes) - 1
        logger.debug("opened scope %d (parent %d)", index, parent)
        return index

    def pop_scope(self, index: int) -> None:
        """Discard the innermost scope, which must be `index`."""
        if index == ROOT or index != len(self.scopes) - 1:
            raise ValueError(f"Scope {index} is not the innermost scope")
        self.scopes.pop()
        logger.debug("closed scope %d", index)

    def chain(self, index: int):
        """Yield scopes from `index` up to the root."""
        current: Optional[int] = index
        while current is not None:
            scope = self.scopes[current]
            yield scope
            current = scope.parent

    def depth(self, index: int) -> int:
        return sum(1 for _ in self.chain(index)) - 1

    # Variables

    def declare_variable(self, index: int, name: Token) -> None:
        """Declare an unassigned variable in the scope at `index`."""
        scope = self.scopes[index]
        if name.lexeme in scope.variables:
            raise DoubleDeclaration(
                f"Double declaration of name: {name.lexeme}", name
            )
        scope.variables[name.lexeme] = None

    def get_variable(self, index: int, name: Token) -> Optional[int]:
        """Return the value bound to a variable; None if never assigned.

        Resolution follows `lookup_value`, so a nearer constant of the same
        name hides an outer variable.
        """
        for scope in self.chain(index):
            if name.lexeme in scope.variables:
                return scope.variables[name.lexeme]
            if name.lexeme in scope.constants:
                raise UnboundName(f"Not a variable: {name.lexeme}", name)
        raise UnboundName(f"Undefined variable: {name.lexeme}", name)

    def assign_variable(self, index: int, name: Token, value: int) -> None:
        """Overwrite the nearest existing variable binding for `name`."""
        for scope in self.chain(index):
            if name.lexeme in scope.variables:
                scope.variables[name.lexeme] = value
                return
            if name.lexeme in scope.constants:
                raise ConstAssignment(
                    f"Cannot assign to constant: {name.lexeme}", name
                )
        raise UnboundName(f"Assigning to undeclared variable: {name.lexeme}", name)

    # Constants

    def declare_constant(self, index: int, name: Token, value: int) -> None:
        scope = self.scopes[index]
        if name.lexeme in scope.constants:
            raise DoubleDeclaration(
                f"Double declaration of constant: {name.lexeme}", name
            )
        scope.constants[name.lexeme] = value

    def get_constant(self, index: int, name: Token) -> int:
        for scope in self.chain(index):
            if name.lexeme in scope.constants:
                return scope.constants[name.lexeme]
        raise UnboundName(f"Undefined constant: {name.lexeme}", name)

    def lookup_value(self, index: int, name: Token) -> Optional[int]:
        """Resolve a name used in an expression to a variable or constant.

        The innermost scope binding the name wins; within one scope a
        variable takes precedence over a constant of the same name.
        """
        for scope in self.chain(index):
            if name.lexeme in scope.variables:
                return scope.variables[name.lexeme]
            if name.lexeme in scope.constants:
                return scope.constants[name.lexeme]
        raise UnboundName(f"Undefined name: {name.lexeme}", name)

    # Procedures

    def define_procedure(self, index: int, name: Token, body: list) -> None:
        scope = self.scopes[index]
        if name.lexeme in scope.procedures:
            raise DoubleDeclaration(
                f"Double declaration of procedure: {name.lexeme}", name
            )
        scope.procedures[name.lexeme] = body

    def get_procedure(self, index: int, name: Token) -> list:
        for scope in self.chain(index):
            if name.lexeme in scope.procedures:
                return scope.procedures[name.lexeme]
        raise UndefinedProcedure(f"Undefined procedure: {name.lexeme}", name)
