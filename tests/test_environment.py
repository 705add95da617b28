import pytest

from environment import Environment, ROOT
from diagnostics import (
    ConstAssignment,
    DoubleDeclaration,
    UnboundName,
    UndefinedProcedure,
)
from tokens import Token, TokenType


def ident(name: str) -> Token:
    return Token(TokenType.IDENTIFIER, name, name, 1)


def test_declared_variable_starts_unassigned():
    env = Environment()
    env.declare_variable(ROOT, ident("x"))
    assert env.get_variable(ROOT, ident("x")) is None


def test_double_declaration_in_same_scope():
    env = Environment()
    env.declare_variable(ROOT, ident("x"))
    with pytest.raises(DoubleDeclaration):
        env.declare_variable(ROOT, ident("x"))


def test_same_name_may_be_redeclared_in_child_scope():
    env = Environment()
    env.declare_variable(ROOT, ident("x"))
    env.assign_variable(ROOT, ident("x"), 1)
    child = env.push_scope(ROOT)
    env.declare_variable(child, ident("x"))
    env.assign_variable(child, ident("x"), 2)
    assert env.get_variable(child, ident("x")) == 2
    env.pop_scope(child)
    assert env.get_variable(ROOT, ident("x")) == 1


def test_assignment_updates_nearest_enclosing_binding():
    env = Environment()
    env.declare_variable(ROOT, ident("x"))
    child = env.push_scope(ROOT)
    grandchild = env.push_scope(child)
    env.assign_variable(grandchild, ident("x"), 7)
    assert env.get_variable(ROOT, ident("x")) == 7
    assert env.scopes[grandchild].variables == {}
    assert env.depth(grandchild) == 2


def test_assignment_to_undeclared_name():
    env = Environment()
    with pytest.raises(UnboundName):
        env.assign_variable(ROOT, ident("nope"), 1)
    with pytest.raises(UnboundName):
        env.get_variable(ROOT, ident("nope"))


def test_assignment_to_constant_anywhere_in_chain():
    env = Environment()
    env.declare_constant(ROOT, ident("K"), 3)
    child = env.push_scope(ROOT)
    with pytest.raises(ConstAssignment) as excinfo:
        env.assign_variable(child, ident("K"), 4)
    assert excinfo.value.token.lexeme == "K"
    assert env.get_constant(child, ident("K")) == 3


def test_inner_variable_shadows_outer_constant():
    env = Environment()
    env.declare_constant(ROOT, ident("K"), 3)
    child = env.push_scope(ROOT)
    env.declare_variable(child, ident("K"))
    env.assign_variable(child, ident("K"), 9)
    assert env.lookup_value(child, ident("K")) == 9
    assert env.lookup_value(ROOT, ident("K")) == 3


def test_inner_constant_hides_outer_variable_for_every_lookup():
    env = Environment()
    env.declare_variable(ROOT, ident("x"))
    env.assign_variable(ROOT, ident("x"), 1)
    child = env.push_scope(ROOT)
    env.declare_constant(child, ident("x"), 5)
    assert env.lookup_value(child, ident("x")) == 5
    with pytest.raises(UnboundName):
        env.get_variable(child, ident("x"))
    with pytest.raises(ConstAssignment):
        env.assign_variable(child, ident("x"), 2)
    assert env.get_variable(ROOT, ident("x")) == 1


def test_constants_cannot_be_declared_twice():
    env = Environment()
    env.declare_constant(ROOT, ident("K"), 1)
    with pytest.raises(DoubleDeclaration):
        env.declare_constant(ROOT, ident("K"), 2)


def test_procedures_resolve_through_chain():
    env = Environment()
    body = ["marker"]
    env.define_procedure(ROOT, ident("p"), body)
    child = env.push_scope(ROOT)
    assert env.get_procedure(child, ident("p")) is body
    with pytest.raises(DoubleDeclaration):
        env.define_procedure(ROOT, ident("p"), [])
    with pytest.raises(UndefinedProcedure):
        env.get_procedure(child, ident("q"))


def test_only_innermost_scope_can_be_popped():
    env = Environment()
    child = env.push_scope(ROOT)
    env.push_scope(child)
    with pytest.raises(ValueError):
        env.pop_scope(child)
    with pytest.raises(ValueError):
        Environment().pop_scope(ROOT)
