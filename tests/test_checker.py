"""Tests for antlsp.frontend.checker and the type table."""
from __future__ import annotations

import pytest

from antlsp.frontend import ast
from antlsp.frontend.checker import TypeChecker
from antlsp.frontend.errors import TypeCheckError, TypeErrorKind
from antlsp.frontend.lexer import Lexer
from antlsp.frontend.parser import Parser
from antlsp.frontend.table import BUILTINS, FLOAT, INT, STR, FuncType, TypeTable
from antlsp.frontend.token import Token, TokenKind


def run(text: str) -> TypeTable:
    table = TypeTable().init()
    TypeChecker(table).check_node(Parser(Lexer(text).get_tokens()).parse_program())
    return table


def run_error(text: str) -> tuple[TypeCheckError, TypeTable]:
    table = TypeTable().init()
    program = Parser(Lexer(text).get_tokens()).parse_program()
    with pytest.raises(TypeCheckError) as excinfo:
        TypeChecker(table).check_node(program)
    return excinfo.value, table


class TestTypeTable:
    def test_init_seeds_builtins(self):
        table = TypeTable().init()
        assert set(BUILTINS) <= set(table.var_map)
        assert table.is_builtin('print')

    def test_uninitialised_table_is_empty(self):
        assert TypeTable().var_map == {}

    def test_inner_scope_shadows_outer(self):
        table = TypeTable()
        table.define('x', INT)
        table.enter_scope()
        table.define('x', STR)
        assert table.var_map['x'] == STR
        table.exit_scope()
        assert table.var_map['x'] == INT

    def test_global_scope_is_never_popped(self):
        table = TypeTable()
        table.exit_scope()
        assert table.depth == 1


class TestTypeChecker:
    def test_assignments_bind_names(self):
        table = run('x = 1\ny = x + 2\nz = "a" + "b"')
        assert table.var_map['x'] == INT
        assert table.var_map['y'] == INT
        assert table.var_map['z'] == STR

    def test_let_annotation_widens_int_to_float(self):
        table = run('let x: float = 1')
        assert table.var_map['x'] == FLOAT

    def test_mixed_arithmetic_is_float(self):
        assert run('x = 1 + 2.5').var_map['x'] == FLOAT

    def test_function_definition_and_call(self):
        table = run('func add(a: int, b: int) -> int {\n  return a + b\n}\nr = add(1, 2)')
        assert table.var_map['r'] == INT
        assert table.var_map['add'] == FuncType('func', (INT, INT), INT)
        assert 'a' not in table.var_map
        assert table.depth == 1

    def test_control_flow(self):
        run('i = 0\nwhile i < 10 {\n  i = i + 1\n}\nif i == 10 && true {\n  print(i)\n}')

    def test_block_locals_do_not_leak(self):
        table = run('if true {\n  inner = 1\n}')
        assert 'inner' not in table.var_map


class TestTypeErrors:
    def test_undefined_variable(self):
        err, table = run_error('x = 1\ny = z\nw = 2')
        assert err.kind is TypeErrorKind.UNDEFINED_VARIABLE
        assert err.token.value == 'z'
        assert err.message == "undefined variable 'z'"
        assert 'x' in table.var_map
        assert 'y' not in table.var_map
        assert 'w' not in table.var_map

    def test_assignment_type_mismatch(self):
        err, _ = run_error('x = 1\nx = "s"')
        assert err.kind is TypeErrorKind.TYPE_MISMATCH
        assert (err.token.line, err.token.column) == (2, 1)

    def test_operand_mismatch_points_at_operator(self):
        err, _ = run_error('x = "a" + 1')
        assert err.kind is TypeErrorKind.TYPE_MISMATCH
        assert err.token.value == '+'
        assert err.message == 'unsupported operand types for +: str and int'

    def test_failure_inside_function_keeps_locals(self):
        err, table = run_error('func f(a: int) -> int {\n  b = a\n  return c\n}')
        assert err.kind is TypeErrorKind.UNDEFINED_VARIABLE
        assert {'f', 'a', 'b'} <= set(table.var_map)

    def test_arity_mismatch(self):
        err, _ = run_error('print(1, 2)')
        assert err.kind is TypeErrorKind.ARITY_MISMATCH

    def test_not_callable(self):
        err, _ = run_error('x = 1\nx(2)')
        assert err.kind is TypeErrorKind.NOT_CALLABLE

    def test_return_outside_function(self):
        err, _ = run_error('return 1')
        assert err.kind is TypeErrorKind.RETURN_OUTSIDE_FUNCTION
        assert err.message is None
        assert str(err) == 'return outside function'

    def test_wrong_return_type(self):
        err, _ = run_error('func f() -> int {\n  return "s"\n}')
        assert err.kind is TypeErrorKind.TYPE_MISMATCH
        assert err.message == 'expected int but found str'

    def test_non_bool_condition(self):
        err, _ = run_error('if 1 {\n}')
        assert err.kind is TypeErrorKind.TYPE_MISMATCH

    def test_unknown_type(self):
        err, _ = run_error('let x: foo = 1')
        assert err.kind is TypeErrorKind.UNKNOWN_TYPE
        assert err.token.value == 'foo'


class TestDeepNesting:
    def test_recursion_limit_becomes_type_error(self):
        tok = Token(TokenKind.INT, '1', 1, 1)
        node = ast.IntLit(token=tok, value=1)
        for _ in range(5000):
            node = ast.Unary(token=tok, op='-', operand=node)
        with pytest.raises(TypeCheckError) as excinfo:
            TypeChecker(TypeTable().init()).check_node(ast.ExprStmt(token=tok, expr=node))
        assert excinfo.value.kind is TypeErrorKind.NESTING_TOO_DEEP
