"""
TypedAnt type checker.

Walks the syntax tree in source order, inferring a type for every expression
and binding declared names into the shared :class:`TypeTable` as it goes.
The first violation raises :class:`TypeCheckError`; the table keeps every
binding made up to that point (scopes opened by an enclosing function or
block are left open), which is what completion relies on for broken code.
"""
from __future__ import annotations

import logging

from . import ast
from .errors import TypeCheckError, TypeErrorKind
from .table import (
    BOOL, FLOAT, INT, STR, UNIT, FuncType, Type, TypeTable, assignable, is_numeric,
)

logger = logging.getLogger(__name__)

_ARITHMETIC = frozenset({'+', '-', '*', '/', '%'})
_ORDERING = frozenset({'<', '<=', '>', '>='})
_EQUALITY = frozenset({'==', '!='})
_LOGICAL = frozenset({'&&', '||'})


class TypeChecker:
    def __init__(self, table: TypeTable):
        self.table = table
        self._return_types: list[Type] = []

    def check_node(self, node: ast.Node) -> Type:
        with self.table.lock:
            try:
                return self._check(node)
            except RecursionError:
                raise TypeCheckError(node.token, TypeErrorKind.NESTING_TOO_DEEP) from None

    def _check(self, node: ast.Node) -> Type:
        method = getattr(self, f'_check_{type(node).__name__}')
        return method(node)

    def _resolve(self, annotation: ast.TypeName | None, default: Type = UNIT) -> Type:
        if annotation is None:
            return default
        resolved = self.table.resolve_type(annotation.name)
        if resolved is None:
            raise TypeCheckError(annotation.token, TypeErrorKind.UNKNOWN_TYPE,
                                 f"unknown type '{annotation.name}'")
        return resolved

    def _expect(self, node: ast.Node, expected: Type, actual: Type) -> None:
        if not assignable(expected, actual):
            raise TypeCheckError(node.token, TypeErrorKind.TYPE_MISMATCH,
                                 f'expected {expected} but found {actual}')

    # -- statements ---------------------------------------------------------

    def _check_Program(self, node: ast.Program) -> Type:
        for stmt in node.statements:
            self._check(stmt)
        return UNIT

    def _check_Block(self, node: ast.Block) -> Type:
        self.table.enter_scope()
        for stmt in node.statements:
            self._check(stmt)
        self.table.exit_scope()
        return UNIT

    def _check_Let(self, node: ast.Let) -> Type:
        value_type = self._check(node.value)
        if node.annotation is not None:
            declared = self._resolve(node.annotation)
            self._expect(node.value, declared, value_type)
            value_type = declared
        self.table.define(node.name.value, value_type)
        return UNIT

    def _check_Assign(self, node: ast.Assign) -> Type:
        value_type = self._check(node.value)
        existing = self.table.lookup(node.name.value)
        if existing is None:
            self.table.define(node.name.value, value_type)
        elif not assignable(existing, value_type):
            raise TypeCheckError(
                node.name, TypeErrorKind.TYPE_MISMATCH,
                f"cannot assign {value_type} to '{node.name.value}' of type {existing}",
            )
        return UNIT

    def _check_FuncDef(self, node: ast.FuncDef) -> Type:
        params = tuple(self._resolve(p.annotation) for p in node.params)
        ret = self._resolve(node.return_type)
        self.table.define(node.name.value, FuncType('func', params, ret))

        self.table.enter_scope()
        for param, type_ in zip(node.params, params):
            self.table.define(param.name.value, type_)
        self._return_types.append(ret)
        for stmt in node.body.statements:
            self._check(stmt)
        self._return_types.pop()
        self.table.exit_scope()
        return UNIT

    def _check_If(self, node: ast.If) -> Type:
        self._expect(node.condition, BOOL, self._check(node.condition))
        self._check(node.then)
        if node.otherwise is not None:
            self._check(node.otherwise)
        return UNIT

    def _check_While(self, node: ast.While) -> Type:
        self._expect(node.condition, BOOL, self._check(node.condition))
        self._check(node.body)
        return UNIT

    def _check_Return(self, node: ast.Return) -> Type:
        if not self._return_types:
            raise TypeCheckError(node.token, TypeErrorKind.RETURN_OUTSIDE_FUNCTION)
        actual = UNIT if node.value is None else self._check(node.value)
        self._expect(node.value or node, self._return_types[-1], actual)
        return UNIT

    def _check_ExprStmt(self, node: ast.ExprStmt) -> Type:
        self._check(node.expr)
        return UNIT

    # -- expressions --------------------------------------------------------

    def _check_IntLit(self, node: ast.IntLit) -> Type:
        return INT

    def _check_FloatLit(self, node: ast.FloatLit) -> Type:
        return FLOAT

    def _check_StringLit(self, node: ast.StringLit) -> Type:
        return STR

    def _check_BoolLit(self, node: ast.BoolLit) -> Type:
        return BOOL

    def _check_Name(self, node: ast.Name) -> Type:
        found = self.table.lookup(node.name)
        if found is None:
            raise TypeCheckError(node.token, TypeErrorKind.UNDEFINED_VARIABLE,
                                 f"undefined variable '{node.name}'")
        return found

    def _check_Unary(self, node: ast.Unary) -> Type:
        operand = self._check(node.operand)
        if node.op == '-' and is_numeric(operand):
            return operand
        if node.op == '!' and operand == BOOL:
            return BOOL
        raise TypeCheckError(node.token, TypeErrorKind.TYPE_MISMATCH,
                             f"unsupported operand type for unary {node.op}: {operand}")

    def _check_Binary(self, node: ast.Binary) -> Type:
        left = self._check(node.left)
        right = self._check(node.right)
        op = node.op
        result: Type | None = None
        if op in _ARITHMETIC:
            if is_numeric(left) and is_numeric(right):
                result = INT if left == right == INT else FLOAT
            elif op == '+' and left == right == STR:
                result = STR
        elif op in _ORDERING:
            if is_numeric(left) and is_numeric(right):
                result = BOOL
        elif op in _EQUALITY:
            if left == right or (is_numeric(left) and is_numeric(right)):
                result = BOOL
        elif op in _LOGICAL:
            if left == right == BOOL:
                result = BOOL
        if result is None:
            raise TypeCheckError(node.token, TypeErrorKind.TYPE_MISMATCH,
                                 f'unsupported operand types for {op}: {left} and {right}')
        return result

    def _check_Call(self, node: ast.Call) -> Type:
        callee = self._check(node.callee)
        if not isinstance(callee, FuncType):
            raise TypeCheckError(node.callee.token, TypeErrorKind.NOT_CALLABLE,
                                 f'{callee} is not callable')
        if len(node.args) != len(callee.params):
            raise TypeCheckError(
                node.token, TypeErrorKind.ARITY_MISMATCH,
                f'expected {len(callee.params)} argument(s) but got {len(node.args)}',
            )
        for arg, expected in zip(node.args, callee.params):
            self._expect(arg, expected, self._check(arg))
        return callee.ret
