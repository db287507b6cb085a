"""
Type table: the symbol table filled in by the type checker.

A table is default-constructed and then seeded with the built-in bindings via
:meth:`TypeTable.init`.  The checker populates it incrementally while walking
the tree, so whatever was bound before a failure stays readable afterwards.

Tables are handed to worker threads; :attr:`TypeTable.lock` must be held while
building or reading one.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Type:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class FuncType(Type):
    params: tuple[Type, ...] = ()
    ret: Type = field(default_factory=lambda: UNIT)

    def __str__(self) -> str:
        args = ', '.join(str(p) for p in self.params)
        return f'func({args}) -> {self.ret}'


INT = Type('int')
FLOAT = Type('float')
STR = Type('str')
BOOL = Type('bool')
UNIT = Type('unit')
ANY = Type('any')

PRIMITIVES = {t.name: t for t in (INT, FLOAT, STR, BOOL, UNIT)}

BUILTINS: dict[str, Type] = {
    'print': FuncType('func', (ANY,), UNIT),
    'len': FuncType('func', (STR,), INT),
    'str': FuncType('func', (ANY,), STR),
    'int': FuncType('func', (ANY,), INT),
    'float': FuncType('func', (ANY,), FLOAT),
}


def is_numeric(t: Type) -> bool:
    return t in (INT, FLOAT)


def assignable(expected: Type, actual: Type) -> bool:
    """Whether a value of type *actual* may be stored where *expected* is required."""
    if ANY in (expected, actual) or expected == actual:
        return True
    return expected == FLOAT and actual == INT


class TypeTable:
    def __init__(self):
        self.lock = threading.RLock()
        self.scopes: list[dict[str, Type]] = [{}]
        self.types: dict[str, Type] = dict(PRIMITIVES)

    def init(self) -> TypeTable:
        """Seed the global scope with the built-in functions and return ``self``."""
        with self.lock:
            self.scopes[0].update(BUILTINS)
        return self

    @property
    def var_map(self) -> dict[str, Type]:
        """Every visible binding, inner scopes shadowing outer ones."""
        with self.lock:
            merged: dict[str, Type] = {}
            for scope in self.scopes:
                merged.update(scope)
            return merged

    @property
    def depth(self) -> int:
        return len(self.scopes)

    def is_builtin(self, name: str) -> bool:
        return name in BUILTINS and self.lookup(name) is BUILTINS[name]

    def lookup(self, name: str) -> Type | None:
        with self.lock:
            for scope in reversed(self.scopes):
                if name in scope:
                    return scope[name]
        return None

    def define(self, name: str, type_: Type) -> None:
        with self.lock:
            self.scopes[-1][name] = type_

    def resolve_type(self, name: str) -> Type | None:
        return self.types.get(name)

    def enter_scope(self) -> None:
        with self.lock:
            self.scopes.append({})

    def exit_scope(self) -> None:
        with self.lock:
            if len(self.scopes) > 1:
                self.scopes.pop()
