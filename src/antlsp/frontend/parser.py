"""
Recursive-descent parser for TypedAnt.

Statements are separated by newlines or ``;``.  Expressions are parsed by
precedence climbing.  The parser stops at the first error and raises
:class:`~antlsp.frontend.errors.ParseError` carrying the offending token;
there is no error recovery.
"""
from __future__ import annotations

from . import ast
from .errors import ParseError, ParseErrorKind
from .lexer import unescape
from .token import Token, TokenKind

# Binary operator precedence, loosest first.
_PRECEDENCE = {
    '||': 1,
    '&&': 2,
    '==': 3, '!=': 3,
    '<': 4, '<=': 4, '>': 4, '>=': 4,
    '+': 5, '-': 5,
    '*': 6, '/': 6, '%': 6,
}


def describe(token: Token) -> str:
    if token.kind in (TokenKind.EOF, TokenKind.NEWLINE):
        return token.kind.value
    return f"'{token.value}'"


class Parser:
    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            last = tokens[-1] if tokens else None
            eof = Token(TokenKind.EOF, '', last.line if last else 1, last.column if last else 1)
            tokens = [*tokens, eof]
        self.tokens = tokens
        self.pos = 0

    # -- token helpers ------------------------------------------------------

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind is not TokenKind.EOF:
            self.pos += 1
        return tok

    def _skip_newlines(self) -> None:
        while self.current.kind is TokenKind.NEWLINE or self.current.is_op(';'):
            self._advance()

    def _expect_op(self, op: str) -> Token:
        if not self.current.is_op(op):
            raise ParseError(
                self.current, ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected '{op}' but found {describe(self.current)}",
            )
        return self._advance()

    def _expect_ident(self) -> Token:
        if self.current.kind is not TokenKind.IDENT:
            raise ParseError(self.current, ParseErrorKind.EXPECTED_IDENTIFIER)
        return self._advance()

    # -- program / statements -----------------------------------------------

    def parse_program(self) -> ast.Program:
        """Parse the whole token stream.

        On failure the raised :class:`ParseError` has ``partial`` set to a
        :class:`~antlsp.frontend.ast.Program` holding the top-level statements
        completed before the error.

        Nesting deeper than the interpreter stack allows is reported as a
        ``NESTING_TOO_DEEP`` error at the token reached.
        """
        program = ast.Program(token=self.current)
        try:
            self._skip_newlines()
            while self.current.kind is not TokenKind.EOF:
                program.statements.append(self._statement())
                self._end_of_statement()
                self._skip_newlines()
        except ParseError as err:
            err.partial = program
            raise
        except RecursionError:
            err = ParseError(self.current, ParseErrorKind.NESTING_TOO_DEEP)
            err.partial = program
            raise err from None
        return program

    def _end_of_statement(self) -> None:
        tok = self.current
        if tok.kind in (TokenKind.NEWLINE, TokenKind.EOF) or tok.is_op(';', '}'):
            return
        raise ParseError(
            tok, ParseErrorKind.UNEXPECTED_TOKEN,
            f'expected end of statement but found {describe(tok)}',
        )

    def _statement(self) -> ast.Node:
        tok = self.current
        if tok.is_keyword('let'):
            return self._let()
        if tok.is_keyword('func'):
            return self._func()
        if tok.is_keyword('if'):
            return self._if()
        if tok.is_keyword('while'):
            self._advance()
            condition = self._expression()
            return ast.While(token=tok, condition=condition, body=self._block())
        if tok.is_keyword('return'):
            self._advance()
            nxt = self.current
            if nxt.kind in (TokenKind.NEWLINE, TokenKind.EOF) or nxt.is_op(';', '}'):
                return ast.Return(token=tok)
            return ast.Return(token=tok, value=self._expression())

        expr = self._expression()
        if self.current.is_op('='):
            if not isinstance(expr, ast.Name):
                raise ParseError(self.current, ParseErrorKind.INVALID_ASSIGNMENT_TARGET)
            eq = self._advance()
            return ast.Assign(token=eq, name=expr.token, value=self._expression())
        return ast.ExprStmt(token=tok, expr=expr)

    def _let(self) -> ast.Let:
        tok = self._advance()
        name = self._expect_ident()
        annotation = None
        if self.current.is_op(':'):
            self._advance()
            annotation = self._type()
        self._expect_op('=')
        return ast.Let(token=tok, name=name, annotation=annotation, value=self._expression())

    def _func(self) -> ast.FuncDef:
        tok = self._advance()
        name = self._expect_ident()
        self._expect_op('(')
        params: list[ast.Param] = []
        while not self.current.is_op(')'):
            pname = self._expect_ident()
            self._expect_op(':')
            params.append(ast.Param(name=pname, annotation=self._type()))
            if not self.current.is_op(','):
                break
            self._advance()
        self._expect_op(')')
        return_type = None
        if self.current.is_op('->'):
            self._advance()
            return_type = self._type()
        return ast.FuncDef(token=tok, name=name, params=params,
                           return_type=return_type, body=self._block())

    def _if(self) -> ast.If:
        tok = self._advance()
        condition = self._expression()
        then = self._block()
        node = ast.If(token=tok, condition=condition, then=then)

        # ``else`` may sit on the line after the closing brace.
        mark = self.pos
        while self.current.kind is TokenKind.NEWLINE:
            self._advance()
        if self.current.is_keyword('else'):
            self._advance()
            node.otherwise = self._if() if self.current.is_keyword('if') else self._block()
        else:
            self.pos = mark
        return node

    def _block(self) -> ast.Block:
        brace = self._expect_op('{')
        block = ast.Block(token=brace)
        self._skip_newlines()
        while not self.current.is_op('}'):
            if self.current.kind is TokenKind.EOF:
                raise ParseError(self.current, ParseErrorKind.UNCLOSED_BLOCK,
                                 f"'{{' opened on line {brace.line} is never closed")
            block.statements.append(self._statement())
            self._end_of_statement()
            self._skip_newlines()
        self._advance()
        return block

    def _type(self) -> ast.TypeName:
        if self.current.kind is not TokenKind.IDENT:
            raise ParseError(self.current, ParseErrorKind.EXPECTED_TYPE)
        tok = self._advance()
        return ast.TypeName(token=tok, name=tok.value)

    # -- expressions --------------------------------------------------------

    def _expression(self, min_prec: int = 1) -> ast.Node:
        left = self._unary()
        while True:
            tok = self.current
            prec = _PRECEDENCE.get(tok.value) if tok.kind is TokenKind.OP else None
            if prec is None or prec < min_prec:
                return left
            self._advance()
            right = self._expression(prec + 1)
            left = ast.Binary(token=tok, op=tok.value, left=left, right=right)

    def _unary(self) -> ast.Node:
        tok = self.current
        if tok.is_op('-', '!'):
            self._advance()
            return ast.Unary(token=tok, op=tok.value, operand=self._unary())
        return self._postfix(self._primary())

    def _postfix(self, expr: ast.Node) -> ast.Node:
        while self.current.is_op('('):
            paren = self._advance()
            args: list[ast.Node] = []
            while not self.current.is_op(')'):
                args.append(self._expression())
                if not self.current.is_op(','):
                    break
                self._advance()
            self._expect_op(')')
            expr = ast.Call(token=paren, callee=expr, args=args)
        return expr

    def _primary(self) -> ast.Node:
        tok = self.current
        if tok.kind is TokenKind.INT:
            self._advance()
            return ast.IntLit(token=tok, value=int(tok.value))
        if tok.kind is TokenKind.FLOAT:
            self._advance()
            return ast.FloatLit(token=tok, value=float(tok.value))
        if tok.kind is TokenKind.STRING:
            self._advance()
            return ast.StringLit(token=tok, value=unescape(tok.value))
        if tok.is_keyword('true', 'false'):
            self._advance()
            return ast.BoolLit(token=tok, value=tok.value == 'true')
        if tok.kind is TokenKind.IDENT:
            self._advance()
            return ast.Name(token=tok, name=tok.value)
        if tok.is_op('('):
            self._advance()
            expr = self._expression()
            self._expect_op(')')
            return expr
        raise ParseError(tok, ParseErrorKind.EXPECTED_EXPRESSION)
