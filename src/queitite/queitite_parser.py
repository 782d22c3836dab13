"""
Queitite Language Parser

Parses a Queitite token sequence into an immutable abstract syntax tree (AST).

This module implements a recursive descent parser over a `TokenCursor`. Every
grammar rule is an explicit method; expression rules form a precedence ladder
where each tier delegates to the next tighter tier and loops while an operator
of its own tier is present.

Grammar
-------
    program     → declaration* EOF
    declaration → "fn" IDENT "(" params? ")" block | statement
    statement   → "if" expression statement ("else" statement)?
                | "for" "(" (IDENT | exprStmt | "and") expression? "and" expression? ")" statement
                | "print" expression EOL
                | "return" expression EOL
                | "while" "(" expression ")" statement
                | block
                | expression EOL
    block       → "do" declaration* "end"

    assignment  → IDENT "=" assignment | logic_or
    logic_or    → logic_and ("or" logic_and)*
    logic_and   → equality ("and" equality)*
    equality    → comparison (("==" | "!=") comparison)*
    comparison  → term ((">" | ">=" | "<" | "<=") term)*
    term        → factor (("+" | "-") factor)*
    factor      → unary (("/" | "*" | "**" | "??") unary)*
    unary       → ("!" | "-") unary | call
    call        → primary ("(" arguments? ")")*
    primary     → NUMBER | STRING | "true" | "false" | "nil" | "(" expression ")" | IDENT

Supported Constructs
--------------------
- Function declarations: `fn add(a, b) do return a + b end`
- Bindings without a keyword: `x = 1` is an ordinary assignment expression
  statement; whether it creates or updates a binding is up to the evaluator.
- `for` loops with `and`-separated clauses, desugared into `while` + blocks:
  `for (i = 0 and i < 10 and i = i + 1) print i`
- `if` without parentheses, `while` with mandatory parentheses.

Parser Behavior
---------------
- A simple statement ends at an end-of-line marker, or right before `end`,
  `else`, or end of input, so one-line forms such as
  `if ok print 1 else print 2` and `do a end` parse.
- Any syntax error raised while parsing a top-level declaration is recorded
  by the `ErrorReporter`, then `synchronize()` skips to the next statement
  boundary and parsing continues. With `fail_fast=True` the first error is
  recorded and re-raised instead.
- When the failed declaration left `do` blocks open, their `end` tokens are
  consumed silently once reached, so one bad statement in a body reports once.
- Nesting too deep for the interpreter stack is reported as `NestingTooDeep`
  at the token where the parser gave up.

Entry Points
------------
- `parse()`: Parse a full program into a `Program` node.
- `parse_expression()`: Parse exactly one expression spanning the whole input.

Raises
------
ParseError
    From `parse_expression()`, and from `parse()` in fail-fast mode.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from queitite.queitite_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Expr,
    ExpressionStmt,
    FunctionDecl,
    Grouping,
    If,
    Literal,
    Logical,
    Print,
    Program,
    Return,
    Stmt,
    Unary,
    VarBinding,
    Variable,
    While,
)
from queitite.queitite_constants import (
    COMPARISON_OPS,
    EOF,
    EOL,
    EQUALITY_OPS,
    ERROR,
    FACTOR_OPS,
    IDENT,
    NUMBER,
    STATEMENT_CLOSERS,
    STRING,
    TERM_OPS,
    UNARY_OPS,
)
from queitite.queitite_cursor import TokenCursor
from queitite.queitite_errors import (
    Diagnostic,
    ErrorReporter,
    InvalidAssignmentTarget,
    MissingExpression,
    NestingTooDeep,
    ParseError,
    UnexpectedToken,
    UnterminatedBlock,
    synchronize,
)
from queitite.queitite_lexer import Token

logger = logging.getLogger(__name__)

T = TypeVar("T")

_KEYWORD_LITERALS = {"TRUE": True, "FALSE": False, "NIL": None}


class Parser:
    """
    Queitite Parser Class

    Transforms a list of tokens into a `Program` AST. A parser instance is
    single-use: it owns its cursor and reporter for the duration of one parse.

    Attributes
    ----------
    cursor : TokenCursor
        Forward-only view over the input tokens.
    reporter : ErrorReporter
        Collects one diagnostic per recovered syntax error.
    fail_fast : bool
        Re-raise the first syntax error instead of recovering.
    """

    def __init__(
        self,
        tokens: Sequence[Token],
        fail_fast: bool = False,
        reporter: ErrorReporter | None = None,
    ) -> None:
        self.cursor = TokenCursor(tokens)
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.fail_fast = fail_fast
        # True while parsing the clauses of a `for` header, where `and` separates slots.
        self.and_is_separator = False
        # `do` blocks entered by the declaration being parsed.
        self.open_blocks = 0
        # `end` tokens still owed to blocks abandoned by an earlier error.
        self.pending_ends = 0

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.reporter.diagnostics

    # Driver

    def parse(self) -> Program:
        """Parse a full program, recovering from errors at statement boundaries."""
        statements: list[Stmt] = []
        self.skip_newlines()
        while not self.cursor.at_end():
            if self.pending_ends and self.cursor.match("END"):
                self.pending_ends -= 1
                self.skip_newlines()
                continue
            try:
                statements.append(self.declaration())
            except ParseError as e:
                self.recover(e)
            except RecursionError:
                self.recover(
                    NestingTooDeep("expression nested too deeply", self.cursor.peek())
                )
            self.skip_newlines()
        logger.debug(
            "parsed %d declarations with %d errors",
            len(statements),
            self.reporter.error_count,
        )
        return Program(tuple(statements), line=1)

    def recover(self, error: ParseError) -> None:
        """Report `error`, then skip to the next statement boundary."""
        self.reporter.report(error)
        if self.fail_fast:
            raise error
        start = self.cursor.position
        synchronize(self.cursor)
        skipped = self.cursor.tokens[start : self.cursor.position]
        opened = sum(tok.type == "DO" for tok in skipped)
        closed = sum(tok.type == "END" for tok in skipped)
        self.pending_ends = max(
            self.pending_ends + self.open_blocks + opened - closed, 0
        )
        self.open_blocks = 0

    def parse_expression(self) -> Expr:
        """Parse a single expression that must span the whole input."""
        self.skip_newlines()
        try:
            expr = self.expression()
        except RecursionError:
            raise NestingTooDeep(
                "expression nested too deeply", self.cursor.peek()
            ) from None
        self.skip_newlines()
        if not self.cursor.at_end():
            raise UnexpectedToken(
                "expected end of input after expression", self.cursor.peek()
            )
        return expr

    def skip_newlines(self) -> None:
        while self.cursor.match(EOL):
            pass

    def end_statement(self, message: str) -> None:
        if self.cursor.match(EOL):
            return
        if self.cursor.check(*STATEMENT_CLOSERS):
            return
        raise UnexpectedToken(message, self.cursor.peek(), expected=EOL)

    # Declarations

    def declaration(self) -> Stmt:
        if self.cursor.check("FN"):
            return self.function_declaration()
        return self.statement()

    def function_declaration(self) -> FunctionDecl:
        fn_tok = self.cursor.advance()
        name = self.cursor.expect(IDENT, "expected function name after 'fn'")
        self.cursor.expect("LPAREN", "expected '(' after function name")

        params: list[str] = []
        if not self.cursor.check("RPAREN"):
            while True:
                param = self.cursor.expect(IDENT, "expected parameter name")
                params.append(param.value)
                if not self.cursor.match("COMMA"):
                    break
        self.cursor.expect("RPAREN", "expected ')' after parameters")

        self.skip_newlines()
        if not self.cursor.check("DO"):
            raise UnexpectedToken(
                "expected 'do' before function body", self.cursor.peek(), expected="DO"
            )
        body = self.block()
        return FunctionDecl(name.value, tuple(params), body, line=fn_tok.line)

    # Statements

    def statement(self) -> Stmt:
        tok = self.cursor.peek()

        if tok.type == "IF":
            return self.if_statement()
        if tok.type == "FOR":
            return self.for_statement()
        if tok.type == "PRINT":
            return self.print_statement()
        if tok.type == "RETURN":
            return self.return_statement()
        if tok.type == "WHILE":
            return self.while_statement()
        if tok.type == "DO":
            return self.block()
        return self.expression_statement()

    def if_statement(self) -> If:
        if_tok = self.cursor.advance()
        condition = self.expression()
        self.skip_newlines()
        then_branch = self.statement()

        # An else on a following line still belongs to this if.
        self.skip_newlines()
        else_branch = None
        if self.cursor.match("ELSE"):
            self.skip_newlines()
            else_branch = self.statement()
        return If(condition, then_branch, else_branch, line=if_tok.line)

    def for_statement(self) -> Block:
        """
        Parse a `for` loop and desugar it:

            for (init and cond and incr) body
            →  Block(init, While(cond, Block(body, incr)))

        A missing condition becomes `Literal(True)`; a missing initializer or
        increment is left out of its block.
        """
        for_tok = self.cursor.advance()
        self.cursor.expect("LPAREN", "expected '(' after 'for'")

        saved = self.and_is_separator
        self.and_is_separator = True
        try:
            initializer: Stmt | None = None
            if not self.cursor.check("AND"):
                initializer = self.for_initializer()
            self.cursor.expect("AND", "expected 'and' after loop initializer")

            condition: Expr | None = None
            if not self.cursor.check("AND"):
                condition = self.expression()
            self.cursor.expect("AND", "expected 'and' after loop condition")

            increment: Expr | None = None
            if not self.cursor.check("RPAREN"):
                increment = self.expression()
        finally:
            self.and_is_separator = saved
        self.cursor.expect("RPAREN", "expected ')' after for clauses")

        self.skip_newlines()
        body = self.statement()

        line = for_tok.line
        loop_body: list[Stmt] = [body]
        if increment is not None:
            loop_body.append(ExpressionStmt(increment, line=increment.line))
        if condition is None:
            condition = Literal(True, line=line)
        loop = While(condition, Block(tuple(loop_body), line=line), line=line)

        outer: list[Stmt] = []
        if initializer is not None:
            outer.append(initializer)
        outer.append(loop)
        return Block(tuple(outer), line=line)

    def for_initializer(self) -> Stmt:
        # A lone name declares the loop variable; anything else is an expression.
        expr = self.expression()
        if isinstance(expr, Variable):
            return VarBinding(expr.name, line=expr.line)
        return ExpressionStmt(expr, line=expr.line)

    def print_statement(self) -> Print:
        print_tok = self.cursor.advance()
        value = self.expression()
        self.end_statement("expected end of line after value")
        return Print(value, line=print_tok.line)

    def return_statement(self) -> Return:
        return_tok = self.cursor.advance()
        value = self.expression()
        self.end_statement("expected end of line after return value")
        return Return(value, line=return_tok.line)

    def while_statement(self) -> While:
        while_tok = self.cursor.advance()
        self.cursor.expect("LPAREN", "expected '(' after 'while'")
        condition = self.expression()
        self.cursor.expect("RPAREN", "expected ')' after condition")
        self.skip_newlines()
        body = self.statement()
        return While(condition, body, line=while_tok.line)

    def block(self) -> Block:
        do_tok = self.cursor.expect("DO", "expected 'do' to open block")
        self.open_blocks += 1
        statements: list[Stmt] = []
        self.skip_newlines()
        while not self.cursor.check("END"):
            if self.cursor.at_end():
                raise UnterminatedBlock(
                    "unterminated block",
                    self.cursor.peek(),
                    expected="END",
                    note=f"block opened with 'do' on line {do_tok.line}",
                )
            statements.append(self.declaration())
            self.skip_newlines()
        self.cursor.advance()
        self.open_blocks -= 1
        return Block(tuple(statements), line=do_tok.line)

    def expression_statement(self) -> ExpressionStmt:
        expr = self.expression()
        self.end_statement("expected end of line after expression")
        return ExpressionStmt(expr, line=expr.line)

    # Expressions

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.cursor.check("ASSIGN"):
            equals = self.cursor.peek()
            if not isinstance(expr, Variable):
                raise InvalidAssignmentTarget("invalid assignment target", equals)
            self.cursor.advance()
            value = self.assignment()
            return Assign(expr.name, value, line=expr.line)

        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.cursor.check("OR"):
            op = self.cursor.advance()
            right = self.logic_and()
            expr = Logical(op.value, expr, right, line=op.line)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.cursor.check("AND") and not self.and_is_separator:
            op = self.cursor.advance()
            right = self.equality()
            expr = Logical(op.value, expr, right, line=op.line)
        return expr

    def equality(self) -> Expr:
        return self.binary_fold(self.comparison, EQUALITY_OPS)

    def comparison(self) -> Expr:
        return self.binary_fold(self.term, COMPARISON_OPS)

    def term(self) -> Expr:
        return self.binary_fold(self.factor, TERM_OPS)

    def factor(self) -> Expr:
        # `**` and `??` share the `*` tier and fold left like it.
        return self.binary_fold(self.unary, FACTOR_OPS)

    def binary_fold(
        self, operand: Callable[[], Expr], operators: tuple[str, ...]
    ) -> Expr:
        expr = operand()
        while self.cursor.check(*operators):
            op = self.cursor.advance()
            right = operand()
            expr = Binary(op.value, expr, right, line=op.line)
        return expr

    def unary(self) -> Expr:
        if self.cursor.check(*UNARY_OPS):
            op = self.cursor.advance()
            operand = self.unary()
            return Unary(op.value, operand, line=op.line)
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while self.cursor.check("LPAREN"):
            paren = self.cursor.advance()
            arguments = self.nested(self.arguments)
            self.cursor.expect("RPAREN", "expected ')' after arguments")
            expr = Call(expr, arguments, line=paren.line)
        return expr

    def arguments(self) -> tuple[Expr, ...]:
        args: list[Expr] = []
        if not self.cursor.check("RPAREN"):
            while True:
                args.append(self.expression())
                if not self.cursor.match("COMMA"):
                    break
        return tuple(args)

    def nested(self, rule: Callable[[], T]) -> T:
        """Run `rule` inside parentheses, where `and` is always a logical operator."""
        saved = self.and_is_separator
        self.and_is_separator = False
        try:
            return rule()
        finally:
            self.and_is_separator = saved

    def primary(self) -> Expr:
        tok = self.cursor.peek()

        if tok.type == NUMBER:
            self.cursor.advance()
            return Literal(number_value(tok), line=tok.line)
        if tok.type == STRING:
            self.cursor.advance()
            value = tok.literal if tok.literal is not None else tok.value
            return Literal(value, line=tok.line)
        if tok.type in _KEYWORD_LITERALS:
            self.cursor.advance()
            return Literal(_KEYWORD_LITERALS[tok.type], line=tok.line)
        if tok.type == "LPAREN":
            self.cursor.advance()
            inner = self.nested(self.expression)
            self.cursor.expect("RPAREN", "expected ')' after expression")
            return Grouping(inner, line=tok.line)
        if tok.type == IDENT:
            self.cursor.advance()
            return Variable(tok.value, line=tok.line)

        note = None
        if tok.type == EOF:
            note = "reached end of input"
        elif tok.type == ERROR:
            note = f"unexpected character {tok.value!r}"
        raise MissingExpression("expected expression", tok, note=note)


def number_value(tok: Token) -> int | float:
    if tok.literal is not None:
        return tok.literal  # type: ignore[no-any-return]
    return float(tok.value) if "." in tok.value else int(tok.value)


__all__ = ["Parser", "number_value"]
