"""
Syntax error hierarchy, diagnostics, and recovery for the Queitite parser.

Every failure the parser can detect is raised as a subclass of the builtin
`SyntaxError`, carrying the message and source line of the offending token.
The parser's driver loop catches these, hands them to an `ErrorReporter`, and
calls `synchronize()` to skip the rest of the malformed statement so that one
bad line produces one diagnostic.

Exception Hierarchy
-------------------
SyntaxError (builtin)
├── LexError - malformed lexeme (unterminated string, bad number)
└── ParseError - base for every parser failure
    ├── UnexpectedToken - expected a specific token, found another
    ├── UnterminatedBlock - `do` without a matching `end`
    ├── InvalidAssignmentTarget - left side of `=` is not a bare name
    ├── MissingExpression - no valid expression start in primary position
    └── NestingTooDeep - nesting exceeds the recursion limit

Diagnostic format:

    [line 3] error: expected expression
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from queitite.queitite_constants import EOF, EOL, STATEMENT_KEYWORDS

if TYPE_CHECKING:
    from queitite.queitite_cursor import TokenCursor
    from queitite.queitite_lexer import Token

logger = logging.getLogger(__name__)


class LexError(SyntaxError):
    """Raised by the lexer for a lexeme it cannot decode."""

    def __init__(self, message: str, line: int = 0, col: int = 0) -> None:
        self.message = message
        self.line = line
        self.col = col
        super().__init__(message)


class ParseError(SyntaxError):
    """
    Base class for all syntax errors raised by the parser.

    Attributes:
        message (str): Human readable description.
        token (Token | None): The token the parser was looking at.
        line (int): Source line of the failure.
        expected (str | None): Token type the parser wanted, when known.
        found (str | None): Lexeme actually present, when known.
        note (str | None): Optional hint for the user.
    """

    def __init__(
        self,
        message: str,
        token: Token | None = None,
        *,
        line: int | None = None,
        expected: str | None = None,
        note: str | None = None,
    ) -> None:
        self.message = message
        self.token = token
        if line is None:
            line = token.line if token is not None else 0
        self.line = line
        self.expected = expected
        self.found = token.value if token is not None else None
        self.note = note
        super().__init__(message)

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(self.line, self.message)


class UnexpectedToken(ParseError):
    """The cursor wanted one token kind and found another."""


class UnterminatedBlock(ParseError):
    """End of input reached inside a `do` block."""


class InvalidAssignmentTarget(ParseError):
    """Left side of `=` is anything other than a bare identifier."""


class MissingExpression(ParseError):
    """A primary expression was required but no expression can start here."""


class NestingTooDeep(ParseError):
    """Input nests deeper than the interpreter stack allows the parser to follow."""


class Diagnostic(NamedTuple):
    line: int
    message: str

    def format(self) -> str:
        return f"[line {self.line}] error: {self.message}"


class ErrorReporter:
    """
    Collects diagnostics for one parse without halting it.

    The reporter never prints; callers decide what to do with the collected
    diagnostics (the CLI writes them to stderr).
    """

    def __init__(self) -> None:
        self.errors: list[ParseError] = []
        self.diagnostics: list[Diagnostic] = []

    def report(self, error: ParseError) -> Diagnostic:
        diagnostic = error.diagnostic()
        self.errors.append(error)
        self.diagnostics.append(diagnostic)
        logger.debug("recorded %s: %s", type(error).__name__, diagnostic.format())
        return diagnostic

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    @property
    def error_count(self) -> int:
        return len(self.diagnostics)

    def render(self) -> str:
        return "\n".join(d.format() for d in self.diagnostics)


def synchronize(cursor: TokenCursor) -> None:
    """
    Discard tokens until a safe place to resume parsing.

    Stops right after an end-of-line marker, or in front of a token that starts
    a statement. Always consumes at least one token unless the cursor is
    already at end of input, so the driver loop cannot stall.
    """
    while not cursor.at_end():
        tok = cursor.advance()
        if tok.type == EOL:
            break
        if cursor.check(*STATEMENT_KEYWORDS):
            break
    next_tok = cursor.peek()
    if next_tok.type != EOF:
        logger.debug(
            "resuming at line %d before %s %r", next_tok.line, next_tok.type, next_tok.value
        )


__all__ = [
    "Diagnostic",
    "ErrorReporter",
    "InvalidAssignmentTarget",
    "LexError",
    "MissingExpression",
    "NestingTooDeep",
    "ParseError",
    "UnexpectedToken",
    "UnterminatedBlock",
    "synchronize",
]
