"""
Forward-only cursor over a Queitite token sequence.

The cursor is the only mutable state of a parse: a position into an immutable
tuple of tokens, with one token of lookahead. It never moves backward, and once
it reaches the terminating `EOF` token it stays there.
"""

from collections.abc import Sequence

from queitite.queitite_constants import EOF
from queitite.queitite_errors import UnexpectedToken
from queitite.queitite_lexer import Token


class TokenCursor:
    """
    Read-only, forward-only view over a token sequence.

    If the sequence does not already end with an `EOF` token one is appended,
    positioned on the line of the last token, so every parsing routine can rely
    on `peek()` always returning a token.

    Attributes
    ----------
    tokens : tuple[Token, ...]
        The tokens being parsed, always terminated by `EOF`.
    position : int
        Index of the current (not yet consumed) token.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        items = list(tokens)
        if not items or items[-1].type != EOF:
            last_line = items[-1].line if items else 1
            items.append(Token(EOF, "", last_line))
        self.tokens: tuple[Token, ...] = tuple(items)
        self.position: int = 0

    def peek(self) -> Token:
        return self.tokens[self.position]

    def advance(self) -> Token:
        tok = self.tokens[self.position]
        if tok.type != EOF:
            self.position += 1
        return tok

    def check(self, *kinds: str) -> bool:
        return self.tokens[self.position].type in kinds

    def match(self, *kinds: str) -> bool:
        if self.check(*kinds):
            self.advance()
            return True
        return False

    def expect(self, kind: str, message: str) -> Token:
        """Consume a token of `kind`, or raise UnexpectedToken at the current token."""
        if self.check(kind):
            return self.advance()
        raise UnexpectedToken(message, self.peek(), expected=kind)

    def at_end(self) -> bool:
        return self.check(EOF)

    def __repr__(self) -> str:
        return f"TokenCursor(position={self.position}, current={self.peek()!r})"


__all__ = ["TokenCursor"]
