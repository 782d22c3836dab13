"""
Lexical analyzer for the Queitite language.

This module turns raw source text into the token stream consumed by the parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, lexeme, decoded literal, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Emits an `EOL` token for every newline; other whitespace is skipped
    - Skips `#` comments up to (not including) the newline
    - Longest-match recognition of operators (`**`, `??`, `==`, `!=`, `>=`, `<=`)
    - Recognizes identifiers and keywords, integer and float numbers, and
      double- or single-quoted strings with `\\n`, `\\t`, `\\\\` and quote escapes

Raises:
    LexError: If a malformed float or an unterminated string is encountered.

Example:
    >>> tokenize("print 42")
    [Token(PRINT, print), Token(NUMBER, 42), Token(EOF, )]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
    - token_hashmap
"""

from typing import Any

from queitite.queitite_constants import (
    EOF,
    EOL,
    ERROR,
    IDENT,
    KEYWORDS,
    NUMBER,
    OPERATORS,
    STRING,
    token_hashmap,
)
from queitite.queitite_errors import LexError

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'"}
_MAX_OPERATOR_LEN = max(len(op) for op in OPERATORS)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the Queitite language.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'NUMBER', 'EOL', 'EOF').
        value (str): The lexeme as written in the source.
        line (int): The 1-based line number where the token appears.
        col (int): The 1-based column number where the token starts.
        literal (Any): Decoded payload for NUMBER (int/float) and STRING tokens, else None.
    """

    def __init__(
        self,
        type_: str,
        value: str,
        line: int = 0,
        col: int = 0,
        literal: Any = None,
    ):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col
        self.literal = literal

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "value": self.value,
            "literal": self.literal,
            "line": self.line,
            "col": self.col,
        }


class Lexer:
    """Lexical analyzer for the Queitite language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips blanks and comments, stopping in front of a newline."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest operator from the current position."""
        line, col = self.stream.line, self.stream.column
        max_token = None
        candidate = ""

        for i in range(_MAX_OPERATOR_LEN):
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in OPERATORS:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(OPERATORS[max_token], max_token, line, col)

        return None

    def read_number(self, line: int, col: int) -> Token:
        num = ""
        has_dot = False
        while not self.stream.end_of_file() and (
            self.peek().isdigit() or self.peek() == "."
        ):
            if self.peek() == ".":
                if has_dot:
                    raise LexError("invalid number literal", line, col)
                has_dot = True
            num += self.advance()
        literal: int | float = float(num) if has_dot else int(num)
        return Token(NUMBER, num, line, col, literal=literal)

    def read_string(self, line: int, col: int) -> Token:
        quote = self.advance()
        raw = ""
        decoded = ""
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch == "\\":
                raw += self.advance()
                if not self.stream.end_of_file():
                    esc = self.advance()
                    raw += esc
                    decoded += _ESCAPES.get(esc, "\\" + esc)
            elif ch == quote:
                break
            else:
                raw += self.advance()
                decoded += ch
        if self.peek() == quote:
            self.advance()
            return Token(STRING, raw, line, col, literal=decoded)
        raise LexError("unterminated string", line, col)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Raises:
            LexError: If a malformed token is encountered.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token(EOF, "", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        if ch == "\n":
            self.advance()
            return Token(EOL, "\n", line, col)

        # 1. Identifier or keyword
        if ch.isalpha() or ch == "_":
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                ident += self.advance()
            if ident in KEYWORDS:
                return Token(KEYWORDS[ident], ident, line, col)
            return Token(IDENT, ident, line, col)

        # 2. Number or float
        if ch.isdigit():
            return self.read_number(line, col)

        # 3. String
        if ch in ('"', "'"):
            return self.read_string(line, col)

        # 4. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character; the parser reports it
        return Token(ERROR, self.advance(), line, col)

    def tokens(self) -> list[Token]:
        """Drains the stream, returning every token including the final EOF."""
        out: list[Token] = []
        while True:
            tok = self.next_token()
            out.append(tok)
            if tok.type == EOF:
                return out


def tokenize(source: str) -> list[Token]:
    return Lexer(CharacterStream(source)).tokens()


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap", "tokenize"]
