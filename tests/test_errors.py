import logging

import pytest

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
from queitite.queitite_lexer import Token, tokenize


@pytest.mark.parametrize(  # type: ignore[misc]
    "cls",
    [
        UnexpectedToken,
        UnterminatedBlock,
        InvalidAssignmentTarget,
        MissingExpression,
        NestingTooDeep,
    ],
)
def test_error_kinds_are_syntax_errors(cls: type[ParseError]) -> None:
    err = cls("boom", Token("IDENT", "x", 5, 2))
    assert isinstance(err, ParseError)
    assert isinstance(err, SyntaxError)
    assert err.line == 5
    assert err.found == "x"
    assert str(err) == "boom"


def test_explicit_line_overrides_token() -> None:
    err = ParseError("boom", Token("IDENT", "x", 5, 2), line=9)
    assert err.line == 9


def test_error_without_token() -> None:
    err = ParseError("boom")
    assert err.line == 0
    assert err.token is None
    assert err.found is None


def test_diagnostic_format() -> None:
    assert Diagnostic(3, "expected expression").format() == (
        "[line 3] error: expected expression"
    )


def test_reporter_collects_in_order(caplog: pytest.LogCaptureFixture) -> None:
    reporter = ErrorReporter()
    assert not reporter.had_error
    with caplog.at_level(logging.DEBUG, logger="queitite.queitite_errors"):
        reporter.report(MissingExpression("expected expression", Token("EOL", "\n", 1)))
        reporter.report(UnterminatedBlock("unterminated block", Token("EOF", "", 4)))
    assert reporter.had_error
    assert reporter.error_count == 2
    assert reporter.diagnostics == [
        Diagnostic(1, "expected expression"),
        Diagnostic(4, "unterminated block"),
    ]
    assert isinstance(reporter.errors[1], UnterminatedBlock)
    assert reporter.render() == (
        "[line 1] error: expected expression\n[line 4] error: unterminated block"
    )
    assert "MissingExpression" in caplog.text


def test_synchronize_stops_after_eol() -> None:
    cursor = TokenCursor(tokenize("1 2 3\nx"))
    synchronize(cursor)
    assert cursor.peek().value == "x"


def test_synchronize_stops_before_statement_keyword() -> None:
    cursor = TokenCursor(tokenize("1 2 print x"))
    synchronize(cursor)
    assert cursor.peek().type == "PRINT"


@pytest.mark.parametrize(  # type: ignore[misc]
    "keyword", ["fn", "if", "for", "print", "return", "while", "do"]
)
def test_synchronize_recognizes_every_statement_keyword(keyword: str) -> None:
    cursor = TokenCursor(tokenize(f") ) {keyword}"))
    synchronize(cursor)
    assert cursor.peek().value == keyword


def test_synchronize_always_makes_progress() -> None:
    # The failing token itself is discarded even when it starts a statement.
    cursor = TokenCursor(tokenize("print print x"))
    synchronize(cursor)
    assert cursor.position == 1
    assert cursor.peek().type == "PRINT"


def test_synchronize_at_eof_is_noop() -> None:
    cursor = TokenCursor(tokenize(""))
    synchronize(cursor)
    assert cursor.at_end()


def test_synchronize_runs_to_eof() -> None:
    cursor = TokenCursor(tokenize("a b c"))
    synchronize(cursor)
    assert cursor.at_end()
