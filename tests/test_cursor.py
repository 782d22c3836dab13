import pytest

from queitite.queitite_cursor import TokenCursor
from queitite.queitite_errors import UnexpectedToken
from queitite.queitite_lexer import Token, tokenize


def make_tokens(*types_vals: tuple[str, str]) -> list[Token]:
    return [Token(t, v, line=1) for t, v in types_vals] + [Token("EOF", "", 1)]


def test_peek_does_not_consume() -> None:
    cursor = TokenCursor(tokenize("a b"))
    assert cursor.peek().value == "a"
    assert cursor.peek().value == "a"
    assert cursor.position == 0


def test_advance_returns_consumed_token() -> None:
    cursor = TokenCursor(tokenize("a b"))
    assert cursor.advance().value == "a"
    assert cursor.peek().value == "b"


def test_advance_at_eof_stays_put() -> None:
    cursor = TokenCursor(tokenize(""))
    assert cursor.advance().type == "EOF"
    assert cursor.advance().type == "EOF"
    assert cursor.position == 0
    assert cursor.at_end()


def test_check_and_match() -> None:
    cursor = TokenCursor(make_tokens(("IDENT", "x"), ("PLUS", "+")))
    assert cursor.check("IDENT")
    assert cursor.check("NUMBER", "IDENT")
    assert not cursor.check("PLUS")
    assert not cursor.match("PLUS")
    assert cursor.position == 0
    assert cursor.match("IDENT")
    assert cursor.check("PLUS")


def test_expect_consumes_on_match() -> None:
    cursor = TokenCursor(make_tokens(("LPAREN", "(")))
    tok = cursor.expect("LPAREN", "expected '('")
    assert tok.type == "LPAREN"
    assert cursor.at_end()


def test_expect_raises_with_message_and_line() -> None:
    cursor = TokenCursor(tokenize("\n\nx"))
    cursor.advance()
    cursor.advance()
    with pytest.raises(UnexpectedToken) as e:
        cursor.expect("LPAREN", "expected '(' after name")
    assert e.value.message == "expected '(' after name"
    assert e.value.line == 3
    assert e.value.expected == "LPAREN"
    assert e.value.found == "x"
    assert isinstance(e.value, SyntaxError)
    assert cursor.position == 2


def test_missing_eof_is_appended() -> None:
    cursor = TokenCursor([Token("IDENT", "x", 4, 1)])
    assert len(cursor.tokens) == 2
    assert cursor.tokens[-1].type == "EOF"
    assert cursor.tokens[-1].line == 4


def test_empty_sequence_gets_eof() -> None:
    cursor = TokenCursor([])
    assert cursor.at_end()
    assert cursor.peek().line == 1


def test_cursor_never_moves_backward() -> None:
    cursor = TokenCursor(tokenize("a + b * c"))
    seen = []
    while not cursor.at_end():
        seen.append(cursor.position)
        cursor.advance()
    assert seen == sorted(seen)
    assert len(set(seen)) == len(seen)
