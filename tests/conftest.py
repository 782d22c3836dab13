import os

import pytest

from queitite.queitite_ast import Program
from queitite.queitite_lexer import Token, tokenize
from queitite.queitite_parser import Parser

# Subprocess coverage for CLI runs started with COVERAGE_PROCESS_START
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


@pytest.fixture  # type: ignore[misc]
def parse_source() -> "ParseSource":
    return ParseSource()


class ParseSource:
    """Callable fixture: lex and parse source text, keeping the parser for inspection."""

    parser: Parser | None = None

    def __call__(self, source: str, fail_fast: bool = False) -> Program:
        self.parser = Parser(tokenize(source), fail_fast=fail_fast)
        return self.parser.parse()

    @property
    def messages(self) -> list[str]:
        assert self.parser is not None
        return [d.message for d in self.parser.diagnostics]

    @property
    def tokens(self) -> tuple[Token, ...]:
        assert self.parser is not None
        return self.parser.cursor.tokens
