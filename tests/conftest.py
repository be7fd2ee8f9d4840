"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from minicalc.interpreter import RunResult, interpret
from minicalc.scanner import tokenize
from minicalc.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str, keep_comments: bool = False) -> list[Token]:
        tokens = tokenize(source, keep_comments=keep_comments)
        return [t for t in tokens if t.kind != TokenKind.EOF]

    return _lex


@pytest.fixture
def run():
    """Return a helper that interprets source in a fresh session."""

    def _run(source: str) -> RunResult:
        return interpret(source)

    return _run


class RecordingSink:
    """Event sink that records every callback as a tuple."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_print(self, value) -> None:
        self.events.append(("print", value))

    def on_assign(self, identifier, value) -> None:
        self.events.append(("assign", identifier, value))

    def on_condition(self, condition) -> None:
        self.events.append(("condition", condition))


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_lexemes(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token lexemes match the expected list."""
    actual = [t.lexeme for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def rules(result: RunResult) -> list[str]:
    """Return the rule labels of all collected errors."""
    return [err.rule for err in result.errors]
