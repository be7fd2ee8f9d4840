"""Scanner: runs the compiled lexer table over an input buffer."""

from __future__ import annotations

from typing import Protocol

from minicalc.compiler import NO_TRANSITION, CompiledTable
from minicalc.lexicon import get_table
from minicalc.symbols import CLASSIFIER, EOF_CHAR, Symbol, SymbolClassifier
from minicalc.tokens import KEYWORDS, Token, TokenKind


class TokenSource(Protocol):
    """Anything the interpreter can pull tokens from."""

    def has_next_token(self) -> bool: ...

    def next_token(self) -> Token: ...


class Scanner:
    """Pull-based tokenizer over a complete in-memory buffer.

    ``stop_on_error`` makes ``has_next_token`` report False for an ERROR
    token as well as for EOF.
    """

    def __init__(
        self,
        source: str,
        table: CompiledTable | None = None,
        classifier: SymbolClassifier | None = None,
        *,
        stop_on_error: bool = False,
    ) -> None:
        self._source = source
        self._table = table if table is not None else get_table()
        self._classifier = classifier if classifier is not None else CLASSIFIER
        self._stop_on_error = stop_on_error
        self._cursor = 0

    @property
    def source(self) -> str:
        return self._source

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, value: int) -> None:
        self._cursor = value

    def peek_character(self) -> str:
        if self._cursor < len(self._source):
            return self._source[self._cursor]
        return EOF_CHAR

    def peek_symbol(self) -> Symbol:
        return self._classifier.classify(self.peek_character())

    def next_token(self) -> Token:
        """Scan one token starting at the cursor.

        Characters consumed while the DFA stays in its start state are
        skipped. On reaching a final state its rollback count is given back.
        A missing transition yields an ERROR token after consuming exactly
        one more character.
        """
        table = self._table
        state = table.start
        begin = self._cursor
        lexeme_start: int | None = None

        while not table.is_final(state):
            next_state = table.next_state(state, self.peek_symbol())
            if next_state == NO_TRANSITION:
                start = begin if lexeme_start is None else lexeme_start
                self._cursor += 1
                return Token(TokenKind.ERROR, self._source[start : self._cursor], start)
            state = next_state
            if state != table.start and lexeme_start is None:
                lexeme_start = self._cursor
            self._cursor += 1

        for _ in range(table.rollback(state)):
            if self._cursor <= 0:
                break
            self._cursor -= 1
        # Consuming the end-of-input sentinel does not move past the buffer
        self._cursor = min(self._cursor, len(self._source))

        start = begin if lexeme_start is None else lexeme_start
        lexeme = self._source[start : self._cursor]
        kind = table.kind(state)
        if kind is TokenKind.IDENT:
            kind = KEYWORDS.get(lexeme, kind)
        return Token(kind, lexeme, start)

    def has_next_token(self) -> bool:
        """Probe the next token without moving the cursor."""
        saved = self._cursor
        kind = self.next_token().kind
        self._cursor = saved
        if kind is TokenKind.EOF:
            return False
        return not (self._stop_on_error and kind is TokenKind.ERROR)


class CommentFilter:
    """Token source that drops COMMENT tokens from a Scanner."""

    def __init__(self, scanner: Scanner) -> None:
        self._scanner = scanner

    @classmethod
    def over(cls, source: str) -> CommentFilter:
        return cls(Scanner(source))

    def next_token(self) -> Token:
        token = self._scanner.next_token()
        while token.kind is TokenKind.COMMENT:
            token = self._scanner.next_token()
        return token

    def has_next_token(self) -> bool:
        saved = self._scanner.cursor
        try:
            while self._scanner.has_next_token():
                if self._scanner.next_token().kind is not TokenKind.COMMENT:
                    return True
            return False
        finally:
            self._scanner.cursor = saved


def tokenize(source: str, *, keep_comments: bool = False) -> list[Token]:
    """Convenience function: scan *source* and return every token including EOF."""
    scanner = Scanner(source)
    tokens: list[Token] = []
    while scanner.has_next_token():
        token = scanner.next_token()
        if keep_comments or token.kind is not TokenKind.COMMENT:
            tokens.append(token)
    tokens.append(scanner.next_token())
    return tokens
