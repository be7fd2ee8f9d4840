"""Token kinds, token and position data structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    # Data
    NUMBER = auto()
    IDENT = auto()
    STRING = auto()
    EOF = auto()

    # Arithmetic
    PLUS = auto()  # +
    MINUS = auto()  # -
    MULT = auto()  # *
    DIVIDE = auto()  # /
    MODULO = auto()  # %
    EXP = auto()  # **

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    COMMA = auto()  # ,
    PERIOD = auto()  # .
    SEMICOLON = auto()  # ;

    # Relational
    EQUALS = auto()  # ==
    NOT_EQUALS = auto()  # !=
    GREATER_THAN = auto()  # >
    GREATER_THAN_OR_EQUALS = auto()  # >=
    LESS_THAN = auto()  # <
    LESS_THAN_OR_EQUALS = auto()  # <=

    # Keywords
    IF = auto()
    PRINT = auto()
    SQRT = auto()

    # Special
    ERROR = auto()
    COMMENT = auto()  # // or # to end of line

    ASSIGNMENT = auto()  # =


# Identifier lexemes promoted to keyword kinds (case-sensitive)
KEYWORDS: dict[str, TokenKind] = {
    "IF": TokenKind.IF,
    "PRINT": TokenKind.PRINT,
    "SQRT": TokenKind.SQRT,
}

RELATIONAL = frozenset(
    {
        TokenKind.EQUALS,
        TokenKind.NOT_EQUALS,
        TokenKind.GREATER_THAN,
        TokenKind.GREATER_THAN_OR_EQUALS,
        TokenKind.LESS_THAN,
        TokenKind.LESS_THAN_OR_EQUALS,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A scanned token: kind, exact lexeme, and 0-based offset of the lexeme."""

    kind: TokenKind
    lexeme: str
    offset: int = 0


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


def position_at(source: str, offset: int) -> Position:
    """Convert a character offset into a line/column Position."""
    offset = max(0, min(offset, len(source)))
    line = source.count("\n", 0, offset) + 1
    line_start = source.rfind("\n", 0, offset) + 1
    return Position(line, offset - line_start + 1, offset)
