"""Input alphabet: abstract symbol classes and the character classifier."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum, auto

from minicalc.errors import AlphabetError

# Sentinel character returned when peeking past the end of the input
EOF_CHAR = "\0"


class Symbol(Enum):
    # Clustered
    DIGIT = auto()
    LETTER_NOT_E = auto()
    LETTER_E = auto()
    SINGLE_QUOTE = auto()
    DOUBLE_QUOTE = auto()
    WHITESPACE = auto()
    ENDLINE = auto()

    # Relational
    EQUALS = auto()
    EXCLAMATION_POINT = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()

    # Single characters
    EOF = auto()
    PLUS = auto()
    MULT = auto()
    MINUS = auto()
    DIVIDE = auto()
    MODULO = auto()
    LPAREN = auto()
    RPAREN = auto()
    COMMA = auto()
    PERIOD = auto()
    HASHTAG = auto()
    SEMICOLON = auto()

    # Unmapped characters
    ERROR = auto()


_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

CHARSETS: dict[Symbol, str] = {
    Symbol.DIGIT: "0123456789",
    Symbol.LETTER_NOT_E: _LETTERS.replace("E", "").replace("e", ""),
    Symbol.LETTER_E: "eE",
    Symbol.SINGLE_QUOTE: "'",
    Symbol.DOUBLE_QUOTE: '"',
    Symbol.WHITESPACE: " \t",
    Symbol.ENDLINE: "\n\r",
    Symbol.EQUALS: "=",
    Symbol.EXCLAMATION_POINT: "!",
    Symbol.GREATER_THAN: ">",
    Symbol.LESS_THAN: "<",
    Symbol.EOF: EOF_CHAR,
    Symbol.PLUS: "+",
    Symbol.MULT: "*",
    Symbol.MINUS: "-",
    Symbol.DIVIDE: "/",
    Symbol.MODULO: "%",
    Symbol.LPAREN: "(",
    Symbol.RPAREN: ")",
    Symbol.COMMA: ",",
    Symbol.PERIOD: ".",
    Symbol.HASHTAG: "#",
    Symbol.SEMICOLON: ";",
}


class SymbolClassifier:
    """Map raw characters to symbols through a table built once at construction.

    Every character belongs to at most one symbol; overlapping character
    sets are rejected with AlphabetError. Characters outside every set
    classify to *fallback*.
    """

    def __init__(
        self,
        charsets: Mapping[Symbol, str],
        fallback: Symbol = Symbol.ERROR,
    ) -> None:
        self._fallback = fallback
        self._charsets = dict(charsets)
        self._table: dict[str, Symbol] = {}
        for symbol, chars in self._charsets.items():
            if symbol is fallback and chars:
                raise AlphabetError(f"fallback symbol {symbol.name} cannot own characters")
            for ch in chars:
                owner = self._table.get(ch)
                if owner is not None and owner is not symbol:
                    raise AlphabetError(
                        f"character {ch!r} belongs to both {owner.name} and {symbol.name}"
                    )
                self._table[ch] = symbol

    @property
    def fallback(self) -> Symbol:
        return self._fallback

    def classify(self, ch: str) -> Symbol:
        return self._table.get(ch, self._fallback)

    def characters(self, symbol: Symbol) -> str:
        """Return the declared characters of *symbol* (empty for the fallback)."""
        return self._charsets.get(symbol, "")

    def symbols(self) -> Iterator[Symbol]:
        """Yield every symbol of the alphabet, fallback included, in declaration order."""
        yield from self._charsets
        if self._fallback not in self._charsets:
            yield self._fallback

    def __contains__(self, ch: object) -> bool:
        return ch in self._table


CLASSIFIER = SymbolClassifier(CHARSETS)


def classify(ch: str) -> Symbol:
    """Classify *ch* with the default alphabet."""
    return CLASSIFIER.classify(ch)
