"""The language's lexer DFA: graph authoring and the shared compiled table."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from minicalc.compiler import CompiledTable, compile_graph
from minicalc.graph import State, TransitionGraph
from minicalc.symbols import Symbol
from minicalc.tokens import TokenKind

ALPHABET = tuple(Symbol)

# Root symbols whose single-character token has the same name
_SINGLE_KINDS = {
    Symbol.EOF: TokenKind.EOF,
    Symbol.PLUS: TokenKind.PLUS,
    Symbol.MINUS: TokenKind.MINUS,
    Symbol.MODULO: TokenKind.MODULO,
    Symbol.LPAREN: TokenKind.LPAREN,
    Symbol.RPAREN: TokenKind.RPAREN,
    Symbol.COMMA: TokenKind.COMMA,
    Symbol.PERIOD: TokenKind.PERIOD,
    Symbol.SEMICOLON: TokenKind.SEMICOLON,
}


@dataclass
class LexerSpec:
    """A transition graph plus the per-state data the compiler needs."""

    graph: TransitionGraph = field(default_factory=TransitionGraph)
    rollbacks: dict[State, int] = field(default_factory=dict)
    token_kinds: dict[State, TokenKind] = field(default_factory=dict)

    def accept(
        self,
        state: State,
        kind: TokenKind,
        rollback: int = 0,
        trap: State | None = None,
    ) -> State:
        """Mark *state* final for *kind*; complete it towards *trap* if given."""
        self.graph.set_final(state)
        self.token_kinds[state] = kind
        if rollback:
            self.rollbacks[state] = rollback
        if trap is not None:
            self.graph.complete(state, ALPHABET, trap)
        return state

    def otherwise(self, state: State, target: State | None = None) -> State:
        result = self.graph.complete(state, ALPHABET, target)
        assert result is not None
        return result

    def compile(self) -> CompiledTable:
        return compile_graph(self.graph, self.rollbacks, self.token_kinds)


def build_lexer() -> LexerSpec:
    """Author the DFA for every token kind of the language."""
    spec = LexerSpec()
    g = spec.graph

    # Whitespace and newlines loop on the root, so they never reach a lexeme
    root = g.start
    g.loop(root, Symbol.WHITESPACE)
    g.loop(root, Symbol.ENDLINE)

    trap = g.transition(root, Symbol.ERROR)
    spec.accept(trap, TokenKind.ERROR)
    spec.otherwise(trap, trap)

    _numbers(spec, root, trap)
    _identifiers(spec, root, trap)
    _strings(spec, root, trap)
    _mult_and_exp(spec, root, trap)
    _divide_and_comments(spec, root, trap)
    _relational(spec, root, trap)

    for symbol in ALPHABET:
        if not g.has_transition(root, symbol):
            fin = g.transition(root, symbol)
            kind = _SINGLE_KINDS.get(symbol, TokenKind.ERROR)
            spec.accept(fin, kind, trap=trap)
    spec.otherwise(root, trap)
    return spec


def _numbers(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph

    num = g.loop(g.transition(root, Symbol.DIGIT), Symbol.DIGIT)

    decimal_point = g.transition(num, Symbol.PERIOD)
    decimal_digit = g.loop(g.transition(decimal_point, Symbol.DIGIT), Symbol.DIGIT)

    exponent = g.transition(num, Symbol.LETTER_E)
    g.transition(decimal_digit, Symbol.LETTER_E, exponent)

    signed_exponent = g.transition(exponent, Symbol.MINUS)
    g.transition(exponent, Symbol.PLUS, signed_exponent)

    exponent_digit = g.loop(g.transition(exponent, Symbol.DIGIT), Symbol.DIGIT)
    g.transition(signed_exponent, Symbol.DIGIT, exponent_digit)

    # One character past the number confirms it ended
    fin = spec.otherwise(num)
    spec.otherwise(decimal_digit, fin)
    spec.otherwise(exponent_digit, fin)
    spec.accept(fin, TokenKind.NUMBER, rollback=1, trap=trap)

    # "1." and "1e" give back the dangling '.' or 'e' too
    fin_two = spec.otherwise(decimal_point)
    spec.otherwise(exponent, fin_two)
    spec.accept(fin_two, TokenKind.NUMBER, rollback=2, trap=trap)

    # "1e-" gives back the sign as well
    fin_three = spec.otherwise(signed_exponent)
    spec.accept(fin_three, TokenKind.NUMBER, rollback=3, trap=trap)


def _identifiers(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph
    letter = g.transition(root, Symbol.LETTER_NOT_E)
    g.transition(root, Symbol.LETTER_E, letter)
    g.loop(letter, Symbol.LETTER_NOT_E)
    g.loop(letter, Symbol.LETTER_E)

    fin = spec.otherwise(letter)
    spec.accept(fin, TokenKind.IDENT, rollback=1, trap=trap)


def _strings(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph

    single = g.transition(root, Symbol.SINGLE_QUOTE)
    unterminated = g.transition(single, Symbol.ENDLINE)
    g.transition(single, Symbol.EOF, trap)
    fin = g.transition(single, Symbol.SINGLE_QUOTE)
    spec.otherwise(single, single)

    double = g.transition(root, Symbol.DOUBLE_QUOTE)
    g.transition(double, Symbol.ENDLINE, unterminated)
    g.transition(double, Symbol.EOF, trap)
    g.transition(double, Symbol.DOUBLE_QUOTE, fin)
    spec.otherwise(double, double)

    spec.accept(fin, TokenKind.STRING, trap=trap)

    # A newline inside a string is an error; the newline itself is given back
    spec.accept(unterminated, TokenKind.ERROR, rollback=1)
    spec.otherwise(unterminated, unterminated)


def _mult_and_exp(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph
    mult = g.transition(root, Symbol.MULT)
    exp = g.transition(mult, Symbol.MULT)
    mult_fin = spec.otherwise(mult)

    spec.accept(exp, TokenKind.EXP, trap=trap)
    spec.accept(mult_fin, TokenKind.MULT, rollback=1, trap=trap)


def _divide_and_comments(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph
    div = g.transition(root, Symbol.DIVIDE)
    comment = g.transition(div, Symbol.DIVIDE)
    g.transition(root, Symbol.HASHTAG, comment)

    comment_end = g.transition(comment, Symbol.ENDLINE)
    g.transition(comment, Symbol.EOF, comment_end)
    spec.otherwise(comment, comment)
    div_end = spec.otherwise(div)

    spec.accept(div_end, TokenKind.DIVIDE, rollback=1, trap=trap)
    # The terminating newline (or end of input) is not part of the comment
    spec.accept(comment_end, TokenKind.COMMENT, rollback=1, trap=trap)


def _relational(spec: LexerSpec, root: State, trap: State) -> None:
    g = spec.graph

    pairs = (
        (Symbol.EQUALS, TokenKind.ASSIGNMENT, TokenKind.EQUALS),
        (Symbol.LESS_THAN, TokenKind.LESS_THAN, TokenKind.LESS_THAN_OR_EQUALS),
        (Symbol.GREATER_THAN, TokenKind.GREATER_THAN, TokenKind.GREATER_THAN_OR_EQUALS),
        (Symbol.EXCLAMATION_POINT, TokenKind.ERROR, TokenKind.NOT_EQUALS),
    )
    for symbol, alone, with_equals in pairs:
        first = g.transition(root, symbol)
        double = g.transition(first, Symbol.EQUALS)
        single = spec.otherwise(first)
        spec.accept(double, with_equals, trap=trap)
        spec.accept(single, alone, rollback=1, trap=trap)


_table: CompiledTable | None = None
_table_lock = threading.Lock()


def get_table() -> CompiledTable:
    """Return the shared compiled lexer table, building it on first use."""
    global _table
    if _table is None:
        with _table_lock:
            if _table is None:
                _table = build_lexer().compile()
    return _table
