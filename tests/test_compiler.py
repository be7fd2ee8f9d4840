"""Tests for compiling transition graphs into dense tables."""

from __future__ import annotations

from minicalc.compiler import NO_TRANSITION, compile_graph
from minicalc.graph import TransitionGraph
from minicalc.lexicon import build_lexer, get_table
from minicalc.symbols import Symbol
from minicalc.tokens import TokenKind


def _ab_graph():
    g = TransitionGraph()
    a = g.loop(g.transition(g.start, "a"), "a")
    done = g.transition(a, "b")
    g.set_final(done)
    return g, a, done


class TestIdAssignment:
    def test_start_state_is_zero(self):
        g, a, done = _ab_graph()
        table = compile_graph(g)
        assert table.start == 0
        assert table.next_state(0, "a") == 1

    def test_symbols_numbered_by_discovery(self):
        g, _, _ = _ab_graph()
        table = compile_graph(g)
        assert table.symbol_ids == {"a": 0, "b": 1}
        assert table.num_symbols == 2
        assert table.num_states == 3

    def test_empty_graph(self):
        table = compile_graph(TransitionGraph())
        assert table.num_states == 1
        assert table.num_symbols == 0
        assert table.rows == ((),)


class TestTableContents:
    def test_missing_cells_are_sentinel(self):
        g, _, _ = _ab_graph()
        table = compile_graph(g)
        assert table.rows[0][table.column("b")] == NO_TRANSITION
        assert table.rows[2] == (NO_TRANSITION, NO_TRANSITION)

    def test_self_loop(self):
        g, _, _ = _ab_graph()
        table = compile_graph(g)
        assert table.next_state(1, "a") == 1
        assert table.next_state(1, "b") == 2

    def test_unknown_symbol(self):
        g, _, _ = _ab_graph()
        table = compile_graph(g)
        assert table.column("z") is None
        assert table.next_state(0, "z") == NO_TRANSITION


class TestFinalStates:
    def test_final_defaults(self):
        g, _, done = _ab_graph()
        table = compile_graph(g)
        assert table.final_states == frozenset({2})
        assert table.rollback(2) == 0
        assert table.kind(2) is TokenKind.ERROR

    def test_declared_rollback_and_kind(self):
        g, _, done = _ab_graph()
        table = compile_graph(g, {done: 1}, {done: TokenKind.IDENT})
        assert table.rollbacks == {2: 1}
        assert table.kind(2) is TokenKind.IDENT

    def test_non_final_states_default_to_error(self):
        g, _, _ = _ab_graph()
        table = compile_graph(g)
        assert table.kind(0) is TokenKind.ERROR
        assert not table.is_final(0)

    def test_unreachable_final_state_absent(self):
        g, a, done = _ab_graph()
        orphan = g.transition(done, "c")
        g.remove_transition(done, "c")
        g.set_final(orphan)
        table = compile_graph(g, {orphan: 5}, {orphan: TokenKind.NUMBER})
        assert table.num_states == 3
        assert 5 not in table.rollbacks.values()
        assert TokenKind.NUMBER not in table.token_kinds


class TestDeterminism:
    def test_same_graph_twice(self):
        g, _, done = _ab_graph()
        assert compile_graph(g, {done: 1}) == compile_graph(g, {done: 1})

    def test_lexer_rebuilt_identically(self):
        assert build_lexer().compile() == build_lexer().compile()

    def test_singleton(self):
        assert get_table() is get_table()


class TestLexerTable:
    def test_every_symbol_has_a_column(self):
        table = get_table()
        assert set(table.symbol_ids) == set(Symbol)

    def test_root_loops_on_whitespace(self):
        table = get_table()
        assert table.next_state(0, Symbol.WHITESPACE) == 0
        assert table.next_state(0, Symbol.ENDLINE) == 0

    def test_every_state_is_complete(self):
        table = get_table()
        for row in table.rows:
            assert NO_TRANSITION not in row

    def test_rollback_distances(self):
        table = get_table()
        distances = {table.rollback(s) for s in table.final_states}
        assert distances == {0, 1, 2, 3}
