"""DFA compiler: flattens a transition graph into a dense state/symbol table."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass

from minicalc.graph import State, TransitionGraph
from minicalc.tokens import TokenKind

NO_TRANSITION = -1


@dataclass(frozen=True, slots=True)
class CompiledTable:
    """Read-only compiled DFA.

    State ids and symbol columns are numbered in first-discovery order of a
    depth-first traversal; the start state is always id 0.
    """

    rows: tuple[tuple[int, ...], ...]
    symbol_ids: Mapping[Hashable, int]
    final_states: frozenset[int]
    rollbacks: Mapping[int, int]
    token_kinds: tuple[TokenKind, ...]
    start: int = 0

    @property
    def num_states(self) -> int:
        return len(self.rows)

    @property
    def num_symbols(self) -> int:
        return len(self.symbol_ids)

    def column(self, symbol: Hashable) -> int | None:
        """Column id of *symbol*, or None if no edge in the graph used it."""
        return self.symbol_ids.get(symbol)

    def next_state(self, state: int, symbol: Hashable) -> int:
        column = self.symbol_ids.get(symbol)
        if column is None:
            return NO_TRANSITION
        return self.rows[state][column]

    def is_final(self, state: int) -> bool:
        return state in self.final_states

    def rollback(self, state: int) -> int:
        return self.rollbacks.get(state, 0)

    def kind(self, state: int) -> TokenKind:
        return self.token_kinds[state]


def compile_graph(
    graph: TransitionGraph,
    rollbacks: Mapping[State, int] | None = None,
    token_kinds: Mapping[State, TokenKind] | None = None,
) -> CompiledTable:
    """Compile *graph* in one depth-first traversal.

    Final states missing from *rollbacks* roll back 0 characters; states
    missing from *token_kinds* emit ERROR. Unreachable states are dropped.
    """
    rollbacks = rollbacks or {}
    token_kinds = token_kinds or {}

    state_ids: dict[State, int] = {graph.start: 0}
    symbol_ids: dict[Hashable, int] = {}
    edges: list[tuple[int, int, int]] = []

    def state_id(state: State) -> int:
        if state not in state_ids:
            state_ids[state] = len(state_ids)
        return state_ids[state]

    def visit(symbol: Hashable, source: State, target: State) -> None:
        if symbol not in symbol_ids:
            symbol_ids[symbol] = len(symbol_ids)
        edges.append((state_id(source), symbol_ids[symbol], state_id(target)))

    graph.depth_first_traverse(visit)

    rows = [[NO_TRANSITION] * len(symbol_ids) for _ in state_ids]
    for source_id, column, target_id in edges:
        rows[source_id][column] = target_id

    final_states: set[int] = set()
    state_rollbacks: dict[int, int] = {}
    kinds: list[TokenKind] = []
    for state, sid in state_ids.items():
        kinds.append(token_kinds.get(state, TokenKind.ERROR))
        if graph.is_final(state):
            final_states.add(sid)
            state_rollbacks[sid] = rollbacks.get(state, 0)

    return CompiledTable(
        rows=tuple(tuple(row) for row in rows),
        symbol_ids=symbol_ids,
        final_states=frozenset(final_states),
        rollbacks=state_rollbacks,
        token_kinds=tuple(kinds),
    )
