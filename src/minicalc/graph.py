"""Transition graph: mutable DFA authoring structure of states and labeled edges."""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import NewType

from minicalc.errors import GraphError

# Opaque handle; only a TransitionGraph hands these out
State = NewType("State", int)

Visitor = Callable[[Hashable, State, State], None]


class TransitionGraph:
    """A directed graph with at most one outgoing edge per (state, symbol).

    The graph owns every state. New states only come into existence as the
    target of ``transition`` (or ``complete``), so everything but the start
    state is created already linked.
    """

    def __init__(self) -> None:
        self._edges: list[dict[Hashable, State]] = []
        self._final: list[bool] = []
        self._start = self._new_state()

    @property
    def start(self) -> State:
        return self._start

    def __len__(self) -> int:
        return len(self._edges)

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------

    def _new_state(self) -> State:
        self._edges.append({})
        self._final.append(False)
        return State(len(self._edges) - 1)

    def _check(self, state: State) -> None:
        if not isinstance(state, int) or not 0 <= state < len(self._edges):
            raise GraphError(f"state {state!r} does not belong to this graph")

    def transition(self, state: State, symbol: Hashable, target: State | None = None) -> State:
        """Link ``state --symbol--> target`` and return target.

        A fresh state is allocated when *target* is omitted. Any previous
        edge for the same (state, symbol) is replaced.
        """
        self._check(state)
        if target is None:
            target = self._new_state()
        else:
            self._check(target)
        self._edges[state][symbol] = target
        return target

    def loop(self, state: State, symbol: Hashable) -> State:
        return self.transition(state, symbol, state)

    def complete(
        self,
        state: State,
        symbols: Iterable[Hashable],
        target: State | None = None,
    ) -> State | None:
        """Send every symbol without an edge from *state* to one shared target.

        When *target* is omitted it is allocated on the first missing symbol.
        Returns the target, or None if nothing was missing and none was given.
        """
        self._check(state)
        for symbol in symbols:
            if symbol not in self._edges[state]:
                target = self.transition(state, symbol, target)
        return target

    def has_transition(self, state: State, symbol: Hashable) -> bool:
        self._check(state)
        return symbol in self._edges[state]

    def remove_transition(self, state: State, symbol: Hashable) -> None:
        self._check(state)
        self._edges[state].pop(symbol, None)

    def get_next(self, state: State, symbol: Hashable) -> State | None:
        self._check(state)
        return self._edges[state].get(symbol)

    def set_final(self, state: State, final: bool = True) -> None:
        self._check(state)
        self._final[state] = final

    def is_final(self, state: State) -> bool:
        self._check(state)
        return self._final[state]

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def depth_first_traverse(self, visitor: Visitor) -> None:
        """Call ``visitor(symbol, source, target)`` once for every reachable edge.

        Each state is expanded once, edges in insertion order, so two
        traversals of an unchanged graph visit the same edges in the same order.
        """
        visited = {self._start}
        stack = [self._start]
        while stack:
            current = stack.pop()
            for symbol, target in self._edges[current].items():
                visitor(symbol, current, target)
                if target not in visited:
                    visited.add(target)
                    stack.append(target)
