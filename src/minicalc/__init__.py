"""minicalc: a DFA-driven lexer and a recursive-descent interpreter for a tiny scripting language."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from minicalc.interpreter import EventSink, RunResult

__version__ = "0.1.0"


def run(source: str, sink: EventSink | None = None) -> RunResult:
    """Tokenize and interpret *source* in a fresh session."""
    from minicalc.interpreter import interpret

    return interpret(source, sink=sink)
