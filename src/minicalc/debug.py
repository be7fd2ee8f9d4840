"""Tracing and table dumps written to stderr (or any text stream)."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from minicalc.compiler import CompiledTable
from minicalc.tokens import Token, TokenKind
from minicalc.values import Number, Value, to_text


def _show(value: Value) -> str:
    if isinstance(value, Number):
        return f"{value.value:.2f}"
    return to_text(value)


class TraceSink:
    """Event sink that narrates prints, conditions, and assignments.

    Effects of an IF body whose guard failed are never reported, because
    the interpreter only notifies for effects that persist.
    """

    def __init__(self, *, file: TextIO = sys.stderr) -> None:
        self._file = file

    def on_print(self, value: Value) -> None:
        self._file.write(f"output ({_show(value)})\n")

    def on_assign(self, identifier: str, value: Value) -> None:
        self._file.write(f"computation performed ({identifier} = {_show(value)})\n")

    def on_condition(self, condition: bool) -> None:
        self._file.write("condition met, " if condition else "condition not met\n")


def dump_tokens(
    tokens: Iterable[Token],
    *,
    file: TextIO = sys.stderr,
    keep_comments: bool = False,
) -> None:
    """Write one ``KIND<TAB>lexeme`` line per token, stopping before EOF."""
    for token in tokens:
        if token.kind is TokenKind.EOF:
            break
        if token.kind is TokenKind.COMMENT and not keep_comments:
            continue
        file.write(f"{token.kind.name}\t{token.lexeme}\n")


def dump_table(table: CompiledTable, *, file: TextIO = sys.stderr) -> None:
    """Print the compiled DFA as a grid, final states labeled with their token kind."""
    symbols = sorted(table.symbol_ids, key=table.symbol_ids.__getitem__)
    names = [getattr(s, "name", str(s)) for s in symbols]

    file.write(f"Created tokenizer: {table.num_states} states\n")
    file.write("DFA table:\n")
    file.write(f"{'':>10}   |" + "".join(f" {name} |" for name in names) + "\n")
    file.write("-" * 13 + "+" + "".join("-" * (len(name) + 2) + "|" for name in names) + "\n")
    for state, row in enumerate(table.rows):
        label = f"[{table.kind(state).name}] " if table.is_final(state) else ""
        cells = "".join(f" {target:>{len(name)}} |" for name, target in zip(names, row))
        file.write(f"{label:>10}{state:>2} |{cells}\n")
