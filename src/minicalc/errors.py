"""Error types: labeled script errors with formatted source context."""

from __future__ import annotations

from minicalc.tokens import position_at


class AlphabetError(ValueError):
    """Raised when two symbols of an alphabet claim the same character."""


class GraphError(ValueError):
    """Raised when a transition graph is given a state it does not own."""


class ScriptError(Exception):
    """A labeled error found while interpreting a program.

    ``str()`` gives the short ``"<rule>: <description>"`` label; ``format()``
    adds a source snippet for callers that have the program text.
    """

    def __init__(self, rule: str, description: str, offset: int = 0) -> None:
        self.rule = rule
        self.description = description
        self.offset = offset
        super().__init__(f"{rule}: {description}")

    @property
    def message(self) -> str:
        return f"{self.rule}: {self.description}"

    def format(self, source: str, filename: str = "input.calc") -> str:
        position = position_at(source, self.offset)
        lines = source.splitlines(keepends=True)
        line_idx = position.line - 1
        col = position.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        pad = " " * (col - 1)
        line_num = str(position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error[{self.rule}]: {self.description}\n"
            f"{' ' * gutter_width}--> {filename}:{position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}^"
        )


class LexError(ScriptError):
    """An ERROR token reached the interpreter."""


class ParseError(ScriptError):
    """The current token does not fit the grammar rule being parsed."""


class EvalError(ScriptError):
    """An operation was applied to values of the wrong type or domain."""


class CompileError(ScriptError):
    """Processing of a program was abandoned (tokenizer failure, runaway nesting)."""
