"""Persistent environment: an immutable chain of bindings."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from minicalc.values import Value


class _Undefined(Enum):
    UNDEFINED = "UNDEFINED"

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined.UNDEFINED


@dataclass(frozen=True, slots=True)
class Environment:
    """One binding frame; the root frame binds nothing.

    ``define`` returns a new frame and never touches the old one, so a
    reference to an earlier frame is a snapshot that can be restored as-is.
    """

    identifier: str | None = None
    value: Value | None = None
    parent: Environment | None = None

    @classmethod
    def empty(cls) -> Environment:
        return cls()

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def define(self, identifier: str, value: Value) -> Environment:
        return Environment(identifier, value, self)

    def lookup(self, identifier: str) -> Value | _Undefined:
        """Return the nearest bound value, or UNDEFINED."""
        env: Environment | None = self
        while env is not None and env.parent is not None:
            if env.identifier == identifier:
                return env.value
            env = env.parent
        return UNDEFINED

    def is_defined(self, identifier: str) -> bool:
        return self.lookup(identifier) is not UNDEFINED

    def bindings(self) -> Iterator[tuple[str, Value]]:
        """Yield visible (identifier, value) pairs, most recent first."""
        seen: set[str] = set()
        env: Environment | None = self
        while env is not None and env.parent is not None:
            assert env.identifier is not None and env.value is not None
            if env.identifier not in seen:
                seen.add(env.identifier)
                yield env.identifier, env.value
            env = env.parent
