"""Tests for the persistent environment."""

from __future__ import annotations

import dataclasses

import pytest

from minicalc.environment import UNDEFINED, Environment
from minicalc.values import Number, Text

ONE = Number(1.0)
TWO = Number(2.0)


class TestDefineAndLookup:
    def test_empty_lookup_is_undefined(self):
        assert Environment.empty().lookup("x") is UNDEFINED

    def test_define_returns_new_frame(self):
        root = Environment.empty()
        env = root.define("x", ONE)
        assert env is not root
        assert env.lookup("x") == ONE
        assert root.lookup("x") is UNDEFINED

    def test_shadowing_nearest_wins(self):
        env = Environment.empty().define("x", ONE).define("x", TWO)
        assert env.lookup("x") == TWO

    def test_parent_keeps_older_value(self):
        env = Environment.empty().define("x", ONE).define("x", TWO)
        assert env.parent is not None
        assert env.parent.lookup("x") == ONE

    def test_parent_of_first_definition(self):
        env = Environment.empty().define("x", ONE)
        assert env.parent is not None
        assert env.parent.lookup("x") is UNDEFINED

    def test_is_defined(self):
        env = Environment.empty().define("a", Number(0.0))
        assert env.is_defined("a")
        assert not env.is_defined("b")

    def test_text_value(self):
        env = Environment.empty().define("s", Text("hi"))
        assert env.lookup("s") == Text("hi")

    def test_root_flag(self):
        assert Environment.empty().is_root
        assert not Environment.empty().define("a", ONE).is_root


class TestSnapshots:
    def test_snapshot_restore(self):
        snapshot = Environment.empty().define("x", ONE)
        branch = snapshot.define("x", Number(5.0)).define("y", Number(6.0))
        assert branch.lookup("x") == Number(5.0)
        # discarding the branch is just going back to the old reference
        assert snapshot.lookup("x") == ONE
        assert snapshot.lookup("y") is UNDEFINED

    def test_frames_are_immutable(self):
        env = Environment.empty().define("x", ONE)
        with pytest.raises(dataclasses.FrozenInstanceError):
            env.value = TWO  # type: ignore[misc]


class TestBindings:
    def test_hides_shadowed(self):
        env = (
            Environment.empty()
            .define("a", ONE)
            .define("b", TWO)
            .define("a", Number(3.0))
        )
        assert list(env.bindings()) == [("a", Number(3.0)), ("b", TWO)]

    def test_empty(self):
        assert list(Environment.empty().bindings()) == []
