"""Unit tests for calling strategies and config helpers."""

import pytest
from unittest.mock import MagicMock

from hookable import flatten_hooks, merge_hooks, parallel_caller, serial_caller
from hookable.callers import call_each_with
from hookable.types import DeprecatedHook, HookCallEvent


class TestFlattenHooks:
    """Tests for flatten_hooks."""

    def test_nested_keys_joined_with_dots(self):
        """Nested mappings become dotted names."""
        fn = MagicMock()
        other = MagicMock()

        flat = flatten_hooks({"a": {"b": fn, "c": {"d": other}}, "e.f": fn})

        assert flat == {"a.b": fn, "a.c.d": other, "e.f": fn}

    def test_non_callable_values_skipped(self):
        """Leaves that are neither mappings nor callables are dropped."""
        fn = MagicMock()

        flat = flatten_hooks({"a": fn, "b": 1, "c": None, "d": "text"})

        assert flat == {"a": fn}


class TestMergeHooks:
    """Tests for merge_hooks."""

    def test_unique_names_kept(self):
        """Names bound once keep their original callback."""
        first = MagicMock()
        second = MagicMock()

        merged = merge_hooks({"a": first}, {"b": {"c": second}})

        assert merged == {"a": first, "b.c": second}

    @pytest.mark.asyncio
    async def test_duplicate_names_run_serially(self):
        """Names bound more than once run every callback in order."""
        calls = []

        merged = merge_hooks(
            {"a": {"b": lambda value: calls.append(("first", value))}},
            {"a.b": lambda value: calls.append(("second", value))},
        )
        await merged["a.b"](3)

        assert calls == [("first", 3), ("second", 3)]


class TestCallers:
    """Tests for serial_caller, parallel_caller and call_each_with."""

    @pytest.mark.asyncio
    async def test_serial_caller_empty(self):
        """No hooks resolves to None."""
        assert await serial_caller([], ()) is None

    @pytest.mark.asyncio
    async def test_serial_caller_mixed(self):
        """Sync and async hooks can be mixed."""

        async def double(value):
            return value * 2

        assert await serial_caller([lambda value: value, double], (4,)) == 8

    @pytest.mark.asyncio
    async def test_parallel_caller_mixed(self):
        """Sync results are collected alongside async ones."""

        async def double(value):
            return value * 2

        assert await parallel_caller([lambda value: value, double], (4,)) == [4, 8]

    def test_call_each_with(self):
        """Every interceptor gets the same event."""
        first = MagicMock()
        second = MagicMock()
        event = HookCallEvent(name="x", args=(1,))

        call_each_with([first, second], event)

        first.assert_called_once_with(event)
        second.assert_called_once_with(event)


class TestDeprecatedHook:
    """Tests for DeprecatedHook.coerce."""

    def test_from_string(self):
        """A plain name becomes the alias target."""
        assert DeprecatedHook.coerce("new") == DeprecatedHook(to="new")

    def test_from_mapping(self):
        """A mapping supplies target and message."""
        dep = DeprecatedHook.coerce({"to": "new", "message": "moved"})

        assert dep.to == "new"
        assert dep.message == "moved"

    def test_instance_passthrough(self):
        """An existing DeprecatedHook is returned unchanged."""
        dep = DeprecatedHook(to="new")

        assert DeprecatedHook.coerce(dep) is dep
