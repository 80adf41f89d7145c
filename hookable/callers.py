"""Calling strategies and helpers for nested hook configs."""

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence

from .types import HookCallback, HookCallEvent, NestedHooks


async def _invoke(hook: HookCallback, args: tuple) -> Any:
    result = hook(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def serial_caller(hooks: Sequence[HookCallback], args: tuple) -> Any:
    """Call hooks one at a time, awaiting each result before the next starts.

    Every hook receives the same arguments. Returns the last hook's result,
    or None when there are no hooks. The first error aborts the remaining hooks.
    """
    result = None
    for hook in hooks:
        result = await _invoke(hook, args)
    return result


async def parallel_caller(hooks: Sequence[HookCallback], args: tuple) -> list[Any]:
    """Start every hook concurrently and collect results in registration order.

    Fails fast: the first error raised by any hook is raised here. Hooks that
    are already running are not cancelled.
    """
    if not hooks:
        return []
    return list(await asyncio.gather(*(_invoke(hook, args) for hook in hooks)))


def call_each_with(callbacks: Iterable[HookCallback], event: HookCallEvent) -> None:
    """Synchronously call each interceptor with the dispatch event."""
    for callback in callbacks:
        callback(event)


def flatten_hooks(
    config: NestedHooks,
    hooks: Optional[dict[str, HookCallback]] = None,
    parent_name: Optional[str] = None,
) -> dict[str, HookCallback]:
    """Flatten a nested hook config into dotted names.

    Parameters
    ----------
    config : NestedHooks
        Mapping whose values are callbacks or further mappings.
    hooks : Optional[dict[str, HookCallback]]
        Accumulator used during recursion.
    parent_name : Optional[str]
        Dotted prefix of the current level.

    Returns
    -------
    dict[str, HookCallback]
        Flat mapping of dotted hook name to callback. Values that are neither
        mappings nor callables are skipped.
    """
    if hooks is None:
        hooks = {}
    for key, value in config.items():
        name = f"{parent_name}.{key}" if parent_name else key
        if isinstance(value, Mapping):
            flatten_hooks(value, hooks, name)
        elif callable(value):
            hooks[name] = value
    return hooks


def merge_hooks(*configs: NestedHooks) -> dict[str, HookCallback]:
    """Merge several nested configs into one flat config.

    Names bound in more than one config get a single async callback that runs
    all of them serially with the same arguments.
    """
    collected: dict[str, list[HookCallback]] = {}
    for config in configs:
        for name, callback in flatten_hooks(config).items():
            collected.setdefault(name, []).append(callback)

    merged: dict[str, HookCallback] = {}
    for name, callbacks in collected.items():
        if len(callbacks) == 1:
            merged[name] = callbacks[0]
        else:
            merged[name] = _merged_callback(callbacks)
    return merged


def _merged_callback(callbacks: list[HookCallback]) -> HookCallback:
    async def merged(*args: Any) -> Any:
        return await serial_caller(callbacks, args)

    return merged
