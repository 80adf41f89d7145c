"""Hook registry: registration, deprecation aliases and dispatch."""

import inspect
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from loguru import logger

from .callers import call_each_with, flatten_hooks, parallel_caller, serial_caller
from .config import config
from .errors import DeprecationCycleError
from .types import (
    DeprecatedHook,
    HookCallback,
    HookCallEvent,
    HookCaller,
    NestedHooks,
    Unregister,
)

DeprecationTarget = Union[str, DeprecatedHook, Mapping[str, Any]]


def default_warn(message: str) -> None:
    """Emit a deprecation warning through loguru unless disabled in config."""
    if config.WARN_DEPRECATED:
        logger.warning(message)


def _noop() -> None:
    return None


class _OnceHook:
    """Callback wrapper that unregisters itself and fires at most once."""

    def __init__(self, callback: HookCallback):
        self._callback: Optional[HookCallback] = callback
        self.unregister: Optional[Unregister] = None

    def __call__(self, *args: Any) -> Any:
        callback = self._callback
        if callback is None:
            return None
        self._callback = None
        if self.unregister is not None:
            self.unregister()
            self.unregister = None
        return callback(*args)


class HookRegistry:
    """Registry of named hooks with serial and parallel dispatch.

    Hooks are stored per name in registration order. Deprecated names are
    redirected to their replacement at registration time. Interceptors added
    with before_each/after_each observe every dispatch regardless of name.

    Not thread-safe: intended for a single asyncio event loop.
    """

    def __init__(self, warn: Optional[Callable[[str], Any]] = None) -> None:
        """Initialize an empty registry.

        Parameters
        ----------
        warn : Optional[Callable[[str], Any]]
            Called once per distinct deprecation message. Defaults to a loguru
            warning that respects HOOKABLE_WARN_DEPRECATED.
        """
        self._hooks: dict[str, list[HookCallback]] = {}
        self._before: list[Callable[[HookCallEvent], Any]] = []
        self._after: list[Callable[[HookCallEvent], Any]] = []
        self._deprecated_hooks: dict[str, DeprecatedHook] = {}
        self._deprecated_messages: set[str] = set()
        self._warn = warn or default_warn

    def hook(
        self,
        name: str,
        callback: HookCallback,
        *,
        allow_deprecated: bool = False,
    ) -> Unregister:
        """Register a callback under a hook name.

        Parameters
        ----------
        name : str
            Hook name. Deprecated names are resolved to their final target.
        callback : HookCallback
            Callable invoked with the dispatch arguments.
        allow_deprecated : bool
            Suppress the deprecation warning for this registration.

        Returns
        -------
        Unregister
            Removes this registration. Empty names and non-callables are
            ignored and get a handle that does nothing.
        """
        if not name or not callable(callback):
            return _noop

        original_name = name
        dep: Optional[DeprecatedHook] = None
        while name in self._deprecated_hooks:
            dep = self._deprecated_hooks[name]
            name = dep.to

        if dep is not None and not allow_deprecated:
            message = dep.message
            if not message:
                message = f"{original_name} hook has been deprecated"
                if dep.to:
                    message += f", please use {dep.to}"
            if message not in self._deprecated_messages:
                self._deprecated_messages.add(message)
                self._warn(message)

        # Removed without replacement
        if not name:
            return _noop

        self._hooks.setdefault(name, []).append(callback)

        target: Optional[HookCallback] = callback

        def unregister() -> None:
            nonlocal target
            if target is not None:
                self.remove_hook(name, target)
                target = None

        return unregister

    def hook_once(self, name: str, callback: HookCallback) -> Unregister:
        """Register a callback that removes itself after its first call."""
        if not callable(callback):
            return _noop
        once = _OnceHook(callback)
        once.unregister = self.hook(name, once)
        return once.unregister

    def remove_hook(self, name: str, callback: HookCallback) -> None:
        """Remove the first registration of callback under the literal name."""
        hooks = self._hooks.get(name)
        if hooks is None:
            return
        try:
            hooks.remove(callback)
        except ValueError:
            pass
        if not hooks:
            del self._hooks[name]

    def remove_all_hooks(self) -> None:
        """Drop every registered hook. Aliases and interceptors are kept."""
        logger.debug(f"Removing hooks for {len(self._hooks)} names")
        self._hooks.clear()

    def deprecate_hook(self, name: str, deprecated: DeprecationTarget) -> None:
        """Mark a hook name as deprecated.

        Parameters
        ----------
        name : str
            Old hook name.
        deprecated : DeprecationTarget
            Replacement name, DeprecatedHook, or mapping with "to"/"message".

        Raises
        ------
        DeprecationCycleError
            If following the new alias would lead back to name.
        """
        dep = DeprecatedHook.coerce(deprecated)

        chain = [name]
        current = dep.to
        while current:
            chain.append(current)
            if current == name:
                raise DeprecationCycleError(name, chain)
            alias = self._deprecated_hooks.get(current)
            current = alias.to if alias else None

        self._deprecated_hooks[name] = dep
        logger.debug(f"Deprecated hook {name} -> {dep.to}")

        existing = self._hooks.pop(name, [])
        if existing:
            logger.debug(f"Migrating {len(existing)} hooks from deprecated {name}")
        for callback in existing:
            self.hook(name, callback)

    def deprecate_hooks(self, deprecated_hooks: Mapping[str, DeprecationTarget]) -> None:
        """Apply deprecate_hook to every entry of a mapping."""
        for name, deprecated in deprecated_hooks.items():
            self.deprecate_hook(name, deprecated)

    def add_hooks(self, config_hooks: NestedHooks) -> Unregister:
        """Register every callback of a nested config.

        Returns a single handle that unregisters all of them; calling it more
        than once is safe.
        """
        hooks = flatten_hooks(config_hooks)
        remove_fns = [self.hook(key, callback) for key, callback in hooks.items()]

        def remove_all() -> None:
            pending = remove_fns[:]
            remove_fns.clear()
            for unregister in pending:
                unregister()

        return remove_all

    def remove_hooks(self, config_hooks: NestedHooks) -> None:
        """Remove every callback of a nested config by literal name."""
        for key, callback in flatten_hooks(config_hooks).items():
            self.remove_hook(key, callback)

    def call_hook(self, name: str, *args: Any) -> Awaitable[Any]:
        """Call hooks serially; resolves to the last hook's result."""
        return self.call_hook_with(serial_caller, name, *args)

    def call_hook_parallel(self, name: str, *args: Any) -> Awaitable[list[Any]]:
        """Call hooks concurrently; resolves to results in registration order."""
        return self.call_hook_with(parallel_caller, name, *args)

    def call_hook_with(self, caller: HookCaller, name: str, *args: Any) -> Any:
        """Dispatch a hook name with a custom calling strategy.

        The caller receives a snapshot of the hooks registered at the time of
        this call. Before-interceptors run immediately; after-interceptors run
        once the caller's result settles, whether it succeeds or fails.
        """
        event = HookCallEvent(name=name, args=args) if self._before or self._after else None
        if self._before:
            call_each_with(list(self._before), event)

        result = caller(list(self._hooks.get(name, ())), args)

        if inspect.isawaitable(result):
            return self._settle(result, event)

        if self._after and event is not None:
            call_each_with(list(self._after), event)
        return result

    async def _settle(self, result: Awaitable[Any], event: Optional[HookCallEvent]) -> Any:
        try:
            return await result
        finally:
            if self._after and event is not None:
                call_each_with(list(self._after), event)

    def before_each(self, callback: Callable[[HookCallEvent], Any]) -> Unregister:
        """Add an interceptor called before every dispatch."""
        return self._add_interceptor(self._before, callback)

    def after_each(self, callback: Callable[[HookCallEvent], Any]) -> Unregister:
        """Add an interceptor called after every dispatch settles."""
        return self._add_interceptor(self._after, callback)

    def _add_interceptor(
        self,
        interceptors: list[Callable[[HookCallEvent], Any]],
        callback: Callable[[HookCallEvent], Any],
    ) -> Unregister:
        interceptors.append(callback)
        target: Optional[Callable[[HookCallEvent], Any]] = callback

        def unregister() -> None:
            nonlocal target
            if target is not None:
                if target in interceptors:
                    interceptors.remove(target)
                target = None

        return unregister


def create_hooks(warn: Optional[Callable[[str], Any]] = None) -> HookRegistry:
    """Create a new, independent hook registry."""
    return HookRegistry(warn=warn)
