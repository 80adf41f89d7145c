"""Dispatch debugger that logs every hook call with its duration."""

import time
from typing import Callable, Optional, Union

from loguru import logger

from .config import config, normalize_log_level
from .registry import HookRegistry
from .types import HookCallEvent

HookFilter = Union[str, Callable[[str], bool]]


class HookDebugger:
    """Before/after interceptor pair attached to a registry.

    Start times are kept in the event context under a per-debugger key so
    several debuggers can watch the same registry.
    """

    def __init__(
        self,
        hooks: HookRegistry,
        tag: str = "",
        inspect: bool = False,
        filter: Optional[HookFilter] = None,
        log_level: str = "DEBUG",
    ) -> None:
        self.tag = tag
        self.inspect = inspect
        self.log_level = log_level
        self._filter = filter
        self._context_key = f"debugger:{id(self)}"
        self._unregister_before = hooks.before_each(self._on_before)
        self._unregister_after = hooks.after_each(self._on_after)
        self._closed = False

    def matches(self, name: str) -> bool:
        """Check whether a hook name passes the filter."""
        if self._filter is None:
            return True
        if isinstance(self._filter, str):
            return name.startswith(self._filter)
        return bool(self._filter(name))

    def _on_before(self, event: HookCallEvent) -> None:
        if not self.matches(event.name):
            return
        event.context[self._context_key] = time.perf_counter()

    def _on_after(self, event: HookCallEvent) -> None:
        started = event.context.pop(self._context_key, None)
        if started is None:
            return
        elapsed_ms = (time.perf_counter() - started) * 1000
        prefix = f"[{self.tag}] " if self.tag else ""
        message = f"{prefix}{event.name}: {elapsed_ms:.2f}ms"
        if self.inspect:
            message += f" args={event.args!r}"
        logger.log(self.log_level, message)

    def close(self) -> None:
        """Detach from the registry. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._unregister_before()
        self._unregister_after()


def create_debugger(
    hooks: HookRegistry,
    *,
    tag: Optional[str] = None,
    inspect: Optional[bool] = None,
    filter: Optional[HookFilter] = None,
    log_level: Optional[str] = None,
) -> HookDebugger:
    """Attach a debugger to a registry.

    Parameters
    ----------
    hooks : HookRegistry
        Registry to observe.
    tag : Optional[str]
        Prefix for log lines. Defaults to HOOKABLE_DEBUG_TAG.
    inspect : Optional[bool]
        Also log call arguments. Defaults to HOOKABLE_DEBUG_INSPECT.
    filter : Optional[HookFilter]
        Hook-name prefix or predicate selecting which dispatches to log.
    log_level : Optional[str]
        loguru level for log lines. Defaults to HOOKABLE_DEBUG_LOG_LEVEL.

    Returns
    -------
    HookDebugger
        Call close() to stop logging.

    Raises
    ------
    ValueError
        If log_level is not a standard loguru level name.
    """
    defaults = config.debugger
    return HookDebugger(
        hooks,
        tag=defaults.tag if tag is None else tag,
        inspect=defaults.inspect if inspect is None else inspect,
        filter=filter,
        log_level=defaults.log_level if log_level is None else normalize_log_level(log_level, "log_level"),
    )
