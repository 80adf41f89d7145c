"""Hook registry with serial and parallel dispatch."""

from .callers import flatten_hooks, merge_hooks, parallel_caller, serial_caller
from .debugger import HookDebugger, create_debugger
from .errors import DeprecationCycleError, HookableError
from .registry import HookRegistry, create_hooks
from .types import DeprecatedHook, HookCallEvent, HookCallback, NestedHooks

__all__ = [
    "HookRegistry",
    "HookCallEvent",
    "HookCallback",
    "NestedHooks",
    "DeprecatedHook",
    "HookDebugger",
    "HookableError",
    "DeprecationCycleError",
    "create_hooks",
    "create_debugger",
    "flatten_hooks",
    "merge_hooks",
    "serial_caller",
    "parallel_caller",
]
