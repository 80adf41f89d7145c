"""Hook registry types and dataclasses."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

HookCallback = Callable[..., Any]

# Removes a single registration; calling it again does nothing.
Unregister = Callable[[], None]

# Calling strategy: receives the hook snapshot and the call arguments.
HookCaller = Callable[[Sequence[HookCallback], tuple], Union[Any, Awaitable[Any]]]

# {"app": {"start": fn}, "app.close": fn} -> "app.start", "app.close"
NestedHooks = Mapping[str, Union[HookCallback, "NestedHooks"]]


@dataclass(frozen=True)
class DeprecatedHook:
    """Alias entry: calls registered on an old name are redirected to `to`.

    A missing `to` marks a hook that was removed without replacement.
    """

    to: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union[str, "DeprecatedHook", Mapping[str, Any]]) -> "DeprecatedHook":
        """Build a DeprecatedHook from a target name, mapping or instance."""
        if isinstance(value, DeprecatedHook):
            return value
        if isinstance(value, str):
            return cls(to=value)
        return cls(to=value.get("to"), message=value.get("message"))


@dataclass
class HookCallEvent:
    """Event passed to before/after interceptors for a single dispatch."""

    name: str
    args: tuple
    context: dict[str, Any] = field(default_factory=dict)
