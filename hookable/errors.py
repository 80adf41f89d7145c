"""Exceptions raised by the hook registry."""


class HookableError(Exception):
    """Base class for hook registry errors."""

    pass


class DeprecationCycleError(HookableError, ValueError):
    """Raised when a deprecation alias would make the alias chain loop."""

    def __init__(self, name: str, chain: list[str]):
        self.name = name
        self.chain = chain
        super().__init__(
            f"Deprecating {name!r} would create an alias cycle: {' -> '.join(chain)}"
        )
