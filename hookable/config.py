import functools

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Standard loguru level names accepted for debugger output
LOG_LEVELS: tuple[str, ...] = (
    "TRACE",
    "DEBUG",
    "INFO",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
)


def normalize_log_level(value: str, field_name: str) -> str:
    """Upper-case a level name and reject ones loguru does not define."""
    level = value.upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{field_name} must be one of {', '.join(LOG_LEVELS)}, got {value}")
    return level


class DebuggerConfig(BaseModel):
    """Defaults for the dispatch debugger."""

    tag: str = ""
    inspect: bool = False
    log_level: str = "DEBUG"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str, info) -> str:
        """Ensure the level is one loguru knows by default."""
        return normalize_log_level(v, info.field_name)


class Config(BaseSettings):
    """
    Library configuration loaded from the environment.

    Priority (highest to lowest):
    1. Explicit keyword arguments
    2. Environment variables (HOOKABLE_ prefix)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Deprecation warnings through the default warn capability
    WARN_DEPRECATED: bool = True

    # Debugger defaults
    DEBUG_TAG: str = ""
    DEBUG_INSPECT: bool = False
    DEBUG_LOG_LEVEL: str = "DEBUG"

    @field_validator("DEBUG_LOG_LEVEL")
    @classmethod
    def validate_debug_log_level(cls, v: str, info) -> str:
        """Reject unknown debugger levels when settings load."""
        return normalize_log_level(v, info.field_name)

    @functools.cached_property
    def debugger(self) -> DebuggerConfig:
        """Build DebuggerConfig from environment variables."""
        return DebuggerConfig(
            tag=self.DEBUG_TAG,
            inspect=self.DEBUG_INSPECT,
            log_level=self.DEBUG_LOG_LEVEL,
        )


config = Config()
