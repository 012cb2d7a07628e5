"""
Server configuration.

Settings come from three places, later ones winning:

1. Defaults below
2. Environment variables prefixed with ``CTAGS_LSP_`` (e.g. ``CTAGS_LSP_TAGFILE``)
3. The client's ``initializationOptions`` (see ServerConfig.with_overrides)

Command-line flags are applied by the entry point as constructor arguments.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ctags_lsp.core.exceptions import ConfigurationError

# initializationOptions keys the client may override
CLIENT_OVERRIDABLE = ("ctags_bin", "tagfile", "tagfile_names")


class ServerConfig(BaseSettings):
    """Configuration for one language server process."""

    model_config = SettingsConfigDict(
        env_prefix="CTAGS_LSP_",
        extra="ignore",
        populate_by_name=True,
    )

    ctags_bin: str = Field(
        default="ctags",
        description="universal-ctags executable used for indexing and rescans",
    )
    tagfile: Optional[str] = Field(
        default=None,
        description="Explicit tagfile to read instead of running ctags "
                    "(absolute, or relative to the workspace root)",
    )
    tagfile_names: List[str] = Field(
        default_factory=lambda: ["tags", ".tags"],
        description="Well-known tagfile names looked up in the workspace root",
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Request worker threads (default: ThreadPoolExecutor's choice)",
    )
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    def with_overrides(self, options: Optional[Dict[str, Any]]) -> "ServerConfig":
        """
        Merge a client's ``initializationOptions`` into a copy of this config.

        Keys are accepted in snake_case or camelCase; unknown keys are ignored.

        Args:
            options: The ``initializationOptions`` object, may be None

        Returns:
            A new ServerConfig

        Raises:
            ConfigurationError: If an override has an invalid value
        """
        if not options:
            return self
        if not isinstance(options, dict):
            raise ConfigurationError("initializationOptions must be an object")

        updates: Dict[str, Any] = {}
        for key in CLIENT_OVERRIDABLE:
            camel = _to_camel(key)
            if key in options:
                updates[key] = options[key]
            elif camel in options:
                updates[key] = options[camel]
        if not updates:
            return self

        try:
            return ServerConfig.model_validate({**self.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigurationError(f"Invalid initializationOptions: {e}") from e


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part.title() for part in tail)
