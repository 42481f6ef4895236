"""gitstream Configuration Module.

Provides centralized configuration for all gitstream components.
All settings support environment variable overrides with GITSTREAM_ prefix.

Usage:
    from gitstream.config import settings

    print(settings.git_binary)
    print(settings.max_line_length)
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["GitStreamSettings", "settings"]

# 64 MiB; large enough for generated commit messages and long blame lines
DEFAULT_MAX_LINE_LENGTH = 64 * 1024 * 1024


class GitStreamSettings(BaseSettings):
    """gitstream configuration.

    All settings can be overridden via environment variables with GITSTREAM_
    prefix. For example, GITSTREAM_GIT_BINARY=/usr/local/bin/git selects a
    different git executable.
    """

    model_config = SettingsConfigDict(env_prefix="GITSTREAM_")

    # git executable
    git_binary: str = Field(
        default="git",
        description="Name or path of the git executable",
    )

    # Output decoding
    max_line_length: int = Field(
        default=DEFAULT_MAX_LINE_LENGTH,
        gt=0,
        description="Maximum length in bytes of a single line of git output",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding used to decode git output",
    )
    decode_errors: str = Field(
        default="replace",
        description="Error handler for bytes that do not decode cleanly",
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_format: str = Field(
        default="console",
        description='Log output format ("json" or "console")',
    )


# Module-level singleton
settings = GitStreamSettings()
