"""Environment-based configuration for the profile viewer."""

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Profile viewer configuration.

    All settings can be overridden via environment variables with
    GHINFO_ prefix. For example:
        GHINFO_USERNAME=octocat
        GHINFO_TOKEN=ghp_xxx
    """

    # Profile shown when no username is given on the command line
    username: str = "barkhaaroraa"

    # GitHub API
    api_base_url: str = "https://api.github.com"
    user_agent: str = "gh-info-client"
    token: str | None = None
    timeout: float = Field(default=10.0, gt=0)

    # Loading timer
    tick_interval: float = Field(default=1.0, gt=0)

    # Logging goes to a file only; stdout belongs to the live display
    log_level: str = "WARNING"
    log_file: Path | None = None

    model_config = {"env_prefix": "GHINFO_"}

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level {value!r}")
        return level
