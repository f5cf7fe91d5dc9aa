"""Configuration management for wrkbench.

This module provides configuration classes using pydantic-settings
for environment variable management and validation.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables with
    the WRKBENCH_ prefix.

    Attributes:
        history_dir: Directory where history files are stored and read.
        max_error_percentage: Max percentage of errors vs total requests
            for a run to be considered healthy.
        wrk_binary: Name or path of the wrk executable.
        timeout_seconds: Optional timeout forwarded to each wrk process.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).

    Example:
        >>> # export WRKBENCH_HISTORY_DIR=/var/lib/bench
        >>> settings = Settings()
        >>> settings.history_dir
        PosixPath('/var/lib/bench')

    Environment Variables:
        WRKBENCH_HISTORY_DIR: History directory (default: .wrk-api-bench)
        WRKBENCH_MAX_ERROR_PERCENTAGE: Error threshold (default: 2.0)
        WRKBENCH_WRK_BINARY: wrk executable (default: wrk)
        WRKBENCH_TIMEOUT_SECONDS: Process timeout (optional)
        WRKBENCH_LOG_LEVEL: Logging level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="WRKBENCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    history_dir: Path = Field(
        default=Path(".wrk-api-bench"),
        description="Directory where history files are stored",
    )
    max_error_percentage: float = Field(
        default=2.0,
        ge=0,
        le=100,
        description="Max percentage of failed requests for a healthy run",
    )
    wrk_binary: str = Field(
        default="wrk",
        description="Name or path of the wrk executable",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Timeout forwarded to each wrk process, in seconds",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
