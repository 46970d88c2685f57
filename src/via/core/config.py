"""Configuration.

Environment variables (prefix `VIA_`) and an optional `.env` file, read with
pydantic-settings so the CLI and the adapters share one typed contract.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Central application settings."""

    model_config = SettingsConfigDict(
        env_prefix="VIA_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Per-request timeout in seconds. None disables the timeout.",
    )
    user_agent: str = Field(
        default="via/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Follow HTTP redirects when dispatching.",
    )

    registry_path: Path = Field(
        default=Path("via") / "registry.json",
        description="Registry file mapping base URLs to schema documents.",
    )
    schema_dir: Path = Field(
        default=Path("via") / "schema",
        description="Directory where generated schema documents are written.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI (DEBUG, INFO, WARNING, ...).",
    )
