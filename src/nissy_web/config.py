"""Configuration for the gateway."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings, read once at startup.

    Every field maps to an environment variable of the same name in upper case
    (``PORT``, ``NISSY_PATH``, ...). A ``.env`` file in the working directory is
    honoured when present.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)

    nissy_path: Path = Path("nissy")
    nissy_timeout: float = Field(default=5 * 60 * 60, gt=0)  # seconds
    # Steps needing the nxopt31 table, which does not fit in memory on small hosts.
    nissy_skip_steps: Annotated[tuple[str, ...], NoDecode] = ("optimal", "light")

    public_dir: Path = Path("public")
    log_level: str = "INFO"

    @field_validator("nissy_skip_steps", mode="before")
    @classmethod
    def _split_skip_steps(cls, value: object) -> object:
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"
