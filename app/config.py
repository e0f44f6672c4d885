"""
Runtime configuration.

All environment reads happen here; the rest of the app consumes a typed
`Settings` object. Variables use the `WORKFORCE_` prefix, e.g.
`WORKFORCE_ROSTER_PATH=/data/roster.json`.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import WorkforceConfigError
from .rules import EXPORT_FILENAME

BUNDLED_ROSTER_PATH = Path(__file__).resolve().parent / "data" / "source-data.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="WORKFORCE_",
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    roster_path: Path = Field(default=BUNDLED_ROSTER_PATH)
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")
    export_filename: str = Field(default=EXPORT_FILENAME, min_length=1)


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, wrapping validation failures."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise WorkforceConfigError(f"Invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
