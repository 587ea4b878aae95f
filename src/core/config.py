"""Runtime settings, read from the environment (a local .env file is picked up too)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///solitaire.db"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    database_echo: bool = False


def _as_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_settings() -> Settings:
    """Build the settings from environment variables, falling back to defaults."""
    load_dotenv()
    return Settings(
        database_url=os.getenv("SOLITAIRE_DATABASE_URL", DEFAULT_DATABASE_URL),
        database_echo=_as_bool(os.getenv("SOLITAIRE_DATABASE_ECHO")),
    )
