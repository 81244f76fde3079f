"""
Environment-based configuration using pydantic-settings.
Values come from environment variables or a local .env file.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # ── Core ────────────────────────────────────────────────────────────────
    ENV: str = "production"

    # ── Storage ─────────────────────────────────────────────────────────────
    DATABASE_PATH: Path = Path.home() / ".cache" / "starsearch" / "tracks.db"

    # ── iTunes search ───────────────────────────────────────────────────────
    ITUNES_BASE_URL: str = "https://itunes.apple.com"
    ITUNES_SEARCH_TERM: str = "star"
    ITUNES_COUNTRY: str = "au"
    ITUNES_MEDIA: str = "movie"
    ITUNES_LIMIT: int = 50

    # ── HTTP client ──────────────────────────────────────────────────────────
    HTTP_TIMEOUT_SECONDS: int = 30
    HTTP_MAX_REDIRECTS: int = 3

    # ── Connectivity check ───────────────────────────────────────────────────
    CONNECTIVITY_HOST: str = "8.8.8.8"
    CONNECTIVITY_PORT: int = 53
    CONNECTIVITY_TIMEOUT_SECONDS: float = 3.0

    @field_validator("DATABASE_PATH", mode="before")
    @classmethod
    def ensure_database_dir(cls, v: Path) -> Path:
        path = Path(v).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def itunes_search_url(self) -> str:
        return f"{self.ITUNES_BASE_URL.rstrip('/')}/search"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
