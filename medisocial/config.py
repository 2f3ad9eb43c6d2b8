"""Application configuration from environment."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (parent of medisocial/); .env is loaded from here so it works regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini
    gemini_api_key: str = ""
    gemini_text_model: str = "gemini-2.5-flash"
    gemini_image_model: str = "imagen-4.0-generate-001"

    # PubMed E-utilities (evidence finder)
    pubmed_base_url: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
    pubmed_max_results: int = 5
    pubmed_timeout: float = 15.0

    # Durable key-value medium (history, last draft, RTS history)
    database_url: str = "sqlite+aiosqlite:///./medisocial.db"

    @property
    def database_url_sync(self) -> str:
        """Sync URL for Alembic (drop the async driver suffix)."""
        if not self.database_url:
            return ""
        for driver in ("+aiosqlite", "+asyncpg"):
            if driver in self.database_url:
                return self.database_url.replace(driver, "")
        return self.database_url

    # Studio behaviour
    notification_seconds: float = 3.0
    # Drop infographic image merges that belong to a superseded submission
    discard_stale_merges: bool = True

    # App
    log_level: str = "INFO"


settings = Settings()
