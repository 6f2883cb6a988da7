"""Application configuration using Pydantic Settings."""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

HOUR = 60 * 60


class Settings(BaseSettings):
    """Application settings, configurable via environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    data_dir: Path = Path("data")
    dictionary_path: Path | None = None
    pronunciation_path: Path | None = None

    # Logging
    log_level: LogLevel = "INFO"
    log_file_enabled: bool = False
    log_file_path: Path | None = None
    log_file_max_bytes: int = 10 * 1024 * 1024  # 10 MB
    log_file_backup_count: int = 5

    @property
    def resolved_log_file_path(self) -> Path:
        """Return log file path, defaulting to data_dir/enorett.log if not set."""
        return self.log_file_path or self.data_dir / "enorett.log"

    @property
    def resolved_dictionary_path(self) -> Path:
        return self.dictionary_path or self.data_dir / "dictionary.json"

    @property
    def resolved_pronunciation_path(self) -> Path:
        return self.pronunciation_path or self.data_dir / "pronunciations.tsv"

    # Purchase records
    database_url: str = "sqlite+aiosqlite:///data/enorett.db"

    # Dictionary tiers
    free_dictionary_limit: int = 250

    # Sparv (morphology)
    morphology_enabled: bool = True
    morphology_endpoint: str = "https://ws.spraakbanken.gu.se/ws/sparv/v2/"
    morphology_timeout: float = 7.0  # seconds
    morphology_cache_ttl: float = 12 * HOUR  # seconds

    # Korp (example sentences)
    corpus_enabled: bool = True
    corpus_endpoint: str = "https://ws.spraakbanken.gu.se/ws/korp/v8/query"
    corpus_corpora: str = "rom99"
    corpus_timeout: float = 7.0  # seconds
    corpus_cache_ttl: float = 6 * HOUR  # seconds
    corpus_max_examples: int = 5


settings = Settings()
