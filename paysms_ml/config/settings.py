from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from ._utils import resolve_env_file_path


class Settings(BaseSettings):
    """Payment SMS service configuration."""

    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./paysms.db"
    database_echo: bool = False

    # Templates are embedded locally; the encoder only sees placeholder text
    encoder_backend: Literal["sentence-transformers"] = "sentence-transformers"
    encoder_model: str = "paraphrase-multilingual-MiniLM-L12-v2"
    device: str = "cpu"
    encoder_max_seq_length: int | None = 128

    # Similarity thresholds for SMS patterns
    auto_apply_threshold: float = 0.95
    confirm_threshold: float = 0.92
    group_threshold: float = 0.95
    non_payment_threshold: float = 0.97
    merge_min_similarity: float = 0.70
    small_group_max_size: int = 5
    telemetry_dedup_similarity: float = 0.99

    # Bounded fan-out
    embedding_batch_size: int = 100
    embedding_concurrency: int = 10
    llm_batch_size: int = 20
    llm_concurrency: int = 5

    # Regex synthesis
    regex_sample_size: int = 3
    regex_min_samples: int = 3
    regex_failure_threshold: int = 2
    regex_failure_cooldown_seconds: float = 30 * 60
    regex_min_success_ratio: float = 0.8

    # Dates in message bodies carry no year or zone
    timezone: str = "Asia/Seoul"

    # Structural pre-filter bounds
    min_body_length: int = 20
    max_body_length: int = 130

    # LLM (Ollama)
    llm_enabled: bool = True
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "qwen2.5:3b"
    ollama_timeout: float = 60.0

    # Telemetry (regex curation samples)
    telemetry_enabled: bool = False
    telemetry_url: str | None = None
    telemetry_timeout: float = 5.0

    # Pattern maintenance
    stale_pattern_days: int = 30
    stale_pattern_max_matches: int = 1

    model_config = SettingsConfigDict(
        env_file=resolve_env_file_path(),
        env_file_encoding="utf-8",
        env_prefix="PAYSMS_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
