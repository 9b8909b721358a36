"""
Configuration module for the Meandering Sleep backend.
Loads settings from .env file and environment variables.
"""

import os
from pathlib import Path
from typing import List, Tuple

from dotenv import load_dotenv

# Existing environment variables take precedence over the .env file
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _parse_int_list(raw: str) -> Tuple[int, ...]:
    """Parse a comma-separated list of integers, ignoring blanks."""
    return tuple(int(part.strip()) for part in raw.split(",") if part.strip())


class Settings:
    """Application configuration loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.getenv("APP_NAME", "Meandering Sleep")
        self.api_version: str = os.getenv("API_VERSION", "v1")
        self.debug: bool = os.getenv("DEBUG", "true").lower() in ("true", "1", "yes")
        self.environment: str = os.getenv("ENVIRONMENT", "development")

        # Groq
        self.groq_api_key: str = os.getenv("GROQ_API_KEY", "")
        self.groq_model: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
        self.groq_utility_model: str = os.getenv("GROQ_UTILITY_MODEL", "llama-3.1-8b-instant")
        self.groq_timeout: int = int(os.getenv("GROQ_TIMEOUT", "120"))
        self.groq_max_retries: int = int(os.getenv("GROQ_MAX_RETRIES", "3"))

        # Firebase Storage
        self.firebase_credentials_path: str = os.getenv("FIREBASE_CREDENTIALS_PATH", "")
        self.storage_bucket: str = os.getenv("STORAGE_BUCKET", "")
        self.local_storage_dir: str = os.getenv("LOCAL_STORAGE_DIR", "./data/bucket")
        self.signed_url_ttl_minutes: int = int(os.getenv("SIGNED_URL_TTL_MINUTES", "15"))

        # CORS
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        self.cors_origins: List[str] = [s.strip() for s in cors_raw.split(",")]

        # Lecture pipeline (~45 minutes at 150 wpm)
        self.lecture_target_words: int = int(os.getenv("LECTURE_TARGET_WORDS", "7500"))
        self.lecture_chunk_targets: Tuple[int, ...] = _parse_int_list(
            os.getenv("LECTURE_CHUNK_TARGETS", "2500,2500,2500")
        )
        self.lecture_overflow_chunk_words: int = int(os.getenv("LECTURE_OVERFLOW_CHUNK_WORDS", "2500"))
        self.lecture_max_paragraph_words: int = int(os.getenv("LECTURE_MAX_PARAGRAPH_WORDS", "150"))
        self.lecture_max_chunks: int = int(os.getenv("LECTURE_MAX_CHUNKS", "20"))

        # Sampling per call class
        self.outline_temperature: float = float(os.getenv("OUTLINE_TEMPERATURE", "0.7"))
        self.content_temperature: float = float(os.getenv("CONTENT_TEMPERATURE", "0.7"))
        self.utility_temperature: float = float(os.getenv("UTILITY_TEMPERATURE", "0.3"))
        self.topics_temperature: float = float(os.getenv("TOPICS_TEMPERATURE", "0.8"))
        self.outline_max_tokens: int = int(os.getenv("OUTLINE_MAX_TOKENS", "1200"))
        self.content_max_tokens: int = int(os.getenv("CONTENT_MAX_TOKENS", "4000"))
        self.summary_max_tokens: int = int(os.getenv("SUMMARY_MAX_TOKENS", "400"))
        self.topics_max_tokens: int = int(os.getenv("TOPICS_MAX_TOKENS", "1000"))


_settings = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
