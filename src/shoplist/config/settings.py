"""Configuration settings for shoplist."""
from functools import lru_cache
from pathlib import Path
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Get project root directory (3 levels up from this file)
PROJECT_ROOT = Path(__file__).parent.parent.parent.parent

# Default log directory
DEFAULT_LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "shoplist.log"


class ShopListSettings(BaseSettings):
    """Application settings with environment variable support."""

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = DEFAULT_LOG_FILE
    LOG_FORMAT: str = "detailed"  # simple, detailed
    LOG_RETENTION_DAYS: int = 7
    LOG_ROTATION_SIZE_MB: int = 1

    # Undo history
    MAX_UNDO_STEPS: int = 50

    # Remote sync
    SYNC_ENABLED: bool = False
    SYNC_DB_URL: str = "sqlite:///shoplist.db"
    SYNC_DB_ECHO: bool = False
    SYNC_USER_ID: str = "UserID-0000"

    model_config = SettingsConfigDict(
        env_prefix="SHOPLIST_",
        case_sensitive=False,
        env_file=PROJECT_ROOT / ".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Convert relative DB path to absolute path from project root
        if self.SYNC_DB_URL.startswith("sqlite:///") and ":memory:" not in self.SYNC_DB_URL:
            relative_path = Path(self.SYNC_DB_URL.replace("sqlite:///", ""))
            if not relative_path.is_absolute():
                self.SYNC_DB_URL = f"sqlite:///{PROJECT_ROOT / relative_path}"

        # Ensure log file path is absolute and parent directory exists
        if self.LOG_FILE:
            if not self.LOG_FILE.is_absolute():
                self.LOG_FILE = PROJECT_ROOT / self.LOG_FILE
            self.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["simple", "detailed"]
        v = v.lower()
        if v not in valid_formats:
            raise ValueError(f"Log format must be one of: {', '.join(valid_formats)}")
        return v

    @field_validator("MAX_UNDO_STEPS")
    @classmethod
    def validate_undo_steps(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Undo history must keep at least one step")
        return v

    @field_validator("SYNC_USER_ID")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Sync user id cannot be empty")
        return v.strip()


@lru_cache()
def get_settings() -> ShopListSettings:
    """Get cached settings instance."""
    return ShopListSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache to force reload from environment."""
    get_settings.cache_clear()
