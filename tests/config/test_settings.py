"""Tests for shoplist settings."""
import pytest
from pydantic import ValidationError

from shoplist.config.settings import (
    PROJECT_ROOT,
    ShopListSettings,
    clear_settings_cache,
    get_settings,
)


@pytest.fixture
def log_file(tmp_path):
    return tmp_path / "logs" / "shoplist.log"


def test_defaults(log_file):
    """Test default values."""
    settings = ShopListSettings(LOG_FILE=log_file)
    assert settings.MAX_UNDO_STEPS == 50
    assert settings.SYNC_USER_ID == "UserID-0000"
    assert log_file.parent.exists()


def test_environment_overrides(monkeypatch, log_file):
    """Test that prefixed environment variables override defaults."""
    monkeypatch.setenv("SHOPLIST_MAX_UNDO_STEPS", "7")
    monkeypatch.setenv("SHOPLIST_SYNC_ENABLED", "true")
    monkeypatch.setenv("SHOPLIST_LOG_LEVEL", "debug")

    settings = ShopListSettings(LOG_FILE=log_file)

    assert settings.MAX_UNDO_STEPS == 7
    assert settings.SYNC_ENABLED
    assert settings.LOG_LEVEL == "DEBUG"


def test_relative_sqlite_path_is_anchored(log_file):
    """Test that relative database paths resolve against the project root."""
    settings = ShopListSettings(SYNC_DB_URL="sqlite:///data/list.db", LOG_FILE=log_file)
    assert settings.SYNC_DB_URL == f"sqlite:///{PROJECT_ROOT / 'data/list.db'}"


def test_memory_database_is_untouched(log_file):
    """Test that in-memory URLs are kept as given."""
    settings = ShopListSettings(SYNC_DB_URL="sqlite:///:memory:", LOG_FILE=log_file)
    assert settings.SYNC_DB_URL == "sqlite:///:memory:"


@pytest.mark.parametrize("field, value", [
    ("LOG_LEVEL", "LOUD"),
    ("LOG_FORMAT", "fancy"),
    ("MAX_UNDO_STEPS", 0),
    ("SYNC_USER_ID", "  "),
])
def test_invalid_values(log_file, field, value):
    """Test that invalid settings are rejected."""
    with pytest.raises(ValidationError):
        ShopListSettings(LOG_FILE=log_file, **{field: value})


def test_settings_are_cached():
    """Test that settings are cached until the cache is cleared."""
    first = get_settings()
    assert get_settings() is first
    clear_settings_cache()
    assert get_settings() is not first
