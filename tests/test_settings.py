"""Tests for environment-driven settings."""

import pytest

from settings import Settings, _load_settings, get_settings


@pytest.fixture(autouse=True)
def fresh_cache(monkeypatch):
    for name in ("PORT", "LOG_LEVEL", "DATA_DIR"):
        monkeypatch.delenv(name, raising=False)
    _load_settings.cache_clear()
    yield
    _load_settings.cache_clear()


def test_defaults() -> None:
    settings = Settings()

    assert settings.port == 3000
    assert str(settings.data_dir) == "data"
    assert settings.fsync is True


def test_env_files_given_as_list(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=8123\nLOG_LEVEL=DEBUG\n")

    settings = get_settings([str(env_file)])

    assert settings.port == 8123
    assert settings.log_level == "DEBUG"
    assert get_settings([str(env_file)]) is settings


def test_environment_overrides_env_file(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=8123\n")
    monkeypatch.setenv("PORT", "9000")

    assert get_settings((str(env_file),)).port == 9000
