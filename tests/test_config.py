"""Tests for settings loading."""

import pytest

from events_api.config import env_files, get_settings


@pytest.fixture()
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_env_files_for_environment():
    assert env_files("production") == (".env", ".env.production")


def test_environment_file_overrides_base_file(tmp_path, monkeypatch, fresh_settings):
    (tmp_path / ".env").write_text("APP_NAME=base\nAPP_PORT=4000\n")
    (tmp_path / ".env.production").write_text("APP_NAME=prod\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.delenv("APP_NAME", raising=False)
    monkeypatch.delenv("APP_PORT", raising=False)

    settings = fresh_settings()

    assert settings.APP_NAME == "prod"
    assert settings.APP_PORT == 4000
    assert settings.ENVIRONMENT == "production"


def test_without_environment_only_base_file_is_read(tmp_path, monkeypatch, fresh_settings):
    (tmp_path / ".env").write_text("APP_NAME=base\n")
    (tmp_path / ".env.production").write_text("APP_NAME=prod\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("APP_NAME", raising=False)

    assert fresh_settings().APP_NAME == "base"
