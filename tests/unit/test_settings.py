"""
Unit tests for environment settings.
"""

import pytest

from file_sink.config import FileSinkSettings, get_settings


def test_defaults(monkeypatch):
    for var in ("DIRECTORY", "ENCODING", "ENVELOPE", "CHUNK_SIZE", "LOG_LEVEL"):
        monkeypatch.delenv(f"FILE_SINK_{var}", raising=False)
    settings = FileSinkSettings(_env_file=None)

    assert settings.DIRECTORY is None
    assert settings.ENVELOPE == "header"
    assert settings.CHUNK_SIZE == 64 * 1024
    assert settings.stage_config().directory is None


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("FILE_SINK_DIRECTORY", str(tmp_path))
    monkeypatch.setenv("FILE_SINK_ENCODING", "utf-8")
    monkeypatch.setenv("FILE_SINK_ENVELOPE", "info")
    settings = FileSinkSettings(_env_file=None)

    cfg = settings.stage_config()
    assert cfg.directory == str(tmp_path)
    assert cfg.encoding == "utf-8"
    assert settings.ENVELOPE == "info"


def test_invalid_envelope(monkeypatch):
    monkeypatch.setenv("FILE_SINK_ENVELOPE", "body")
    with pytest.raises(Exception):
        FileSinkSettings(_env_file=None)


def test_get_settings_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()
    get_settings.cache_clear()
