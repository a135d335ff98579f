"""Tests for configuration loading."""

import json
import logging

from app.main import configure_logging
from app.services.config_service import ConfigService


def _service(tmp_path, config=None, environ=None):
    if config is not None:
        (tmp_path / "config.json").write_text(config if isinstance(config, str) else json.dumps(config))
    cfg = ConfigService(str(tmp_path), environ=environ or {})
    cfg.load()
    return cfg.config


def test_defaults_without_file(tmp_path):
    config = _service(tmp_path)
    assert config.log_level == "INFO"
    assert config.playlist_max_age == 3600
    assert config.playlist_filename_prefix == "xtream_playlist"
    assert config.live_extension == "ts"
    assert config.upstream_timeout.read == 600.0


def test_file_values(tmp_path):
    config = _service(tmp_path, {"log_level": "debug", "live_extension": ".m3u8", "upstream_timeout": {"read": 20}})
    assert config.log_level == "DEBUG"
    assert config.live_extension == "m3u8"
    assert config.upstream_timeout.read == 20.0
    assert config.upstream_timeout.connect == 30.0


def test_env_overrides_file(tmp_path):
    config = _service(
        tmp_path,
        {"playlist_max_age": 60},
        environ={"PLAYLIST_MAX_AGE": "120", "UPSTREAM_TIMEOUT": "5"},
    )
    assert config.playlist_max_age == 120
    assert config.upstream_timeout.connect == 5.0
    assert config.upstream_timeout.pool == 5.0


def test_invalid_timeout_env_ignored(tmp_path):
    config = _service(tmp_path, environ={"UPSTREAM_TIMEOUT": "soon"})
    assert config.upstream_timeout.connect == 30.0


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    config = _service(tmp_path, "not valid json{{{")
    assert config.playlist_max_age == 3600


def test_invalid_values_fall_back_to_defaults(tmp_path):
    config = _service(tmp_path, {"playlist_max_age": "forever"})
    assert config.playlist_max_age == 3600


def test_negative_max_age_clamped(tmp_path):
    assert _service(tmp_path, {"playlist_max_age": -5}).playlist_max_age == 0


def test_httpx_request_urls_not_logged():
    configure_logging("DEBUG")
    assert logging.getLogger("httpx").getEffectiveLevel() == logging.WARNING
