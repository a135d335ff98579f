"""Configuration service — loads settings from config.json and the environment."""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from app.models.config import AppConfig

logger = logging.getLogger(__name__)

# Environment variables that override a single option
ENV_OVERRIDES = {
    "LOG_LEVEL": "log_level",
    "USER_AGENT": "user_agent",
    "PLAYLIST_MAX_AGE": "playlist_max_age",
    "LIVE_EXTENSION": "live_extension",
}


class ConfigService:
    """Holds the application configuration.

    Values are read from ``<data_dir>/config.json`` (when it exists) and
    then overridden by environment variables.  The service is read-only:
    nothing is ever written back to disk.
    """

    def __init__(self, data_dir: Optional[str] = None, environ: Optional[dict] = None):
        self.data_dir = data_dir or os.environ.get("DATA_DIR", "./data")
        self.config_file = os.path.join(self.data_dir, "config.json")
        self.environ = os.environ if environ is None else environ
        self._config = AppConfig()

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    def _read_file(self) -> dict:
        if not os.path.exists(self.config_file):
            return {}
        try:
            with open(self.config_file) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading config: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Error loading config: {self.config_file} is not a JSON object")
            return {}
        return data

    def _apply_env(self, data: dict) -> dict:
        for env_name, key in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                data[key] = value

        timeout = self.environ.get("UPSTREAM_TIMEOUT")
        if timeout:
            try:
                seconds = float(timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid UPSTREAM_TIMEOUT={timeout!r}")
            else:
                data["upstream_timeout"] = {"connect": seconds, "read": seconds, "write": seconds, "pool": seconds}
        return data

    def load(self) -> AppConfig:
        """Load configuration, falling back to defaults on invalid input."""
        data = self._apply_env(self._read_file())
        try:
            self._config = AppConfig(**data)
        except ValidationError as e:
            logger.error(f"Invalid configuration, using defaults: {e}")
            self._config = AppConfig()
        return self._config

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> AppConfig:
        return self._config
