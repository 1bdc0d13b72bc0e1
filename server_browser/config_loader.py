"""Configuration loader for network settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from server_browser.errors import SettingsError

logger = logging.getLogger(__name__)

DEFAULT_MASTER_SERVER_URL = "https://servers.openrct2.website"
DEFAULT_NETWORK_PORT = 11753
# Network protocol identifier of this build, compared against server versions
NETWORK_STREAM_ID = "0.0.4-10"

PLAYER_NAME_MAX_LENGTH = 32


class NetworkSettings:
    """Network settings loaded from the settings file."""

    def __init__(self, data: dict[str, Any] | None = None):
        """Initialize network settings.

        Args:
            data: The "network" section of the settings file
        """
        data = data or {}
        self.player_name: str = self._read_player_name(data.get("player_name"))
        self.default_port: int = self._read_port(data.get("default_port"))
        self.master_server_url: str = self._read_str(data, "master_server_url", "")
        self.fetch_timeout: float = self._read_timeout(data, "fetch_timeout", 10.0)
        self.connect_timeout: float = self._read_timeout(data, "connect_timeout", 5.0)

    @staticmethod
    def _read_player_name(value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            return "Player"
        return value.strip()[:PLAYER_NAME_MAX_LENGTH]

    @staticmethod
    def _read_port(value: Any) -> int:
        if value is None:
            return DEFAULT_NETWORK_PORT
        if isinstance(value, int) and not isinstance(value, bool) and 0 < value <= 65535:
            return value
        logger.warning("Invalid default_port %r, using %d", value, DEFAULT_NETWORK_PORT)
        return DEFAULT_NETWORK_PORT

    @staticmethod
    def _read_str(data: dict[str, Any], key: str, default: str) -> str:
        value = data.get(key, default)
        if value is None:
            return default
        if not isinstance(value, str):
            logger.warning("Invalid %s %r, using default", key, value)
            return default
        return value.strip()

    @staticmethod
    def _read_timeout(data: dict[str, Any], key: str, default: float) -> float:
        value = data.get(key, default)
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return float(value)
        logger.warning("Invalid %s %r, using %s", key, value, default)
        return default

    @property
    def directory_url(self) -> str:
        """Get the directory-service URL, preferring the local override."""
        return self.master_server_url or DEFAULT_MASTER_SERVER_URL

    def to_dict(self) -> dict[str, Any]:
        """Convert to the "network" section of the settings file.

        Returns:
            Settings dictionary
        """
        return {
            "player_name": self.player_name,
            "default_port": self.default_port,
            "master_server_url": self.master_server_url,
            "fetch_timeout": self.fetch_timeout,
            "connect_timeout": self.connect_timeout,
        }


class SettingsLoader:
    """Loads and saves settings from a YAML file."""

    def __init__(self, settings_file: Path):
        """Initialize settings loader.

        Args:
            settings_file: Path to settings.yaml
        """
        self.settings_file = settings_file

    def load(self) -> NetworkSettings:
        """Load network settings.

        A missing or malformed file yields the defaults.

        Returns:
            NetworkSettings instance
        """
        if not self.settings_file.exists():
            return NetworkSettings()

        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Could not load settings file %s: %s", self.settings_file, e)
            return NetworkSettings()

        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a mapping, using defaults", self.settings_file)
            return NetworkSettings()

        network = data.get("network")
        return NetworkSettings(network if isinstance(network, dict) else None)

    def save(self, settings: NetworkSettings) -> None:
        """Save network settings, keeping other sections of the file.

        Args:
            settings: Settings to save

        Raises:
            SettingsError: If the file cannot be written
        """
        data: dict[str, Any] = {}
        if self.settings_file.exists():
            try:
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    existing = yaml.safe_load(f)
                if isinstance(existing, dict):
                    data = existing
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Overwriting unreadable settings file %s: %s", self.settings_file, e)

        data["network"] = settings.to_dict()

        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)
        except OSError as e:
            raise SettingsError(f"Unable to save settings to {self.settings_file}: {e}") from e
