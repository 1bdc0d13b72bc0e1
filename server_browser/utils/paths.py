"""Where Server Browser keeps its files.

Favourites (servers.cfg) and settings.yaml live in the per-user config
directory, logs in the data directory. A portable.txt marker in the
install directory keeps everything under <install>/data instead.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

PORTABLE_MARKER = "portable.txt"


def _user_dirs(app_dir_name: str) -> tuple[Path, Path]:
    """Get the (config, data) directories for the current platform."""
    if sys.platform == "win32":
        return (
            Path(os.path.expandvars(r"%APPDATA%")) / app_dir_name,
            Path(os.path.expandvars(r"%LOCALAPPDATA%")) / app_dir_name,
        )
    if sys.platform == "darwin":
        support = Path.home() / "Library" / "Application Support" / app_dir_name
        return support, support

    home = Path.home()
    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config")
    data_home = Path(os.environ.get("XDG_DATA_HOME") or home / ".local" / "share")
    return config_home / app_dir_name, data_home / app_dir_name


class AppPaths:
    """Resolves the config, data and log locations."""

    APP_DIR_NAME = "ServerBrowser"
    FAVOURITES_FILENAME = "servers.cfg"
    SETTINGS_FILENAME = "settings.yaml"

    def __init__(self, install_dir: Path | None = None) -> None:
        """Initialize application paths.

        Args:
            install_dir: Override for the install directory, where the portable marker is looked up
        """
        self._install_dir = install_dir
        self._resolve()

    def _resolve(self) -> None:
        self._portable_mode = (self.get_app_install_dir() / PORTABLE_MARKER).exists()
        if self._portable_mode:
            base = self.get_app_install_dir() / "data"
            self._config_dir, self._data_dir = base, base
        else:
            self._config_dir, self._data_dir = _user_dirs(self.APP_DIR_NAME)

    def get_app_install_dir(self) -> Path:
        """Get the directory the application runs from."""
        if self._install_dir is not None:
            return self._install_dir
        if getattr(sys, "frozen", False):
            return Path(sys.executable).parent
        return Path(__file__).resolve().parent.parent.parent

    def get_config_dir(self) -> Path:
        return self._config_dir

    def get_data_dir(self) -> Path:
        return self._data_dir

    def get_favourites_file(self) -> Path:
        """Get the favourites file path.

        Returns:
            Path to servers.cfg in the config directory
        """
        return self._config_dir / self.FAVOURITES_FILENAME

    def get_settings_file(self) -> Path:
        return self._config_dir / self.SETTINGS_FILENAME

    def get_logs_dir(self) -> Path:
        return self._data_dir / "logs"

    def ensure_directories(self) -> None:
        """Create the config, data and logs directories."""
        for directory in (self._config_dir, self._data_dir, self.get_logs_dir()):
            directory.mkdir(parents=True, exist_ok=True)

    def is_portable_mode(self) -> bool:
        return self._portable_mode

    def set_portable_mode(self, enabled: bool) -> None:
        """Create or remove the portable marker and re-resolve paths.

        Args:
            enabled: Whether files should live next to the install
        """
        marker = self.get_app_install_dir() / PORTABLE_MARKER
        if enabled:
            marker.write_text("Server Browser stores its files in ./data\n")
        elif marker.exists():
            marker.unlink()
        self._resolve()


_app_paths: AppPaths | None = None


def get_app_paths() -> AppPaths:
    """Get the shared AppPaths instance."""
    global _app_paths
    if _app_paths is None:
        _app_paths = AppPaths()
    return _app_paths
