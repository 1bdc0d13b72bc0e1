"""Tests for application paths."""

import sys

import pytest

from server_browser.utils.paths import AppPaths


class TestAppPaths:
    """Tests for AppPaths."""

    def test_portable_mode(self, tmp_path) -> None:
        (tmp_path / "portable.txt").write_text("on")

        paths = AppPaths(install_dir=tmp_path)

        assert paths.is_portable_mode()
        assert paths.get_favourites_file() == tmp_path / "data" / "servers.cfg"
        assert paths.get_settings_file() == tmp_path / "data" / "settings.yaml"

    @pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="XDG layout")
    def test_xdg_layout(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

        paths = AppPaths(install_dir=tmp_path / "install")

        assert not paths.is_portable_mode()
        assert paths.get_favourites_file() == tmp_path / "cfg" / "ServerBrowser" / "servers.cfg"
        assert paths.get_logs_dir() == tmp_path / "share" / "ServerBrowser" / "logs"

    def test_enable_and_disable_portable_mode(self, tmp_path) -> None:
        paths = AppPaths(install_dir=tmp_path)
        paths.set_portable_mode(True)
        assert paths.get_config_dir() == tmp_path / "data"

        paths.set_portable_mode(False)
        assert not (tmp_path / "portable.txt").exists()
        assert not paths.is_portable_mode()

    def test_ensure_directories(self, tmp_path) -> None:
        (tmp_path / "portable.txt").write_text("on")
        paths = AppPaths(install_dir=tmp_path)

        paths.ensure_directories()

        assert paths.get_logs_dir().is_dir()
        assert paths.get_favourites_file().parent.is_dir()
