"""Shared fixtures for Server Browser tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from PySide6.QtCore import QCoreApplication, QObject, Signal

from server_browser.config_loader import NetworkSettings
from server_browser.models import ServerEntry
from server_browser.services.directory_store import DirectoryStore
from server_browser.utils.qt_background_worker import wait_for_background_tasks


class FakeFetchHelper(QObject):
    """Stands in for DirectoryFetchHelper without starting threads."""

    finished = Signal(object)
    error = Signal(str)

    def __init__(self) -> None:
        super().__init__()
        self.requests: list[tuple[str, int, float]] = []
        self.stopped = False

    def start_fetching(self, url: str, default_port: int, timeout: float = 10.0) -> bool:
        self.requests.append((url, default_port, timeout))
        return True

    def stop_fetching(self) -> None:
        self.stopped = True


@pytest.fixture(scope="session")
def qapp() -> Iterator[QCoreApplication]:
    """Provide a Qt core application for signal delivery."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
    wait_for_background_tasks()


@pytest.fixture
def fake_helper(qapp) -> FakeFetchHelper:
    return FakeFetchHelper()


@pytest.fixture
def settings() -> NetworkSettings:
    return NetworkSettings({"default_port": 11753, "master_server_url": "http://master.test/servers"})


@pytest.fixture
def favourites_file(tmp_path):
    return tmp_path / "config" / "servers.cfg"


@pytest.fixture
def store(favourites_file) -> DirectoryStore:
    return DirectoryStore(favourites_file)


@pytest.fixture
def populate():
    """Add (address, favourite) pairs to a store."""

    def _populate(store: DirectoryStore, *specs: tuple[str, bool]) -> None:
        for address, favourite in specs:
            store.add_or_get(address)
            if favourite:
                store.toggle_favourite(store.index_of(address))

    return _populate


@pytest.fixture
def make_entry():
    def _make(address: str, **kwargs) -> ServerEntry:
        kwargs.setdefault("name", address)
        return ServerEntry(address=address, **kwargs)

    return _make
