"""Directory controller coordinating the store, fetching and joining."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from PySide6.QtCore import QObject, Signal

from server_browser.config_loader import NETWORK_STREAM_ID, PLAYER_NAME_MAX_LENGTH
from server_browser.controllers.connect_controller import ConnectController
from server_browser.errors import SettingsError
from server_browser.services.directory_store import DirectoryStore
from server_browser.services.fetch_service import DirectoryFetchService

if TYPE_CHECKING:
    from pathlib import Path

    from server_browser.config_loader import NetworkSettings, SettingsLoader
    from server_browser.controllers.connect_controller import SessionStarter
    from server_browser.models import ServerEntry
    from server_browser.utils.qt_directory_worker import DirectoryFetchHelper

logger = logging.getLogger(__name__)


class DirectoryController(QObject):
    """Controller between the server list UI and the directory services.

    The store exists only while the directory is open. Opening creates a
    fresh store, loads favourites and starts a fetch; closing stops the
    fetch and drops every entry.
    """

    directory_changed = Signal(int)  # players online
    fetch_completed = Signal(bool)
    join_failed = Signal(object, str)  # ErrorKind, detail

    def __init__(
        self,
        favourites_file: Path,
        settings: NetworkSettings,
        settings_loader: SettingsLoader,
        begin_client_session: SessionStarter,
        local_version: str = NETWORK_STREAM_ID,
        fetch_helper_factory: Callable[[], DirectoryFetchHelper] | None = None,
    ) -> None:
        """Initialize directory controller.

        Args:
            favourites_file: Path to servers.cfg
            settings: Network settings
            settings_loader: Loader used to persist settings changes
            begin_client_session: Capability that opens a session to (host, port)
            local_version: Network protocol identifier of this build
            fetch_helper_factory: Callable returning a DirectoryFetchHelper
        """
        super().__init__()
        self._favourites_file = favourites_file
        self._settings = settings
        self._settings_loader = settings_loader
        self._fetch_helper_factory = fetch_helper_factory
        self._store: DirectoryStore | None = None
        self._fetch_service: DirectoryFetchService | None = None

        self._connect_controller = ConnectController(settings, begin_client_session, local_version)
        self._connect_controller.join_failed.connect(self.join_failed)

    @property
    def is_open(self) -> bool:
        """Check if the directory is open."""
        return self._store is not None

    @property
    def settings(self) -> NetworkSettings:
        """Get the network settings."""
        return self._settings

    @property
    def local_version(self) -> str:
        """Get the local network protocol identifier."""
        return self._connect_controller.local_version

    @property
    def players_online(self) -> int:
        """Get the players online statistic from the last fetch."""
        if self._fetch_service is None:
            return 0
        return self._fetch_service.players_online

    def open(self, fetch: bool = True) -> None:
        """Open the directory: load favourites and start a fetch.

        Args:
            fetch: Whether to start a fetch immediately
        """
        if self.is_open:
            return

        self._store = DirectoryStore(self._favourites_file)
        self._store.load()

        helper: DirectoryFetchHelper | None = None
        if self._fetch_helper_factory is not None:
            helper = self._fetch_helper_factory()
        self._fetch_service = DirectoryFetchService(self._store, self._settings, helper)
        self._fetch_service.directory_changed.connect(self.directory_changed)
        self._fetch_service.fetch_completed.connect(self.fetch_completed)

        self.directory_changed.emit(self._store.total_players())
        if fetch:
            self.refresh()

    def close(self) -> None:
        """Close the directory and dispose of all entries."""
        if self._fetch_service is not None:
            self._fetch_service.close()
            self._fetch_service = None
        if self._store is not None:
            self._store.clear()
            self._store = None

    def refresh(self, url: str | None = None) -> bool:
        """Start a fetch cycle.

        Args:
            url: Optional directory-service URL for this fetch

        Returns:
            True if a fetch was started
        """
        if self._fetch_service is None:
            return False
        return self._fetch_service.refresh(url)

    def count(self) -> int:
        """Get the number of entries."""
        return self._store.count() if self._store else 0

    def entry_at(self, index: int) -> ServerEntry | None:
        """Get a copy of the entry at a position."""
        return self._store.entry_at(index) if self._store else None

    def entries(self) -> list[ServerEntry]:
        """Get a snapshot of all entries."""
        return self._store.entries() if self._store else []

    def total_players(self) -> int:
        """Get the sum of players over all entries."""
        return self._store.total_players() if self._store else 0

    def add_or_get(self, address: str) -> ServerEntry | None:
        """Get or create the entry for an address."""
        if self._store is None:
            return None
        return self._store.add_or_get(address)

    def add_server(self, address: str) -> ServerEntry | None:
        """Add a server typed by the user and save favourites.

        Args:
            address: Address text

        Returns:
            Copy of the entry, or None if the address is empty or closed
        """
        address = address.strip()
        if self._store is None or not address:
            return None

        entry = self._store.add_or_get(address)
        self._store.save()
        self.directory_changed.emit(self._store.total_players())
        return entry

    def remove(self, index: int) -> bool:
        """Remove the entry at a position."""
        if self._store is None or not self._store.remove(index):
            return False
        self.directory_changed.emit(self._store.total_players())
        return True

    def toggle_favourite(self, index: int) -> bool | None:
        """Toggle the favourite flag of an entry and save favourites.

        Returns:
            New favourite state, or None if index is out of range
        """
        if self._store is None:
            return None
        state = self._store.toggle_favourite(index)
        if state is not None:
            self.directory_changed.emit(self._store.total_players())
        return state

    def join(self, index: int) -> bool:
        """Join the entry at a position.

        Returns:
            True if the session was started
        """
        entry = self.entry_at(index)
        if entry is None:
            return False
        return self._connect_controller.join(entry)

    def join_raw(self, address: str) -> bool:
        """Connect to a typed address without a version check."""
        if not address.strip():
            return False
        return self._connect_controller.join_raw(address)

    def set_player_name(self, name: str) -> bool:
        """Change the player name and save settings.

        Args:
            name: New player name

        Returns:
            True if the name changed
        """
        name = name.strip()[:PLAYER_NAME_MAX_LENGTH]
        if not name or name == self._settings.player_name:
            return False

        self._settings.player_name = name
        try:
            self._settings_loader.save(self._settings)
        except SettingsError as e:
            logger.warning("%s", e)
        return True
