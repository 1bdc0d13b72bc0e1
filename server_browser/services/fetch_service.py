"""Fetch service for refreshing the directory from the master server."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QObject, Signal, Slot

from server_browser.utils.qt_directory_worker import DirectoryFetchHelper

if TYPE_CHECKING:
    from server_browser.config_loader import NetworkSettings
    from server_browser.models import ServerListing
    from server_browser.services.directory_store import DirectoryStore

logger = logging.getLogger(__name__)


class DirectoryFetchService(QObject):
    """Runs fetch cycles against the master server and merges the results.

    A fetch cycle purges non-favourite entries, requests the server list
    on a background thread and merges the validated records back into the
    store from the thread that owns this service. While a fetch is in
    flight, further refresh requests are dropped.
    """

    directory_changed = Signal(int)  # players online
    fetch_completed = Signal(bool)  # True if the server list was merged

    def __init__(
        self,
        store: DirectoryStore,
        settings: NetworkSettings,
        helper: DirectoryFetchHelper | None = None,
    ) -> None:
        """Initialize fetch service.

        Args:
            store: Directory store to merge results into
            settings: Network settings (URL override, default port, timeout)
            helper: Background fetch helper, created if not given
        """
        super().__init__()
        self._store = store
        self._settings = settings
        self._helper = helper if helper is not None else DirectoryFetchHelper()
        self._helper.finished.connect(self._on_servers_fetched)
        self._helper.error.connect(self._on_fetch_error)
        self._in_flight = False
        self._closed = False
        self.players_online = 0

    @property
    def is_fetching(self) -> bool:
        """Check if a fetch is in flight."""
        return self._in_flight

    def refresh(self, url: str | None = None) -> bool:
        """Start a fetch cycle.

        Args:
            url: Directory-service URL, defaults to the configured one

        Returns:
            True if a fetch was started, False if closed or already fetching
        """
        if self._closed:
            return False
        if self._in_flight:
            logger.info("Server list fetch already in progress, ignoring refresh")
            return False

        purged = self._store.purge_non_favourites()
        if purged:
            logger.debug("Purged %d non-favourite servers", purged)
            self.directory_changed.emit(self._store.total_players())

        url = url or self._settings.directory_url
        logger.info("Fetching server list from %s", url)
        if not self._helper.start_fetching(url, self._settings.default_port, self._settings.fetch_timeout):
            logger.warning("Background fetch could not be started")
            return False

        self._in_flight = True
        return True

    def apply_listings(self, listings: list[ServerListing]) -> None:
        """Merge fetched records and notify listeners.

        Args:
            listings: Validated records from the directory service
        """
        self._store.merge_listings(listings)
        self.players_online = self._store.total_players()
        self.directory_changed.emit(self.players_online)

    @Slot(object)
    def _on_servers_fetched(self, listings: list[ServerListing] | None) -> None:
        self._in_flight = False
        if self._closed:
            logger.debug("Discarding server list received after close")
            return
        if listings is None:
            self.fetch_completed.emit(False)
            return
        self.apply_listings(listings)
        self.fetch_completed.emit(True)

    @Slot(str)
    def _on_fetch_error(self, error: str) -> None:
        self._in_flight = False
        logger.warning("Server list fetch failed: %s", error)
        if not self._closed:
            self.fetch_completed.emit(False)

    def close(self) -> None:
        """Stop fetching; results that arrive later are discarded."""
        self._closed = True
        self._helper.stop_fetching()
