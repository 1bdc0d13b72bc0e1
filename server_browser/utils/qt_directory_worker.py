"""Qt worker for non-blocking directory-service fetching."""

from __future__ import annotations

from PySide6.QtCore import Signal

from server_browser.models import ServerListing
from server_browser.utils.directory_client import DirectoryClient
from server_browser.utils.qt_background_worker import BackgroundHelper


def _fetch_directory(url: str, default_port: int, timeout: float) -> list[ServerListing] | None:
    """Fetch the server list (runs in background thread).

    Args:
        url: Directory-service URL
        default_port: Port used for records without a usable port
        timeout: Request timeout in seconds

    Returns:
        List of ServerListing, or None if the fetch failed
    """
    client = DirectoryClient(timeout=timeout)
    try:
        return client.fetch_servers(url, default_port)
    finally:
        client.close()


class DirectoryFetchHelper(BackgroundHelper[list[ServerListing] | None]):
    """Runs directory fetches on a background QThread."""

    finished = Signal(object)  # list[ServerListing] | None
    error = Signal(str)

    def start_fetching(self, url: str, default_port: int, timeout: float = 10.0) -> bool:
        """Start fetching the server list in background.

        Args:
            url: Directory-service URL
            default_port: Port used for records without a usable port
            timeout: Request timeout in seconds

        Returns:
            True if a fetch was started, False if one is already in progress
        """
        return self.run_task(_fetch_directory, url, default_port, timeout)

    def stop_fetching(self) -> None:
        """Stop fetching and clean up."""
        self.stop_task()
