"""Services module for business logic."""

from server_browser.services.directory_store import DirectoryStore
from server_browser.services.fetch_service import DirectoryFetchService

__all__ = [
    "DirectoryStore",
    "DirectoryFetchService",
]
