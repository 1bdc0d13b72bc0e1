"""Directory store holding the server entries shown in the browser."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from pathlib import Path
from typing import Iterable

from server_browser.errors import FavouritesFormatError
from server_browser.models import ServerEntry, ServerListing
from server_browser.utils.favourites_codec import decode_favourites, encode_favourites

logger = logging.getLogger(__name__)


class DirectoryStore:
    """Thread-safe registry of server entries keyed by address.

    Every mutation and every walk over the full collection holds the
    store lock. Entries handed out to callers are copies, so positions
    and values must be re-queried after any mutating call.
    """

    def __init__(self, favourites_file: Path) -> None:
        """Initialize directory store.

        Args:
            favourites_file: Path to the servers.cfg favourites file
        """
        self._favourites_file = favourites_file
        self._lock = threading.RLock()
        self._entries: list[ServerEntry] = []

    @property
    def favourites_file(self) -> Path:
        """Get the favourites file path."""
        return self._favourites_file

    def load(self) -> None:
        """Replace the current contents with the persisted favourites.

        A missing or unreadable file leaves the store empty.
        """
        with self._lock:
            self._entries.clear()

            try:
                data = self._favourites_file.read_bytes()
            except FileNotFoundError:
                return
            except OSError as e:
                logger.warning("Unable to read favourites from %s: %s", self._favourites_file, e)
                return

            try:
                entries = decode_favourites(data)
            except FavouritesFormatError as e:
                logger.warning("Ignoring corrupt favourites file %s: %s", self._favourites_file, e)
                return

            seen = set()
            for entry in entries:
                if entry.address in seen:
                    logger.debug("Skipping duplicate favourite %s", entry.address)
                    continue
                seen.add(entry.address)
                self._entries.append(entry)

        logger.info("Loaded %d favourite servers", len(self._entries))

    def save(self) -> bool:
        """Write the current favourites to disk.

        Returns:
            True if saved, False if the file could not be written
        """
        with self._lock:
            data = encode_favourites(self._entries)
            try:
                self._favourites_file.parent.mkdir(parents=True, exist_ok=True)
                self._favourites_file.write_bytes(data)
            except OSError as e:
                logger.warning("Unable to save servers to %s: %s", self._favourites_file, e)
                return False
        return True

    def _find_locked(self, address: str) -> ServerEntry | None:
        for entry in self._entries:
            if entry.address == address:
                return entry
        return None

    def _add_or_get_locked(self, address: str) -> ServerEntry:
        entry = self._find_locked(address)
        if entry is None:
            entry = ServerEntry(address=address, name=address)
            self._entries.append(entry)
        return entry

    def add_or_get(self, address: str) -> ServerEntry:
        """Get the entry for an address, creating it if needed.

        Args:
            address: Exact address string (case-sensitive)

        Returns:
            Copy of the existing or newly created entry
        """
        with self._lock:
            return replace(self._add_or_get_locked(address))

    def find(self, address: str) -> ServerEntry | None:
        """Find an entry by address.

        Args:
            address: Exact address string

        Returns:
            Copy of the entry or None if not found
        """
        with self._lock:
            entry = self._find_locked(address)
            return replace(entry) if entry else None

    def index_of(self, address: str) -> int:
        """Get the position of an address.

        Args:
            address: Exact address string

        Returns:
            Index of the entry, or -1 if not found
        """
        with self._lock:
            for index, entry in enumerate(self._entries):
                if entry.address == address:
                    return index
        return -1

    def remove(self, index: int) -> bool:
        """Remove the entry at a position, keeping the order of the rest.

        Args:
            index: Position of the entry

        Returns:
            True if an entry was removed, False if index is out of range
        """
        with self._lock:
            if not 0 <= index < len(self._entries):
                return False
            del self._entries[index]
        return True

    def toggle_favourite(self, index: int) -> bool | None:
        """Flip the favourite flag of an entry and save favourites.

        Args:
            index: Position of the entry

        Returns:
            The new favourite state, or None if index is out of range
        """
        with self._lock:
            if not 0 <= index < len(self._entries):
                return None
            entry = self._entries[index]
            entry.favourite = not entry.favourite
            self.save()
            return entry.favourite

    def purge_non_favourites(self) -> int:
        """Remove every entry that is not a favourite.

        Returns:
            Number of entries removed
        """
        with self._lock:
            before = len(self._entries)
            self._entries[:] = [entry for entry in self._entries if entry.favourite]
            return before - len(self._entries)

    def merge_listings(self, listings: Iterable[ServerListing]) -> int:
        """Merge directory-service records into the store.

        Each record overwrites all non-identity fields of the entry with
        the same address, creating the entry if needed.

        Args:
            listings: Validated records from the directory service

        Returns:
            Number of records merged
        """
        merged = 0
        with self._lock:
            for listing in listings:
                listing.apply_to(self._add_or_get_locked(listing.address))
                merged += 1
        return merged

    def count(self) -> int:
        """Get the number of entries."""
        with self._lock:
            return len(self._entries)

    def entry_at(self, index: int) -> ServerEntry | None:
        """Get the entry at a position.

        Args:
            index: Position of the entry

        Returns:
            Copy of the entry, or None if index is out of range
        """
        with self._lock:
            if not 0 <= index < len(self._entries):
                return None
            return replace(self._entries[index])

    def entries(self) -> list[ServerEntry]:
        """Get a snapshot of all entries in order."""
        with self._lock:
            return [replace(entry) for entry in self._entries]

    def total_players(self) -> int:
        """Get the sum of players over all entries."""
        with self._lock:
            return sum(entry.players for entry in self._entries)

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._entries.clear()
