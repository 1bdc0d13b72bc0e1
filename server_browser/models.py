"""Data models for Server Browser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Kinds of errors reported to the UI when joining a server."""

    INCOMPATIBLE_VERSION = "incompatible_version"
    CONNECTION_FAILED = "connection_failed"


@dataclass
class ServerEntry:
    """One row in the server directory, keyed by address."""

    address: str
    name: str = ""
    description: str = ""
    requires_password: bool = False
    version: str = ""
    favourite: bool = False
    players: int = 0
    max_players: int = 0

    @property
    def display_name(self) -> str:
        """Get the name to show, falling back to the address."""
        return self.name or self.address

    @property
    def player_count(self) -> str:
        """Get formatted player count, empty when the capacity is unknown."""
        if self.max_players <= 0:
            return ""
        return f"{self.players}/{self.max_players}"

    @property
    def is_online(self) -> bool:
        """Whether the server has reported a version (i.e. has been contacted)."""
        return self.version != ""

    def is_compatible(self, local_version: str) -> bool:
        """Check if the entry speaks the same network protocol as this build.

        Args:
            local_version: Local network protocol identifier

        Returns:
            True if versions match exactly
        """
        return self.version == local_version


@dataclass
class ServerListing:
    """A validated server record from the directory service."""

    address: str
    name: str
    version: str
    description: str = ""
    requires_password: bool = False
    players: int = 0
    max_players: int = 0

    def apply_to(self, entry: ServerEntry) -> None:
        """Overwrite the non-identity fields of an entry with this listing.

        Args:
            entry: Entry to update in place
        """
        entry.name = self.name
        entry.description = self.description
        entry.version = self.version
        entry.requires_password = self.requires_password
        entry.players = self.players
        entry.max_players = self.max_players
