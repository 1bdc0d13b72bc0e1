"""Exception types for Server Browser."""

from __future__ import annotations


class ServerBrowserError(Exception):
    """Base class for all Server Browser errors."""


class FavouritesFormatError(ServerBrowserError):
    """The favourites file is truncated or otherwise unreadable."""


class DirectoryResponseError(ServerBrowserError):
    """The directory service returned a payload we cannot use."""


class SettingsError(ServerBrowserError):
    """The settings file could not be written."""
