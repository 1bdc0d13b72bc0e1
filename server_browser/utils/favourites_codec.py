"""Binary codec for the servers.cfg favourites file.

Layout (little-endian)::

    uint32 count
    repeat count times:
        NUL-terminated UTF-8 address
        NUL-terminated UTF-8 name
        NUL-terminated UTF-8 description

Only durable directory data is stored. Password, version and player
counts are reported by the server itself and are not persisted.
"""

from __future__ import annotations

import struct
from typing import Iterable

from server_browser.errors import FavouritesFormatError
from server_browser.models import ServerEntry

_COUNT = struct.Struct("<I")


class _CStringReader:
    """Reads NUL-terminated strings from a byte buffer."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = data
        self._offset = offset

    def read_until_nul(self) -> str:
        """Read the next string and skip its terminator.

        Returns:
            Decoded string

        Raises:
            FavouritesFormatError: If the buffer ends before a terminator
        """
        end = self._data.find(b"\0", self._offset)
        if end == -1:
            raise FavouritesFormatError(
                f"Unterminated string at offset {self._offset}"
            )
        raw = self._data[self._offset:end]
        self._offset = end + 1
        return raw.decode("utf-8", errors="replace")


def _encode_string(value: str) -> bytes:
    """Encode a string with its NUL terminator, truncating at any embedded NUL."""
    return value.split("\0", 1)[0].encode("utf-8") + b"\0"


def decode_favourites(data: bytes) -> list[ServerEntry]:
    """Decode a favourites blob.

    Args:
        data: Raw file contents

    Returns:
        Entries in file order, all marked as favourites

    Raises:
        FavouritesFormatError: If the data is truncated
    """
    if len(data) < _COUNT.size:
        raise FavouritesFormatError("Favourites data is missing its entry count")

    (count,) = _COUNT.unpack_from(data, 0)
    reader = _CStringReader(data, _COUNT.size)

    entries = []
    for _ in range(count):
        address = reader.read_until_nul()
        name = reader.read_until_nul()
        description = reader.read_until_nul()
        entries.append(
            ServerEntry(
                address=address,
                name=name,
                description=description,
                favourite=True,
            )
        )
    return entries


def encode_favourites(entries: Iterable[ServerEntry]) -> bytes:
    """Encode the favourite entries of a collection.

    Args:
        entries: Entries in directory order; non-favourites are skipped

    Returns:
        Encoded blob
    """
    favourites = [entry for entry in entries if entry.favourite]

    chunks = [_COUNT.pack(len(favourites))]
    for entry in favourites:
        chunks.append(_encode_string(entry.address))
        chunks.append(_encode_string(entry.name))
        chunks.append(_encode_string(entry.description))
    return b"".join(chunks)
