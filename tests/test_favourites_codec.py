"""Tests for the favourites file codec."""

import struct

import pytest

from server_browser.errors import FavouritesFormatError
from server_browser.utils.favourites_codec import decode_favourites, encode_favourites


def _blob(*records: tuple[str, str, str]) -> bytes:
    data = struct.pack("<I", len(records))
    for record in records:
        for value in record:
            data += value.encode("utf-8") + b"\0"
    return data


class TestDecodeFavourites:
    """Tests for decode_favourites."""

    def test_decodes_entries_in_order(self) -> None:
        entries = decode_favourites(
            _blob(("1.2.3.4:11753", "Alpha", "First"), ("example.com", "Beta", ""))
        )

        assert [e.address for e in entries] == ["1.2.3.4:11753", "example.com"]
        assert [e.name for e in entries] == ["Alpha", "Beta"]
        assert [e.description for e in entries] == ["First", ""]

    def test_transient_fields_get_defaults(self) -> None:
        (entry,) = decode_favourites(_blob(("host:1", "Name", "Desc")))

        assert entry.favourite is True
        assert entry.requires_password is False
        assert entry.version == ""
        assert entry.players == 0
        assert entry.max_players == 0

    def test_empty_list(self) -> None:
        assert decode_favourites(struct.pack("<I", 0)) == []

    def test_utf8_strings(self) -> None:
        (entry,) = decode_favourites(_blob(("host:1", "Parc Ünïcode 🎢", "Übersicht")))
        assert entry.name == "Parc Ünïcode 🎢"
        assert entry.description == "Übersicht"

    def test_missing_count_raises(self) -> None:
        with pytest.raises(FavouritesFormatError):
            decode_favourites(b"\x01\x00")

    def test_truncated_string_raises(self) -> None:
        data = _blob(("host:1", "Name", "Desc"))[:-3]
        with pytest.raises(FavouritesFormatError):
            decode_favourites(data)

    def test_count_larger_than_data_raises(self) -> None:
        data = struct.pack("<I", 2) + b"host:1\0Name\0Desc\0"
        with pytest.raises(FavouritesFormatError):
            decode_favourites(data)


class TestEncodeFavourites:
    """Tests for encode_favourites."""

    def test_writes_only_favourites(self, make_entry) -> None:
        entries = [
            make_entry("a:1", name="A", favourite=True),
            make_entry("b:1", name="B", favourite=False),
            make_entry("c:1", name="C", description="third", favourite=True),
        ]

        assert encode_favourites(entries) == _blob(("a:1", "A", ""), ("c:1", "C", "third"))

    def test_count_is_number_of_favourites(self, make_entry) -> None:
        entries = [make_entry("a:1"), make_entry("b:1", favourite=True)]
        (count,) = struct.unpack_from("<I", encode_favourites(entries))
        assert count == 1

    def test_round_trip_preserves_bytes(self) -> None:
        data = _blob(("1.2.3.4:11753", "Alpha", "First"), ("[::1]:11753", "", "No name"))
        assert encode_favourites(decode_favourites(data)) == data

    def test_round_trip_drops_non_favourites(self, make_entry) -> None:
        entries = [
            make_entry("a:1", name="A", favourite=True),
            make_entry("b:1", name="B"),
        ]

        decoded = decode_favourites(encode_favourites(entries))

        assert [(e.address, e.name) for e in decoded] == [("a:1", "A")]

    def test_embedded_nul_is_truncated(self, make_entry) -> None:
        entries = [make_entry("a:1", name="Bad\0Name", favourite=True)]
        (entry,) = decode_favourites(encode_favourites(entries))
        assert entry.name == "Bad"
