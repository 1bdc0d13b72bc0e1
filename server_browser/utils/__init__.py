"""Utility modules."""

from server_browser.utils.address_parser import format_address, parse_address
from server_browser.utils.directory_client import DirectoryClient, parse_listing, parse_server
from server_browser.utils.favourites_codec import decode_favourites, encode_favourites
from server_browser.utils.paths import AppPaths, get_app_paths
from server_browser.utils.session import begin_client_session

__all__ = [
    "AppPaths",
    "get_app_paths",
    "parse_address",
    "format_address",
    "DirectoryClient",
    "parse_listing",
    "parse_server",
    "decode_favourites",
    "encode_favourites",
    "begin_client_session",
]
