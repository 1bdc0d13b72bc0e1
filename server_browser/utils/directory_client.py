"""Client for the master server directory service."""

from __future__ import annotations

import logging
from typing import Any

import requests

from server_browser import __version__
from server_browser.errors import DirectoryResponseError
from server_browser.models import ServerListing
from server_browser.utils.address_parser import format_address

logger = logging.getLogger(__name__)

USER_AGENT = f"ServerBrowser/{__version__}"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _clamp_count(value: Any) -> int:
    """Clamp a player count into the 0..255 range, defaulting to 0."""
    if not _is_int(value):
        return 0
    return max(0, min(255, value))


def _first_address(ip: Any) -> str | None:
    """Pick the first IPv4 address, falling back to the first IPv6 one."""
    if not isinstance(ip, dict):
        return None

    for family in ("v4", "v6"):
        addresses = ip.get(family)
        if isinstance(addresses, list) and addresses and isinstance(addresses[0], str):
            return addresses[0]
    return None


def parse_server(server: Any, default_port: int) -> ServerListing | None:
    """Validate one element of the "servers" array.

    Args:
        server: Decoded JSON value
        default_port: Port used when the record has no usable port

    Returns:
        ServerListing, or None if the record must be skipped
    """
    if not isinstance(server, dict):
        return None

    name = server.get("name")
    version = server.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        logger.debug("Refusing to add server without name or version: %r", server)
        return None

    host = _first_address(server.get("ip"))
    if host is None:
        logger.debug("Skipping server %r without an IP address", name)
        return None

    port = server.get("port")
    if not _is_int(port) or not 0 < port <= 65535:
        port = default_port

    description = server.get("description")

    return ServerListing(
        address=format_address(host, port),
        name=name,
        version=version,
        description=description if isinstance(description, str) else "",
        requires_password=server.get("requiresPassword") is True,
        players=_clamp_count(server.get("players")),
        max_players=_clamp_count(server.get("maxPlayers")),
    )


def parse_listing(payload: Any, default_port: int) -> list[ServerListing]:
    """Validate a directory-service response body.

    Args:
        payload: Decoded JSON body
        default_port: Port used for records without a usable port

    Returns:
        Valid server records in response order

    Raises:
        DirectoryResponseError: If the response as a whole is unusable
    """
    if not isinstance(payload, dict):
        raise DirectoryResponseError("Invalid response from master server")

    status = payload.get("status")
    if not isinstance(status, (int, float)) or isinstance(status, bool):
        raise DirectoryResponseError("Invalid response from master server")
    if status != 200:
        raise DirectoryResponseError(f"Master server failed to return servers (status {status})")

    servers = payload.get("servers")
    if not isinstance(servers, list):
        raise DirectoryResponseError("Invalid response from master server")

    listings = []
    for server in servers:
        listing = parse_server(server, default_port)
        if listing is not None:
            listings.append(listing)
    return listings


class DirectoryClient:
    """Fetches the server list from a directory service."""

    def __init__(self, user_agent: str = USER_AGENT, timeout: float = 10.0):
        """Initialize directory client.

        Args:
            user_agent: User agent string for requests
            timeout: Request timeout in seconds
        """
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def fetch_servers(self, url: str, default_port: int) -> list[ServerListing] | None:
        """Fetch and validate the server list.

        Args:
            url: Directory-service URL
            default_port: Port used for records without a usable port

        Returns:
            List of ServerListing, or None if no usable response was received
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Unable to connect to master server %s: %s", url, e)
            return None

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("Invalid JSON from master server %s: %s", url, e)
            return None

        try:
            listings = parse_listing(payload, default_port)
        except DirectoryResponseError as e:
            logger.warning("%s", e)
            return None

        logger.info("Master server returned %d servers", len(listings))
        return listings

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
