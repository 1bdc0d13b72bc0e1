"""Parsing of user supplied server addresses."""

from __future__ import annotations

import re

# Leading integer, as a best-effort scan of the port text
_PORT_PATTERN = re.compile(r"\s*(\d+)")


def _parse_port(text: str, default_port: int) -> int:
    """Parse a port number, falling back to the default.

    Args:
        text: Text following the port separator
        default_port: Port to use if the text is not a valid port

    Returns:
        Parsed port or default_port
    """
    match = _PORT_PATTERN.match(text)
    if not match:
        return default_port

    port = int(match.group(1))
    if 0 < port <= 65535:
        return port
    return default_port


def parse_address(text: str, default_port: int) -> tuple[str, int]:
    """Split a free-form address into host and port.

    Supports "host", "host:port", "1.2.3.4:port", "[v6]" and "[v6]:port".
    A bare IPv6 address without brackets is kept whole, since its colons
    cannot be told apart from a port separator.

    Args:
        text: Address typed by the user or stored on an entry
        default_port: Port used when the text does not carry one

    Returns:
        Tuple of (host, port)
    """
    text = text.strip()
    start_bracket = text.rfind("[")
    end_bracket = text.rfind("]")

    if start_bracket != -1 and end_bracket > start_bracket:
        host = text[start_bracket + 1:end_bracket]
        rest = text[end_bracket + 1:]
        port = default_port
        if rest.startswith(":"):
            port = _parse_port(rest[1:], default_port)
        return host, port

    if ":" in text and ("." in text or "]" in text):
        host, _, port_text = text.rpartition(":")
        return host, _parse_port(port_text, default_port)

    return text, default_port


def format_address(host: str, port: int) -> str:
    """Build a canonical address string for a host and port.

    Args:
        host: Hostname, IPv4 or IPv6 address
        port: Port number

    Returns:
        "host:port", or "[host]:port" for IPv6 literals
    """
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"
