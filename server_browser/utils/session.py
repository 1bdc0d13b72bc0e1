"""Default client session capability.

The game's own network protocol is outside this package; the default
session only establishes a TCP connection to the chosen server and
reports whether it succeeded.
"""

from __future__ import annotations

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor

logger = logging.getLogger(__name__)


async def open_session(host: str, port: int, timeout: float = 5.0) -> int:
    """Open a TCP connection to a server and measure the handshake.

    Args:
        host: Hostname or IP address
        port: Port number
        timeout: Timeout in seconds

    Returns:
        Connection latency in milliseconds, -1 if the server is unreachable
    """
    if not host:
        return -1

    try:
        start_time = time.perf_counter()
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(host, port), timeout=timeout
        )
        end_time = time.perf_counter()

        writer.close()
        await writer.wait_closed()

        return int((end_time - start_time) * 1000)
    except (asyncio.TimeoutError, OSError) as e:
        logger.info("Unable to connect to %s:%d: %s", host, port, e)
        return -1


def begin_client_session(host: str, port: int, timeout: float = 5.0) -> bool:
    """Begin a client session with a server.

    Args:
        host: Hostname or IP address
        port: Port number
        timeout: Timeout in seconds

    Returns:
        True if the server accepted the connection
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        latency_ms = asyncio.run(open_session(host, port, timeout))
    else:
        # This thread already runs an event loop; use a fresh one elsewhere
        with ThreadPoolExecutor(max_workers=1) as executor:
            latency_ms = executor.submit(asyncio.run, open_session(host, port, timeout)).result()

    if latency_ms >= 0:
        logger.info("Connected to %s:%d in %d ms", host, port, latency_ms)
        return True
    return False
