"""Connect controller for joining servers from the directory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from PySide6.QtCore import QObject, Signal

from server_browser.config_loader import NETWORK_STREAM_ID
from server_browser.models import ErrorKind
from server_browser.utils.address_parser import parse_address

if TYPE_CHECKING:
    from server_browser.config_loader import NetworkSettings
    from server_browser.models import ServerEntry

logger = logging.getLogger(__name__)

SessionStarter = Callable[[str, int], bool]


class ConnectController(QObject):
    """Validates join requests and starts client sessions."""

    # kind, detail (remote version for INCOMPATIBLE_VERSION)
    join_failed = Signal(object, str)

    def __init__(
        self,
        settings: NetworkSettings,
        begin_client_session: SessionStarter,
        local_version: str = NETWORK_STREAM_ID,
    ) -> None:
        """Initialize connect controller.

        Args:
            settings: Network settings (default port)
            begin_client_session: Capability that opens a session to (host, port)
            local_version: Network protocol identifier of this build
        """
        super().__init__()
        self._settings = settings
        self._begin_client_session = begin_client_session
        self._local_version = local_version

    @property
    def local_version(self) -> str:
        """Get the local network protocol identifier."""
        return self._local_version

    def join(self, entry: ServerEntry) -> bool:
        """Join a directory entry after checking its protocol version.

        Args:
            entry: Entry chosen by the user

        Returns:
            True if the session was started
        """
        if not entry.is_compatible(self._local_version):
            logger.info(
                "Refusing to join %s: server version %r, local version %r",
                entry.address,
                entry.version,
                self._local_version,
            )
            self.join_failed.emit(ErrorKind.INCOMPATIBLE_VERSION, entry.version)
            return False

        return self.join_raw(entry.address)

    def join_raw(self, address: str) -> bool:
        """Connect to a typed address without a version check.

        Args:
            address: Free-form address text

        Returns:
            True if the session was started
        """
        host, port = parse_address(address, self._settings.default_port)
        logger.info("Joining %s port %d", host, port)

        try:
            started = self._begin_client_session(host, port)
        except Exception:
            logger.exception("Client session to %s:%d raised", host, port)
            started = False

        if not started:
            self.join_failed.emit(ErrorKind.CONNECTION_FAILED, "Unable to connect to server")
            return False
        return True
