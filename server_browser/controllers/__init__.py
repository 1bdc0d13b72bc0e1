"""Controllers module for coordinating UI and services."""

from server_browser.controllers.connect_controller import ConnectController
from server_browser.controllers.directory_controller import DirectoryController

__all__ = [
    "ConnectController",
    "DirectoryController",
]
