"""Server Browser - multiplayer server directory with favourites."""

__version__ = "0.1.0"
