"""Last.fm Jam Sync - imports loved tracks as jam content records."""

__version__ = "0.1.0"
