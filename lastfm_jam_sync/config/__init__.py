"""Configuration module for Last.fm Jam Sync."""

from .settings import Settings, SyncConfig

__all__ = ["Settings", "SyncConfig"]
