"""Core functionality for Last.fm Jam Sync."""

from .detector import DuplicateDetector
from .fetcher import EnrichmentFetcher, TrackFetcher
from .invalidation import CacheInvalidator, CommandCacheInvalidator, NullCacheInvalidator
from .remote import RemoteClient, RemoteResponse
from .scheduler import SyncScheduler
from .sync import JamSyncService
from .writer import RecordWriter

__all__ = [
    "CacheInvalidator",
    "CommandCacheInvalidator",
    "DuplicateDetector",
    "EnrichmentFetcher",
    "JamSyncService",
    "NullCacheInvalidator",
    "RecordWriter",
    "RemoteClient",
    "RemoteResponse",
    "SyncScheduler",
    "TrackFetcher",
]
