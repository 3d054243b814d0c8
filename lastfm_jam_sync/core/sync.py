"""Loved-track synchronization: fetch, dedupe, enrich, write."""

import logging
from typing import Optional

from ..config.settings import DEFAULT_API_URL, Settings, SyncConfig
from ..errors import ConfigurationError
from ..models.result import SyncSummary, TrackResult
from ..models.track import LovedTrack
from .detector import DuplicateDetector
from .fetcher import EnrichmentFetcher, TrackFetcher
from .invalidation import CacheInvalidator, NullCacheInvalidator, build_invalidator
from .remote import RemoteClient
from .writer import RecordWriter


class JamSyncService:
    """Imports new Last.fm loved tracks as jam records."""

    def __init__(
        self,
        config: SyncConfig,
        remote: RemoteClient,
        logger: logging.Logger,
        invalidator: Optional[CacheInvalidator] = None,
        base_url: str = DEFAULT_API_URL
    ):
        """Initialize the service.

        Args:
            config: Sync configuration
            remote: HTTP client shared by all API calls and downloads
            logger: Logger instance
            invalidator: Cache invalidation hook (default: no-op)
            base_url: Last.fm API root
        """
        self.config = config
        self.remote = remote
        self.logger = logger
        self.invalidator = invalidator or NullCacheInvalidator(logger)

        self.fetcher = TrackFetcher(remote, config.api_key, config.user, logger, base_url=base_url)
        self.enrichment = EnrichmentFetcher(remote, config.api_key, logger, base_url=base_url)
        self.detector = DuplicateDetector(config.content_root, logger)
        self.writer = RecordWriter(config.content_root, remote, logger, tz=config.timezone)

    @classmethod
    def from_settings(cls, settings: Settings, logger: logging.Logger) -> 'JamSyncService':
        """Build a service wired from loaded settings."""
        remote = RemoteClient(logger=logger, timeout=settings.lastfm.timeout)
        return cls(
            config=settings.sync_config(),
            remote=remote,
            logger=logger,
            invalidator=build_invalidator(settings, logger),
            base_url=settings.lastfm.base_url,
        )

    def sync(self, limit: Optional[int] = None) -> SyncSummary:
        """Synchronize the latest loved tracks.

        Args:
            limit: Number of loved tracks to fetch (default: configured webhook limit)

        Returns:
            SyncSummary of the batch

        Raises:
            ConfigurationError: If the API key or user is missing
            UpstreamError: If the loved-tracks request fails
        """
        if not self.config.api_key or not self.config.user:
            raise ConfigurationError(
                "Last.fm configuration missing: set lastfm.api_key and lastfm.user"
            )

        if limit is None:
            limit = self.config.webhook_limit

        self.config.content_root.mkdir(parents=True, exist_ok=True)

        tracks = self.fetcher.fetch(limit)

        summary = SyncSummary()
        for track in tracks:
            summary.results.append(self.import_track(track))

        self.logger.info(
            f"Sync complete: {summary.total} fetched, {summary.imported} imported, "
            f"{summary.skipped} skipped, {summary.errors} failed"
        )

        if summary.imported > 0:
            self._invalidate_cache()

        return summary

    def import_track(self, track: LovedTrack) -> TrackResult:
        """Import a single loved track.

        Failures are returned as a failed result, never raised.
        """
        label = f"{track.artist} - {track.name}"
        try:
            if track.uts is None:
                raise ValueError("loved track has no timestamp")

            if self.detector.exists(track.uts):
                self.logger.debug(f"Skipping already imported jam: {label}")
                return TrackResult.skipped(track)

            details = self.enrichment.fetch(track.artist, track.name)
            path = self.writer.write(track, details)

            self.logger.info(f"Imported jam: {label} -> {path.name}")
            return TrackResult.imported(track, path)

        except Exception as e:
            self.logger.error(f"Error importing track {label}: {e}")
            return TrackResult.failed(track, str(e))

    def _invalidate_cache(self) -> None:
        """Notify the host; failures are logged and never change the result."""
        try:
            self.invalidator.invalidate()
        except Exception as e:
            self.logger.error(f"Error clearing cache: {e}")
