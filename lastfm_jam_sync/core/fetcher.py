"""Last.fm loved-tracks and track-info retrieval."""

import logging
from typing import Any, List

from ..config.settings import DEFAULT_API_URL, DEFAULT_LIMIT
from ..errors import TransportError, UpstreamError
from ..models.track import LovedTrack, TrackDetails
from .remote import RemoteClient


def normalize_track_entries(data: Any) -> List[dict]:
    """Return the ``lovedtracks.track`` entries of a response as a list.

    Last.fm returns a bare object instead of a one-element list when the
    user has exactly one loved track in the requested window.
    """
    if not isinstance(data, dict):
        return []

    loved = data.get('lovedtracks')
    if not isinstance(loved, dict):
        return []

    entries = loved.get('track')
    if entries is None:
        return []
    if isinstance(entries, dict):
        return [entries]
    if isinstance(entries, list):
        return [entry for entry in entries if isinstance(entry, dict)]
    return []


class TrackFetcher:
    """Fetches the most recent loved tracks of a user."""

    def __init__(
        self,
        remote: RemoteClient,
        api_key: str,
        user: str,
        logger: logging.Logger,
        base_url: str = DEFAULT_API_URL
    ):
        """Initialize the fetcher.

        Args:
            remote: HTTP client
            api_key: Last.fm API key
            user: Last.fm user name
            logger: Logger instance
            base_url: Last.fm API root
        """
        self.remote = remote
        self.api_key = api_key
        self.user = user
        self.logger = logger
        self.base_url = base_url

    def fetch(self, limit: int = DEFAULT_LIMIT) -> List[LovedTrack]:
        """Fetch the latest loved tracks, most recent first.

        Args:
            limit: Number of tracks to request

        Returns:
            List of LovedTrack in API order

        Raises:
            ValueError: If limit is not a positive integer
            UpstreamError: If the request fails or returns an error
        """
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")

        params = {
            'method': 'user.getlovedtracks',
            'user': self.user,
            'api_key': self.api_key,
            'format': 'json',
            'limit': limit,
        }

        try:
            response = self.remote.get(self.base_url, params=params)
        except TransportError as e:
            raise UpstreamError(f"Last.fm API request failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"Last.fm API request failed with code {response.status_code}",
                status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Last.fm API returned an invalid body: {e}") from e

        if isinstance(data, dict) and 'error' in data:
            raise UpstreamError(
                f"Last.fm API error {data.get('error')}: {data.get('message', 'unknown error')}"
            )

        tracks = [LovedTrack.from_api(entry) for entry in normalize_track_entries(data)]
        self.logger.info(f"Fetched {len(tracks)} loved track(s) for {self.user}")
        return tracks


class EnrichmentFetcher:
    """Looks up album name and cover art for a track.

    Best effort: any failure yields empty details.
    """

    def __init__(
        self,
        remote: RemoteClient,
        api_key: str,
        logger: logging.Logger,
        base_url: str = DEFAULT_API_URL
    ):
        self.remote = remote
        self.api_key = api_key
        self.logger = logger
        self.base_url = base_url

    def fetch(self, artist: str, name: str) -> TrackDetails:
        """Fetch track.getInfo details for an artist/track pair."""
        params = {
            'method': 'track.getInfo',
            'api_key': self.api_key,
            'artist': artist,
            'track': name,
            'format': 'json',
        }

        try:
            response = self.remote.get(self.base_url, params=params)
        except TransportError as e:
            self.logger.warning(f"Track info lookup failed for {artist} - {name}: {e}")
            return TrackDetails.empty()

        if response.status_code != 200:
            self.logger.warning(
                f"Track info lookup for {artist} - {name} returned code {response.status_code}"
            )
            return TrackDetails.empty()

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning(f"Invalid track info body for {artist} - {name}: {e}")
            return TrackDetails.empty()

        if not isinstance(data, dict):
            return TrackDetails.empty()

        return TrackDetails.from_api(data)
