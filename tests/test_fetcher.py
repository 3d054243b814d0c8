"""Unit tests for the loved-tracks and track-info fetchers."""

import logging
from unittest.mock import MagicMock

import pytest
import requests

from conftest import API_URL, FakeRemote, info_payload, json_response, loved_payload, track_entry

from lastfm_jam_sync.core.fetcher import EnrichmentFetcher, TrackFetcher, normalize_track_entries
from lastfm_jam_sync.core.remote import RemoteClient, RemoteResponse
from lastfm_jam_sync.errors import TransportError, UpstreamError
from lastfm_jam_sync.models import TrackDetails


@pytest.fixture
def fetcher(remote: FakeRemote, logger: logging.Logger) -> TrackFetcher:
    return TrackFetcher(remote, "key", "jammer", logger, base_url=API_URL)


@pytest.fixture
def enrichment(remote: FakeRemote, logger: logging.Logger) -> EnrichmentFetcher:
    return EnrichmentFetcher(remote, "key", logger, base_url=API_URL)


class TestNormalizeTrackEntries:
    def test_single_object_becomes_one_element_list(self) -> None:
        entry = track_entry("Boards of Canada", "Roygbiv", 1700000000)
        assert normalize_track_entries(loved_payload(entry, single=True)) == [entry]

    def test_list_is_kept_in_order(self) -> None:
        first, second = track_entry("A", "1", 2), track_entry("B", "2", 1)
        assert normalize_track_entries(loved_payload(first, second)) == [first, second]

    @pytest.mark.parametrize("data", [
        {},
        {"lovedtracks": {}},
        {"lovedtracks": {"track": None}},
        {"lovedtracks": "nope"},
        [],
    ])
    def test_missing_field_gives_empty_list(self, data) -> None:
        assert normalize_track_entries(data) == []


class TestTrackFetcher:
    def test_builds_loved_tracks_request(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        fetcher.fetch(5)

        url, params = remote.calls[0]
        assert url == API_URL
        assert params == {
            'method': 'user.getlovedtracks',
            'user': 'jammer',
            'api_key': 'key',
            'format': 'json',
            'limit': 5,
        }

    def test_default_limit_is_twenty(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        fetcher.fetch()
        assert remote.calls[0][1]['limit'] == 20

    def test_single_track_object_is_normalized(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = json_response(
            loved_payload(track_entry("Boards of Canada", "Roygbiv", 1700000000), single=True)
        )

        tracks = fetcher.fetch(1)

        assert len(tracks) == 1
        assert tracks[0].artist == "Boards of Canada"
        assert tracks[0].name == "Roygbiv"
        assert tracks[0].uts == 1700000000

    def test_preserves_api_order(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = json_response(loved_payload(
            track_entry("A", "newest", 300), track_entry("B", "middle", 200), track_entry("C", "oldest", 100)
        ))
        assert [t.name for t in fetcher.fetch()] == ["newest", "middle", "oldest"]

    def test_non_200_raises_upstream_error(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = RemoteResponse(status_code=500, content=b'oops')

        with pytest.raises(UpstreamError) as exc_info:
            fetcher.fetch()

        assert exc_info.value.status_code == 500
        assert "500" in str(exc_info.value)

    def test_transport_error_raises_upstream_error(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = TransportError(API_URL, "connection refused")
        with pytest.raises(UpstreamError):
            fetcher.fetch()

    def test_refused_connection_does_not_leak_api_key(self, logger: logging.Logger) -> None:
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        session.get.side_effect = requests.ConnectionError(
            "HTTPConnectionPool(host='127.0.0.1', port=9): Max retries exceeded with url: "
            "/2.0/?method=user.getlovedtracks&user=jammer&api_key=TOPSECRETKEY&format=json"
        )
        client = RemoteClient(logger=logger, session=session)
        fetcher = TrackFetcher(client, "TOPSECRETKEY", "jammer", logger, base_url="http://127.0.0.1:9/2.0/")

        with pytest.raises(UpstreamError) as exc_info:
            fetcher.fetch()

        assert "TOPSECRETKEY" not in str(exc_info.value)
        assert "ConnectionError" in str(exc_info.value)

    def test_invalid_json_raises_upstream_error(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = RemoteResponse(status_code=200, content=b'<html>')
        with pytest.raises(UpstreamError):
            fetcher.fetch()

    def test_api_error_body_raises_upstream_error(self, fetcher: TrackFetcher, remote: FakeRemote) -> None:
        remote.loved = json_response({"error": 6, "message": "User not found"})
        with pytest.raises(UpstreamError, match="User not found"):
            fetcher.fetch()

    @pytest.mark.parametrize("limit", [0, -3, "20", True])
    def test_rejects_invalid_limit(self, fetcher: TrackFetcher, remote: FakeRemote, limit) -> None:
        with pytest.raises(ValueError):
            fetcher.fetch(limit)
        assert remote.calls == []


class TestEnrichmentFetcher:
    def test_builds_track_info_request(self, enrichment: EnrichmentFetcher, remote: FakeRemote) -> None:
        enrichment.fetch("Boards of Canada", "Roygbiv")

        url, params = remote.calls[0]
        assert url == API_URL
        assert params == {
            'method': 'track.getInfo',
            'api_key': 'key',
            'artist': 'Boards of Canada',
            'track': 'Roygbiv',
            'format': 'json',
        }

    def test_returns_album_and_large_cover(self, enrichment: EnrichmentFetcher, remote: FakeRemote) -> None:
        remote.info[("A", "B")] = json_response(info_payload("Album", "https://x/large.jpg"))
        assert enrichment.fetch("A", "B") == TrackDetails(album="Album", image_url="https://x/large.jpg")

    def test_non_200_degrades_to_empty(self, enrichment: EnrichmentFetcher, remote: FakeRemote) -> None:
        remote.info[("A", "B")] = RemoteResponse(status_code=503, content=b'')
        assert enrichment.fetch("A", "B") == TrackDetails.empty()

    def test_transport_error_degrades_to_empty(self, enrichment: EnrichmentFetcher, remote: FakeRemote) -> None:
        remote.info[("A", "B")] = TransportError(API_URL, "timed out")
        assert enrichment.fetch("A", "B") == TrackDetails.empty()

    def test_invalid_json_degrades_to_empty(self, enrichment: EnrichmentFetcher, remote: FakeRemote) -> None:
        remote.info[("A", "B")] = RemoteResponse(status_code=200, content=b'not json')
        assert enrichment.fetch("A", "B") == TrackDetails.empty()
