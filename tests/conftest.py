"""Shared fixtures for Last.fm Jam Sync tests."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import pytest

from lastfm_jam_sync.config.settings import SyncConfig
from lastfm_jam_sync.core.remote import RemoteResponse
from lastfm_jam_sync.core.sync import JamSyncService

API_URL = "https://ws.audioscrobbler.com/2.0/"
COVER_URL = "https://lastfm.freetls.fastly.net/i/u/174s/cover.png"


def json_response(data: Any, status_code: int = 200) -> RemoteResponse:
    return RemoteResponse(status_code=status_code, content=json.dumps(data).encode('utf-8'))


def track_entry(artist: str, name: str, uts: Union[int, str], url: str = "") -> Dict[str, Any]:
    """Build a user.getLovedTracks track entry."""
    return {
        "artist": {"name": artist, "mbid": "", "url": f"https://www.last.fm/music/{artist}"},
        "name": name,
        "mbid": "",
        "url": url or f"https://www.last.fm/music/{artist}/_/{name}",
        "date": {"uts": str(uts), "#text": "14 Nov 2023, 22:13"},
        "image": [],
        "streamable": {"fulltrack": "0", "#text": "0"},
    }


def loved_payload(*entries: Dict[str, Any], single: bool = False) -> Dict[str, Any]:
    """Build a user.getLovedTracks body; ``single`` returns a bare object."""
    track: Any = entries[0] if single else list(entries)
    return {
        "lovedtracks": {
            "track": track,
            "@attr": {"user": "jammer", "page": "1", "perPage": "20", "total": str(len(entries))},
        }
    }


def info_payload(album: str = "", image_url: str = "") -> Dict[str, Any]:
    """Build a track.getInfo body."""
    images = [
        {"#text": "https://example.com/small.png", "size": "small"},
        {"#text": "https://example.com/medium.png", "size": "medium"},
    ]
    if image_url:
        images.append({"#text": image_url, "size": "large"})
    images.append({"#text": "https://example.com/xl.png", "size": "extralarge"})
    return {"track": {"name": "x", "album": {"title": album, "image": images}}}


class FakeRemote:
    """In-memory stand-in for RemoteClient that records every call."""

    def __init__(self):
        self.calls: List[Tuple[str, Optional[Dict[str, Any]]]] = []
        self.loved: Union[RemoteResponse, Exception] = json_response(loved_payload())
        self.info: Dict[Tuple[str, str], RemoteResponse] = {}
        self.default_info = RemoteResponse(status_code=404, content=b'')
        self.files: Dict[str, Union[RemoteResponse, Exception]] = {}
        self.closed = False

    def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> RemoteResponse:
        self.calls.append((url, params))
        method = (params or {}).get('method')

        if method == 'user.getlovedtracks':
            response = self.loved
        elif method == 'track.getInfo':
            response = self.info.get((params['artist'], params['track']), self.default_info)
        else:
            response = self.files.get(url, RemoteResponse(status_code=404, content=b''))

        if isinstance(response, Exception):
            raise response
        return response

    def calls_for(self, method: str) -> List[Dict[str, Any]]:
        return [params for _, params in self.calls if params and params.get('method') == method]

    def close(self) -> None:
        self.closed = True


class RecordingInvalidator:
    def __init__(self, error: Optional[Exception] = None):
        self.calls = 0
        self.error = error

    def invalidate(self) -> None:
        self.calls += 1
        if self.error:
            raise self.error


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep default settings paths out of the real home directory."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("jam_sync_tests")


@pytest.fixture
def content_root(tmp_path: Path) -> Path:
    return tmp_path / "content" / "jams"


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def invalidator() -> RecordingInvalidator:
    return RecordingInvalidator()


@pytest.fixture
def sync_config(content_root: Path) -> SyncConfig:
    return SyncConfig(api_key="key", user="jammer", content_root=content_root)


@pytest.fixture
def service(
    sync_config: SyncConfig,
    remote: FakeRemote,
    logger: logging.Logger,
    invalidator: RecordingInvalidator
) -> JamSyncService:
    return JamSyncService(sync_config, remote, logger, invalidator=invalidator, base_url=API_URL)
