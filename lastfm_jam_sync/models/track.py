"""Track data models decoded from Last.fm responses."""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

LARGE_IMAGE_SIZE = "large"

_UTS_PATTERN = re.compile(r'[0-9]+')


def _text(value: Any) -> str:
    """Return a stripped string for a scalar JSON value, '' otherwise."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value).strip()
    return ""


def _parse_uts(value: Any) -> Optional[int]:
    text = _text(value)
    if not _UTS_PATTERN.fullmatch(text):
        return None
    return int(text)


@dataclass(frozen=True)
class LovedTrack:
    """A loved track entry as returned by user.getLovedTracks."""

    artist: str
    name: str
    url: str = ""
    uts: Optional[int] = None  # Loved-at timestamp, the record identity
    mbid: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'LovedTrack':
        """Decode a single ``lovedtracks.track`` entry.

        Missing fields decode to empty values; a missing or non-numeric
        ``date.uts`` decodes to None and is rejected later at import time.
        """
        artist = data.get('artist')
        if isinstance(artist, dict):
            artist_name = _text(artist.get('name')) or _text(artist.get('#text'))
        else:
            artist_name = _text(artist)

        date = data.get('date')
        uts = _parse_uts(date.get('uts')) if isinstance(date, dict) else None

        return cls(
            artist=artist_name,
            name=_text(data.get('name')),
            url=_text(data.get('url')),
            uts=uts,
            mbid=_text(data.get('mbid')) or None,
        )


@dataclass(frozen=True)
class TrackDetails:
    """Album enrichment for a loved track; empty values when unavailable."""

    album: str = ""
    image_url: str = ""

    @classmethod
    def empty(cls) -> 'TrackDetails':
        return cls()

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'TrackDetails':
        """Decode a track.getInfo response body."""
        track = data.get('track')
        if not isinstance(track, dict):
            return cls.empty()

        album = track.get('album')
        if not isinstance(album, dict):
            return cls.empty()

        image_url = ""
        images = album.get('image')
        if isinstance(images, list):
            for image in images:
                if not isinstance(image, dict):
                    continue
                url = _text(image.get('#text'))
                if image.get('size') == LARGE_IMAGE_SIZE and url:
                    image_url = url
                    break

        return cls(album=_text(album.get('title')), image_url=image_url)
