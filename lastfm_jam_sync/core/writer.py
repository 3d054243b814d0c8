"""Creates jam records on disk."""

import logging
import posixpath
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from zoneinfo import ZoneInfo

from ..errors import TransportError
from ..models.track import LovedTrack, TrackDetails
from .content import (
    FIELD_SEPARATOR,
    FILE_UUID_SCHEME,
    format_fields,
    generate_uuid,
    read_fields,
    slugify,
    write_atomic,
)
from .detector import JAM_FILENAME, UTS_FIELD
from .remote import RemoteClient

ALLOWED_EXTENSIONS = ('jpg', 'jpeg', 'png', 'gif', 'webp')
DEFAULT_EXTENSION = 'jpg'
COVER_BASENAME = 'cover'
JAM_TEMPLATE = 'jam'
IMAGE_TEMPLATE = 'image'


def cover_extension(url: str) -> str:
    """Pick the cover file extension from the URL path."""
    path = urlparse(url).path
    extension = posixpath.splitext(posixpath.basename(path))[1].lstrip('.').lower()
    if extension not in ALLOWED_EXTENSIONS:
        return DEFAULT_EXTENSION
    return extension


class RecordWriter:
    """Writes one jam record directory per imported loved track.

    Layout::

        <content_root>/<YYYYMMDDHHmm>_<artist>-<title>/
            jam.txt
            cover.<ext>
            cover.<ext>.txt
    """

    def __init__(
        self,
        content_root: Path,
        remote: RemoteClient,
        logger: logging.Logger,
        tz: str = "UTC"
    ):
        """Initialize the writer.

        Args:
            content_root: Directory holding the jam records
            remote: HTTP client used for cover downloads
            logger: Logger instance
            tz: Timezone name used for directory prefixes and dates
        """
        self.content_root = content_root
        self.remote = remote
        self.logger = logger
        self.tz = ZoneInfo(tz)

    def _loved_at(self, track: LovedTrack) -> datetime:
        if track.uts is None:
            raise ValueError(f"Loved track '{track.artist} - {track.name}' has no timestamp")
        return datetime.fromtimestamp(track.uts, tz=timezone.utc).astimezone(self.tz)

    def directory_name(self, track: LovedTrack) -> str:
        """Build the record directory name for a track."""
        prefix = self._loved_at(track).strftime('%Y%m%d%H%M')
        return f"{prefix}_{slugify(track.artist)}-{slugify(track.name)}"

    def _claimed_by_other(self, directory: Path, track: LovedTrack) -> bool:
        """Check whether a directory already holds a record for another timestamp."""
        jam_file = directory / JAM_FILENAME
        if not jam_file.is_file():
            return False
        return read_fields(jam_file).get(UTS_FIELD) != str(track.uts)

    def allocate_directory(self, track: LovedTrack) -> Path:
        """Create (or reuse) the record directory for a track.

        A directory without jam.txt is left over from an interrupted import
        and is reused. A directory holding another timestamp's record gets a
        numeric suffix instead.

        Args:
            track: Loved track being imported

        Returns:
            Path of the record directory
        """
        base_name = self.directory_name(track)
        directory = self.content_root / base_name
        suffix = 2
        while self._claimed_by_other(directory, track):
            directory = self.content_root / f"{base_name}-{suffix}"
            suffix += 1

        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def download_cover(self, url: str, directory: Path) -> str:
        """Download a cover image into the record directory.

        Args:
            url: Image URL
            directory: Record directory

        Returns:
            Cover reference (``file://<uuid>``), or '' if the download failed
        """
        try:
            response = self.remote.get(url)
        except TransportError as e:
            self.logger.warning(f"Cover download failed: {e}")
            return ''

        if response.status_code != 200:
            self.logger.warning(f"Cover download from {url} returned code {response.status_code}")
            return ''

        if not response.content:
            self.logger.warning(f"Cover download from {url} returned an empty body")
            return ''

        filepath = directory / f"{COVER_BASENAME}.{cover_extension(url)}"
        write_atomic(filepath, response.content)

        image_uuid = generate_uuid()
        metadata = format_fields([
            ('Sort', 1),
            ('Template', IMAGE_TEMPLATE),
            ('Uuid', image_uuid),
        ])
        write_atomic(filepath.with_name(filepath.name + '.txt'), metadata)

        self.logger.debug(f"Saved cover {filepath.name} ({len(response.content)} bytes)")
        return f"{FILE_UUID_SCHEME}{image_uuid}"

    def write_metadata(
        self,
        track: LovedTrack,
        details: TrackDetails,
        cover_reference: str,
        directory: Path
    ) -> Path:
        """Write the jam.txt document for a track.

        Returns:
            Path of the written metadata file
        """
        loved_at = self._loved_at(track)
        content = format_fields([
            ('Title', track.name),
            ('Date', loved_at.strftime('%Y-%m-%d %H:%M')),
            ('Artist', track.artist),
            ('Track', track.name),
            ('Album', details.album),
            ('Url', track.url),
            ('Cover', cover_reference),
            ('Template', JAM_TEMPLATE),
            ('Uts', track.uts),
            ('Uuid', generate_uuid()),
        ])
        content += f"{FIELD_SEPARATOR}\n\nText:\n\n"

        jam_file = directory / JAM_FILENAME
        write_atomic(jam_file, content)
        return jam_file

    def write(self, track: LovedTrack, details: Optional[TrackDetails] = None) -> Path:
        """Create the complete record for a track.

        Returns:
            Path of the record directory
        """
        details = details or TrackDetails.empty()
        directory = self.allocate_directory(track)

        cover_reference = ''
        if details.image_url:
            cover_reference = self.download_cover(details.image_url, directory)

        self.write_metadata(track, details, cover_reference, directory)
        return directory
