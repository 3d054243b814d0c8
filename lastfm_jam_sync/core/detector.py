"""Duplicate detection against existing jam records."""

import logging
from pathlib import Path
from typing import Iterator, Union

from .content import read_fields

JAM_FILENAME = "jam.txt"
UTS_FIELD = "uts"


def iter_record_dirs(content_root: Path) -> Iterator[Path]:
    """Yield numeric-prefixed record directories under the content root."""
    if not content_root.is_dir():
        return
    for entry in sorted(content_root.iterdir()):
        if entry.is_dir() and entry.name[:1].isdigit():
            yield entry


class DuplicateDetector:
    """Decides whether a loved track has already been imported.

    The raw loved-at timestamp is the only identity; artist and title are
    ignored because Last.fm may change them. Every lookup scans all records,
    which is fine for a personal library of a few thousand jams.
    """

    def __init__(self, content_root: Path, logger: logging.Logger):
        self.content_root = content_root
        self.logger = logger

    def exists(self, uts: Union[int, str]) -> bool:
        """Check whether a record with this timestamp exists.

        Args:
            uts: Loved-at timestamp

        Returns:
            True if a complete record carries the same timestamp
        """
        wanted = str(uts).strip()

        for record_dir in iter_record_dirs(self.content_root):
            jam_file = record_dir / JAM_FILENAME
            if not jam_file.is_file():
                continue

            try:
                fields = read_fields(jam_file)
            except (OSError, UnicodeDecodeError) as e:
                self.logger.warning(f"Could not read {jam_file}: {e}")
                continue

            if fields.get(UTS_FIELD) == wanted:
                self.logger.debug(f"Timestamp {wanted} already recorded in {record_dir.name}")
                return True

        return False

    def count(self) -> int:
        """Count complete records under the content root."""
        return sum(
            1 for record_dir in iter_record_dirs(self.content_root)
            if (record_dir / JAM_FILENAME).is_file()
        )
