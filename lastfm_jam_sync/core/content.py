"""Helpers for Kirby-style content files.

A content file is a list of ``Key: value`` fields separated by lines that
contain only ``----``. Field names are matched case-insensitively when read
back.
"""

import os
import re
import secrets
import string
import tempfile
import unicodedata
from pathlib import Path
from typing import Dict, Iterable, Tuple, Union

FIELD_SEPARATOR = "----"
UUID_ALPHABET = string.ascii_letters + string.digits
UUID_LENGTH = 16
FILE_UUID_SCHEME = "file://"

_SEPARATOR_LINE = re.compile(r'^[ \t]*-{4}[ \t]*\r?$', re.MULTILINE)
_NON_SLUG_CHARS = re.compile(r'[^a-z0-9]+')


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# mkstemp creates files as 0600
FILE_MODE = 0o666 & ~_current_umask()


def slugify(text: str) -> str:
    """Render text as a lowercase, ASCII, dash-separated slug."""
    normalized = unicodedata.normalize('NFKD', text).encode('ascii', 'ignore').decode('ascii')
    return _NON_SLUG_CHARS.sub('-', normalized.lower()).strip('-')


def generate_uuid() -> str:
    """Generate a fresh content identifier."""
    return ''.join(secrets.choice(UUID_ALPHABET) for _ in range(UUID_LENGTH))


def format_fields(fields: Iterable[Tuple[str, object]]) -> str:
    """Serialize fields in the given order."""
    chunks = []
    for name, value in fields:
        chunks.append(f"{name}: {'' if value is None else value}\n")
    return f"{FIELD_SEPARATOR}\n".join(chunks)


def parse_fields(text: str) -> Dict[str, str]:
    """Parse a content file into a dict keyed by lowercase field name."""
    fields = {}
    for chunk in _SEPARATOR_LINE.split(text):
        name, sep, value = chunk.strip().partition(':')
        if not sep:
            continue
        fields[name.strip().lower()] = value.strip()
    return fields


def read_fields(path: Path) -> Dict[str, str]:
    """Read and parse a content file."""
    return parse_fields(path.read_text(encoding='utf-8'))


def write_atomic(path: Path, data: Union[str, bytes]) -> None:
    """Write a file so readers see either nothing or the complete content.

    The data goes to a temporary file in the same directory which is then
    renamed over the target. The file gets the usual umask-derived mode.
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix='.tmp', dir=path.parent)
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
