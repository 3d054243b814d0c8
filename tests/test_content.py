"""Unit tests for content-file helpers."""

import os
import stat
from pathlib import Path

import pytest

from lastfm_jam_sync.core.content import (
    FILE_MODE,
    format_fields,
    generate_uuid,
    parse_fields,
    slugify,
    write_atomic,
)


class TestSlugify:
    @pytest.mark.parametrize("text,expected", [
        ("Boards of Canada", "boards-of-canada"),
        ("Roygbiv", "roygbiv"),
        ("Sigur Rós", "sigur-ros"),
        ("AC/DC", "ac-dc"),
        ("  Hello,   World!  ", "hello-world"),
        ("Beyoncé & Jay-Z", "beyonce-jay-z"),
        ("!!!", ""),
    ])
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected


class TestFields:
    def test_format_uses_separator_lines(self) -> None:
        text = format_fields([('Sort', 1), ('Template', 'image'), ('Uuid', 'abc')])
        assert text == "Sort: 1\n----\nTemplate: image\n----\nUuid: abc\n"

    def test_none_is_written_empty(self) -> None:
        assert format_fields([('Album', None)]) == "Album: \n"

    def test_parse_is_case_insensitive_and_trims(self) -> None:
        fields = parse_fields("Title: Roygbiv\n----\nUts:  1700000000 \n----\n\nText:\n\n")
        assert fields == {'title': 'Roygbiv', 'uts': '1700000000', 'text': ''}

    def test_parse_keeps_colons_in_values(self) -> None:
        fields = parse_fields("Url: https://www.last.fm/music/x\n----\nCover: file://abc\n")
        assert fields['url'] == "https://www.last.fm/music/x"
        assert fields['cover'] == "file://abc"


class TestGenerateUuid:
    def test_shape_and_freshness(self) -> None:
        first, second = generate_uuid(), generate_uuid()
        assert len(first) == 16
        assert first.isalnum()
        assert first != second


class TestWriteAtomic:
    def test_writes_text_and_leaves_no_temp_files(self, tmp_path: Path) -> None:
        target = tmp_path / "jam.txt"
        write_atomic(target, "Title: x\n")

        assert target.read_text(encoding='utf-8') == "Title: x\n"
        assert [p.name for p in tmp_path.iterdir()] == ["jam.txt"]

    def test_replaces_existing_bytes(self, tmp_path: Path) -> None:
        target = tmp_path / "cover.jpg"
        target.write_bytes(b"old")
        write_atomic(target, b"new")
        assert target.read_bytes() == b"new"

    def test_written_file_uses_umask_mode(self, tmp_path: Path) -> None:
        mask = os.umask(0)
        os.umask(mask)
        target = tmp_path / "cover.png"

        write_atomic(target, b"png")

        assert FILE_MODE == 0o666 & ~mask
        assert stat.S_IMODE(target.stat().st_mode) == 0o666 & ~mask
