"""Tests for program image loading."""

import pytest

from lc3vm.errors import ImageError
from lc3vm.loader import parse_image, read_image_file

import encode


class TestParseImage:

    def test_origin_and_words(self):
        origin, words = parse_image(b"\x30\x00\x12\x34\xF0\x25")
        assert origin == 0x3000
        assert words == [0x1234, 0xF025]

    def test_origin_only(self):
        assert parse_image(b"\x40\x00") == (0x4000, [])

    @pytest.mark.parametrize("data", [b"", b"\x30"])
    def test_too_short(self, data):
        with pytest.raises(ImageError):
            parse_image(data)

    def test_trailing_odd_byte_ignored(self):
        assert parse_image(b"\x30\x00\x00\x01\xFF") == (0x3000, [1])

    def test_truncated_at_top_of_memory(self):
        origin, words = parse_image(encode.image(0xFFFE, [1, 2, 3, 4]))
        assert origin == 0xFFFE
        assert words == [1, 2]


class TestReadImageFile:

    def test_reads_file(self, tmp_path):
        path = tmp_path / "prog.obj"
        path.write_bytes(encode.image(0x3000, [encode.HALT]))
        assert read_image_file(path) == (0x3000, [0xF025])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageError):
            read_image_file(tmp_path / "missing.obj")
