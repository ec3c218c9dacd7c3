from __future__ import annotations

import io
from pathlib import Path

import pytest

from rev_lines.rev_lines import RevLines
from rev_lines.results import DecodeError, DecodeFailure, IoFailure, Line, ReadError


MULTI_LINE = ["UVWXYZ", "LMNOPQRST", "GHIJK", "ABCDEF"]


def rev(data: bytes, buf_size: int = 4096) -> list[str]:
    return list(RevLines(io.BytesIO(data), buf_size))


class FailingReader(io.BytesIO):
    """BytesIO that raises once more than `fail_after` reads were made."""

    def __init__(self, data: bytes, fail_after: int):
        super().__init__(data)
        self.fail_after = fail_after
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if self.reads > self.fail_after:
            raise OSError("device not ready")
        return super().read(size)


class ShortReader(io.BytesIO):
    """BytesIO that always returns one byte less than asked for."""

    def read(self, size=-1):
        data = super().read(size)
        return data[:-1]


def test_empty_file(samples: dict[str, Path]):
    with open(samples["empty_file"], "rb") as f:
        assert list(RevLines(f)) == []


def test_one_line_file(samples: dict[str, Path]):
    with open(samples["one_line_file"], "rb") as f:
        assert list(RevLines(f)) == ["ABCD"]


def test_multi_line_file(samples: dict[str, Path]):
    with open(samples["multi_line_file"], "rb") as f:
        assert list(RevLines(f)) == MULTI_LINE


def test_blank_line_file(samples: dict[str, Path]):
    with open(samples["blank_line_file"], "rb") as f:
        assert list(RevLines(f)) == ["", "", "XYZ", "", "ABCD"]


@pytest.mark.parametrize("buf_size", [1, 2, 5, 4096, 29])
def test_multi_line_file_with_capacity(samples: dict[str, Path], buf_size: int):
    with open(samples["multi_line_file"], "rb") as f:
        assert list(RevLines(f, buf_size)) == MULTI_LINE


@pytest.mark.parametrize("buf_size", [1, 2, 3, 5, 4096])
@pytest.mark.parametrize("content", [
    "a\nbb\nccc",
    "a\nbb\nccc\n",
    "\n\nfirst blank lines\n",
    "\nABC",
    "trailing blanks\n\n\n",
    "\n",
    "\n\n",
    "x",
    "héllo\nwörld\n€uro",
])
def test_matches_forward_split(content: str, buf_size: int):
    lines = rev(content.encode("utf-8"), buf_size)
    assert lines == content.splitlines()[::-1]
    # Rejoining restores the content, give or take one trailing terminator
    assert "\n".join(reversed(lines)) == content.removesuffix("\n")


def test_terminator_only_stream():
    assert rev(b"\n") == [""]
    assert rev(b"\r\n") == [""]


def test_bare_trailing_bytes_are_content():
    assert rev(b"AB\r") == ["AB\r"]
    assert rev(b"AB\n\r") == ["\r", "AB"]
    assert rev(b"\rX") == ["\rX"]


def test_crlf_lines():
    assert rev(b"ABC\r\nDEF\r\nGHI\r\n") == ["GHI", "DEF", "ABC"]


def test_crlf_split_at_chunk_boundary_keeps_cr():
    # The LF lands at index 0 of the chunk, so its CR is left on the earlier line
    assert rev(b"AB\r\nCD", buf_size=3) == ["CD", "AB\r"]
    assert rev(b"AB\r\nCD", buf_size=4096) == ["CD", "AB"]


def test_line_longer_than_chunk():
    long_line = "x" * 10_000
    content = f"{long_line}\nshort\n".encode()
    assert rev(content, 4096) == ["short", long_line]
    assert rev(content, 7) == ["short", long_line]


def test_multibyte_character_split_across_chunks():
    assert rev("ab€\n€cd".encode("utf-8"), buf_size=1) == ["€cd", "ab€"]


def test_position_after_trim():
    assert RevLines(io.BytesIO(b"ABCD\n")).position == 4
    assert RevLines(io.BytesIO(b"ABCD\r\n")).position == 4
    assert RevLines(io.BytesIO(b"ABCD")).position == 4
    assert RevLines(io.BytesIO(b"")).position == 0


def test_position_moves_back_line_by_line():
    rev_lines = RevLines(io.BytesIO(b"ABCDEF\nGHIJK\nLMNOPQRST\nUVWXYZ"))
    assert rev_lines.next_line() == "UVWXYZ"
    assert rev_lines.position == 22
    assert rev_lines.next_line() == "LMNOPQRST"
    assert rev_lines.position == 12


@pytest.mark.parametrize("buf_size", [0, -1, 1.5])
def test_invalid_buf_size(buf_size):
    with pytest.raises(ValueError):
        RevLines(io.BytesIO(b"ABCD"), buf_size)


def test_invalid_utf8_ends_production():
    rev_lines = RevLines(io.BytesIO(b"good\n\xff\xfe\nlast"))
    assert next(rev_lines) == "last"
    with pytest.raises(DecodeError) as exc_info:
        next(rev_lines)
    assert exc_info.value.data == b"\xff\xfe"
    assert exc_info.value.position == 5
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
    assert rev_lines.next_line() is None
    assert list(rev_lines) == []


def test_results_reports_decode_failure():
    results = list(RevLines(io.BytesIO(b"good\n\xff\xfe\nlast")).results())
    assert results[0] == Line("last")
    assert isinstance(results[1], DecodeFailure)
    assert results[1].data == b"\xff\xfe"
    assert len(results) == 2


def test_read_error_ends_production():
    # One read during construction, one for the first line, then the reader fails
    rev_lines = RevLines(FailingReader(b"one\ntwo\nthree", fail_after=2))
    assert next(rev_lines) == "three"
    with pytest.raises(ReadError) as exc_info:
        next(rev_lines)
    assert isinstance(exc_info.value, OSError)
    assert isinstance(exc_info.value.__cause__, OSError)
    assert rev_lines.next_line() is None


def test_results_reports_io_failure():
    results = list(RevLines(FailingReader(b"one\ntwo\nthree", fail_after=2)).results())
    assert results[0] == Line("three")
    assert isinstance(results[1], IoFailure)
    assert "device not ready" in results[1].message
    assert len(results) == 2


def test_short_read_is_fatal():
    with pytest.raises(ReadError, match="Short read"):
        RevLines(ShortReader(b"one\ntwo"))


def test_single_pass():
    rev_lines = RevLines(io.BytesIO(b"a\nb"))
    assert list(rev_lines) == ["b", "a"]
    assert list(rev_lines) == []


def test_close_closes_reader():
    reader = io.BytesIO(b"a\nb")
    with RevLines(reader) as rev_lines:
        assert next(rev_lines) == "b"
    assert rev_lines.closed
    assert reader.closed
    assert rev_lines.next_line() is None


def test_close_can_leave_reader_open():
    reader = io.BytesIO(b"a\nb")
    rev_lines = RevLines(reader, close_reader=False)
    rev_lines.close()
    rev_lines.close()
    assert not reader.closed
    assert list(rev_lines) == []
