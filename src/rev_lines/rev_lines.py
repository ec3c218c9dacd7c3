import io
import logging
from typing import BinaryIO, Iterator, Optional

from .common_args import DEFAULT_BUF_SIZE
from .results import DecodeError, Line, LineResult, ReadError, RevLinesError, result_from_error

logger = logging.getLogger(__name__)

LF = b"\n"
CR = b"\r"


class RevLines:
    """ Iterate over the lines of a seekable binary stream in reverse order,
    last line first, reading at most `buf_size` bytes at a time.

    The scanner takes ownership of `reader`: nothing else may seek or read it
    while lines are being produced, since the current position is tracked
    here rather than queried from the stream. A trailing `\\n` or `\\r\\n` does
    not produce an empty final line, and neither terminator byte is ever part
    of a produced line.

    Lines are decoded as strict UTF-8. A failing read raises `ReadError` and
    invalid text raises `DecodeError`; either one ends production.

        with open("app.log", "rb") as f:
            for line in RevLines(f):
                print(line)
    """

    def __init__(self, reader: BinaryIO, buf_size: int = DEFAULT_BUF_SIZE, close_reader: bool = True):
        if not isinstance(buf_size, int) or buf_size < 1:
            raise ValueError(f"buf_size must be a positive integer, got {buf_size!r}")

        self._reader = reader
        self._buf_size = buf_size
        self._close_reader = close_reader
        self._closed = False

        self.reader_pos = 0
        self.reader_pos = self._seek(0, io.SEEK_END)
        # A non-empty stream always ends with a (possibly empty) line
        self._line_pending = self.reader_pos > 0

        # Absorb a trailing terminator so the first line produced is not ""
        end_size = min(self.reader_pos, 2)
        end_buf = self.read_to_buffer(end_size)
        if end_buf.endswith(CR + LF):
            trimmed = 2
        elif end_buf.endswith(LF):
            trimmed = 1
        else:
            trimmed = 0
        self._move_reader_position(end_size - trimmed)

        logger.debug("Scanning %d bytes in reverse (%d terminator bytes trimmed, buf_size=%d)",
                     self.reader_pos + trimmed, trimmed, buf_size)

    @property
    def position(self) -> int:
        return self.reader_pos

    @property
    def buf_size(self) -> int:
        return self._buf_size

    @property
    def closed(self) -> bool:
        return self._closed

    def _seek(self, offset: int, whence: int = io.SEEK_CUR) -> int:
        try:
            return self._reader.seek(offset, whence)
        except (OSError, ValueError) as e:
            raise ReadError(f"Unable to seek by {offset}: {e}", self.reader_pos) from e

    def read_to_buffer(self, size: int) -> bytes:
        """ Read the `size` bytes that end at the current position, leaving the
        stream positioned at the start of those bytes
        """
        self._seek(-size)
        try:
            buf = self._reader.read(size)
        except (OSError, ValueError) as e:
            raise ReadError(f"Unable to read {size} bytes: {e}", self.reader_pos) from e
        if buf is None or len(buf) != size:
            got = 0 if buf is None else len(buf)
            raise ReadError(f"Short read: expected {size} bytes, got {got}", self.reader_pos)
        self._seek(-size)

        self.reader_pos -= size
        return buf

    def _move_reader_position(self, offset: int):
        if offset:
            self._seek(offset)
            self.reader_pos += offset

    def next_line(self) -> Optional[str]:
        """ Return the next line walking backward through the stream, or None
        once every line has been produced
        """
        if self._closed or not self._line_pending:
            return None
        line_end = self.reader_pos
        try:
            data = self._scan_line()
            return self._decode(data, line_end - len(data))
        except RevLinesError as e:
            # Position bookkeeping can't be trusted after a failure
            self._line_pending = False
            logger.debug("Stopping reverse scan: %s", e)
            raise

    def _scan_line(self) -> bytes:
        # Pieces are collected right to left, one per chunk
        pieces: list[bytes] = []

        while True:
            if self.reader_pos == 0:
                # Reached the start of the stream, whatever was accumulated is the first line
                self._line_pending = False
                break

            chunk = self.read_to_buffer(min(self._buf_size, self.reader_pos))

            idx = chunk.rfind(LF)
            if idx < 0:
                # No boundary in this chunk, the line continues into the one before it
                pieces.append(chunk)
                continue

            pieces.append(chunk[idx + 1:])
            offset = idx
            # The CR of a CRLF pair is only recognized when the LF sits at index 2 or later
            if idx >= 2 and chunk[idx - 1:idx] == CR:
                offset -= 1

            # Leave the stream just before the terminator of the line that was completed
            self._move_reader_position(offset)
            break

        return b"".join(reversed(pieces))

    def _decode(self, data: bytes, line_start: int) -> str:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(data, line_start, e.reason) from e

    def results(self) -> Iterator[LineResult]:
        """ Produce every remaining line as a `Line`, ending with a single
        `IoFailure` or `DecodeFailure` item if the scan fails
        """
        while True:
            try:
                line = self.next_line()
            except RevLinesError as e:
                yield result_from_error(e)
                return
            if line is None:
                return
            yield Line(line)

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._line_pending = False
        if self._close_reader:
            self._reader.close()

    def __iter__(self) -> "RevLines":
        return self

    def __next__(self) -> str:
        line = self.next_line()
        if line is None:
            raise StopIteration
        return line

    def __enter__(self) -> "RevLines":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return f"RevLines(position={self.reader_pos}, buf_size={self._buf_size}, closed={self._closed})"
