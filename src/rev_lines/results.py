import msgspec
from typing import Union


class RevLinesError(Exception):
    """ Base class for every failure raised while producing lines in reverse
    """


class ReadError(RevLinesError, OSError):
    """ A seek or read against the underlying stream failed, or returned fewer
    bytes than requested
    """
    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position

    def __str__(self):
        return f"{self.args[0]} (at byte {self.position})"


class DecodeError(RevLinesError, ValueError):
    """ A completed line is not valid UTF-8 text
    """
    def __init__(self, data: bytes, position: int, reason: str):
        super().__init__(f"line at byte {position} is not valid UTF-8: {reason}")
        self.data = data
        self.position = position
        self.reason = reason


class Line(msgspec.Struct, frozen=True, tag="line"):
    text: str


class IoFailure(msgspec.Struct, frozen=True, tag="io_error"):
    message: str
    position: int


class DecodeFailure(msgspec.Struct, frozen=True, tag="decode_error"):
    message: str
    position: int
    data: bytes


LineResult = Union[Line, IoFailure, DecodeFailure]

_result_decoder = msgspec.json.Decoder(LineResult)


def result_from_error(err: RevLinesError) -> LineResult:
    """ Convert a raised scanner error into the matching failure item
    """
    if isinstance(err, DecodeError):
        return DecodeFailure(str(err), err.position, err.data)
    if isinstance(err, ReadError):
        return IoFailure(str(err), err.position)
    raise TypeError(f"Unknown error type {type(err).__name__}")


def encode_result(result: LineResult) -> bytes:
    return msgspec.json.encode(result)


def decode_result(raw: Union[bytes, str]) -> LineResult:
    """ Decode a JSON-encoded result back into its tagged variant
    """
    return _result_decoder.decode(raw)
