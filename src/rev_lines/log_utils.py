import logging
import sys
from pathlib import Path
from typing import Optional

from .results import DecodeFailure, IoFailure, Line, LineResult, encode_result


def setup_logger(name: str, log_level: str = "WARNING") -> logging.Logger:
    """
    Set up a logger writing to stderr

    Args:
        name: Logger name
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


COLOR_CODES = {
    "ERROR": "\033[31m", # Red
    "FILE": "\033[35m", # Magenta
    "RESET": "\033[0m" # Unset
}


def print_file_header(file_path: Path):
    print(f"{COLOR_CODES['FILE']}==> {file_path} <=={COLOR_CODES['RESET']}")


def print_error(file_path: Optional[Path], message: str):
    prefix = f"{file_path}: " if file_path else ""
    print(f"{COLOR_CODES['ERROR']}{prefix}{message}{COLOR_CODES['RESET']}", file=sys.stderr)


def print_result(result: LineResult, file_path: Optional[Path] = None, as_json: bool = False):
    """ Print a single result, lines to stdout and failures to stderr, or every
    result as a JSON object on stdout when as_json is set
    """
    if as_json:
        print(encode_result(result).decode())
        return

    if isinstance(result, Line):
        print(result.text)
    elif isinstance(result, IoFailure):
        print_error(file_path, f"read error: {result.message}")
    elif isinstance(result, DecodeFailure):
        print_error(file_path, f"decode error: {result.message}")
