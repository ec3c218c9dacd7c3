import gzip
import logging
import magic
from pathlib import Path
from typing import BinaryIO, Iterator
from .common_args import CHUNK_SIZE, MAX_DEPTH
from .rev_lines import RevLines
from .results import LineResult

logger = logging.getLogger(__name__)


def open_possibly_compressed_file(file_path: Path) -> BinaryIO:
    """ Using python-magic, expose a plaintext or compressed file in
    read-binary mode via a unified interface
    """
    mime = magic.Magic(mime=True)
    file_type = mime.from_file(str(file_path))
    is_compressed = 'gzip' in file_type
    logger.debug("Opening %s (%s)", file_path, file_type)

    open_func = gzip.open if is_compressed else open

    return open_func(file_path, 'rb')


def read_file_reverse(file_path: Path, chunk_size: int = CHUNK_SIZE) -> Iterator[LineResult]:
    """ Reads a regular or compressed (.gz) text file line by line in reverse
    order using chunk-based processing.

    The file is closed once its lines are exhausted, or as soon as the caller
    stops iterating.
    """
    with open_possibly_compressed_file(file_path) as f:
        yield from RevLines(f, chunk_size).results()


def find_files(paths: list[Path], max_depth: int = MAX_DEPTH) -> Iterator[Path]:
    """
    Given a set of file paths or directories containing files, and a max search depth, yield
    all individual files in those paths
    """
    for p in paths:
        if p.is_file():
            yield p
            continue
        if not p.is_dir():
            raise FileNotFoundError(f"No such file or directory: '{p}'")
        dirs: list[tuple[Path, int]] = [(p, 0)]
        while len(dirs) and (dir_tuple := dirs.pop()):
            cur_dir, cur_depth = dir_tuple
            for f in sorted(cur_dir.iterdir()):
                if f.is_file():
                    yield f
                elif f.is_dir() and cur_depth < max_depth:
                    dirs.append((f, cur_depth + 1))


def read_files_reverse(paths: list[Path], chunk_size: int = CHUNK_SIZE, max_depth: int = MAX_DEPTH) -> Iterator[tuple[Path, LineResult]]:
    """ Run read_file_reverse over every file found in the given paths, one
    file after another
    """
    for file_path in find_files(paths, max_depth):
        for result in read_file_reverse(file_path, chunk_size):
            yield file_path, result
