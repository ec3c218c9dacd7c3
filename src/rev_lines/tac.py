import typer
from contextlib import closing
from pathlib import Path
from typing import Annotated, Callable, Optional

from . import common_args as ca
from .file_utils import find_files, read_file_reverse
from .log_utils import print_error, print_file_header, print_result
from .results import Line, RevLinesError

reverser = typer.Typer()


def collect_files(paths: list[Path], max_depth: int = ca.MAX_DEPTH) -> tuple[list[Path], bool]:
    """ Expand the given paths into individual files, reporting the ones that
    can't be found. Returns the files and whether every path was usable
    """
    files: list[Path] = []
    ok = True
    for path in paths:
        try:
            files.extend(find_files([path], max_depth))
        except OSError as e:
            print_error(path, e.strerror or str(e))
            ok = False
    return files, ok


def print_files_reverse(
        paths: list[Path],
        chunk_size: int = ca.CHUNK_SIZE,
        max_lines: int = 0,
        max_depth: int = ca.MAX_DEPTH,
        as_json: bool = False,
        line_matches: Optional[Callable[[str], bool]] = None) -> bool:
    """ Print the lines of each file last-first, one file after another. Lines
    rejected by line_matches are skipped, and at most max_lines lines are
    printed per file when it is non-zero.

    Returns whether every file was read without error
    """
    files, ok = collect_files(paths, max_depth)

    for file_path in files:
        if len(files) > 1 and not as_json:
            print_file_header(file_path)

        printed = 0
        try:
            with closing(read_file_reverse(file_path, chunk_size)) as results:
                for result in results:
                    if not isinstance(result, Line):
                        ok = False
                    elif line_matches and not line_matches(result.text):
                        continue
                    else:
                        printed += 1

                    print_result(result, file_path, as_json)
                    if max_lines and printed >= max_lines:
                        break
        except (OSError, RevLinesError) as e:
            print_error(file_path, str(e))
            ok = False

    return ok


@reverser.callback(invoke_without_command=True)
def tac(
        paths: ca.PathsArg,
        chunk_size: ca.ChunkSizeArg = ca.CHUNK_SIZE,
        max_lines: ca.MaxLinesArg = 0,
        max_depth: ca.MaxDepthArg = ca.MAX_DEPTH,
        as_json: Annotated[bool, typer.Option("--json", help="Print every result as a JSON object")] = False,
):
    """ Print the lines of each file in reverse order, last line first
    """
    if not print_files_reverse(paths, chunk_size, max_lines, max_depth, as_json):
        raise typer.Exit(code=1)
