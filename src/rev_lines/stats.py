import typer
import tabulate
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path

from . import common_args as ca
from .file_utils import read_file_reverse
from .results import Line, RevLinesError
from .tac import collect_files

stats = typer.Typer()

HEADERS = ["file", "lines", "blank", "longest", "error"]


@dataclass
class FileStats:
    path: Path
    lines: int = 0
    blank: int = 0
    longest: int = 0
    error: str = ""

    def add_line(self, text: str):
        self.lines += 1
        if not text.strip():
            self.blank += 1
        self.longest = max(self.longest, len(text))

    @property
    def row(self) -> list:
        return [str(self.path), self.lines, self.blank, self.longest, self.error]


def tabulate_file(file_path: Path, chunk_size: int = ca.CHUNK_SIZE) -> FileStats:
    """ Scan a whole file in reverse, counting its lines """
    file_stats = FileStats(file_path)
    try:
        with closing(read_file_reverse(file_path, chunk_size)) as results:
            for result in results:
                if isinstance(result, Line):
                    file_stats.add_line(result.text)
                else:
                    file_stats.error = result.message
    except (OSError, RevLinesError) as e:
        file_stats.error = str(e)
    return file_stats


@stats.callback(invoke_without_command=True)
def get_file_stats(
        paths: ca.PathsArg,
        chunk_size: ca.ChunkSizeArg = ca.CHUNK_SIZE,
        max_depth: ca.MaxDepthArg = ca.MAX_DEPTH,
):
    """ Tabulate line counts for each file, as seen by the reverse reader
    """
    files, ok = collect_files(paths, max_depth)

    rows = []
    for file_path in files:
        file_stats = tabulate_file(file_path, chunk_size)
        ok = ok and not file_stats.error
        rows.append(file_stats.row)

    print(tabulate.tabulate(rows, headers=HEADERS))

    if not ok:
        raise typer.Exit(code=1)
