import typer
import re
from enum import Enum
from typing import Annotated
from thefuzz import fuzz

from . import common_args as ca
from .tac import print_files_reverse

filterer = typer.Typer()

# Minimum partial ratio for a fuzzy match
FUZZY_THRESHOLD = 75


class FilterMode(Enum):
    RAW = "raw"
    REGEX = "regex"
    FUZZY = "fuzzy"


def value_matches(value: str, filter: str, mode: FilterMode) -> bool:
    if not value:
        return False
    if mode == FilterMode.RAW:
        return filter.lower() in value.lower()
    elif mode == FilterMode.REGEX:
        return re.search(filter, value) is not None
    else:
        return fuzz.partial_ratio(value.lower(), filter.lower()) > FUZZY_THRESHOLD


def line_matcher(patterns: list[str], mode: FilterMode):
    """ Build a predicate accepting lines that match every one of the given patterns
    """
    if mode == FilterMode.REGEX:
        # Fail on a malformed expression before any file is opened
        for p in patterns:
            re.compile(p)

    def matches(line: str) -> bool:
        return all(value_matches(line, p, mode) for p in patterns)

    return matches


@filterer.callback(invoke_without_command=True)
def filter_lines(
        paths: ca.PathsArg,
        patterns: Annotated[list[str], typer.Option("-p", "--pattern", help="Pattern that printed lines must contain, may be repeated")],
        filter_mode: Annotated[FilterMode, typer.Option("-m", "--filter-mode", help="String comparison mode to use for filtering lines")] = FilterMode.RAW.value,
        chunk_size: ca.ChunkSizeArg = ca.CHUNK_SIZE,
        max_lines: ca.MaxLinesArg = 0,
        max_depth: ca.MaxDepthArg = ca.MAX_DEPTH,
):
    """ Print the lines of each file that match the given patterns, most
    recent (last) lines first
    """
    try:
        matches = line_matcher(patterns, filter_mode)
    except re.error as e:
        raise typer.BadParameter(f"invalid regular expression: {e}", param_hint="'--pattern'")

    if not print_files_reverse(paths, chunk_size, max_lines, max_depth, line_matches=matches):
        raise typer.Exit(code=1)
