import typer
from dotenv import load_dotenv, find_dotenv
from pathlib import Path
from typing import Annotated

load_dotenv(find_dotenv(usecwd=True))

# Bytes read per backward step; only changes how many reads happen, never the output
DEFAULT_BUF_SIZE = 4096
CHUNK_SIZE = DEFAULT_BUF_SIZE
MAX_DEPTH = 999
LOG_LEVEL = "WARNING"


PathsArg = Annotated[list[Path], typer.Argument(help="Path to the file(s) or directories to read in reverse")]
ChunkSizeArg = Annotated[int, typer.Option(min=1, help="Maximum chunk size of a file to read at once", envvar="CHUNK_SIZE")]
MaxLinesArg = Annotated[int, typer.Option("-n", "--max-lines", min=0, help="Max number of lines to print per file (0 for no limit)")]
MaxDepthArg = Annotated[int, typer.Option(min=0, help="How many directory levels to descend into when searching for files")]
LogLevelArg = Annotated[str, typer.Option(help="Level of diagnostic logging written to stderr", envvar="LOG_LEVEL")]
