import typer

from . import common_args as ca
from .line_filter import filterer
from .log_utils import setup_logger
from .stats import stats
from .tac import reverser


app = typer.Typer()
app.add_typer(reverser, name="tac")
app.add_typer(filterer, name="filter")
app.add_typer(stats, name="stats")


@app.callback()
def main(log_level: ca.LogLevelArg = ca.LOG_LEVEL):
    """ Read files line by line in reverse, last line first
    """
    setup_logger("rev_lines", log_level)


if __name__ == '__main__':
    app()
