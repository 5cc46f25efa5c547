"""
Console logging for the HBase table manager.

`LOGGER` is the one project logger; modules import it rather than calling
`logging.getLogger`. The CLI calls `set_verbose` so that `--verbose` runs also show
DEBUG records (per-family differences, snapshot loads, REST requests).
"""

import logging
from enum import StrEnum

from src import settings

LOG_FORMAT = "{asctime} - {name} - {levelname} - {message}"


class Ansi(StrEnum):
    """ANSI SGR codes used to colour whole log lines.

    <https://en.wikipedia.org/wiki/ANSI_escape_code#Select_Graphic_Rendition_parameters>
    """

    RESET = "\033[0m"
    BLACK = "\033[30m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    LIGHT_GREY = "\033[37m"
    HIGHLIGHT_RED = "\033[41m"
    BOLD = "\033[1m"


LEVEL_COLOURS = {
    logging.DEBUG: Ansi.LIGHT_GREY,
    logging.INFO: Ansi.BLUE,
    logging.WARNING: Ansi.YELLOW,
    logging.ERROR: Ansi.RED,
    logging.CRITICAL: Ansi.BOLD + Ansi.HIGHLIGHT_RED + Ansi.BLACK,
}


class ConsoleFormatter(logging.Formatter):
    """`LOG_FORMAT` lines, optionally wrapped in the colour of the record's level."""

    def __init__(self, colour: bool = False) -> None:
        super().__init__(LOG_FORMAT, style="{")
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        if not self.colour:
            return line
        return f"{LEVEL_COLOURS.get(record.levelno, Ansi.RESET)}{line}{Ansi.RESET}"


def set_verbose(verbose: bool) -> None:
    """Drop the logger and its console handler to DEBUG when `verbose` is set."""
    level = logging.DEBUG if verbose else settings.LOG_LEVEL
    LOGGER.setLevel(level)
    _stream_handler.setLevel(level)


_stream_handler = logging.StreamHandler()
_stream_handler.setLevel(settings.LOG_LEVEL)
_stream_handler.setFormatter(ConsoleFormatter(colour=settings.LOG_COLOUR_ENABLED))

LOGGER = logging.getLogger(settings.LOGGER_NAME)
LOGGER.setLevel(settings.LOG_LEVEL)
LOGGER.addHandler(_stream_handler)
