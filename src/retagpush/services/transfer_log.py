"""Timestamped event log shared by every transfer phase."""

import logging
from typing import Optional

from rich.console import Console

LINE_FORMAT = "%(asctime)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TransferLog:
    """Single sink for run events; handlers are chosen when it is built."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def record(self, message: str, level: int = logging.INFO):
        self.logger.log(level, message)

    def debug(self, message: str, *args):
        self.logger.debug(message, *args)

    def exception(self, message: str):
        self.logger.exception(message)


class ConsoleLineHandler(logging.Handler):
    """Prints each formatted record through rich as one unwrapped line."""

    def __init__(self, console: Optional[Console] = None, level: int = logging.NOTSET):
        super().__init__(level)
        self.console = console or Console(soft_wrap=True)

    def emit(self, record: logging.LogRecord):
        try:
            self.console.print(
                self.format(record),
                soft_wrap=True,
                markup=False,
                highlight=False,
                emoji=False,
            )
        except Exception:
            self.handleError(record)


def build_transfer_log(
    log_file: Optional[str] = None,
    to_console: bool = True,
    verbose: bool = False,
    console: Optional[Console] = None,
    name: str = "retagpush",
) -> TransferLog:
    """Configure the named logger for console and/or append-only file output.

    Both targets share one formatter so the console and the log file carry
    identical ``YYYY-MM-DD HH:MM:SS - message`` lines.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    logger.propagate = False
    formatter = logging.Formatter(LINE_FORMAT, datefmt=DATE_FORMAT)

    if to_console:
        console_handler = ConsoleLineHandler(console=console, level=level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return TransferLog(logger)
