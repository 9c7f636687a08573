"""Log stream for the CLI.

All ``webext_cli`` loggers share one :class:`ConsoleStream` handler that
renders records on stderr through Rich.  In normal mode only INFO and
above are shown, as bare messages.  ``--verbose`` switches the stream to
DEBUG and prefixes each line with the logger name and level.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.text import Text

from webext_cli.cli.console import console as default_console

LOGGER_NAMESPACE: str = "webext_cli"


class ConsoleStream(logging.Handler):
    """Logging handler writing to a Rich console."""

    def __init__(self, console: Console | None = None, *, verbose: bool = False) -> None:
        super().__init__(logging.DEBUG if verbose else logging.INFO)
        self.console: Console = console or default_console
        self.is_verbose: bool = verbose

    def make_verbose(self) -> None:
        self.is_verbose = True
        self.setLevel(logging.DEBUG)

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if self.is_verbose:
            message = f"[{record.name}][{record.levelname.lower()}] {message}"
        if record.exc_info:
            message = f"{message}\n{logging.Formatter().formatException(record.exc_info)}"
        return message

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.console.print(Text(self.format(record)))
        except Exception:  # noqa: BLE001
            self.handleError(record)


console_stream = ConsoleStream()
"""Default stream attached to the ``webext_cli`` logger namespace."""


def create_logger(name: str, stream: logging.Handler = console_stream) -> logging.Logger:
    """Return the logger for *name*, attaching *stream* to the namespace once."""
    root = logging.getLogger(LOGGER_NAMESPACE)
    if stream not in root.handlers:
        root.addHandler(stream)
        root.setLevel(logging.DEBUG)
    return logging.getLogger(name)
