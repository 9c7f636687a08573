"""Failure classification and reporting.

This module is the **only** place that decides how much detail a failed
run prints:

===================  ================  ======================
error kind           verbose off       verbose on
===================  ================  ======================
UsageError           short message     full traceback
anything else        full traceback    full traceback
===================  ================  ======================

Every line is prefixed with ``"<command>: "`` when a command name was
given, and an error carrying a ``code`` attribute gets an extra
``"<command>: Error code: <code>"`` line.
"""

from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from enum import Enum

from webext_cli.exceptions import (
    OperationalFailure,
    UsageError,
    UsageFailure,
    WebExtError,
)


class FailureKind(Enum):
    USAGE = "usage"
    OPERATIONAL = "operational"


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed run, classified once at the dispatch boundary."""

    kind: FailureKind
    error: BaseException
    command: str | None = None
    verbose: bool = False

    @property
    def prefix(self) -> str:
        return f"{self.command}: " if self.command else ""

    @property
    def code(self) -> str | None:
        code = getattr(self.error, "code", None)
        if code is None or code == "":
            return None
        return str(code)

    @property
    def detailed(self) -> bool:
        """Whether the report carries the full traceback."""
        return self.kind is FailureKind.OPERATIONAL or self.verbose

    def summary(self) -> str:
        return f"{self.prefix}{self.error}"

    def details(self) -> str:
        trace = "".join(traceback.format_exception(self.error)).rstrip()
        return f"{self.prefix}{trace}"

    def code_line(self) -> str | None:
        if self.code is None:
            return None
        return f"{self.prefix}Error code: {self.code}"

    def message(self) -> str:
        """Short report text used for re-raised failures."""
        lines = [self.summary()]
        if (code_line := self.code_line()) is not None:
            lines.append(code_line)
        return "\n".join(lines)

    def to_exception(self) -> WebExtError:
        """Wrap the original error in its classified exception type."""
        failure_type = UsageFailure if self.kind is FailureKind.USAGE else OperationalFailure
        return failure_type(
            self.message(),
            error=self.error,
            command=self.command,
            code=self.code,
        )


def classify(
    error: BaseException,
    *,
    command: str | None = None,
    verbose: bool = False,
) -> Failure:
    """Sort *error* into a usage or an operational failure."""
    kind = FailureKind.USAGE if isinstance(error, UsageError) else FailureKind.OPERATIONAL
    return Failure(kind=kind, error=error, command=command, verbose=verbose)


def report(failure: Failure, log: logging.Logger) -> None:
    """Write *failure* to *log* at ERROR level."""
    body = failure.details() if failure.detailed else failure.summary()
    log.error("\n%s\n", body)
    hint = getattr(failure.error, "hint", None)
    if hint:
        log.error("%sHint: %s", failure.prefix, hint)
    if (code_line := failure.code_line()) is not None:
        log.error("%s\n", code_line)
