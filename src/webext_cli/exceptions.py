"""Custom exception hierarchy for webext-cli.

Every failure that reaches the dispatch boundary is sorted into one of
two kinds:

* :class:`UsageError` — the user invoked the program incorrectly (bad
  flags, unknown command, invalid option value).  Reported with a short
  message unless verbose mode is on.
* anything else — an operational or internal failure raised by an
  executor or an option coercion.  Always reported with a full
  traceback.

When the program does not own the process, the boundary re-raises the
classified failure as :class:`UsageFailure` or
:class:`OperationalFailure` so embedding code and tests can inspect it.

Hierarchy
---------
WebExtError
├── UsageError
│   └── UsageFailure
├── OperationalError
└── OperationalFailure
"""

from __future__ import annotations


class WebExtError(Exception):
    """Base exception for all webext-cli errors.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    hint:
        Optional actionable guidance shown below the message.
    code:
        Optional machine-readable error code (e.g. ``"E_NET"``).
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""
        self.code: str | None = code
        """Optional machine-readable code reported on its own line."""


# --- Error kinds -----------------------------------------------------------

class UsageError(WebExtError):
    """Raised when the invocation itself is wrong (flags, command, values)."""


class OperationalError(WebExtError):
    """Raised when a command fails for operational reasons."""


# --- Classified failures ---------------------------------------------------

class _ClassifiedFailure:
    """Mixin recording the original error and the command it came from."""

    error: BaseException
    command: str | None

    def _bind(self, error: BaseException, command: str | None) -> None:
        self.error = error
        self.command = command
        self.__cause__ = error


class UsageFailure(_ClassifiedFailure, UsageError):
    """A classified :class:`UsageError` re-raised by the dispatcher."""

    def __init__(
        self,
        message: str,
        *,
        error: BaseException,
        command: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message, hint=getattr(error, "hint", None), code=code)
        self._bind(error, command)


class OperationalFailure(_ClassifiedFailure, WebExtError):
    """A classified operational failure re-raised by the dispatcher."""

    def __init__(
        self,
        message: str,
        *,
        error: BaseException,
        command: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message, hint=getattr(error, "hint", None), code=code)
        self._bind(error, command)
