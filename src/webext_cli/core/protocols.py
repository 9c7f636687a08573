"""Protocols (interfaces) consumed by the core and CLI layers.

These define the contracts that external collaborators must satisfy.
Command implementations, version providers and log streams are never
imported by the dispatch core — they are injected.
"""

from __future__ import annotations

from collections.abc import Awaitable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from webext_cli.core.models import ParsedArgs


class Executor(Protocol):
    """Contract for command implementations.

    An executor receives the full :class:`ParsedArgs` of the run.  It may
    be a plain function or a coroutine function; an awaitable return value
    is driven to completion by the dispatcher.

    Raises
    ------
    UsageError
        When the failure is caused by how the user invoked the command.
    Exception
        Any other exception is reported as an operational failure.
    """

    def __call__(self, args: ParsedArgs) -> Awaitable[None] | None:
        ...  # pragma: no cover


class VersionGetter(Protocol):
    """Contract for version string providers."""

    def __call__(self, package_dir: Path) -> str:
        """Return the version string of the package rooted at *package_dir*."""
        ...  # pragma: no cover


class LogStream(Protocol):
    """Contract for the log stream toggled by ``--verbose``."""

    def make_verbose(self) -> None:
        ...  # pragma: no cover
