"""Infrastructure: discovery of command executors.

Command implementations live outside the dispatch core.  They are found
through the ``webext_cli.commands`` entry-point group, keyed by command
name, and imported only when the command actually runs.
"""

from __future__ import annotations

from collections.abc import Awaitable, Iterable
from importlib import metadata
from typing import Any

from webext_cli.core.models import ParsedArgs
from webext_cli.core.protocols import Executor
from webext_cli.exceptions import OperationalError

ENTRY_POINT_GROUP: str = "webext_cli.commands"


def unavailable_executor(name: str) -> Executor:
    """Return an executor that fails because *name* has no implementation."""

    def executor(args: ParsedArgs) -> None:
        raise OperationalError(
            f"No executor is installed for the {name!r} command",
            hint=f"Install a package providing the {ENTRY_POINT_GROUP!r} entry point {name!r}.",
            code="E_NO_EXECUTOR",
        )

    executor.__name__ = f"unavailable_{name.replace('-', '_')}"
    return executor


def _deferred_executor(entry_point: metadata.EntryPoint) -> Executor:
    """Wrap *entry_point* so its module is imported on first call."""

    def executor(args: ParsedArgs) -> Awaitable[Any] | None:
        return entry_point.load()(args)

    executor.__name__ = f"deferred_{entry_point.name.replace('-', '_')}"
    return executor


def load_commands(
    names: Iterable[str],
    *,
    group: str = ENTRY_POINT_GROUP,
) -> dict[str, Executor]:
    """Map every command in *names* to an executor.

    Commands without an installed entry point map to
    :func:`unavailable_executor`.
    """
    installed = {entry.name: entry for entry in metadata.entry_points(group=group)}
    return {
        name: (
            _deferred_executor(installed[name])
            if name in installed
            else unavailable_executor(name)
        )
        for name in names
    }
