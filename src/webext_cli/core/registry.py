"""Command registry — name to :class:`~webext_cli.core.models.Command`.

Registration validates eagerly so that a broken declaration fails when
the program is assembled, never halfway through a user's run.  Lookup
is an exact string match; there is no prefix or abbreviation matching.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import replace
from types import MappingProxyType

from webext_cli.core.models import Command, CommandNotFound, OptionSchema
from webext_cli.core.protocols import Executor
from webext_cli.core.schema import merge_schemas


class CommandRegistry:
    """Ordered collection of registered commands."""

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        description: str,
        executor: Executor,
        options: OptionSchema | None = None,
        *,
        global_options: OptionSchema | None = None,
    ) -> Command:
        """Register a command and return it.

        Raises
        ------
        ValueError
            If *name* is empty, contains whitespace, starts with ``-``, or
            is already registered.
        TypeError
            If *executor* is not callable or an option is not an
            :class:`~webext_cli.core.models.OptionSpec`.
        """
        if not isinstance(name, str) or not name or name != name.strip():
            raise ValueError(f"Command name must be a non-empty string, got {name!r}")
        if name.startswith("-") or any(ch.isspace() for ch in name):
            raise ValueError(f"Invalid command name: {name!r}")
        if not callable(executor):
            raise TypeError(f"Executor for command {name!r} is not callable")
        if name in self._commands:
            raise ValueError(f"Command already registered: {name}")

        local = dict(options or {})
        command = Command(
            name=name,
            description=description,
            options=merge_schemas(global_options or {}, local),
            executor=executor,
            local_options=MappingProxyType(local),
        )
        self._commands[name] = command
        return command

    def rebase(self, global_options: OptionSchema) -> None:
        """Re-merge every registered command against new *global_options*.

        Either every command is rebased or, when one merge fails, none is.

        Raises
        ------
        ValueError
            If a new global option collides with a command's own flags.
        """
        rebased = {
            name: replace(
                command,
                options=merge_schemas(global_options, command.local_options),
            )
            for name, command in self._commands.items()
        }
        self._commands = rebased

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, name: str | None) -> Command | CommandNotFound:
        """Return the command registered as *name*, or :class:`CommandNotFound`."""
        if name is None:
            return CommandNotFound(None)
        command = self._commands.get(name)
        if command is None:
            return CommandNotFound(name)
        return command

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __iter__(self) -> Iterator[Command]:
        return iter(self._commands.values())

    def __len__(self) -> int:
        return len(self._commands)
