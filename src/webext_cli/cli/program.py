"""The command-line program: registration, dispatch and the error boundary.

A :class:`Program` owns its command registry and global options, so any
number of independent programs can coexist (one per test, for example).
Setup is synchronous and happens before :meth:`Program.run`; during a
run the registry is treated as read-only.

A run moves through a single-shot sequence::

    Idle -> Parsed -> Resolved -> Succeeded
                  \\          \\
                   +-> Failed  +-> Failed

Every failure is classified once, here, by
:mod:`webext_cli.cli.reporting`.
"""

from __future__ import annotations

import asyncio
import inspect
import sys
from collections.abc import Awaitable, Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, NoReturn

from webext_cli.cli import exit_codes
from webext_cli.cli.logger import console_stream, create_logger
from webext_cli.cli.reporting import classify, report
from webext_cli.core.models import Command, OptionSchema, OptionSpec, ParsedArgs
from webext_cli.core.parser import ArgumentParser
from webext_cli.core.protocols import Executor, LogStream, VersionGetter
from webext_cli.core.registry import CommandRegistry
from webext_cli.core.schema import mark_global, union_schemas
from webext_cli.exceptions import UsageError
from webext_cli.infra.manifest import read_manifest_version
from webext_cli.utils.naming import ENV_PREFIX

log = create_logger(__name__)

NO_COMMAND_MESSAGE = "No sub-command was specified in the args"


async def _settle(pending: Awaitable[Any]) -> Any:
    return await pending


class Program:
    """A command-line program made of named sub-commands.

    Parameters
    ----------
    argv:
        Argument vector without the executable prefix.  When ``None``
        (default), ``sys.argv[1:]`` is used.
    package_dir:
        Directory handed to the version getter.  Defaults to the current
        working directory.
    prog, usage, description, epilog:
        Help text for the top-level parser.
    environ:
        Environment mapping for ``<PREFIX>_<OPTION>`` lookups.  Defaults
        to :data:`os.environ`.
    env_prefix:
        Prefix of those environment variables.
    """

    def __init__(
        self,
        argv: Sequence[str] | None = None,
        *,
        package_dir: Path | str | None = None,
        prog: str = "web-ext",
        usage: str | None = None,
        description: str | None = None,
        epilog: str | None = None,
        environ: Mapping[str, str] | None = None,
        env_prefix: str = ENV_PREFIX,
    ) -> None:
        self.argv: list[str] = list(sys.argv[1:] if argv is None else argv)
        self.package_dir: Path = Path(package_dir) if package_dir else Path.cwd()
        self.epilog: str | None = epilog
        self.exit_on_error: bool = True
        self.registry: CommandRegistry = CommandRegistry()
        self.global_options: dict[str, OptionSpec] = {}
        self.parser: ArgumentParser = ArgumentParser(
            prog,
            usage=usage,
            description=description,
            environ=environ,
            env_prefix=env_prefix,
        )

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def set_global_options(self, options: OptionSchema) -> Program:
        """Declare options available to every command.

        Each option is marked global and required unless it says
        otherwise.  Commands registered earlier pick up the new options.
        A declaration that collides with any command's flags is rejected
        and leaves the program unchanged.
        """
        merged = {**self.global_options, **mark_global(options)}
        self.registry.rebase(merged)
        self.global_options = merged
        return self

    def command(
        self,
        name: str,
        description: str,
        executor: Executor,
        options: OptionSchema | None = None,
    ) -> Program:
        """Register the *name* sub-command and return the program.

        The command accepts the global options plus *options*; local
        declarations override global ones of the same name.  Positional
        arguments after the command name are rejected.
        """
        self.registry.register(
            name,
            description,
            executor,
            options,
            global_options=self.global_options,
        )
        return self

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(
        self,
        package_dir: Path | str | None = None,
        *,
        exit_on_error: bool = True,
        get_version: VersionGetter = read_manifest_version,
        log_stream: LogStream = console_stream,
        system_exit: Callable[[int], NoReturn | None] = sys.exit,
    ) -> None:
        """Parse the arguments and run the selected command once.

        On failure the error is reported on stderr.  With *exit_on_error*
        the process then exits with status 1; without it the classified
        :class:`~webext_cli.exceptions.UsageFailure` or
        :class:`~webext_cli.exceptions.OperationalFailure` is raised.
        """
        self.exit_on_error = exit_on_error
        package_dir = Path(package_dir) if package_dir else self.package_dir
        self.parser.version = lambda: get_version(package_dir)
        self.parser.epilog = self._epilog()

        # Command flags may precede the command name, so the pre-scan must
        # know which of them take a value.
        known = union_schemas(
            self.global_options,
            *(command.local_options for command in self.registry),
        )
        scan = self.parser.scan(self.argv, known)
        name, verbose = scan.command, bool(scan.get("verbose"))

        try:
            args = self._parse(name)
            name, verbose = args.command, bool(args.get("verbose"))
            if verbose:
                log.info("Version: %s", get_version(package_dir))
                log_stream.make_verbose()
            command = self._resolve(args)
            self._execute(command, args)
        except Exception as error:
            failure = classify(error, command=name, verbose=verbose)
            report(failure, log)
            if self.exit_on_error:
                system_exit(exit_codes.GENERAL_ERROR)
                return
            raise failure.to_exception() from error

    # ------------------------------------------------------------------
    # Dispatch steps
    # ------------------------------------------------------------------

    def _parse(self, name: str | None) -> ParsedArgs:
        """Idle -> Parsed, using the schema of the command named *name*."""
        found = self.registry.lookup(name)
        if isinstance(found, Command):
            return self.parser.parse(
                self.argv,
                found.options,
                command=found.name,
                description=found.description,
                max_positionals=1,
            )
        # Unknown or missing command: only the global options apply and the
        # lookup failure is reported by _resolve.
        return self.parser.parse(self.argv, self.global_options)

    def _resolve(self, args: ParsedArgs) -> Command:
        """Parsed -> Resolved."""
        found = self.registry.lookup(args.command)
        if isinstance(found, Command):
            return found
        if found.name is None:
            raise UsageError(NO_COMMAND_MESSAGE)
        raise UsageError(f"Unknown command: {found.name}")

    def _execute(self, command: Command, args: ParsedArgs) -> None:
        """Resolved -> Succeeded; exceptions propagate to the boundary."""
        log.debug("Running command %r", command.name)
        result = command.executor(args)
        if inspect.isawaitable(result):
            asyncio.run(_settle(result))

    def _epilog(self) -> str | None:
        commands = list(self.registry)
        sections = []
        if commands:
            width = max(len(command.name) for command in commands)
            sections.append("\n".join(
                ["Commands:"]
                + [f"  {command.name:<{width}}  {command.description}" for command in commands]
            ))
        if self.epilog:
            sections.append(self.epilog)
        return "\n\n".join(sections) or None

