"""CLI application entry point and command declarations for web-ext.

This module declares the ``web-ext`` program — its global options and
the ``build``, ``sign``, ``run`` and ``lint`` commands — and hands it to
:class:`~webext_cli.cli.program.Program` for dispatch.

Architecture notes
------------------
* No business logic lives here — command executors are injected or
  discovered through entry points (:mod:`webext_cli.infra.command_loader`).
* The option declarations below are the whole user-facing surface of
  the program; help output and environment bindings are derived from them.
* :func:`cli` is the console-script error boundary.  Classified failures
  are handled inside :meth:`Program.run`; only ``KeyboardInterrupt`` is
  translated here.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from webext_cli.cli import exit_codes
from webext_cli.cli.console import console
from webext_cli.cli.program import Program
from webext_cli.core.models import OptionSpec
from webext_cli.core.protocols import Executor, VersionGetter
from webext_cli.infra.command_loader import load_commands, unavailable_executor
from webext_cli.infra.manifest import read_manifest_version
from webext_cli.utils.naming import ENV_PREFIX

PACKAGE_DIR: Path = Path(__file__).resolve().parents[3]
"""Project root holding ``pyproject.toml`` in a source checkout."""

COMMAND_NAMES: tuple[str, ...] = ("build", "sign", "run", "lint")

USAGE = "%(prog)s [options] command"

DESCRIPTION = f"""\
Option values can also be set by declaring an environment variable prefixed
with ${ENV_PREFIX}_. For example: ${ENV_PREFIX}_SOURCE_DIR=/path is the same as
--source-dir=/path.
"""

EPILOG = """\
To view specific help for any given command, add the command name.
Example: web-ext run --help
"""


# ---------------------------------------------------------------------------
# Option declarations
# ---------------------------------------------------------------------------

def global_options() -> dict[str, OptionSpec]:
    """Options shared by every command (cwd-dependent defaults)."""
    cwd = os.getcwd()
    return {
        "source-dir": OptionSpec(
            alias="s",
            description="Web extension source directory.",
            default=cwd,
            requires_arg=True,
            type="string",
            coerce=os.path.abspath,
        ),
        "artifacts-dir": OptionSpec(
            alias="a",
            description="Directory where artifacts will be saved.",
            default=os.path.join(cwd, "web-ext-artifacts"),
            normalize=True,
            requires_arg=True,
            type="string",
        ),
        "verbose": OptionSpec(
            alias="v",
            description="Show verbose output",
            type="boolean",
        ),
    }


BUILD_OPTIONS: dict[str, OptionSpec] = {
    "as-needed": OptionSpec(
        description="Watch for file changes and re-build as needed",
        type="boolean",
    ),
}

SIGN_OPTIONS: dict[str, OptionSpec] = {
    "api-key": OptionSpec(
        description="API key (JWT issuer) from addons.mozilla.org",
        required=True,
        type="string",
    ),
    "api-secret": OptionSpec(
        description="API secret (JWT secret) from addons.mozilla.org",
        required=True,
        type="string",
    ),
    "api-url-prefix": OptionSpec(
        description="Signing API URL prefix",
        default="https://addons.mozilla.org/api/v3",
        required=True,
        type="string",
    ),
    "id": OptionSpec(
        description=(
            "A custom ID for the extension. This has no effect if the "
            "extension already declares an explicit ID in its manifest."
        ),
        required=False,
        type="string",
    ),
    "timeout": OptionSpec(
        description="Number of milliseconds to wait before giving up",
        type="number",
    ),
}

RUN_OPTIONS: dict[str, OptionSpec] = {
    "firefox": OptionSpec(
        alias="f",
        description=(
            "Path to a Firefox executable such as firefox-bin. "
            "If not specified, the default Firefox will be used."
        ),
        required=False,
        type="string",
    ),
    "firefox-profile": OptionSpec(
        alias="p",
        description=(
            "Run Firefox using a copy of this profile. The profile "
            "can be specified as a directory or a name, such as one "
            "you would see in the Profile Manager. If not specified, "
            "a new temporary profile will be created."
        ),
        required=False,
        type="string",
    ),
    "no-reload": OptionSpec(
        description="Do not reload the extension when source files change",
        required=False,
        type="boolean",
    ),
    "pre-install": OptionSpec(
        description=(
            "Pre-install the extension into the profile before "
            "startup. This is only needed to support older versions "
            "of Firefox."
        ),
        required=False,
        type="boolean",
    ),
}

LINT_OPTIONS: dict[str, OptionSpec] = {
    "output": OptionSpec(
        alias="o",
        description="The type of output to generate",
        type="string",
        default="text",
        choices=("json", "text"),
    ),
    "metadata": OptionSpec(
        description="Output only metadata as JSON",
        type="boolean",
        default=False,
    ),
    "pretty": OptionSpec(
        description="Prettify JSON output",
        type="boolean",
        default=False,
    ),
    "self-hosted": OptionSpec(
        description=(
            "Your extension will be self-hosted. This disables messages "
            "related to hosting on addons.mozilla.org."
        ),
        type="boolean",
        default=False,
    ),
    "boring": OptionSpec(
        description="Disables colorful shell output",
        type="boolean",
        default=False,
    ),
}


# ---------------------------------------------------------------------------
# Program assembly
# ---------------------------------------------------------------------------

def build_program(
    argv: Sequence[str] | None = None,
    *,
    package_dir: Path | str = PACKAGE_DIR,
    commands: Mapping[str, Executor] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Program:
    """Declare the web-ext program without running it."""
    executors = dict(load_commands(COMMAND_NAMES) if commands is None else commands)
    for name in COMMAND_NAMES:
        executors.setdefault(name, unavailable_executor(name))

    program = Program(
        argv,
        package_dir=package_dir,
        usage=USAGE,
        description=DESCRIPTION,
        epilog=EPILOG,
        environ=environ,
    )
    program.set_global_options(global_options())
    (
        program
        .command(
            "build",
            "Create a web extension package from source",
            executors["build"],
            BUILD_OPTIONS,
        )
        .command(
            "sign",
            "Sign the web extension so it can be installed in Firefox",
            executors["sign"],
            SIGN_OPTIONS,
        )
        .command("run", "Run the web extension", executors["run"], RUN_OPTIONS)
        .command("lint", "Validate the web extension source", executors["lint"], LINT_OPTIONS)
    )
    return program


def main(
    package_dir: Path | str = PACKAGE_DIR,
    *,
    get_version: VersionGetter = read_manifest_version,
    commands: Mapping[str, Executor] | None = None,
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
    run_options: Mapping[str, Any] | None = None,
) -> int:
    """Run the web-ext CLI.

    Parameters
    ----------
    package_dir:
        Directory whose manifest provides the version string.
    get_version:
        Version string provider.
    commands:
        Executors keyed by command name.  When ``None`` (default), they
        are discovered from installed entry points.
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    environ:
        Environment mapping for option values (defaults to ``os.environ``).
    run_options:
        Extra keyword arguments for :meth:`Program.run`
        (``exit_on_error``, ``log_stream``, ``system_exit``).

    Returns
    -------
    int
        OS process exit code for a run that did not exit by itself.
    """
    program = build_program(
        argv, package_dir=package_dir, commands=commands, environ=environ,
    )
    program.run(package_dir, get_version=get_version, **dict(run_options or {}))
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point."""
    try:
        code = main()
        sys.exit(code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
