"""Core layer — option schemas, argument parsing and the command registry.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O (the environment mapping is injected).
* No imports from ``cli`` or ``infra``.
* Every input problem is reported as :class:`~webext_cli.exceptions.UsageError`.
"""

from webext_cli.core.models import (
    Command,
    CommandNotFound,
    OptionSchema,
    OptionSpec,
    ParsedArgs,
)
from webext_cli.core.parser import ArgumentParser
from webext_cli.core.protocols import Executor, LogStream, VersionGetter
from webext_cli.core.registry import CommandRegistry
from webext_cli.core.schema import mark_global, merge_schemas, resolve_local

__all__: list[str] = [
    "ArgumentParser",
    "Command",
    "CommandNotFound",
    "CommandRegistry",
    "Executor",
    "LogStream",
    "OptionSchema",
    "OptionSpec",
    "ParsedArgs",
    "VersionGetter",
    "mark_global",
    "merge_schemas",
    "resolve_local",
]
