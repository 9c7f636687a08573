"""Argument parsing on top of :mod:`argparse`.

The adapter turns an :data:`~webext_cli.core.models.OptionSchema` into a
strict :class:`argparse.ArgumentParser`, parses an argument vector and
resolves every declared option to a final value.

Resolution order for each option
--------------------------------
1. the command line,
2. the ``<PREFIX>_<OPTION>`` environment variable,
3. the declared default (``False`` for booleans without one).

Then, in this order: path normalization, ``choices`` validation, the
``required`` check, and finally ``coerce``.  Every input problem surfaces
as :class:`~webext_cli.exceptions.UsageError`; argparse is never allowed
to terminate the process on its own, except for ``--help`` and
``--version`` which exit with status 0.
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NoReturn

from webext_cli.core.models import OptionSchema, OptionSpec, ParsedArgs
from webext_cli.exceptions import UsageError
from webext_cli.utils.naming import ENV_PREFIX, dest_name, env_var_name, flag_names

_UNSET: Any = object()

_TRUE_WORDS = frozenset(("1", "true", "yes", "on"))
_FALSE_WORDS = frozenset(("", "0", "false", "no", "off"))

NO_ARGUMENTS_MESSAGE = "This command does not take any arguments"


# ---------------------------------------------------------------------------
# Value converters
# ---------------------------------------------------------------------------

def number(raw: str) -> int | float:
    """Convert *raw* to an ``int`` when possible, else a ``float``.

    The function name shows up in argparse messages
    (``invalid number value: 'x'``).
    """
    try:
        return int(raw)
    except ValueError:
        return float(raw)


def boolean(raw: str) -> bool:
    """Interpret an environment string as a boolean."""
    word = raw.strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(raw)


_CONVERTERS: dict[str, Callable[[str], Any]] = {
    "string": str,
    "number": number,
    "boolean": boolean,
}


# ---------------------------------------------------------------------------
# argparse plumbing
# ---------------------------------------------------------------------------

class _StrictArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


class _LazyVersionAction(argparse.Action):
    """``--version`` action that asks for the version only when used."""

    def __init__(
        self,
        option_strings: Sequence[str],
        dest: str = argparse.SUPPRESS,
        default: str = argparse.SUPPRESS,
        *,
        version: Callable[[], str],
        help: str = "Show version number",
    ) -> None:
        super().__init__(
            option_strings=option_strings,
            dest=dest,
            default=default,
            nargs=0,
            help=help,
        )
        self._version = version

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: str | None = None,
    ) -> NoReturn:
        print(self._version(), file=sys.stdout)
        parser.exit()


def _help_text(name: str, spec: OptionSpec, env_prefix: str) -> str:
    parts = [spec.description.replace("%", "%%"), f"[{spec.type}]"]
    if spec.choices is not None:
        parts.append("[choices: " + ", ".join(repr(c) for c in spec.choices) + "]")
    if spec.default is not None:
        parts.append(f"[default: {spec.default!r}]".replace("%", "%%"))
    elif spec.required:
        parts.append("[required]")
    parts.append(f"[env: {env_var_name(name, env_prefix)}]")
    return " ".join(parts)


def _add_option(
    parser: argparse.ArgumentParser,
    name: str,
    spec: OptionSpec,
    env_prefix: str,
) -> None:
    kwargs: dict[str, Any] = {
        "dest": dest_name(name),
        "default": _UNSET,
        "help": _help_text(name, spec, env_prefix),
    }
    if spec.type == "boolean":
        parser.add_argument(
            *flag_names(name, spec.alias), action="store_const", const=True, **kwargs,
        )
        return

    kwargs["type"] = _CONVERTERS[spec.type]
    kwargs["metavar"] = name.upper().replace("-", "_")
    if not spec.requires_arg:
        kwargs["nargs"] = "?"
        kwargs["const"] = "" if spec.type == "string" else None
    parser.add_argument(*flag_names(name, spec.alias), **kwargs)


def _explicit_booleans(
    argv: Sequence[str],
    schema: OptionSchema,
) -> tuple[list[str], dict[str, bool]]:
    """Split ``--flag=true`` / ``--flag=false`` tokens out of *argv*.

    argparse cannot attach a value to a flag that takes none, so boolean
    assignments are read here and the remaining tokens are parsed as usual.
    Tokens after ``--`` are left alone.
    """
    spellings = {
        flag: name
        for name, spec in schema.items()
        if spec.type == "boolean"
        for flag in flag_names(name, spec.alias)
    }
    rest: list[str] = []
    explicit: dict[str, bool] = {}
    for index, token in enumerate(argv):
        if token == "--":
            rest.extend(argv[index:])
            break
        flag, sep, raw = token.partition("=")
        name = spellings.get(flag) if sep else None
        if name is None:
            rest.append(token)
            continue
        try:
            explicit[dest_name(name)] = boolean(raw)
        except ValueError:
            raise UsageError(f"Invalid boolean value for {flag}: {raw!r}") from None
    return rest, explicit


# ---------------------------------------------------------------------------
# Public adapter
# ---------------------------------------------------------------------------

class ArgumentParser:
    """Parse argument vectors against option schemas.

    Parameters
    ----------
    prog:
        Program name used in usage and help output.
    usage, description, epilog:
        Optional help text for the top-level parser.
    environ:
        Environment mapping consulted for option values.  Defaults to
        :data:`os.environ`.
    env_prefix:
        Prefix of the environment variables bound to options.
    version:
        Zero-argument callable returning the version string; enables
        ``--version`` when given.
    """

    def __init__(
        self,
        prog: str | None = None,
        *,
        usage: str | None = None,
        description: str | None = None,
        epilog: str | None = None,
        environ: Mapping[str, str] | None = None,
        env_prefix: str = ENV_PREFIX,
        version: Callable[[], str] | None = None,
    ) -> None:
        self.prog = prog
        self.usage = usage
        self.description = description
        self.epilog = epilog
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        self.env_prefix = env_prefix
        self.version = version

    # ------------------------------------------------------------------
    # Parser construction
    # ------------------------------------------------------------------

    def build(
        self,
        schema: OptionSchema,
        *,
        command: str | None = None,
        description: str | None = None,
        add_help: bool = True,
    ) -> argparse.ArgumentParser:
        """Build a strict argparse parser for *schema*.

        With *command*, the parser documents that command; otherwise it
        uses the top-level usage, description and epilog.
        """
        if command is None:
            prog, usage, epilog = self.prog, self.usage, self.epilog
            description = description or self.description
        else:
            prog = f"{self.prog} {command}" if self.prog else command
            usage, epilog = None, None

        parser = _StrictArgumentParser(
            prog=prog,
            usage=usage,
            description=description,
            epilog=epilog,
            add_help=add_help,
            allow_abbrev=False,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument(
            "positionals",
            nargs="*",
            default=[],
            metavar="command",
            help=argparse.SUPPRESS if command is not None else "Command to run",
        )
        if self.version is not None and add_help:
            parser.add_argument("--version", action=_LazyVersionAction, version=self.version)
        for name, spec in schema.items():
            _add_option(parser, name, spec, self.env_prefix)
        return parser

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(
        self,
        argv: Sequence[str],
        schema: OptionSchema,
        *,
        command: str | None = None,
        description: str | None = None,
        max_positionals: int | None = None,
    ) -> ParsedArgs:
        """Parse *argv* strictly against *schema*.

        Raises
        ------
        UsageError
            On unknown flags, missing or invalid values, more positional
            arguments than *max_positionals*, or a failing coercion that
            raises :class:`UsageError` itself.
        """
        parser = self.build(schema, command=command, description=description)
        rest, explicit = _explicit_booleans(argv, schema)
        namespace = parser.parse_intermixed_args(rest)
        vars(namespace).update(explicit)
        positionals = tuple(namespace.positionals or ())
        if max_positionals is not None and len(positionals) > max_positionals:
            raise UsageError(NO_ARGUMENTS_MESSAGE)
        return ParsedArgs(positionals, self._resolve_all(schema, namespace))

    def scan(self, argv: Sequence[str], schema: OptionSchema) -> ParsedArgs:
        """Leniently pre-parse *argv* to find the command and global flags.

        Unknown flags are ignored and options that cannot be resolved are
        left out.  Coercion is not applied.  The result is only used to
        pick the schema for the strict :meth:`parse` pass and to decide
        how verbosely to report a failure of that pass.
        """
        parser = self.build(schema, add_help=False)
        try:
            rest, explicit = _explicit_booleans(argv, schema)
            namespace, _ = parser.parse_known_intermixed_args(rest)
        except UsageError:
            return ParsedArgs()
        vars(namespace).update(explicit)

        values: dict[str, Any] = {}
        for name, spec in schema.items():
            try:
                value = self._lookup(name, spec, namespace)
            except UsageError:
                continue
            values[dest_name(name)] = value
        return ParsedArgs(tuple(namespace.positionals or ()), values)

    # ------------------------------------------------------------------
    # Value resolution
    # ------------------------------------------------------------------

    def _from_environment(self, name: str, spec: OptionSpec) -> Any:
        variable = env_var_name(name, self.env_prefix)
        raw = self.environ.get(variable)
        if raw is None:
            return _UNSET
        try:
            return _CONVERTERS[spec.type](raw)
        except ValueError:
            raise UsageError(
                f"Invalid {spec.type} value in {variable}: {raw!r}"
            ) from None

    def _lookup(self, name: str, spec: OptionSpec, namespace: argparse.Namespace) -> Any:
        value = getattr(namespace, dest_name(name), _UNSET)
        if value is _UNSET:
            value = self._from_environment(name, spec)
        if value is _UNSET:
            value = spec.default
            if value is None and spec.type == "boolean":
                value = False
        if spec.normalize and isinstance(value, str) and value:
            value = os.path.normpath(value)
        return value

    def _resolve_all(
        self,
        schema: OptionSchema,
        namespace: argparse.Namespace,
    ) -> dict[str, Any]:
        values: dict[str, Any] = {}
        missing: list[str] = []
        for name, spec in schema.items():
            value = self._lookup(name, spec, namespace)
            if value is not None and spec.choices is not None and value not in spec.choices:
                allowed = ", ".join(repr(choice) for choice in spec.choices)
                raise UsageError(
                    f"Invalid value for --{name}: {value!r} (choose from {allowed})"
                )
            if value is None and spec.required:
                missing.append(name)
            values[dest_name(name)] = value

        if missing:
            noun = "argument" if len(missing) == 1 else "arguments"
            raise UsageError(f"Missing required {noun}: {', '.join(missing)}")

        for name, spec in schema.items():
            key = dest_name(name)
            if spec.coerce is not None and values[key] is not None:
                values[key] = spec.coerce(values[key])
        return values
