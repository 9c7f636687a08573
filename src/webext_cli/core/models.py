"""Domain models for webext-cli.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and must remain pure
across the entire lifecycle of a program run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal

from webext_cli.utils.naming import dest_name

if TYPE_CHECKING:
    from webext_cli.core.protocols import Executor

OptionType = Literal["string", "boolean", "number"]

OPTION_TYPES: frozenset[str] = frozenset(("string", "boolean", "number"))


# ---------------------------------------------------------------------------
# Option declaration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declaration of a single command-line option.

    ``required`` is tri-state on purpose: ``None`` means "not specified"
    and is resolved to a real boolean when the option enters a command's
    effective schema (see :mod:`webext_cli.core.schema`).
    """

    description: str
    """Help text shown in ``--help`` output."""

    type: OptionType = "string"
    """Value type: ``"string"``, ``"boolean"`` or ``"number"``."""

    alias: str | None = None
    """Alternative spelling; a single letter becomes ``-x``."""

    default: Any = None
    """Value used when neither the command line nor the environment sets one."""

    required: bool | None = None
    """Whether a value must be resolved; ``None`` until merged."""

    requires_arg: bool = False
    """Reject the flag when it is given without a value."""

    choices: tuple[Any, ...] | None = None
    """Allowed values, checked before coercion."""

    coerce: Callable[[Any], Any] | None = None
    """Transformation applied to the resolved value."""

    global_: bool = False
    """Visible to every registered command."""

    normalize: bool = False
    """Normalize string values as filesystem paths."""

    def __post_init__(self) -> None:
        if self.type not in OPTION_TYPES:
            raise ValueError(
                f"Unsupported option type {self.type!r}; "
                f"expected one of {sorted(OPTION_TYPES)}"
            )
        if self.choices is not None:
            object.__setattr__(self, "choices", tuple(self.choices))
        if self.coerce is not None and not callable(self.coerce):
            raise TypeError("coerce must be callable")


OptionSchema = Mapping[str, OptionSpec]
"""Mapping of kebab-case option name to its declaration."""


# ---------------------------------------------------------------------------
# Registered command
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Command:
    """A named, independently invocable unit of CLI behaviour."""

    name: str
    description: str
    options: OptionSchema
    """Effective schema: global options merged with the local ones."""

    executor: Executor
    local_options: OptionSchema = field(default_factory=dict)
    """Options exactly as declared at registration."""


@dataclass(frozen=True, slots=True)
class CommandNotFound:
    """Lookup result for a name that is not registered.

    ``name`` is ``None`` when no command was given at all.
    """

    name: str | None


# ---------------------------------------------------------------------------
# Parse result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedArgs:
    """Structured result of parsing an argument vector.

    Option values are keyed by their snake_case destination name and can
    be read as attributes (``args.source_dir``) or items
    (``args["source-dir"]``).
    """

    positionals: tuple[str, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "positionals", tuple(self.positionals))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def command(self) -> str | None:
        """The invoked command name, or ``None`` when absent."""
        return self.positionals[0] if self.positionals else None

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(dest_name(key), default)

    def as_dict(self) -> dict[str, Any]:
        return dict(self.options)

    def __getitem__(self, key: str) -> Any:
        return self.options[dest_name(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and dest_name(key) in self.options

    def __iter__(self) -> Iterator[str]:
        return iter(self.options)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__") or name in ("positionals", "options"):
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(
                f"{type(self).__name__!s} has no option {name!r}"
            ) from None
