"""Option schema merging.

Two rules shape every command's effective schema:

* Global options are visible to all commands, so each one is marked
  ``global_=True`` and, unless the caller said otherwise, ``required=True``.
  A global option normally carries a default, so "required" only bites
  when neither a default nor a value is available.
* Command-local options override globals of the same name.  Their
  unspecified ``required`` flag resolves to ``False``.

After merging, no option in an effective schema has ``required=None``.
All functions here are pure and return new mappings.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from types import MappingProxyType

from webext_cli.core.models import OptionSchema, OptionSpec
from webext_cli.utils.naming import flag_names


def _check_entries(options: Mapping[str, object]) -> None:
    for name, spec in options.items():
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Option names must be non-empty strings, got {name!r}")
        if not isinstance(spec, OptionSpec):
            raise TypeError(
                f"Option {name!r} must be declared with OptionSpec, "
                f"got {type(spec).__name__}"
            )


def mark_global(options: OptionSchema) -> dict[str, OptionSpec]:
    """Return *options* with every entry marked global.

    ``required`` defaults to ``True`` only where it was left unset, so
    applying this twice yields the same schema.
    """
    _check_entries(options)
    return {
        name: replace(
            spec,
            global_=True,
            required=True if spec.required is None else spec.required,
        )
        for name, spec in options.items()
    }


def resolve_local(options: OptionSchema) -> dict[str, OptionSpec]:
    """Return command-local *options* with ``required`` resolved to a bool."""
    _check_entries(options)
    return {
        name: spec if spec.required is not None else replace(spec, required=False)
        for name, spec in options.items()
    }


def _check_collisions(schema: Mapping[str, OptionSpec]) -> None:
    seen: dict[str, str] = {}
    for name, spec in schema.items():
        for flag in flag_names(name, spec.alias):
            owner = seen.setdefault(flag, name)
            if owner != name:
                raise ValueError(
                    f"Option {name!r} collides with {owner!r} on {flag!r}"
                )


def merge_schemas(
    global_options: OptionSchema,
    command_options: OptionSchema | None = None,
) -> Mapping[str, OptionSpec]:
    """Build a command's effective schema.

    Command-local declarations win over global ones with the same name.
    """
    merged = mark_global(global_options)
    merged.update(resolve_local(command_options or {}))
    _check_collisions(merged)
    return MappingProxyType(merged)


def union_schemas(*schemas: OptionSchema) -> dict[str, OptionSpec]:
    """Combine several schemas into one that declares every known flag.

    Used for the lenient pre-scan, which runs before the command is
    known.  The first declaration of a name wins, and a later option
    whose flags are already taken is left out.
    """
    union: dict[str, OptionSpec] = {}
    taken: set[str] = set()
    for schema in schemas:
        for name, spec in schema.items():
            flags = set(flag_names(name, spec.alias))
            if name in union or flags & taken:
                continue
            union[name] = spec
            taken |= flags
    return union
