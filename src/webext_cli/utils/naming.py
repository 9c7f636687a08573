"""Naming conventions shared by the schema, parser and help text.

Option names are declared in kebab-case (``source-dir``).  From that one
name three others are derived:

* the destination key in parsed results (``source_dir``),
* the command-line flag (``--source-dir``, plus ``-s`` for an alias),
* the environment variable (``WEB_EXT_SOURCE_DIR``).
"""

from __future__ import annotations

import re

ENV_PREFIX: str = "WEB_EXT"
"""Prefix for environment variables that supply option values."""

_SEPARATORS = re.compile(r"[-\s]+")


def dest_name(option: str) -> str:
    """Return the snake_case result key for *option*."""
    return _SEPARATORS.sub("_", option.strip()).lower()


def env_var_name(option: str, prefix: str = ENV_PREFIX) -> str:
    """Return the environment variable bound to *option*.

    >>> env_var_name("source-dir")
    'WEB_EXT_SOURCE_DIR'
    """
    return f"{prefix}_{dest_name(option).upper()}"


def flag_names(option: str, alias: str | None = None) -> list[str]:
    """Return the command-line spellings for *option* and its *alias*."""
    flags = [f"--{option}"]
    if alias:
        flags.append(f"-{alias}" if len(alias) == 1 else f"--{alias}")
    return flags
