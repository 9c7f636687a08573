"""webext-cli — command registry and dispatcher for the web-ext tool.

Declares named sub-commands with option schemas, parses arguments
against them, and runs one executor per invocation with uniform error
reporting and exit behaviour.
"""

from webext_cli.version import __version__

__all__: list[str] = ["__version__"]
