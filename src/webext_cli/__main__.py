"""Allow ``python -m webext_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m webext_cli`` behaves identically to the ``web-ext``
console script.
"""

from __future__ import annotations

from webext_cli.cli.app import cli

if __name__ == "__main__":
    cli()
