"""Rich console shared by the CLI layer.

Everything the CLI layer reports goes to **stderr**; stdout is left to
command implementations.  The console resolves ``sys.stderr`` at print
time, so redirected or captured streams are honoured.
"""

from __future__ import annotations

from rich.console import Console


def get_rich_console() -> Console:
    """Create a Rich console instance targeting stderr."""
    return Console(stderr=True, highlight=False, soft_wrap=True)


console = get_rich_console()
