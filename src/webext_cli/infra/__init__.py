"""Infrastructure layer — external system integration.

This layer wraps the filesystem (package manifests) and the installed
distribution metadata (command entry points).  Raw third-party and OS
exceptions are caught here and re-raised as
:class:`~webext_cli.exceptions.OperationalError`.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from webext_cli.infra.command_loader import (
    ENTRY_POINT_GROUP,
    load_commands,
    unavailable_executor,
)
from webext_cli.infra.manifest import read_manifest_version

__all__: list[str] = [
    "ENTRY_POINT_GROUP",
    "load_commands",
    "read_manifest_version",
    "unavailable_executor",
]
