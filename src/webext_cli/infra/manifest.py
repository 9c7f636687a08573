"""Infrastructure: version string provider.

Reads the version of a package from its ``pyproject.toml`` manifest.
When the manifest is not present (an installed, non-editable copy) the
version recorded in the distribution metadata is used instead.

Rules
-----
* Read-only filesystem access.
* No ``print()`` — callers handle user-facing output.
* Failures are raised as :class:`~webext_cli.exceptions.OperationalError`.
"""

from __future__ import annotations

import tomllib
from importlib import metadata
from pathlib import Path

from webext_cli.exceptions import OperationalError

MANIFEST_NAME: str = "pyproject.toml"
DISTRIBUTION_NAME: str = "webext-cli"


def read_manifest_version(package_dir: Path | str) -> str:
    """Return the ``[project].version`` declared under *package_dir*.

    Raises
    ------
    OperationalError
        If the manifest cannot be read or declares no version, or if
        there is no manifest and the distribution is not installed.
    """
    manifest = Path(package_dir) / MANIFEST_NAME
    if not manifest.is_file():
        return _installed_version()

    try:
        data = tomllib.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise OperationalError(f"Cannot read {manifest}: {exc}") from exc

    version = data.get("project", {}).get("version")
    if not isinstance(version, str) or not version:
        raise OperationalError(f"{manifest} does not declare [project].version")
    return version


def _installed_version() -> str:
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError as exc:
        raise OperationalError(
            f"Cannot determine the version: {DISTRIBUTION_NAME} is not installed",
            code="E_NO_VERSION",
        ) from exc
