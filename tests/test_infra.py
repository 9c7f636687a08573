"""Tests for the infrastructure layer (infra/manifest.py, infra/command_loader.py).

The filesystem is confined to ``tmp_path`` and entry points are mocked.
"""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from webext_cli.core.models import ParsedArgs
from webext_cli.exceptions import OperationalError
from webext_cli.infra.command_loader import (
    ENTRY_POINT_GROUP,
    load_commands,
    unavailable_executor,
)
from webext_cli.infra.manifest import read_manifest_version


# ---------------------------------------------------------------------------
# Version string provider
# ---------------------------------------------------------------------------

class TestReadManifestVersion:
    def test_reads_project_version(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "demo"\nversion = "2.5.0"\n', encoding="utf-8",
        )
        assert read_manifest_version(tmp_path) == "2.5.0"

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nversion = "0.3.1"\n', encoding="utf-8",
        )
        assert read_manifest_version(str(tmp_path)) == "0.3.1"

    def test_missing_version(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")
        with pytest.raises(OperationalError, match="does not declare"):
            read_manifest_version(tmp_path)

    def test_malformed_manifest(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[project\n", encoding="utf-8")
        with pytest.raises(OperationalError, match="Cannot read"):
            read_manifest_version(tmp_path)

    @patch("webext_cli.infra.manifest.metadata.version", return_value="0.1.0")
    def test_falls_back_to_distribution(self, mock_version: MagicMock, tmp_path: Path) -> None:
        assert read_manifest_version(tmp_path) == "0.1.0"
        mock_version.assert_called_once_with("webext-cli")

    @patch(
        "webext_cli.infra.manifest.metadata.version",
        side_effect=metadata.PackageNotFoundError("webext-cli"),
    )
    def test_not_installed(self, _mock_version: MagicMock, tmp_path: Path) -> None:
        with pytest.raises(OperationalError) as exc_info:
            read_manifest_version(tmp_path)
        assert exc_info.value.code == "E_NO_VERSION"


# ---------------------------------------------------------------------------
# Command discovery
# ---------------------------------------------------------------------------

def _entry_point(name: str, target: object) -> MagicMock:
    entry = MagicMock(spec=metadata.EntryPoint)
    entry.name = name
    entry.load.return_value = target
    return entry


class TestLoadCommands:
    def test_installed_entry_point_loaded_on_call(self) -> None:
        lint = MagicMock(return_value=None)
        entry = _entry_point("lint", lint)
        with patch(
            "webext_cli.infra.command_loader.metadata.entry_points",
            return_value=[entry],
        ) as mock_entry_points:
            executors = load_commands(["lint"])
        mock_entry_points.assert_called_once_with(group=ENTRY_POINT_GROUP)
        entry.load.assert_not_called()

        args = ParsedArgs(("lint",), {})
        executors["lint"](args)
        lint.assert_called_once_with(args)

    def test_missing_entry_point_is_unavailable(self) -> None:
        with patch("webext_cli.infra.command_loader.metadata.entry_points", return_value=[]):
            executors = load_commands(["sign"])
        with pytest.raises(OperationalError) as exc_info:
            executors["sign"](ParsedArgs(("sign",), {}))
        assert exc_info.value.code == "E_NO_EXECUTOR"


class TestUnavailableExecutor:
    def test_message_and_hint(self) -> None:
        executor = unavailable_executor("self-host")
        assert executor.__name__ == "unavailable_self_host"
        with pytest.raises(OperationalError, match="'self-host' command") as exc_info:
            executor(ParsedArgs())
        assert ENTRY_POINT_GROUP in (exc_info.value.hint or "")
