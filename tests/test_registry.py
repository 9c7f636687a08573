"""Tests for the command registry (core/registry.py)."""

from __future__ import annotations

import pytest

from webext_cli.core.models import Command, CommandNotFound, OptionSpec
from webext_cli.core.registry import CommandRegistry

from conftest import RecordingExecutor, global_options, lint_options


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


class TestRegistration:
    def test_register_returns_command(self, registry: CommandRegistry) -> None:
        executor = RecordingExecutor()
        command = registry.register("lint", "Validate", executor, lint_options())
        assert isinstance(command, Command)
        assert command.executor is executor
        assert "lint" in registry
        assert len(registry) == 1

    def test_effective_schema_includes_globals(self, registry: CommandRegistry) -> None:
        command = registry.register(
            "lint", "Validate", RecordingExecutor(), lint_options(),
            global_options=global_options(),
        )
        assert set(command.options) == {"source-dir", "verbose", "output", "pretty"}
        assert command.options["verbose"].global_ is True
        assert command.options["verbose"].required is True
        assert set(command.local_options) == {"output", "pretty"}

    @pytest.mark.parametrize("name", ["", "  ", " lint", "--lint", "two words"])
    def test_invalid_names_rejected(self, registry: CommandRegistry, name: str) -> None:
        with pytest.raises(ValueError):
            registry.register(name, "Bad", RecordingExecutor())

    def test_non_callable_executor_rejected(self, registry: CommandRegistry) -> None:
        with pytest.raises(TypeError, match="not callable"):
            registry.register("lint", "Validate", "lint")  # type: ignore[arg-type]

    def test_duplicate_rejected(self, registry: CommandRegistry) -> None:
        registry.register("lint", "Validate", RecordingExecutor())
        with pytest.raises(ValueError, match="already registered: lint"):
            registry.register("lint", "Validate again", RecordingExecutor())

    def test_invalid_option_fails_at_registration(self, registry: CommandRegistry) -> None:
        with pytest.raises(TypeError):
            registry.register("lint", "Validate", RecordingExecutor(), {"output": "json"})  # type: ignore[dict-item]
        assert "lint" not in registry

    def test_rebase_merges_new_globals(self, registry: CommandRegistry) -> None:
        registry.register("lint", "Validate", RecordingExecutor(), lint_options())
        registry.rebase({"verbose": OptionSpec(description="Verbose", type="boolean")})
        command = registry.lookup("lint")
        assert isinstance(command, Command)
        assert "verbose" in command.options
        assert command.options["verbose"].global_ is True

    def test_failed_rebase_changes_nothing(self, registry: CommandRegistry) -> None:
        registry.register("build", "Build", RecordingExecutor())
        registry.register("lint", "Validate", RecordingExecutor(), lint_options())
        with pytest.raises(ValueError, match="collides"):
            registry.rebase({"origin": OptionSpec(description="Origin", alias="o")})
        for command in registry:
            assert "origin" not in command.options


class TestLookup:
    def test_exact_match(self, registry: CommandRegistry) -> None:
        registry.register("lint", "Validate", RecordingExecutor())
        found = registry.lookup("lint")
        assert isinstance(found, Command)
        assert found.name == "lint"

    def test_no_prefix_matching(self, registry: CommandRegistry) -> None:
        registry.register("lint", "Validate", RecordingExecutor())
        assert registry.lookup("lin") == CommandNotFound("lin")

    def test_missing_name(self, registry: CommandRegistry) -> None:
        assert registry.lookup(None) == CommandNotFound(None)

    def test_registration_order_kept(self, registry: CommandRegistry) -> None:
        for name in ("build", "sign", "run", "lint"):
            registry.register(name, name.title(), RecordingExecutor())
        assert registry.names() == ["build", "sign", "run", "lint"]
        assert [command.name for command in registry] == registry.names()
