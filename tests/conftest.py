"""Shared pytest fixtures and configuration for the webext-cli test suite.

Guidelines
----------
* Tests never read or mutate the process environment — an explicit
  ``environ`` mapping is injected into every program and parser.
* Executors are plain recording callables; no command does real work.
* Processes are never terminated — ``system_exit`` is replaced or
  ``exit_on_error=False`` is used.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence

import pytest

from webext_cli.cli.logger import console_stream
from webext_cli.cli.program import Program
from webext_cli.core.models import OptionSpec, ParsedArgs


class RecordingExecutor:
    """Executor that remembers every ParsedArgs it was called with."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.calls: list[ParsedArgs] = []
        self.error = error

    def __call__(self, args: ParsedArgs) -> None:
        self.calls.append(args)
        if self.error is not None:
            raise self.error

    @property
    def called(self) -> bool:
        return bool(self.calls)

    @property
    def last(self) -> ParsedArgs:
        return self.calls[-1]


class FakeLogStream:
    def __init__(self) -> None:
        self.verbose = False

    def make_verbose(self) -> None:
        self.verbose = True


def lint_options() -> dict[str, OptionSpec]:
    return {
        "output": OptionSpec(
            alias="o",
            description="The type of output to generate",
            type="string",
            default="text",
            choices=("json", "text"),
        ),
        "pretty": OptionSpec(
            description="Prettify JSON output",
            type="boolean",
            default=False,
        ),
    }


def global_options() -> dict[str, OptionSpec]:
    return {
        "source-dir": OptionSpec(
            alias="s",
            description="Source directory",
            default="/work/src",
            requires_arg=True,
        ),
        "verbose": OptionSpec(alias="v", description="Verbose output", type="boolean"),
    }


@pytest.fixture(autouse=True)
def _reset_console_stream() -> Iterator[None]:
    yield
    console_stream.is_verbose = False
    console_stream.setLevel(logging.INFO)


@pytest.fixture
def environ() -> dict[str, str]:
    return {}


@pytest.fixture
def log_stream() -> FakeLogStream:
    return FakeLogStream()


@pytest.fixture
def make_program(
    environ: dict[str, str],
) -> Callable[..., Program]:
    """Factory for a program with the test global options declared."""

    def factory(
        argv: Sequence[str],
        *,
        globals_: Mapping[str, OptionSpec] | None = None,
    ) -> Program:
        program = Program(argv, prog="web-ext", environ=environ, package_dir="/pkg")
        program.set_global_options(global_options() if globals_ is None else globals_)
        return program

    return factory


@pytest.fixture
def run_embedded(log_stream: FakeLogStream) -> Callable[[Program], None]:
    """Run *program* without owning the process."""

    def runner(program: Program) -> None:
        program.run(
            exit_on_error=False,
            get_version=lambda package_dir: "9.9.9",
            log_stream=log_stream,
        )

    return runner
