"""Tests for --examples flag on CLI commands.

Parametrized to cover all commands that define examples text.
"""

from __future__ import annotations

import click
import pytest
from click.testing import CliRunner

from specreg.cli import cli
from specreg.commands._base import SpecGroup
from specreg.commands.show import show

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (
        ["show", "--examples"],
        [
            "specreg show project demo",
            "specreg show typekit base",
            "specreg show type -t base /base/Time",
            "specreg show deployed-task ctrl",
        ],
    ),
    (["show", "project", "--examples"], ["--json show project"]),
    (["show", "typekit", "--examples"], ["specreg show typekit"]),
    (["show", "type", "--examples"], ["--interface", "--dummy-types"]),
    (["show", "task", "--examples"], ["demo::Controller"]),
    (["show", "deployment", "--examples"], ["demo_deployment"]),
    (["show", "deployed-task", "--examples"], ["--deployment"]),
    (["check", "--examples"], ["specreg check demo base", "-I ./models"]),
]


def _examples_id(item: tuple[list[str], list[str]]) -> str:
    """Generate a readable test ID from args."""
    args, _ = item
    return "_".join(a for a in args if a != "--examples")


@pytest.mark.parametrize(
    "args,expected_keywords",
    EXAMPLES_COMMANDS,
    ids=[_examples_id(item) for item in EXAMPLES_COMMANDS],
)
def test_examples_flag(
    cli_runner: CliRunner, args: list[str], expected_keywords: list[str]
) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0
    assert "Examples for" in result.output
    for kw in expected_keywords:
        assert kw in result.output, f"Expected '{kw}' in examples output for {args}"


class TestExamplesInHelp:
    """Test that --examples appears in --help output for commands that have it."""

    @pytest.mark.parametrize(
        "args",
        [
            ["show", "--help"],
            ["show", "type", "--help"],
            ["check", "--help"],
        ],
    )
    def test_examples_in_help(self, cli_runner: CliRunner, args: list[str]) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert "--examples" in result.output


class TestExamplesEagerExit:
    """Test that --examples exits before validation (eager option)."""

    def test_missing_argument_ignored(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["show", "task", "--examples"])
        assert result.exit_code == 0
        assert "Missing argument" not in result.output


class TestGroupExamples:
    """A SpecGroup without its own examples lists each subcommand's first one."""

    def _group(self, examples: str | None = None) -> click.Group:
        @click.group(cls=SpecGroup, examples=examples)
        def grp() -> None:
            pass

        @grp.command(examples="  grp b first\n  grp b second")
        def b() -> None:
            pass

        @grp.command(examples="  grp a first")
        def a() -> None:
            pass

        @grp.command()
        def c() -> None:
            pass

        return grp

    def test_collects_first_example_per_subcommand(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(self._group(), ["--examples"])
        assert result.exit_code == 0
        assert result.output.splitlines()[2:] == ["  grp a first", "  grp b first"]

    def test_own_examples_win(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(self._group("  grp custom"), ["--examples"])
        assert result.exit_code == 0
        assert "grp custom" in result.output
        assert "grp a first" not in result.output

    def test_show_lists_one_line_per_subcommand(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["show", "--examples"])
        examples = [line for line in result.output.splitlines() if line.startswith("  ")]
        assert len(examples) == len(show.commands)
