"""Tests for the root specreg CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from specreg import __version__
from specreg.cli import cli
from tests.conftest import write_sources


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "specreg" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize(
    "flags",
    [
        ["--json"],
        ["-q"],
        ["-v"],
        ["--log-json"],
        ["--trace-loads"],
        ["--dummy-types"],
        ["-c", "/tmp/specreg-test.toml"],
        ["-I", "models", "-I", "more"],
    ],
)
def test_global_flag_accepted(cli_runner: CliRunner, flags: list[str]) -> None:
    result = cli_runner.invoke(cli, [*flags, "--version"])
    assert result.exit_code == 0


def test_invalid_config_reported(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "specreg.toml").write_text("[paths\n")
    monkeypatch.delenv("SPECREG_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    result = cli_runner.invoke(cli, ["check"])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


def test_unparseable_source_reported_by_check(
    cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    models = write_sources(tmp_path / "models")
    (models / "bad.project.yml").write_text("tasks: [\n")
    monkeypatch.delenv("SPECREG_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)

    result = cli_runner.invoke(cli, ["--json", "-I", "models", "check"])
    assert result.exit_code == 1
    payload = json.loads(result.stderr)
    assert payload["op"] == "check"
    issues = payload["data"]["issues"]
    assert [(i["project"], i["code"]) for i in issues] == [("bad", "SYNTAX_ERROR")]
    assert payload["data"]["checked"] == ["base", "demo", "other"]

    result = cli_runner.invoke(cli, ["--json", "-I", "models", "show", "typekit", "base"])
    assert result.exit_code == 0


# --- Command groups registered ---

EXPECTED_GROUPS = ["show"]

EXPECTED_COMMANDS = ["check"]


@pytest.mark.parametrize("group", EXPECTED_GROUPS)
def test_group_registered(cli_runner: CliRunner, group: str) -> None:
    result = cli_runner.invoke(cli, [group, "--help"])
    assert result.exit_code == 0, f"{group} --help failed: {result.output}"


@pytest.mark.parametrize("command", EXPECTED_COMMANDS)
def test_command_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, [command, "--help"])
    assert result.exit_code == 0, f"{command} --help failed: {result.output}"


def test_all_commands_in_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    for name in EXPECTED_GROUPS + EXPECTED_COMMANDS:
        assert name in result.output, f"{name} missing from --help"
