# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from click.testing import CliRunner

from ecsrun_lib import __version__, cli


def test_cli_version():
    result = CliRunner().invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_cli_without_command_prints_help():
    result = CliRunner().invoke(cli, [])

    assert result.exit_code == 0
    for command in ("run", "stop", "status"):
        assert command in result.output


def test_cli_lists_run_options():
    result = CliRunner().invoke(cli, ["run", "--help"])

    assert result.exit_code == 0
    assert "--task-definition" in result.output
    assert "--security-groups" in result.output
