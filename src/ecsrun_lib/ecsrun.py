# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys

import click
from click_help_colors import HelpColorsGroup

from ecsrun_lib.run.cli import run
from ecsrun_lib.status.cli import status
from ecsrun_lib.stop.cli import stop

__version__ = "0.1.0"

# support both --help and -h
_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(
    cls=HelpColorsGroup,
    help_options_color="bright_blue",
    invoke_without_command=True,
    context_settings=_CONTEXT_SETTINGS,
)
@click.option(
    "--version",
    is_flag=True,
    help="Print the current version of ecsrun and exit.",
)
@click.pass_context
def cli(ctx: click.Context, version: bool):
    """
    Run any ecsrun command.

    ecsrun launches a one-off containerized task, waits for it to finish,
    and reports the exit code of its container. It is meant to be used as a step
    of a CI/CD pipeline.
    """
    if version:
        print(__version__)
        sys.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        sys.exit(0)


cli.add_command(run)
cli.add_command(stop)
cli.add_command(status)
