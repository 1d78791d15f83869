# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand
from rich.console import Console

from ecsrun_lib.control.ecs import ECSJobControl
from ecsrun_lib.core.common import input_envvars
from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import ECSRunError
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.poll.poller import Poller
from ecsrun_lib.status.presenter import StatusPresenter

logger = get_logger(__name__)


@click.command(
    short_help="Display the state of a task.",
    help=f"""Check the state of the specified task once and display it.

{click.style("TASK_ARN", fg="green")}   The identifier of the task.

The exit code shown is the one `{CFG.binary_name} run` would report for the task if it had finished now.""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@click.argument(
    "task_arn",
    type=str,
    metavar=click.style("TASK_ARN", fg="green"),
)
@click.option(
    "--cluster",
    "ecs_cluster",
    type=str,
    default=None,
    envvar=input_envvars("ecs_cluster"),
    help="Name of the cluster the task runs in. [ecs_cluster]",
)
@click.option(
    "--container",
    type=str,
    default=None,
    envvar=input_envvars("container"),
    help="Name of the container whose exit code is reported. [container]",
)
@click.option("--yaml", is_flag=True, help="Output the state of the task in YAML format.")
def status(
    task_arn: str, ecs_cluster: str | None, container: str | None, yaml: bool
) -> NoReturn:
    try:
        if not ecs_cluster:
            raise ECSRunError("Attribute 'cluster' of the task is undefined.")
        if not container:
            raise ECSRunError("Attribute 'container' of the task is undefined.")

        client = ECSJobControl.fromEnvironment()
        response = client.describeTask(ecs_cluster, task_arn)
        outcome = Poller(client).evaluate(response, task_arn, container)

        presenter = StatusPresenter(
            task_arn,
            container,
            response.tasks[0] if response.tasks else None,
            outcome,
        )
        if yaml:
            presenter.dumpYaml()
        else:
            console = Console(record=False, markup=False)
            console.print(presenter.createStatusPanel())

        sys.exit(0)
    except ECSRunError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
