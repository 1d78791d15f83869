# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import sys
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand

from ecsrun_lib.control.ecs import ECSJobControl
from ecsrun_lib.core.common import input_envvars, yes_or_no_prompt
from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import ECSRunError
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.stop.stopper import Stopper

logger = get_logger(__name__)


@click.command(
    short_help="Stop a running task.",
    help=f"""Forcibly stop the specified task.

{click.style("TASK_ARN", fg="green")}   The identifier of the task to stop.

By default, `{CFG.binary_name} stop` prompts for confirmation before stopping the task.
The stop request is sent once; `{CFG.binary_name} stop` does not wait for the task to actually stop.""",
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
    "--reason",
    type=str,
    default=CFG.stopper.manual_reason,
    help="Reason for stopping the task.",
)
@click.option("-y", "--yes", is_flag=True, help="Stop the task without confirmation.")
def stop(task_arn: str, ecs_cluster: str | None, reason: str, yes: bool) -> NoReturn:
    """
    Forcibly stop the specified task.
    """
    try:
        if not ecs_cluster:
            raise ECSRunError("Attribute 'cluster' of the task is undefined.")

        if not yes and not yes_or_no_prompt(f"Do you want to stop the task '{task_arn}'?"):
            logger.info("Operation aborted.")
            sys.exit(0)

        stopper = Stopper(ECSJobControl.fromEnvironment())
        outcome = stopper.stop(task_arn, ecs_cluster, reason)
        logger.info(
            f"Stop requested for task '{outcome.task_arn}'. Last status: '{outcome.last_status}'."
        )
        sys.exit(0)
    except ECSRunError as e:
        logger.error(e)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        sys.exit(CFG.exit_codes.unexpected_error)
