# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab


import sys
from pathlib import Path
from typing import NoReturn

import click
from click_help_colors import HelpColorsCommand
from click_option_group import optgroup

from ecsrun_lib.control.ecs import ECSJobControl
from ecsrun_lib.core.common import (
    dump_yaml,
    input_envvars,
    parse_tags,
    split_command,
    split_list,
)
from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import ECSRunError
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.core.outputs import set_output
from ecsrun_lib.properties.launch_spec import LaunchSpec, NetworkPlacement
from ecsrun_lib.properties.outcomes import RunOutcome, StopOutcome

from .runner import Runner

logger = get_logger(__name__)


@click.command(
    short_help="Run a task and wait for it to finish.",
    help=f"""
Launch a single task using the latest revision of a task definition,
wait for it to finish, and report the exit code of the selected container.

Every option can also be provided through the environment variable `{CFG.env_vars.input_prefix}<INPUT>`
or `<input>`, where <input> is the name shown in brackets, e.g. `{CFG.env_vars.input_prefix}ECS_CLUSTER` or `ecs_cluster`.

Sending SIGINT or SIGTERM to `{CFG.binary_name} run` while it waits stops the task.

`{CFG.binary_name} run` exits with 0 if the container exited with 0,
with {CFG.exit_codes.task_failed} if it exited with a nonzero code or the task was stopped,
and with {CFG.exit_codes.default} if the task could not be launched or checked.
""",
    cls=HelpColorsCommand,
    help_options_color="bright_blue",
)
@optgroup.group(f"{click.style('Task settings', fg='yellow')}")
@optgroup.option(
    "--cluster",
    "ecs_cluster",
    type=str,
    default=None,
    envvar=input_envvars("ecs_cluster"),
    help="Name of the cluster to run the task in. [ecs_cluster]",
)
@optgroup.option(
    "--task-definition",
    "ecs_task_definition",
    type=str,
    default=None,
    envvar=input_envvars("ecs_task_definition"),
    help="Name of the task definition. Its latest revision is used. [ecs_task_definition]",
)
@optgroup.option(
    "--container",
    type=str,
    default=None,
    envvar=input_envvars("container"),
    help="Name of the container to run the command in. Its exit code is reported. [container]",
)
@optgroup.option(
    "--command",
    type=str,
    default=None,
    envvar=input_envvars("command"),
    help="Command to run in the container, with tokens separated by the command delimiter. [command]",
)
@optgroup.option(
    "--command-delimiter",
    type=str,
    default=None,
    envvar=input_envvars("command_delimiter"),
    help=f"Delimiter separating the tokens of the command. Defaults to '{CFG.inputs.command_delimiter}'. [command_delimiter]",
)
@optgroup.option(
    "--tags",
    type=str,
    default=None,
    envvar=input_envvars("tags"),
    help=f"Comma-separated list of tags to attach to the task, e.g. 'team{CFG.inputs.tag_separator}data,purpose{CFG.inputs.tag_separator}ci'. [tags]",
)
@optgroup.option(
    "--group",
    type=str,
    default=None,
    envvar=input_envvars("group"),
    help="Task group to launch the task in. [group]",
)
@optgroup.group(f"{click.style('Network settings', fg='yellow')}")
@optgroup.option(
    "--subnets",
    type=str,
    default=None,
    envvar=input_envvars("subnets"),
    help="Comma-separated list of subnets to attach the task to. [subnets]",
)
@optgroup.option(
    "--security-groups",
    "security_group_ids",
    type=str,
    default=None,
    envvar=input_envvars("security_group_ids"),
    help="Comma-separated list of security groups to attach the task to. [security_group_ids]",
)
@optgroup.group(f"{click.style('Run settings', fg='yellow')}")
@optgroup.option(
    "--check-interval",
    type=float,
    default=None,
    envvar=input_envvars("check_interval"),
    help=f"Interval in seconds between checks of the task's state. Defaults to {CFG.poller.check_interval}. [check_interval]",
)
@optgroup.option(
    "--report",
    type=str,
    default=None,
    envvar=input_envvars("report"),
    help="Write a YAML report of the run into this file. [report]",
)
def run(
    ecs_cluster: str | None,
    ecs_task_definition: str | None,
    container: str | None,
    command: str | None,
    command_delimiter: str | None,
    tags: str | None,
    group: str | None,
    subnets: str | None,
    security_group_ids: str | None,
    check_interval: float | None,
    report: str | None,
) -> NoReturn:
    """
    Launch a task, wait for it to finish, and publish the result as step outputs.
    """
    runner = None
    try:
        spec = build_launch_spec(
            ecs_cluster,
            ecs_task_definition,
            container,
            command,
            command_delimiter,
            tags,
            group,
            subnets,
            security_group_ids,
        )
        log_launch_spec(spec)

        runner = Runner(ECSJobControl.fromEnvironment(), spec, check_interval)
        outcome = runner.run()

        # the report is auxiliary; failing to write it must not change the outcome
        if report:
            try:
                write_report(Path(report), spec, outcome, runner.stop_outcome)
            except ECSRunError as e:
                logger.warning(e)
        publish_outcome(outcome)
        print_logs_hint(spec.cluster, outcome.task_arn)

        if outcome.success:
            logger.info("Task finished successfully.")
            sys.exit(0)

        if outcome.was_stopped:
            logger.error("Task was stopped before it finished.")
        else:
            logger.error(f"Task failed with exit code {outcome.exit_code}.")
        sys.exit(CFG.exit_codes.task_failed)
    except ECSRunError as e:
        logger.error(e)
        publish_failure(runner.task_arn if runner else None)
        sys.exit(CFG.exit_codes.default)
    except Exception as e:
        logger.critical(e, exc_info=True, stack_info=True)
        publish_failure(runner.task_arn if runner else None)
        sys.exit(CFG.exit_codes.unexpected_error)


def build_launch_spec(
    cluster: str | None,
    task_definition: str | None,
    container: str | None,
    command: str | None,
    command_delimiter: str | None,
    tags: str | None,
    group: str | None,
    subnets: str | None,
    security_groups: str | None,
) -> LaunchSpec:
    """
    Build the description of the task from raw input values.

    Raises:
        ECSRunError: If a required input is missing or an input is malformed.
    """
    return LaunchSpec(
        cluster=cluster or "",
        task_definition=task_definition or "",
        container=container or "",
        command=tuple(split_command(command or "", command_delimiter)),
        network=NetworkPlacement(
            subnets=tuple(split_list(subnets)),
            security_groups=tuple(split_list(security_groups)),
        ),
        tags=parse_tags(tags) or None,
        group=group or None,
    )


def log_launch_spec(spec: LaunchSpec) -> None:
    """Log the inputs of the run."""
    logger.info(f"Cluster: {spec.cluster}")
    logger.info(f"Task definition: {spec.task_definition}")
    logger.info(f"Container: {spec.container}")
    logger.info(f"Command: {list(spec.command)}")
    logger.debug(f"Subnets: {list(spec.network.subnets)}")
    logger.debug(f"Security groups: {list(spec.network.security_groups)}")
    if spec.tags:
        logger.debug(f"Tags: {spec.tags}")
    if spec.group:
        logger.debug(f"Group: {spec.group}")


def publish_outcome(outcome: RunOutcome) -> None:
    """
    Publish the outcome of the run as step outputs.
    """
    set_output("success", outcome.success)
    set_output("exit_code", outcome.exit_code)
    set_output("task_arn", outcome.task_arn)
    set_output("was_stopped", outcome.was_stopped)


def publish_failure(task_arn: str | None) -> None:
    """
    Publish the outputs of a run that failed with an error.

    The identifier of the task is published if the task has been launched,
    since the task keeps running and has to be dealt with by the caller.
    """
    try:
        set_output("success", False)
        if task_arn:
            logger.warning(f"Task '{task_arn}' may still be running.")
            set_output("task_arn", task_arn)
    except ECSRunError as e:
        logger.warning(e)


def write_report(
    file: Path,
    spec: LaunchSpec,
    outcome: RunOutcome,
    stop_outcome: StopOutcome | None,
) -> None:
    """
    Write a YAML report describing the launched task and the outcome of the run.

    Raises:
        ECSRunError: If the report cannot be written.
    """
    data: dict[str, object] = {
        "task": spec.toDict(),
        "outcome": outcome.toDict(),
    }
    if stop_outcome:
        data["stop"] = stop_outcome.toDict()

    logger.debug(f"Writing report into '{file}'.")
    try:
        file.write_text(dump_yaml(data))
    except OSError as e:
        raise ECSRunError(f"Could not write report '{file}': {e}.") from e


def print_logs_hint(cluster: str, task_arn: str) -> None:
    """
    Tell the user how to inspect the task and find its logs.
    """
    logger.info(
        f"To inspect the task and locate its logs, run: "
        f"aws ecs describe-tasks --cluster {cluster} --tasks {task_arn}"
    )
