# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import signal
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import ECSRunError
from ecsrun_lib.properties.launch_spec import LaunchSpec, NetworkPlacement
from ecsrun_lib.properties.outcomes import RunOutcome, StopOutcome
from ecsrun_lib.properties.records import (
    ContainerRecord,
    Failure,
    StopResponse,
    TaskRecord,
    TaskResponse,
)
from ecsrun_lib.run.cli import build_launch_spec, publish_failure, run, write_report

ARGS = [
    "--cluster",
    "cluster",
    "--task-definition",
    "family",
    "--container",
    "app",
    "--command",
    "python,manage.py,migrate",
    "--subnets",
    "subnet-1,subnet-2",
    "--security-groups",
    "sg-1",
    "--check-interval",
    "0",
]


def _client(*describe_responses: TaskResponse) -> MagicMock:
    client = MagicMock()
    client.resolveLatestTemplate.return_value = "arn:family:4"
    client.launchTask.return_value = TaskResponse(
        tasks=[TaskRecord(task_arn="arn:task/1", last_status="PROVISIONING")]
    )
    client.describeTask.side_effect = list(describe_responses)
    client.stopTask.return_value = StopResponse(task_arn="arn:task/1", last_status="RUNNING")
    return client


def _stopped(exit_code: int | None) -> TaskResponse:
    return TaskResponse(
        tasks=[
            TaskRecord(
                task_arn="arn:task/1",
                last_status="STOPPED",
                containers=[ContainerRecord(name="app", exit_code=exit_code)],
            )
        ]
    )


def _running() -> TaskResponse:
    return TaskResponse(tasks=[TaskRecord(task_arn="arn:task/1", last_status="RUNNING")])


def _outputs(path) -> dict[str, str]:
    return dict(line.split("=", 1) for line in path.read_text().splitlines())


def _invoke(client, args, output_file, env=None):
    runner = CliRunner()
    with patch("ecsrun_lib.run.cli.ECSJobControl.fromEnvironment", return_value=client):
        return runner.invoke(
            run, args, env={CFG.env_vars.github_output: str(output_file), **(env or {})}
        )


def test_run_success_exits_zero(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_running(), _running(), _stopped(0))

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == 0
    assert _outputs(output_file) == {
        "success": "true",
        "exit_code": "0",
        "task_arn": "arn:task/1",
        "was_stopped": "false",
    }
    client.resolveLatestTemplate.assert_called_once_with("family")
    args = client.launchTask.call_args.args
    assert args[0] == "cluster"
    assert args[1] == "arn:family:4"
    assert args[2] == NetworkPlacement(
        subnets=("subnet-1", "subnet-2"), security_groups=("sg-1",)
    )
    assert args[3] == "app"
    assert args[4] == ["python", "manage.py", "migrate"]
    assert client.describeTask.call_count == 3


def test_run_nonzero_exit_code_exits_task_failed(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_stopped(2))

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.task_failed
    outputs = _outputs(output_file)
    assert outputs["success"] == "false"
    assert outputs["exit_code"] == "2"
    assert outputs["was_stopped"] == "false"


def test_run_missing_exit_code_reports_sentinel(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_stopped(None))

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.task_failed
    assert _outputs(output_file)["exit_code"] == "-3"


def test_run_launch_rejected_exits_default(tmp_path):
    output_file = tmp_path / "output"
    client = _client()
    client.launchTask.return_value = TaskResponse(failures=[Failure(reason="RESOURCE:CPU")])

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.default
    assert _outputs(output_file) == {"success": "false"}
    client.describeTask.assert_not_called()


def test_run_check_failure_publishes_task_arn(tmp_path):
    output_file = tmp_path / "output"
    client = _client()
    client.describeTask.side_effect = ECSRunError("describe failed")

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.default
    assert _outputs(output_file) == {"success": "false", "task_arn": "arn:task/1"}
    client.stopTask.assert_not_called()


def test_run_unexpected_error_exits_unexpected(tmp_path):
    output_file = tmp_path / "output"
    client = _client()
    client.resolveLatestTemplate.side_effect = RuntimeError("boom")

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.unexpected_error
    assert _outputs(output_file) == {"success": "false"}


def test_run_missing_cluster_exits_default(tmp_path):
    output_file = tmp_path / "output"
    client = _client()
    args = ARGS[2:]

    result = _invoke(
        client,
        args,
        output_file,
        env={"INPUT_ECS_CLUSTER": None, "ecs_cluster": None},
    )

    assert result.exit_code == CFG.exit_codes.default
    client.resolveLatestTemplate.assert_not_called()


def test_run_reads_inputs_from_environment(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_stopped(0))

    result = _invoke(
        client,
        [],
        output_file,
        env={
            "INPUT_ECS_CLUSTER": "env-cluster",
            "INPUT_ECS_TASK_DEFINITION": "env-family",
            "INPUT_CONTAINER": "app",
            "INPUT_COMMAND": "echo hello",
            "INPUT_COMMAND_DELIMITER": " ",
            "INPUT_SUBNETS": "subnet-9",
            "INPUT_SECURITY_GROUP_IDS": "sg-9",
            "INPUT_TAGS": "team:data",
            "INPUT_GROUP": "ci",
            "INPUT_CHECK_INTERVAL": "0",
        },
    )

    assert result.exit_code == 0
    client.resolveLatestTemplate.assert_called_once_with("env-family")
    call = client.launchTask.call_args
    assert call.args[0] == "env-cluster"
    assert call.args[2] == NetworkPlacement(subnets=("subnet-9",), security_groups=("sg-9",))
    assert call.args[4] == ["echo", "hello"]
    assert call.kwargs == {"tags": {"team": "data"}, "group": "ci"}


def test_run_bare_input_names_are_fallback(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_stopped(0))

    result = _invoke(
        client,
        ARGS[2:],
        output_file,
        env={"INPUT_ECS_CLUSTER": None, "ecs_cluster": "bare-cluster"},
    )

    assert result.exit_code == 0
    assert client.launchTask.call_args.args[0] == "bare-cluster"


def test_run_options_override_environment(tmp_path):
    output_file = tmp_path / "output"
    client = _client(_stopped(0))

    result = _invoke(client, ARGS, output_file, env={"INPUT_ECS_CLUSTER": "env-cluster"})

    assert result.exit_code == 0
    assert client.launchTask.call_args.args[0] == "cluster"


def test_run_signal_stops_task(tmp_path):
    output_file = tmp_path / "output"
    client = _client()

    def describe(_cluster, _task_arn):
        signal.raise_signal(signal.SIGINT)
        return _running()

    client.describeTask.side_effect = describe

    result = _invoke(client, ARGS, output_file)

    assert result.exit_code == CFG.exit_codes.task_failed
    assert _outputs(output_file) == {
        "success": "false",
        "exit_code": "127",
        "task_arn": "arn:task/1",
        "was_stopped": "true",
    }
    client.stopTask.assert_called_once()
    assert "SIGINT" in client.stopTask.call_args.args[2]


def test_run_writes_report(tmp_path):
    output_file = tmp_path / "output"
    report = tmp_path / "report.yaml"
    client = _client(_stopped(0))

    result = _invoke(client, ARGS + ["--report", str(report)], output_file)

    assert result.exit_code == 0
    data = yaml.safe_load(report.read_text())
    assert data["task"]["cluster"] == "cluster"
    assert data["task"]["command"] == ["python", "manage.py", "migrate"]
    assert data["outcome"] == {
        "success": True,
        "exit_code": 0,
        "task_arn": "arn:task/1",
        "was_stopped": False,
    }
    assert "stop" not in data


def test_build_launch_spec_parses_inputs():
    spec = build_launch_spec(
        "cluster",
        "family",
        "app",
        "bash;-c;echo hi",
        ";",
        "team:data,purpose:ci",
        "ci",
        "subnet-1, subnet-2",
        "sg-1",
    )

    assert spec == LaunchSpec(
        cluster="cluster",
        task_definition="family",
        container="app",
        command=("bash", "-c", "echo hi"),
        network=NetworkPlacement(subnets=("subnet-1", "subnet-2"), security_groups=("sg-1",)),
        tags={"team": "data", "purpose": "ci"},
        group="ci",
    )


def test_build_launch_spec_without_optional_inputs():
    spec = build_launch_spec("cluster", "family", "app", "true", None, None, None, None, None)

    assert spec.tags is None
    assert spec.group is None
    assert spec.network == NetworkPlacement()


@pytest.mark.parametrize("command", [None, "", "  "])
def test_build_launch_spec_empty_command_raises(command):
    with pytest.raises(ECSRunError, match="empty"):
        build_launch_spec("cluster", "family", "app", command, None, None, None, None, None)


def test_publish_failure_swallows_output_errors():
    with (
        patch("ecsrun_lib.run.cli.set_output", side_effect=ECSRunError("read-only")),
        patch("ecsrun_lib.run.cli.logger") as mock_logger,
    ):
        publish_failure("arn:task/1")

    mock_logger.warning.assert_called_once()


def test_write_report_includes_stop_outcome(tmp_path):
    report = tmp_path / "report.yaml"
    spec = build_launch_spec("cluster", "family", "app", "true", None, None, None, None, None)

    write_report(
        report,
        spec,
        RunOutcome(success=False, exit_code=127, task_arn="arn:task/1", was_stopped=True),
        StopOutcome(task_arn="arn:task/1", last_status="RUNNING"),
    )

    data = yaml.safe_load(report.read_text())
    assert data["stop"] == {"task_arn": "arn:task/1", "last_status": "RUNNING", "stopped_at": ""}


def test_write_report_unwritable_raises(tmp_path):
    spec = build_launch_spec("cluster", "family", "app", "true", None, None, None, None, None)

    with pytest.raises(ECSRunError, match="Could not write report"):
        write_report(
            tmp_path / "missing" / "report.yaml",
            spec,
            RunOutcome(success=True, exit_code=0, task_arn="arn:task/1"),
            None,
        )


def test_run_unwritable_report_keeps_published_outcome(tmp_path):
    output_file = tmp_path / "output"
    report = tmp_path / "missing" / "report.yaml"
    client = _client(_stopped(0))

    result = _invoke(client, ARGS + ["--report", str(report)], output_file)

    assert result.exit_code == 0
    lines = output_file.read_text().splitlines()
    assert lines == [
        "success=true",
        "exit_code=0",
        "task_arn=arn:task/1",
        "was_stopped=false",
    ]
    assert not report.exists()


def test_run_unwritable_report_with_failed_task(tmp_path):
    output_file = tmp_path / "output"
    report = tmp_path / "missing" / "report.yaml"
    client = _client(_stopped(5))

    result = _invoke(client, ARGS + ["--report", str(report)], output_file)

    assert result.exit_code == CFG.exit_codes.task_failed
    lines = output_file.read_text().splitlines()
    assert [line for line in lines if line.startswith("success=")] == ["success=false"]
    assert "exit_code=5" in lines
