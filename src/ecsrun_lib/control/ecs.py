# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
from datetime import datetime
from typing import Any, Self

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ecsrun_lib.core.common import mask_secret
from ecsrun_lib.core.config import CFG
from ecsrun_lib.core.error import JobControlError
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.properties.launch_spec import NetworkPlacement
from ecsrun_lib.properties.records import (
    ContainerRecord,
    Failure,
    StopResponse,
    TaskRecord,
    TaskResponse,
)

from .interface import JobControlInterface

logger = get_logger(__name__)


class ECSJobControl(JobControlInterface):
    """
    Implementation of JobControlInterface for Amazon ECS.

    Wraps a boto3 `ecs` client and converts its responses into ecsrun records.
    """

    # error code returned when a task definition has no ACTIVE revision
    NOT_FOUND_CODE = "ClientException"

    def __init__(self, client: Any):
        """
        Initialize the job control with an existing boto3 ECS client.

        Args:
            client (Any): boto3 client for the 'ecs' service.
        """
        self._client = client

    @classmethod
    def fromEnvironment(cls) -> Self:
        """
        Create the job control using credentials from the environment.

        Reads the access key id, secret access key, and region from the
        environment variables named in `CFG.env_vars`. Unset or empty variables
        are left for boto3 to resolve through its default credential chain.

        Raises:
            JobControlError: If the client cannot be created.
        """
        access_key_id = os.environ.get(CFG.env_vars.access_key_id) or None
        secret_access_key = os.environ.get(CFG.env_vars.secret_access_key) or None
        region = os.environ.get(CFG.env_vars.region) or None

        logger.debug(f"AWS access key id: {mask_secret(access_key_id or '')}.")
        logger.debug(f"AWS region: {region}.")

        try:
            client = boto3.client(
                "ecs",
                aws_access_key_id=access_key_id,
                aws_secret_access_key=secret_access_key,
                region_name=region,
            )
        except (BotoCoreError, ClientError) as e:
            raise JobControlError(f"Could not create ECS client: {e}.") from e

        return cls(client)

    def resolveLatestTemplate(self, name: str) -> str | None:
        # a bare family name resolves to its latest ACTIVE revision
        logger.debug(f"Calling ECS 'describe_task_definition' for '{name}'.")
        try:
            response = self._client.describe_task_definition(taskDefinition=name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == ECSJobControl.NOT_FOUND_CODE:
                logger.debug(f"Task definition '{name}' not found: {e}.")
                return None
            raise JobControlError(
                f"ECS 'describe_task_definition' request failed: {e}."
            ) from e
        except BotoCoreError as e:
            raise JobControlError(
                f"ECS 'describe_task_definition' request failed: {e}."
            ) from e

        if not (arn := (response.get("taskDefinition") or {}).get("taskDefinitionArn")):
            return None

        logger.debug(f"Latest revision of task definition '{name}': '{arn}'.")
        return arn

    def launchTask(
        self,
        cluster: str,
        revision: str,
        network: NetworkPlacement,
        container: str,
        command: list[str],
        tags: dict[str, str] | None = None,
        group: str | None = None,
    ) -> TaskResponse:
        request: dict[str, Any] = {
            "cluster": cluster,
            "taskDefinition": revision,
            "count": 1,
            "launchType": CFG.launcher.launch_type,
            "networkConfiguration": {
                "awsvpcConfiguration": {
                    "subnets": list(network.subnets),
                    "securityGroups": list(network.security_groups),
                }
            },
            "overrides": {
                "containerOverrides": [{"name": container, "command": list(command)}]
            },
        }

        # absent and empty are not the same for ECS, keys must not be sent at all
        if tags is not None:
            request["tags"] = [{"key": k, "value": v} for k, v in tags.items()]
        if group is not None:
            request["group"] = group

        return ECSJobControl._toTaskResponse(self._call("run_task", **request))

    def describeTask(self, cluster: str, task_arn: str) -> TaskResponse:
        return ECSJobControl._toTaskResponse(
            self._call("describe_tasks", cluster=cluster, tasks=[task_arn])
        )

    def stopTask(self, cluster: str, task_arn: str, reason: str) -> StopResponse:
        response = self._call("stop_task", cluster=cluster, task=task_arn, reason=reason)
        task = response.get("task") or {}

        stopped_at = task.get("stoppedAt")
        if isinstance(stopped_at, datetime):
            stopped_at = stopped_at.strftime(CFG.date_formats.standard)

        return StopResponse(
            task_arn=task.get("taskArn"),
            last_status=task.get("lastStatus"),
            stopped_at=stopped_at,
        )

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """
        Invoke an operation of the boto3 client.

        Raises:
            JobControlError: If the call fails.
        """
        logger.debug(f"Calling ECS '{operation}' with {kwargs}.")
        try:
            return getattr(self._client, operation)(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise JobControlError(f"ECS '{operation}' request failed: {e}.") from e

    @staticmethod
    def _toTaskResponse(response: dict[str, Any]) -> TaskResponse:
        """
        Convert a run_task or describe_tasks response into a TaskResponse.
        """
        return TaskResponse(
            tasks=[ECSJobControl._toTaskRecord(t) for t in response.get("tasks") or []],
            failures=[
                Failure(
                    arn=f.get("arn"),
                    reason=f.get("reason"),
                    detail=f.get("detail"),
                )
                for f in response.get("failures") or []
            ],
        )

    @staticmethod
    def _toTaskRecord(task: dict[str, Any]) -> TaskRecord:
        return TaskRecord(
            task_arn=task.get("taskArn"),
            last_status=task.get("lastStatus"),
            stopped_reason=task.get("stoppedReason"),
            containers=[
                ContainerRecord(
                    name=c.get("name"),
                    exit_code=c.get("exitCode"),
                    last_status=c.get("lastStatus"),
                    reason=c.get("reason"),
                )
                for c in task.get("containers") or []
            ],
        )
