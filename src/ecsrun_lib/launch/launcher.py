# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from ecsrun_lib.control.interface import JobControlInterface
from ecsrun_lib.core.error import (
    LaunchRejectedError,
    MissingHandleError,
    NoTaskReturnedError,
    TemplateNotFoundError,
)
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.properties.launch_spec import LaunchSpec

logger = get_logger(__name__)


class Launcher:
    """
    Class to launch a single task using a job-control service.

    Responsibilities:
        - Resolve the latest revision of the requested task definition.
        - Submit exactly one launch request for it.
        - Validate the response and return the identifier of the launched task.
    """

    def __init__(self, client: JobControlInterface):
        """
        Initialize a Launcher instance.

        Args:
            client (JobControlInterface): Job-control service used to launch the task.
        """
        self._client = client

    def launch(self, spec: LaunchSpec) -> str:
        """
        Launch the task described by `spec`.

        Tags and group are only forwarded if they are non-empty.

        Args:
            spec (LaunchSpec): Description of the task to launch.

        Returns:
            str: Identifier (ARN) of the launched task.

        Raises:
            TemplateNotFoundError: If the task definition has no revision.
            LaunchRejectedError: If the service reports failures for the launch.
            NoTaskReturnedError: If the service returns no task.
            MissingHandleError: If the returned task has no identifier.
            JobControlError: If a request to the service fails.
        """
        if not (revision := self._client.resolveLatestTemplate(spec.task_definition)):
            raise TemplateNotFoundError(
                f"No revision of task definition '{spec.task_definition}' found."
            )
        logger.info(f"Launching task '{revision}' in cluster '{spec.cluster}'.")

        response = self._client.launchTask(
            spec.cluster,
            revision,
            spec.network,
            spec.container,
            list(spec.command),
            tags=dict(spec.tags) if spec.tags else None,
            group=spec.group or None,
        )

        if response.failures:
            for failure in response.failures:
                logger.debug(f"Launch failure: {failure}.")
            raise LaunchRejectedError(response.failures[0].reason or "unknown reason")

        if not response.tasks:
            raise NoTaskReturnedError("No tasks started.")

        if not (task_arn := response.tasks[0].task_arn):
            raise MissingHandleError("Started task does not have an ARN.")

        logger.info(f"Started task '{task_arn}'.")
        return task_arn
