# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from abc import ABC

from ecsrun_lib.properties.launch_spec import NetworkPlacement
from ecsrun_lib.properties.records import StopResponse, TaskResponse


class JobControlInterface(ABC):
    """
    Abstract base class for job-control service integrations.

    Concrete classes must implement these methods to allow ecsrun
    to launch, inspect, and stop tasks.

    All methods should raise JobControlError when the call itself fails.
    Failures the service reports for individual tasks are returned
    as part of the response instead.
    """

    def resolveLatestTemplate(self, name: str) -> str | None:
        """
        Resolve the latest revision of a task definition.

        Only revisions of exactly the named family are considered,
        never those of families whose names merely start with it.

        Args:
            name (str): Name (family) of the task definition.

        Returns:
            str | None: Identifier of the latest revision or None if no revision exists.

        Raises:
            JobControlError: If the service cannot be queried.
        """
        raise NotImplementedError(
            "resolveLatestTemplate method is not implemented for this job-control implementation"
        )

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
        """
        Launch a single instance of a task.

        Args:
            cluster (str): Cluster to run the task in.
            revision (str): Identifier of the task definition revision.
            network (NetworkPlacement): Network placement of the task.
            container (str): Name of the container whose command is overridden.
            command (list[str]): Command to run in the container.
            tags (dict[str, str] | None): Tags to attach. Omitted from the request if None.
            group (str | None): Task group label. Omitted from the request if None.

        Returns:
            TaskResponse: Launched tasks and reported failures.

        Raises:
            JobControlError: If the request fails.
        """
        raise NotImplementedError(
            "launchTask method is not implemented for this job-control implementation"
        )

    def describeTask(self, cluster: str, task_arn: str) -> TaskResponse:
        """
        Get the current state of a task.

        Args:
            cluster (str): Cluster the task runs in.
            task_arn (str): Identifier of the task.

        Returns:
            TaskResponse: Matching tasks and reported failures.

        Raises:
            JobControlError: If the request fails.
        """
        raise NotImplementedError(
            "describeTask method is not implemented for this job-control implementation"
        )

    def stopTask(self, cluster: str, task_arn: str, reason: str) -> StopResponse:
        """
        Forcibly stop a task.

        Args:
            cluster (str): Cluster the task runs in.
            task_arn (str): Identifier of the task.
            reason (str): Reason for stopping the task, recorded by the service.

        Returns:
            StopResponse: State of the task as reported by the service.

        Raises:
            JobControlError: If the request fails.
        """
        raise NotImplementedError(
            "stopTask method is not implemented for this job-control implementation"
        )
