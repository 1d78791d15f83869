# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from ecsrun_lib.control.interface import JobControlInterface
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.properties.outcomes import PollOutcome
from ecsrun_lib.properties.records import TaskResponse

logger = get_logger(__name__, show_time=True)


class Poller:
    """
    Checks whether a task has reached its terminal state and extracts
    the exit code of the container of interest.

    A single check never retries. A response that does not allow a definitive
    reading is treated as terminal with one of the sentinel exit codes below.
    """

    # last status of a task that is no longer running
    TERMINAL_STATUS = "STOPPED"

    # the service reported failures or returned no task
    STATUS_INDETERMINATE = -1
    # the task stopped but has no container with the requested name
    CONTAINER_NOT_FOUND = -2
    # the container exists but has no exit code (e.g. it never started)
    EXIT_CODE_UNAVAILABLE = -3

    def __init__(self, client: JobControlInterface):
        """
        Initialize a Poller instance.

        Args:
            client (JobControlInterface): Job-control service to query.
        """
        self._client = client

    def checkOnce(self, task_arn: str, cluster: str, container: str) -> PollOutcome:
        """
        Query the service once and evaluate the state of the task.

        Args:
            task_arn (str): Identifier of the task.
            cluster (str): Cluster the task runs in.
            container (str): Name of the container whose exit code is reported.

        Returns:
            PollOutcome: Pending, or terminated with the container's exit code
                or a sentinel.

        Raises:
            JobControlError: If the request to the service fails.
        """
        logger.debug(f"Checking status of task '{task_arn}'.")
        return self.evaluate(
            self._client.describeTask(cluster, task_arn), task_arn, container
        )

    def evaluate(
        self, response: TaskResponse, task_arn: str, container: str
    ) -> PollOutcome:
        """
        Evaluate a describe response for the given task and container.

        Args:
            response (TaskResponse): Response to a describe request.
            task_arn (str): Identifier of the task (used for logging).
            container (str): Name of the container whose exit code is reported.

        Returns:
            PollOutcome: Outcome of the check.
        """
        if response.failures:
            logger.warning(
                f"Describing task '{task_arn}' failed: {'; '.join(str(f) for f in response.failures)}."
            )
            return PollOutcome.terminated(Poller.STATUS_INDETERMINATE)

        if not response.tasks:
            logger.warning(f"Describing task '{task_arn}' returned no tasks.")
            return PollOutcome.terminated(Poller.STATUS_INDETERMINATE)

        task = response.tasks[0]
        if task.last_status != Poller.TERMINAL_STATUS:
            logger.info(
                f"Task '{task_arn}' is still running. Last status is '{task.last_status}'."
            )
            return PollOutcome.pending(task.last_status)

        logger.info(f"Task '{task_arn}' has stopped running.")
        if task.stopped_reason:
            logger.info(f"Stopped reason: {task.stopped_reason}")

        if not (record := task.getContainer(container)):
            logger.warning(f"Task '{task_arn}' has no container named '{container}'.")
            return PollOutcome.terminated(Poller.CONTAINER_NOT_FOUND, task.last_status)

        if record.exit_code is None:
            logger.warning(
                f"Container '{container}' of task '{task_arn}' has no exit code"
                + (f": {record.reason}." if record.reason else ".")
            )
            return PollOutcome.terminated(Poller.EXIT_CODE_UNAVAILABLE, task.last_status)

        logger.info(
            f"Container '{container}' of task '{task_arn}' exited with code {record.exit_code}."
        )
        return PollOutcome.terminated(record.exit_code, task.last_status)
