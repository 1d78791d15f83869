# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from ecsrun_lib.control.interface import JobControlInterface
from ecsrun_lib.core.logger import get_logger
from ecsrun_lib.properties.outcomes import StopOutcome

logger = get_logger(__name__, show_time=True)


class Stopper:
    """
    Class to forcibly stop a running task.

    Sends a single stop request and reports what the service returned.
    The request is not retried and the task is not checked to actually stop.
    """

    # status reported if the service does not return one
    UNKNOWN_STATUS = "unknown"

    def __init__(self, client: JobControlInterface):
        """
        Initialize a Stopper instance.

        Args:
            client (JobControlInterface): Job-control service used to stop the task.
        """
        self._client = client

    def stop(self, task_arn: str, cluster: str, reason: str) -> StopOutcome:
        """
        Request the task to be stopped.

        Args:
            task_arn (str): Identifier of the task.
            cluster (str): Cluster the task runs in.
            reason (str): Reason for stopping the task.

        Returns:
            StopOutcome: Identifier, last status, and stop time of the task.
                Fields missing from the response fall back to the known identifier,
                an 'unknown' status, and an empty stop time.

        Raises:
            JobControlError: If the stop request fails.
        """
        logger.info(f"Stopping task '{task_arn}'.")
        response = self._client.stopTask(cluster, task_arn, reason)

        return StopOutcome(
            task_arn=response.task_arn or task_arn,
            last_status=response.last_status or Stopper.UNKNOWN_STATUS,
            stopped_at=response.stopped_at or "",
        )
