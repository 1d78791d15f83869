# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Exception types used throughout ecsrun.

This module defines the ecsrun-specific exceptions: the common recoverable error,
the failures of launching a task, and failures of communicating with the
job-control service. Each exception carries an associated exit code used by
ecsrun commands to report failures consistently.

Cancelling a run is not an error; it is reported through `RunOutcome.was_stopped`.
"""

from ecsrun_lib.core.config import CFG


class ECSRunError(Exception):
    """Common exception type for all recoverable ecsrun errors."""

    exit_code = CFG.exit_codes.default


class TemplateNotFoundError(ECSRunError):
    """Raised when no revision of the requested task definition exists."""

    pass


class LaunchRejectedError(ECSRunError):
    """
    Raised when the job-control service explicitly refuses to launch the task.

    Attributes:
        reason (str): Reason reported by the service for the first failure.
    """

    def __init__(self, reason: str):
        super().__init__(f"Failed to start task: {reason}")
        self.reason = reason


class NoTaskReturnedError(ECSRunError):
    """Raised when a launch succeeds but no task record is returned."""

    pass


class MissingHandleError(ECSRunError):
    """Raised when the returned task record has no identifier."""

    pass


class JobControlError(ECSRunError):
    """Raised when a call to the job-control service fails."""

    pass
