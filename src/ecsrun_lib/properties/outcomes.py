# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from dataclasses import asdict, dataclass
from typing import Self


@dataclass(frozen=True)
class PollOutcome:
    """
    Result of a single check of a task's state.

    Either pending (the task has not reached a terminal state yet)
    or terminated with an exit code. The exit code may be one of the
    sentinels defined on `Poller` when no definitive reading was possible.
    """

    finished: bool
    exit_code: int | None = None
    # last status reported by the service, if any
    status: str | None = None

    @classmethod
    def pending(cls, status: str | None = None) -> Self:
        return cls(finished=False, exit_code=None, status=status)

    @classmethod
    def terminated(cls, exit_code: int, status: str | None = None) -> Self:
        return cls(finished=True, exit_code=exit_code, status=status)

    def toDict(self) -> dict[str, object]:
        """Return all fields as a dict. Fields that are None are omitted."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class StopOutcome:
    """
    Result of a stop request.

    Attributes:
        task_arn (str): Identifier of the stopped task.
        last_status (str): Last status of the task reported by the service.
        stopped_at (str): Time the task was stopped. Empty if unavailable.
    """

    task_arn: str
    last_status: str
    stopped_at: str = ""

    def toDict(self) -> dict[str, object]:
        """Return all fields as a dict."""
        return asdict(self)


@dataclass(frozen=True)
class RunOutcome:
    """
    Final result of a run.

    Attributes:
        success (bool): Whether the container exited with a code of 0.
        exit_code (int): Exit code of the container, a poller sentinel,
            or the cancellation exit code.
        task_arn (str): Identifier of the launched task.
        was_stopped (bool): Whether the run ended due to an external
            cancellation rather than the task completing.
    """

    success: bool
    exit_code: int
    task_arn: str
    was_stopped: bool = False

    def toDict(self) -> dict[str, object]:
        """Return all fields as a dict."""
        return asdict(self)
