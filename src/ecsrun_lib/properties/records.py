# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Records returned by the job-control service.

These are normalized, service-agnostic views of the responses to launch,
describe, and stop requests. Fields the service may omit are optional.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Failure:
    """A failure reported by the job-control service for one resource."""

    arn: str | None = None
    reason: str | None = None
    detail: str | None = None

    def __str__(self) -> str:
        parts = [self.reason or "unknown reason"]
        if self.detail:
            parts.append(f"({self.detail})")
        if self.arn:
            parts.append(f"[{self.arn}]")
        return " ".join(parts)


@dataclass(frozen=True)
class ContainerRecord:
    """State of one container of a task."""

    name: str | None = None
    exit_code: int | None = None
    last_status: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class TaskRecord:
    """State of a task."""

    task_arn: str | None = None
    last_status: str | None = None
    containers: list[ContainerRecord] = field(default_factory=list)
    stopped_reason: str | None = None

    def getContainer(self, name: str) -> ContainerRecord | None:
        """
        Return the first container with the given name or None if there is none.
        """
        return next((c for c in self.containers if c.name == name), None)


@dataclass(frozen=True)
class TaskResponse:
    """Response to a launch or describe request."""

    tasks: list[TaskRecord] = field(default_factory=list)
    failures: list[Failure] = field(default_factory=list)


@dataclass(frozen=True)
class StopResponse:
    """Response to a stop request. The service may omit any of the fields."""

    task_arn: str | None = None
    last_status: str | None = None
    stopped_at: str | None = None
