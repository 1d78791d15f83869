# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Abstractions for talking to the job-control service that runs ecsrun tasks.

- `JobControlInterface`: the abstract interface every backend implements.
  It defines resolving the latest revision of a task definition, launching
  a task, describing a task, and stopping a task.

- `ECSJobControl`: the Amazon ECS backend built on a boto3 client.
"""

from .ecs import ECSJobControl
from .interface import JobControlInterface

__all__ = [
    "ECSJobControl",
    "JobControlInterface",
]
