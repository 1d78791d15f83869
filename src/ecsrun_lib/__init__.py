# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core implementation of the ecsrun command-line tool.

This package provides the internal logic behind ecsrun's run-and-wait workflow
for one-off containerized tasks. It defines the abstraction of a job-control
service with an Amazon ECS backend, launching a task from the latest revision of
a task definition, polling the task until it stops, extracting the exit code of
its container, and stopping the task when the run is cancelled. All ecsrun CLI
commands ultimately delegate to the functionality implemented here.
"""

from .ecsrun import __version__, cli

__all__ = [
    "__version__",
    "cli",
    "control",
    "core",
    "launch",
    "poll",
    "properties",
    "run",
    "status",
    "stop",
]
