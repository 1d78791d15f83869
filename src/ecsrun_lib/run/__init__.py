# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Running of ecsrun tasks.

This module defines the `Runner` class, which launches a task, checks its state
at a fixed interval until it stops, and reports the exit code of the container
of interest. The run can be cancelled by SIGINT or SIGTERM, in which case the
task is stopped and the run is reported as cancelled.
"""

from .runner import Runner

__all__ = [
    "Runner",
]
