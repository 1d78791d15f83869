# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Launching of ecsrun tasks.

This module defines the `Launcher` class, which resolves the latest revision
of a task definition and submits a single task with the requested network
placement, command override, tags, and group.
"""

from .launcher import Launcher

__all__ = [
    "Launcher",
]
