# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Stopping of ecsrun tasks.

This module defines the `Stopper` class, which sends a single forced-stop
request for a task and reports the status returned by the service.
"""

from .stopper import Stopper

__all__ = [
    "Stopper",
]
