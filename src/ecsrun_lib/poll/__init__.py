# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Completion checks for ecsrun tasks.

This module defines the `Poller` class, which performs a single status check
of a launched task and turns the service's response into a `PollOutcome`,
including the sentinel exit codes used when no definitive reading is possible.
"""

from .poller import Poller

__all__ = [
    "Poller",
]
