# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Inspection of ecsrun tasks.

This module defines the `StatusPresenter` class, which renders a single
reading of a task's state, including its containers and the exit code
`ecsrun run` would report, as a Rich panel or as YAML.
"""

from .presenter import StatusPresenter

__all__ = [
    "StatusPresenter",
]
