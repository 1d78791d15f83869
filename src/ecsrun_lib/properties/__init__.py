# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Properties and structured metadata for ecsrun tasks.

This module provides the data representations underlying an ecsrun run:
the description of the task to launch, the records returned by the
job-control service, the outcomes of polling, stopping, and running a task,
and the states of the run lifecycle.
"""
