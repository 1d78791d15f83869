# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for ecsrun.

This module collects the foundational helpers used across the ecsrun codebase:
configuration, error types, structured logging, input parsing,
and publishing of step outputs.
"""
