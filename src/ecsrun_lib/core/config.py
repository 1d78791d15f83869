# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Configuration system for ecsrun.

This module defines dataclasses representing all configurable aspects of ecsrun,
including environment variables, polling cadence, launch settings, input parsing,
date formats, and exit codes.

The `Config` class loads user configuration from a TOML file (if available)
and provides a globally accessible `CFG` instance.
"""

import os
import tomllib
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Self


@dataclass
class EnvironmentVariables:
    """Environment variable names used by ecsrun."""

    # Enables ecsrun debug mode.
    debug_mode: str = "ECSRUN_DEBUG"
    # Explicit path to the ecsrun config file.
    config: str = "ECSRUN_CONFIG"
    # Set by most CI providers.
    ci: str = "CI"
    # File collecting step outputs on GitHub Actions.
    github_output: str = "GITHUB_OUTPUT"
    # AWS access key id.
    access_key_id: str = "AWS_ACCESS_KEY_ID"
    # AWS secret access key.
    secret_access_key: str = "AWS_SECRET_ACCESS_KEY"
    # AWS region.
    region: str = "AWS_REGION"
    # Prefix of CI action inputs passed through the environment.
    input_prefix: str = "INPUT_"


@dataclass
class PollerSettings:
    """Settings for polling the state of a launched task."""

    # Interval (in seconds) between successive checks of the task's state.
    check_interval: float = 5.0
    # Longest uninterrupted sleep (in seconds) while waiting for the next check.
    wake_interval: float = 0.2


@dataclass
class LauncherSettings:
    """Settings for launching tasks."""

    # Launch type of the submitted task.
    launch_type: str = "FARGATE"


@dataclass
class StopperSettings:
    """Settings for stopping tasks."""

    # Reason attached to stop requests issued after a termination signal.
    # '%s' is replaced with the name of the signal.
    signal_reason: str = "Stopped by ecsrun after receiving %s."
    # Reason attached to stop requests issued by `ecsrun stop`.
    manual_reason: str = "Stopped by ecsrun."


@dataclass
class InputSettings:
    """Settings for parsing list-valued inputs."""

    # Delimiter separating subnets and security groups.
    list_delimiter: str = ","
    # Default delimiter separating the tokens of the command.
    command_delimiter: str = ","
    # Delimiter separating individual tags.
    tag_delimiter: str = ","
    # Separator between the key and the value of a tag.
    tag_separator: str = ":"


@dataclass
class StatusPresenterSettings:
    """Settings for StatusPresenter."""

    # Width of the task status panel.
    width: int | None = 80
    # Style of the border lines.
    border_style: str = "white"
    # Style of the title.
    title_style: str = "white bold"
    # Style used for the keys in the task status panel.
    key_style: str = "default bold"
    # Style used for values in the task status panel.
    value_style: str = "white"
    # Style used for table headers.
    headers_style: str = "default bold"
    # Style used for a task or container that is still running.
    running_style: str = "bright_blue"
    # Style used for a container that exited with 0.
    success_style: str = "bright_green"
    # Style used for a container that failed or could not be read.
    failure_style: str = "bright_red"


@dataclass
class DateFormats:
    """Date and time format strings."""

    # Standard date format used by ecsrun.
    standard: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class ExitCodes:
    """Exit codes of ecsrun commands."""

    # Returned when the task finished with a nonzero exit code or was stopped.
    task_failed: int = 1
    # Default error code for failures of ecsrun commands.
    default: int = 91
    # Returned on an unexpected or unhandled error.
    unexpected_error: int = 99


@dataclass
class Config:
    """Main configuration for ecsrun."""

    env_vars: EnvironmentVariables = field(default_factory=EnvironmentVariables)
    poller: PollerSettings = field(default_factory=PollerSettings)
    launcher: LauncherSettings = field(default_factory=LauncherSettings)
    stopper: StopperSettings = field(default_factory=StopperSettings)
    inputs: InputSettings = field(default_factory=InputSettings)
    status_presenter: StatusPresenterSettings = field(
        default_factory=StatusPresenterSettings
    )
    date_formats: DateFormats = field(default_factory=DateFormats)
    exit_codes: ExitCodes = field(default_factory=ExitCodes)

    # Name of the ecsrun binary.
    binary_name: str = "ecsrun"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Self:
        """
        Load configuration from TOML file or use defaults.

        Args:
            config_path: Explicit path to config file. If None, searches standard locations.

        Returns:
            Config instance with loaded or default values.
        """
        if config_path is None:
            config_path = Config._get_config_path()

        try:
            if config_path and config_path.exists():
                with config_path.open("rb") as f:
                    config_data = tomllib.load(f)
                return _dict_to_dataclass(cls, config_data)
        except Exception as e:
            raise ValueError(f"Could not read ecsrun config '{config_path}': {e}.")

        # no config found - use defaults
        return cls()

    @staticmethod
    def _get_config_path() -> Path | None:
        """
        Search for config file in standard locations (XDG compliant).
        Returns the first existing config file, or None.
        """
        config_locations: list[Path | None] = [
            # 1. Explicit environment variable (highest priority)
            Path(env_path) if (env_path := os.getenv("ECSRUN_CONFIG")) else None,
            # 2. Current working directory (e.g. the root of a CI checkout)
            Path.cwd() / "ecsrun_config.toml",
            # 3. XDG config home (standard user config location)
            Path(os.getenv("XDG_CONFIG_HOME", Path.home() / ".config"))
            / "ecsrun"
            / "config.toml",
        ]

        for path in config_locations:
            if path and path.is_file():
                return path

        return None


def _dict_to_dataclass(cls, data: dict[str, Any]):
    """
    Recursively convert a dictionary to a dataclass instance.
    Handles nested dataclasses properly.
    """
    if not is_dataclass(cls):
        return data

    field_values = {}
    for field_info in fields(cls):
        field_name = field_info.name
        field_type = field_info.type

        if field_name in data:
            value = data[field_name]
            if is_dataclass(field_type) and isinstance(value, dict):
                field_values[field_name] = _dict_to_dataclass(field_type, value)
            else:
                field_values[field_name] = value

    return cls(**field_values)


# Global configuration for ecsrun.
CFG = Config.load()
