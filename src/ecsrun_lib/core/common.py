# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
General utility functions for the ecsrun library.

This module provides helpers for parsing list-valued and tag-valued inputs,
naming the environment variables that back CLI inputs, masking secrets before
logging, YAML output, and user prompts.
"""

from functools import lru_cache

import readchar
import yaml
from rich.live import Live
from rich.text import Text

from .config import CFG
from .error import ECSRunError
from .logger import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def load_yaml_dumper() -> type[yaml.Dumper]:
    """Return the fastest available YAML dumper (CDumper if possible)."""
    try:
        from yaml import CDumper as Dumper  # type: ignore[attr-defined]

        logger.debug("Loaded YAML CDumper.")
    except ImportError:
        from yaml import Dumper

        logger.debug("Loaded default YAML dumper.")
    return Dumper


def dump_yaml(data: dict[str, object]) -> str:
    """
    Serialize a dictionary into a block-style YAML string, preserving key order.
    """
    return yaml.dump(
        data, default_flow_style=False, sort_keys=False, Dumper=load_yaml_dumper()
    )


def yes_or_no_prompt(prompt: str) -> bool:
    """
    Display an interactive yes/no prompt to the user and return the selection.

    The prompt highlights the pressed key ('y' in green for yes, 'N' in red for no)
    and defaults to 'No' if the user presses any key other than 'y'.

    Args:
        prompt (str): The text to display as the question.

    Returns:
        bool: True if the user selects 'yes' (presses 'y'), False otherwise.
    """
    prompt = f"   {prompt} "
    text = (
        Text("PROMPT", style="magenta")
        + Text(prompt, style="default")
        + Text("[y/N]", style="bold default")
    )

    with Live(text, refresh_per_second=1) as live:
        key = readchar.readkey().lower()

        if key == "y":
            choice = Text("[", style="bold default") + Text("y", style="bold green")
            choice += Text("/N]", style="bold default")
        else:
            choice = Text("[y/", style="bold default") + Text("N", style="bold red")
            choice += Text("]", style="bold default")

        live.update(
            Text("PROMPT", style="magenta") + Text(prompt, style="default") + choice
        )

    return key == "y"


def input_envvars(name: str) -> list[str]:
    """
    Return the environment variables an input can be read from, in order of priority.

    CI actions expose their inputs as `INPUT_<NAME>`; plain environment variables
    named after the input are accepted as a fallback.

    Args:
        name (str): Name of the input, e.g. 'ecs_cluster'.

    Returns:
        list[str]: Names of the environment variables.
    """
    return [f"{CFG.env_vars.input_prefix}{name.upper()}", name]


def split_list(string: str | None, delimiter: str | None = None) -> list[str]:
    """
    Split a delimited string into a list of non-empty, stripped items.

    Args:
        string (str | None): The string to split. If None or empty,
                             an empty list is returned.
        delimiter (str | None): Delimiter to split by.
                                Defaults to `CFG.inputs.list_delimiter`.

    Returns:
        list[str]: The individual items.
    """
    if not string:
        return []

    delimiter = delimiter or CFG.inputs.list_delimiter
    return [item.strip() for item in string.strip().split(delimiter) if item.strip()]


def split_command(string: str, delimiter: str | None = None) -> list[str]:
    """
    Split a command line into its tokens.

    Unlike `split_list`, the tokens are kept exactly as written (apart from the
    surrounding whitespace of the whole command) since whitespace inside an
    argument may be significant.

    Raises:
        ECSRunError: If the command is empty.
    """
    if not string or not string.strip():
        raise ECSRunError("Command to run in the container is empty.")

    delimiter = delimiter or CFG.inputs.command_delimiter
    return string.strip().split(delimiter)


def parse_tags(string: str | None) -> dict[str, str]:
    """
    Parse tags encoded as `key:value` pairs joined by a delimiter.

    Only the first separator of each pair splits key from value,
    so values may themselves contain the separator.

    Args:
        string (str | None): Encoded tags, e.g. 'team:data,purpose:ci'.

    Returns:
        dict[str, str]: Mapping of tag keys to values. Empty if no tags are given.

    Raises:
        ECSRunError: If a tag is missing its separator or has an empty key.
    """
    tags = {}
    for item in split_list(string, CFG.inputs.tag_delimiter):
        key, separator, value = item.partition(CFG.inputs.tag_separator)
        if not separator or not key.strip():
            raise ECSRunError(
                f"Invalid tag '{item}'. Tags must be specified as 'key{CFG.inputs.tag_separator}value'."
            )
        tags[key.strip()] = value.strip()

    return tags


def mask_secret(secret: str, visible: int = 2) -> str:
    """
    Mask a secret for logging, keeping only its first few characters.

    Returns an empty string for an empty secret.
    """
    if not secret:
        return ""

    return f"{secret[:visible]}*******"
