# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import os
from pathlib import Path

from .config import CFG
from .error import ECSRunError
from .logger import get_logger

logger = get_logger(__name__)


def set_output(name: str, value: object) -> None:
    """
    Publish a step output for the surrounding CI pipeline.

    On GitHub Actions, outputs are appended to the file named by `GITHUB_OUTPUT`.
    Elsewhere the output is printed to stdout as `name=value`.

    Booleans are written in lowercase so that they compare equal to
    the literals used in workflow expressions.

    Raises:
        ECSRunError: If the output file cannot be written.
    """
    if isinstance(value, bool):
        value = str(value).lower()

    line = f"{name}={value}"

    if not (output_file := os.environ.get(CFG.env_vars.github_output)):
        print(line)
        return

    logger.debug(f"Writing output '{line}' into '{output_file}'.")
    try:
        with Path(output_file).open("a") as f:
            f.write(f"{line}\n")
    except OSError as e:
        raise ECSRunError(f"Could not write output '{name}' into '{output_file}': {e}.") from e
