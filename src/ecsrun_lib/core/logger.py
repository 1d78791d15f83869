# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

from .config import CFG


def get_logger(name: str, show_time: bool = False) -> logging.Logger:
    """
    Return a logger with unified formatting.

    Records are rendered by rich's RichHandler on stderr. Timestamps are shown
    if `show_time` is set, in debug mode, or when running inside a CI pipeline
    where the log is the only record of how long a run took.
    """
    logger = logging.getLogger(name)

    debug_mode = os.environ.get(CFG.env_vars.debug_mode) is not None
    in_ci = bool(os.environ.get(CFG.env_vars.ci))
    level = logging.DEBUG if debug_mode else logging.INFO
    logger.setLevel(level)

    # CI logs are not terminals; do not wrap long lines at 80 characters
    console = Console(stderr=True, soft_wrap=in_ci)
    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=False,
        show_level=True,
        show_time=show_time or debug_mode or in_ci,
        log_time_format=CFG.date_formats.standard,
        tracebacks_width=None,
        tracebacks_code_width=None,
    )

    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False

    return logger
