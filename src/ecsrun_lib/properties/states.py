# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from enum import Enum


class RunState(Enum):
    """
    State of the run lifecycle managed by `Runner`.

    LAUNCHING -> POLLING -> TERMINATED on the normal path,
    POLLING -> STOPPING -> TERMINATED when the run is cancelled.
    """

    LAUNCHING = 1
    POLLING = 2
    STOPPING = 3
    TERMINATED = 4

    def __str__(self) -> str:
        """
        Return the lowercase string representation of the enum variant.

        Returns:
            str: The name of the state in lowercase.
        """
        return self.name.lower()
