"""Width of the largest process id."""

from __future__ import annotations

import os
from typing import Union

# Digits of the largest 32-bit unsigned integer.
MAX_DIGITS_UINT32 = 10

PATH_MAX_PID = "/proc/sys/kernel/pid_max"


def max_pid_digits(path: Union[str, os.PathLike] = PATH_MAX_PID) -> int:
    """Return how many digits the largest pid has, read from ``path``.

    Falls back to the width of a 32-bit number when the file cannot be read.
    """
    try:
        with open(path, "rb") as file:
            content = file.read()
    except OSError:
        return MAX_DIGITS_UINT32

    tokens = content.split()
    if not tokens:
        return MAX_DIGITS_UINT32
    return min(len(tokens[0]), MAX_DIGITS_UINT32)