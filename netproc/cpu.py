"""Number of processors available on the system."""

import os


def count_cpu() -> int:
    """Return the number of online processors, or 0 when it cannot be told."""
    try:
        count = os.sysconf("SC_NPROCESSORS_ONLN")
    except (AttributeError, ValueError, OSError):
        return 0
    return count if count > 0 else 0