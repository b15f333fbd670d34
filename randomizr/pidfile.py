"""Pidfile writing."""

import logging
import os

logger = logging.getLogger(__name__)


def write_pidfile(path: str, pid: int | None = None) -> bool:
    """Write the process id followed by a newline. Failures are logged, not raised."""
    if not path:
        return False
    pid = os.getpid() if pid is None else pid
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"{pid}\n")
    except OSError as e:
        logger.error("Unable to write pidfile %s: %s", path, e)
        return False
    logger.info("Wrote pid %d to %s", pid, path)
    return True
