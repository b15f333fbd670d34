"""Timestamp formatters, selected once by name."""

import time
from datetime import datetime

NS_PER_SECOND = 1_000_000_000


def _default(clock):
    def timestamp() -> str:
        now = clock()
        seconds, nanos = divmod(now, NS_PER_SECOND)
        wall = time.strftime("%H:%M:%S", time.localtime(seconds))
        return f"{wall} {nanos // 100_000:04d}"
    return timestamp


def _nanoseconds(clock):
    return lambda: str(clock())


def _milliseconds(clock):
    return lambda: str(clock() // 1_000_000)


def _seconds(clock):
    return lambda: str(clock() // NS_PER_SECOND)


def _strftime(pattern, clock):
    def timestamp() -> str:
        return datetime.fromtimestamp(clock() / NS_PER_SECOND).strftime(pattern)
    return timestamp


_NAMED_FORMATS = {
    "": _default,
    "ns": _nanoseconds,
    "ms": _milliseconds,
    "epoch": _seconds,
    "unix": _seconds,
}


def get_timestamp_func(fmt: str | None = "", clock=time.time_ns):
    """Return a zero-argument callable producing timestamps in the named format.

    ``clock`` returns nanoseconds since the epoch. Unknown names are treated
    as strftime patterns.
    """
    fmt = fmt or ""
    factory = _NAMED_FORMATS.get(fmt)
    if factory is None:
        return _strftime(fmt, clock)
    return factory(clock)


def measure_width(timestamp_func) -> int:
    """Byte length of one sample timestamp. Approximate for variable-width formats."""
    return len(timestamp_func().encode("utf-8"))
