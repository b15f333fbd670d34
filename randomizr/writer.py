"""OutputWriter: consumer thread that owns the destination handle."""

import logging
import queue
import sys
import threading
from enum import Enum

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1


class WriterState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    REOPENING = "reopening"


def open_destination(path: str, truncate: bool):
    """Open ``path`` for writing, truncating or appending, creating it if absent."""
    mode = "w" if truncate else "a"
    return open(path, mode, encoding="utf-8")


class OutputWriter(threading.Thread):
    """Drains lines from ``channel`` and writes them to a file or a stream.

    With ``reopen_every_line`` the file is opened, written and closed for
    each line. Otherwise one handle is kept open; ``request_reopen()`` makes
    the writer emit a ``HUP`` marker line, close the handle and reopen it.
    A ``None`` on the channel stops the thread.
    """

    def __init__(
        self,
        channel: queue.Queue,
        path: str = "",
        truncate: bool = False,
        reopen_every_line: bool = False,
        timestamp_func=None,
        stream=None,
    ):
        super().__init__(name="output-writer", daemon=True)
        self._channel = channel
        self._path = path
        self._truncate = truncate
        self._reopen_every_line = reopen_every_line
        self._timestamp = timestamp_func
        self._stream = stream if stream is not None else sys.stdout
        self._reopen_requested = threading.Event()
        self._handle = None
        self._lock = threading.Lock()
        self._lines_written = 0
        self._write_errors = 0
        self._reopen_count = 0
        self.state = WriterState.CLOSED

    @property
    def lines_written(self) -> int:
        with self._lock:
            return self._lines_written

    @property
    def write_errors(self) -> int:
        with self._lock:
            return self._write_errors

    @property
    def reopen_count(self) -> int:
        with self._lock:
            return self._reopen_count

    @property
    def to_stdout(self) -> bool:
        return not self._path

    def request_reopen(self):
        """Ask the writer to reopen its destination. Safe to call from a signal handler."""
        self._reopen_requested.set()

    def stop(self, timeout: float = 5.0):
        """Queue the poison pill; lines already queued are written first."""
        try:
            self._channel.put(None, timeout=timeout)
        except queue.Full:
            logger.warning("Writer did not drain the channel within %.1fs", timeout)

    # -- handle lifecycle --

    def _open(self) -> bool:
        if self.to_stdout:
            self._handle = self._stream
            self.state = WriterState.OPEN
            return True
        try:
            self._handle = open_destination(self._path, self._truncate)
        except OSError as e:
            logger.error("Unable to open outfile %s: %s", self._path, e)
            self._count_error()
            self._handle = None
            self.state = WriterState.CLOSED
            return False
        self.state = WriterState.OPEN
        return True

    def _close(self):
        handle, self._handle = self._handle, None
        self.state = WriterState.CLOSED
        if handle is None or self.to_stdout:
            return
        try:
            handle.close()
        except OSError as e:
            logger.error("Unable to close outfile %s: %s", self._path, e)

    def _write(self, line: str) -> bool:
        try:
            self._handle.write(line)
            self._handle.flush()
        except (OSError, ValueError) as e:
            logger.error("Unable to write line: %s", e)
            self._count_error()
            return False
        with self._lock:
            self._lines_written += 1
        return True

    def _count_error(self):
        with self._lock:
            self._write_errors += 1

    def _reopen(self):
        """Write the HUP marker, then close and reacquire the handle."""
        self.state = WriterState.REOPENING
        if self._handle is not None and self._timestamp is not None:
            try:
                self._handle.write(f"{self._timestamp()} HUP\n")
                self._handle.flush()
            except (OSError, ValueError) as e:
                logger.error("Unable to write HUP marker: %s", e)
        self._close()
        self._open()
        with self._lock:
            self._reopen_count += 1
        logger.info("Reopened %s", self._path or "<stdout>")

    # -- loops --

    def _next_line(self):
        """Wait for either a reopen request or a line. Returns (reopen, line)."""
        while True:
            if self._reopen_requested.is_set():
                self._reopen_requested.clear()
                return True, None
            try:
                return False, self._channel.get(timeout=POLL_INTERVAL)
            except queue.Empty:
                continue

    def _run_persistent(self):
        while True:
            reopen, line = self._next_line()
            if reopen:
                self._reopen()
                continue
            if line is None:
                break
            if self.state is not WriterState.OPEN and not self._open():
                continue
            self._write(line)

    def _run_reopen_every_line(self):
        while True:
            reopen, line = self._next_line()
            if reopen:
                logger.debug("Reopen requested; handle already reopened per line")
                continue
            if line is None:
                break
            if not self._open():
                continue
            self._write(line)
            self._close()

    def run(self):
        logger.info(
            "Writer started: destination=%s, policy=%s",
            self._path or "<stdout>",
            "reopen-per-line" if self._reopen_every_line else "persistent",
        )
        try:
            if self._reopen_every_line:
                self._run_reopen_every_line()
            else:
                self._run_persistent()
        finally:
            self._close()
            logger.info(
                "Writer stopped: %d lines written, %d errors, %d reopens",
                self.lines_written, self.write_errors, self.reopen_count,
            )
