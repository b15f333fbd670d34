"""Fixed-rate producer feeding generated lines into the writer channel."""

import logging
import queue
import threading
import time

from randomizr.config import ConfigError

logger = logging.getLogger(__name__)

PUT_POLL_INTERVAL = 0.1


class Scheduler:
    """Calls ``produce`` once per tick and puts the line on ``channel``.

    The put blocks while the writer still holds the previous line, so a
    slow writer slows the emission rate instead of growing a backlog.
    Ticks missed while blocked are dropped, not replayed.
    """

    def __init__(
        self,
        produce,
        channel: queue.Queue,
        frequency: float,
        shutdown_event: threading.Event,
        clock=time.monotonic,
        sleep=None,
    ):
        if frequency <= 0:
            raise ConfigError(f"frequency must be positive, got {frequency}")
        self._produce = produce
        self._channel = channel
        self._period = 1.0 / frequency
        self._shutdown = shutdown_event
        self._clock = clock
        # Waiting on the event lets a shutdown cut a long period short.
        self._sleep = sleep or shutdown_event.wait
        self._sent = 0

    @property
    def period(self) -> float:
        return self._period

    @property
    def sent(self) -> int:
        return self._sent

    def _send(self, line: str) -> bool:
        """Blocking put that still notices shutdown."""
        while not self._shutdown.is_set():
            try:
                self._channel.put(line, timeout=min(self._period, PUT_POLL_INTERVAL))
                return True
            except queue.Full:
                continue
        return False

    def run(self, max_lines: int | None = None) -> int:
        """Tick until shutdown (or ``max_lines`` sent). Returns lines sent."""
        logger.info("Scheduler started: %.3f Hz (period %.4fs)", 1.0 / self._period, self._period)
        next_tick = self._clock() + self._period
        while not self._shutdown.is_set():
            if max_lines is not None and self._sent >= max_lines:
                break

            delay = next_tick - self._clock()
            if delay > 0:
                self._sleep(delay)
            if self._shutdown.is_set():
                break

            if not self._send(self._produce()):
                break
            self._sent += 1

            next_tick += self._period
            now = self._clock()
            if now - next_tick > self._period:
                next_tick = now + self._period

        logger.info("Scheduler stopped after %d lines", self._sent)
        return self._sent
