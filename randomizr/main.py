#!/usr/bin/env python3
"""Random log line generator — Entry Point."""

import logging
import queue
import signal
import sys
import threading

from randomizr.assembler import build_line_func
from randomizr.config import ConfigError, load_config
from randomizr.pidfile import write_pidfile
from randomizr.scheduler import Scheduler
from randomizr.words import load_dictionary
from randomizr.writer import OutputWriter

# Internal logging to stderr (separate from generated lines on stdout)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [RANDOMIZR] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

REOPEN_SIGNALS = ("SIGHUP", "SIGUSR1")


def install_signal_handlers(shutdown: threading.Event, writer: OutputWriter):
    def _shutdown_handler(sig, _frame):
        logger.info("Shutdown signal received (signal %d), stopping...", sig)
        shutdown.set()

    def _reopen_handler(sig, _frame):
        logger.info("Reopen signal received (signal %d)", sig)
        writer.request_reopen()

    signal.signal(signal.SIGINT, _shutdown_handler)
    signal.signal(signal.SIGTERM, _shutdown_handler)
    for name in REOPEN_SIGNALS:
        # Not every platform has SIGHUP/SIGUSR1.
        if hasattr(signal, name):
            signal.signal(getattr(signal, name), _reopen_handler)


def main(argv=None) -> int:
    try:
        config = load_config(argv)
        logging.getLogger().setLevel(config.log_level)
        logger.info("Starting randomizr with config: %s", config)

        index = load_dictionary(config.dictionary) if config.dictionary else None
        timestamp_func, assembler = build_line_func(config, index)
        shutdown = threading.Event()
        channel = queue.Queue(maxsize=1)
        scheduler = Scheduler(assembler, channel, config.frequency, shutdown)
    except (ConfigError, ValueError) as e:
        logger.error("%s", e)
        return 1

    write_pidfile(config.pidfile)

    writer = OutputWriter(
        channel,
        path=config.output_file,
        truncate=config.truncate,
        reopen_every_line=config.reopen,
        timestamp_func=timestamp_func,
    )
    install_signal_handlers(shutdown, writer)
    writer.start()

    try:
        scheduler.run()
    except KeyboardInterrupt:
        pass
    finally:
        writer.stop()
        writer.join(timeout=5)

    logger.info("Generator stopped. Total lines written: %d", writer.lines_written)
    return 0


if __name__ == "__main__":
    sys.exit(main())
