"""Combine a timestamp formatter and a content generator into whole lines."""

import logging
import random

from randomizr.config import Config, ConfigError, LengthSpec
from randomizr.content import make_content_generator
from randomizr.timestamps import get_timestamp_func, measure_width

logger = logging.getLogger(__name__)

SEPARATOR = " "


class LineAssembler:
    """Produces ``"<timestamp> <content>\\n"`` lines.

    The content budget is resolved once here. For a fixed length ``L`` the
    text before the newline is ``L`` bytes: timestamp, one space, content.
    In random mode each line gets a fresh budget up to ``max_random_length``.
    """

    def __init__(
        self,
        timestamp_func,
        generator,
        length_spec: LengthSpec,
        max_random_length: int = 80,
        rng: random.Random | None = None,
    ):
        self._timestamp = timestamp_func
        self._generator = generator
        self._rng = rng or random.Random()
        self.timestamp_width = measure_width(timestamp_func)

        overhead = self.timestamp_width + len(SEPARATOR)
        limit = max_random_length if length_spec.random else length_spec.length
        if limit < overhead:
            sample = timestamp_func()
            raise ConfigError(
                f"line length {limit} is too small for timestamps like {sample!r}"
            )

        if length_spec.random:
            self.content_budget = None
            self._max_budget = limit - overhead
        else:
            self.content_budget = limit - overhead
            self._max_budget = self.content_budget

    def _budget(self) -> int:
        if self.content_budget is not None:
            return self.content_budget
        return self._rng.randint(0, self._max_budget)

    def next_line(self) -> str:
        return f"{self._timestamp()}{SEPARATOR}{self._generator.generate(self._budget())}\n"

    __call__ = next_line


def build_line_func(config: Config, index=None):
    """Resolve config into ``(timestamp_func, assembler)``; raises ConfigError."""
    timestamp_func = get_timestamp_func(config.ts_format)
    generator = make_content_generator(index)
    assembler = LineAssembler(
        timestamp_func,
        generator,
        config.line_length,
        max_random_length=config.max_random_length,
    )
    logger.info(
        "Line format: timestamp width %d, %s content, length %s",
        assembler.timestamp_width,
        "dictionary" if index else "random-string",
        config.line_length,
    )
    return timestamp_func, assembler
