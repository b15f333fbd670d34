"""Dictionary words indexed by length for constant-time random selection."""

import logging
import random

from randomizr.config import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 32


def byte_length(text: str) -> int:
    """Length of ``text`` once written out as UTF-8."""
    return len(text.encode("utf-8"))


class DictionaryError(ConfigError):
    """Raised when a dictionary file cannot be loaded."""


class WordIndex:
    """Buckets of words keyed by exact UTF-8 byte length.

    Every word in bucket ``n`` encodes to exactly ``n`` bytes. Lookups by
    length are O(1); a word of a given length is chosen uniformly from
    its bucket.
    """

    def __init__(self, words=None, rng: random.Random | None = None):
        self._buckets: dict[int, list[str]] = {}
        self._rng = rng or random.Random()
        for word in words or ():
            self.add(word)

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __contains__(self, word) -> bool:
        return word in self._buckets.get(byte_length(word), ())

    def add(self, word: str):
        word = word.strip()
        # Entries with inner whitespace would split into non-dictionary tokens.
        if not word or len(word.split()) != 1:
            return
        self._buckets.setdefault(byte_length(word), []).append(word)

    def read_all(self, stream):
        """Add every line of a text stream as a word."""
        for line in stream:
            self.add(line)

    def lengths(self) -> list[int]:
        return sorted(self._buckets)

    def bucket(self, n: int) -> list[str]:
        return list(self._buckets.get(n, ()))

    def random_word_of_length(self, n: int) -> str | None:
        """Return a random word of exactly ``n`` bytes, or None."""
        words = self._buckets.get(n)
        if not words:
            return None
        return self._rng.choice(words)

    def longest_word_at_most(self, n: int) -> str | None:
        """Return a random word from the longest bucket not longer than ``n``."""
        fitting = [length for length in self._buckets if length <= n]
        if not fitting:
            return None
        return self.random_word_of_length(max(fitting))

    def random_word_below(self, n: int, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> str | None:
        """Return a random word shorter than ``n`` bytes.

        Samples lengths uniformly in ``[0, n)`` up to ``max_attempts`` times,
        then falls back to the longest word shorter than ``n``. Returns None
        only when no such word exists.
        """
        if n <= 1:
            return None
        for _ in range(max_attempts):
            word = self.random_word_of_length(self._rng.randrange(n))
            if word is not None:
                return word
        return self.longest_word_at_most(n - 1)


def load_dictionary(path: str, rng: random.Random | None = None) -> WordIndex:
    """Read a newline-delimited word file into a WordIndex."""
    index = WordIndex(rng=rng)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            index.read_all(f)
    except OSError as e:
        raise DictionaryError(f"unable to read dictionary file {path}: {e}") from e
    if not index:
        raise DictionaryError(f"dictionary file {path} contains no words")
    logger.info(
        "Loaded %d words from %s (%d distinct lengths)",
        len(index), path, len(index.lengths()),
    )
    return index
