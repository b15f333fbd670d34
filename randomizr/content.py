"""Line content generators: random alphanumeric noise or dictionary words."""

import random
import string

from randomizr.words import WordIndex, byte_length

# Two leading spaces weight the output slightly toward word-like gaps.
ALPHABET = "  " + string.ascii_lowercase + string.ascii_uppercase + string.digits

# Below this many bytes left, the dictionary generator asks for one word
# of exactly the remaining length and stops.
TERMINAL_THRESHOLD = 8


class RandomStringGenerator:
    """Produces exactly ``n`` characters drawn uniformly from ALPHABET."""

    def __init__(self, rng: random.Random | None = None, alphabet: str = ALPHABET):
        self._rng = rng or random.Random()
        self._alphabet = alphabet

    def generate(self, n: int) -> str:
        if n <= 0:
            return ""
        return "".join(self._rng.choices(self._alphabet, k=n))


class DictionaryGenerator:
    """Produces space-separated dictionary words totalling at most ``n`` bytes."""

    def __init__(self, index: WordIndex, threshold: int = TERMINAL_THRESHOLD):
        self._index = index
        self._threshold = threshold

    def generate(self, n: int) -> str:
        words: list[str] = []
        used = 0
        while True:
            separator = 1 if words else 0
            remaining = n - used - separator
            if remaining <= 0:
                break

            if remaining < self._threshold:
                word = self._index.random_word_of_length(remaining)
                if word is None:
                    word = self._index.longest_word_at_most(remaining)
                if word is not None:
                    words.append(word)
                break

            word = self._index.random_word_below(remaining)
            if word is None:
                break
            words.append(word)
            used += separator + byte_length(word)

        return " ".join(words)


def make_content_generator(index: WordIndex | None = None, rng: random.Random | None = None):
    """Pick the dictionary generator when words are loaded, random noise otherwise."""
    if index:
        return DictionaryGenerator(index)
    return RandomStringGenerator(rng=rng)
