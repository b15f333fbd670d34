"""Shared pytest fixtures for the randomizr test suite."""

from __future__ import annotations

import random

import pytest

from randomizr.words import WordIndex

SAMPLE_WORDS = [
    "a", "an", "ox", "cat", "dog", "sun", "tree", "log", "file",
    "stream", "rotate", "shipper", "parser", "pipeline", "timestamp",
    "generator", "dictionary",
]


@pytest.fixture()
def rng() -> random.Random:
    """Seeded RNG so failures are reproducible."""
    return random.Random(1234)


@pytest.fixture()
def dict_file(tmp_path):
    """A newline-delimited dictionary file with some blank and padded lines."""
    path = tmp_path / "words.txt"
    path.write_text("\n".join(SAMPLE_WORDS[:5]) + "\n\n  " + "\n".join(SAMPLE_WORDS[5:]) + "  \n")
    return path


@pytest.fixture()
def word_index(rng) -> WordIndex:
    return WordIndex(SAMPLE_WORDS, rng=rng)


@pytest.fixture()
def sample_words() -> list[str]:
    return list(SAMPLE_WORDS)
