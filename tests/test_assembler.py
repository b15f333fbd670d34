"""Tests for line assembly and content budgeting."""

import random
import re

import pytest

from randomizr.assembler import LineAssembler, build_line_func
from randomizr.config import Config, ConfigError, LengthSpec
from randomizr.content import DictionaryGenerator, RandomStringGenerator
from randomizr.timestamps import get_timestamp_func
from randomizr.words import WordIndex


def constant_ts(value):
    return lambda: value


class TestFixedLength:
    @pytest.mark.parametrize("fmt", ["", "ns", "ms", "epoch", "unix", "%Y-%m-%d %H:%M:%S"])
    @pytest.mark.parametrize("length", [40, 80, 256])
    def test_random_string_lines_are_exact(self, fmt, length, rng):
        ts = get_timestamp_func(fmt)
        assembler = LineAssembler(ts, RandomStringGenerator(rng=rng), LengthSpec(length))
        for _ in range(10):
            line = assembler.next_line()
            assert line.endswith("\n")
            assert len(line) == length + 1

    def test_default_format_forty_bytes(self, rng):
        assembler = LineAssembler(
            get_timestamp_func(""), RandomStringGenerator(rng=rng), LengthSpec(40)
        )
        assert assembler.timestamp_width == 13
        assert assembler.content_budget == 26
        line = assembler()
        assert len(line) == 41
        match = re.fullmatch(r"(\d{2}:\d{2}:\d{2} \d{4}) (.{26})\n", line)
        assert match is not None
        assert re.fullmatch(r"[ a-zA-Z0-9]{26}", match.group(2))

    def test_dictionary_lines_within_budget(self, word_index, sample_words):
        assembler = LineAssembler(
            constant_ts("12:00:00 0000"), DictionaryGenerator(word_index), LengthSpec(60)
        )
        for _ in range(50):
            line = assembler.next_line()
            assert line.startswith("12:00:00 0000 ")
            content = line[len("12:00:00 0000 "):-1]
            assert len(content) <= 60 - 13 - 1
            for word in content.split():
                assert word in sample_words

    def test_too_small_for_timestamp(self, rng):
        with pytest.raises(ConfigError, match="too small for timestamps"):
            LineAssembler(get_timestamp_func(""), RandomStringGenerator(rng=rng), LengthSpec(10))

    def test_exactly_timestamp_plus_separator(self, rng):
        assembler = LineAssembler(constant_ts("abc"), RandomStringGenerator(rng=rng), LengthSpec(4))
        assert assembler.content_budget == 0
        assert assembler.next_line() == "abc \n"


class TestRandomLength:
    def test_budget_varies_within_bound(self):
        assembler = LineAssembler(
            constant_ts("0123456789"),
            RandomStringGenerator(rng=random.Random(1)),
            LengthSpec(length=None, random=True),
            max_random_length=40,
            rng=random.Random(2),
        )
        assert assembler.content_budget is None
        lengths = {len(assembler.next_line()) for _ in range(500)}
        assert min(lengths) >= len("0123456789 \n")
        assert max(lengths) <= 41
        assert len(lengths) > 5

    def test_max_random_length_too_small(self, rng):
        with pytest.raises(ConfigError):
            LineAssembler(
                constant_ts("0123456789"),
                RandomStringGenerator(rng=rng),
                LengthSpec(length=None, random=True),
                max_random_length=5,
            )


class TestBuildLineFunc:
    def test_random_string_from_config(self):
        ts, assembler = build_line_func(Config(line_length=LengthSpec(50)))
        assert len(ts()) == 13
        assert len(assembler()) == 51

    def test_dictionary_from_config(self, word_index, sample_words):
        _, assembler = build_line_func(Config(line_length=LengthSpec(70), ts_format="epoch"), word_index)
        line = assembler()
        assert len(line) <= 71
        assert all(word in sample_words for word in line.split()[1:])

    def test_config_error_propagates(self):
        with pytest.raises(ConfigError):
            build_line_func(Config(line_length=LengthSpec(5)))

    def test_empty_index_uses_random_strings(self):
        _, assembler = build_line_func(Config(line_length=LengthSpec(30)), WordIndex())
        assert len(assembler()) == 31


class TestByteBudget:
    def test_non_ascii_dictionary_line_within_length(self):
        index = WordIndex(["café", "élan", "Ångström"], rng=random.Random(21))
        assembler = LineAssembler(
            get_timestamp_func(""), DictionaryGenerator(index), LengthSpec(40)
        )
        for _ in range(200):
            assert len(assembler.next_line().encode("utf-8")) <= 41

    def test_non_ascii_timestamp_width_in_bytes(self, rng):
        assembler = LineAssembler(constant_ts("é"), RandomStringGenerator(rng=rng), LengthSpec(10))
        assert assembler.timestamp_width == 2
        line = assembler.next_line()
        assert len(line.encode("utf-8")) == 11
