"""Tests for the auto-fit font scale of long caption pages.

WHY: Long pages must shrink uniformly instead of wrapping. The scale has
to be exact integer math so the same page always gets the same number.

RULES:
- Character count = trimmed word lengths + one space between words
- Scale = floor(20 / chars * 100) above 20 characters, else 100
"""

from __future__ import annotations

import pytest

from short_captions.core.autofit import autofit_scale, chunk_char_count, scale_for_chars
from short_captions.core.chunker import chunk_words
from short_captions.core.ir import Word


def _chunk(*texts):
    words = [Word(t, i * 0.3, i * 0.3 + 0.3) for i, t in enumerate(texts)]
    return chunk_words(words, "full")[0]


class TestCharCount:

    def test_counts_spaces_between_words(self):
        assert chunk_char_count(_chunk("ab", "cde")) == 6

    def test_trims_word_text(self):
        assert chunk_char_count(_chunk(" ab ", "c")) == 4

    def test_single_word(self):
        assert chunk_char_count(_chunk("hello")) == 5


class TestScale:

    def test_thirty_three_characters(self):
        assert scale_for_chars(33) == 60

    def test_long_two_word_page(self):
        chunk = _chunk("SUPERCALIFRAGILISTIC", "EXPIALIDOCIOUS")
        assert chunk_char_count(chunk) == 35
        assert autofit_scale(chunk) == 57

    @pytest.mark.parametrize("chars", [0, 1, 12, 20])
    def test_short_pages_are_not_scaled(self, chars):
        assert scale_for_chars(chars) == 100

    def test_just_over_the_limit(self):
        assert scale_for_chars(21) == 95

    def test_never_increases(self):
        scales = [scale_for_chars(n) for n in range(1, 200)]
        for prev, nxt in zip(scales, scales[1:]):
            assert nxt <= prev

    def test_strictly_decreasing_near_the_limit(self):
        for n in range(20, 45):
            assert scale_for_chars(n + 1) < scale_for_chars(n)
