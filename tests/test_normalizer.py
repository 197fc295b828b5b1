"""Tests for transcript parsing and word-timing normalization.

WHY: Transcriber output is untrusted. Every later stage assumes ordered,
positive-duration words, so the repairs must hold for every kind of
broken input without ever raising.

HOW: Feed hand-built Word lists and raw JSON shapes through
parse_words(), try_parse_json() and normalize_words() and check the
repaired timings against hand-computed values.

RULES:
- Output length always equals input length
- Float comparisons use pytest.approx
"""

from __future__ import annotations

import math

import pytest

from short_captions.config import MIN_DURATION_S
from short_captions.core.ir import Word
from short_captions.core.normalizer import normalize_words, parse_words, slice_clip, try_parse_json


# ---------------------------------------------------------------------------
# parse_words
# ---------------------------------------------------------------------------


class TestParseWords:
    """Accepts the common transcriber response shapes."""

    def test_flat_list(self):
        words = parse_words([
            {"word": "Hello", "start": 0.0, "end": 0.4},
            {"word": "world", "start": 0.4, "end": 0.9},
        ])
        assert [w.text for w in words] == ["Hello", "world"]
        assert words[1].start == 0.4
        assert words[1].end == 0.9

    def test_words_key(self):
        words = parse_words({"words": [{"word": "a", "start": 0, "end": 1}]})
        assert len(words) == 1
        assert words[0].text == "a"

    def test_segments_with_nested_words(self):
        data = {"segments": [
            {"text": "a b", "words": [
                {"word": "a", "start": 0.0, "end": 0.2},
                {"word": "b", "start": 0.2, "end": 0.4},
            ]},
            {"text": "c", "words": [{"word": "c", "start": 1.0, "end": 1.3}]},
        ]}
        words = parse_words(data)
        assert [w.text for w in words] == ["a", "b", "c"]

    def test_text_key_is_accepted(self):
        words = parse_words([{"text": " hi ", "start": 0.1, "end": 0.3}])
        assert words[0].text == "hi"

    def test_non_dict_items_are_skipped(self):
        words = parse_words([1, "x", None, {"word": "ok", "start": 0, "end": 0.5}])
        assert [w.text for w in words] == ["ok"]

    def test_unparsable_numbers_become_zero(self):
        words = parse_words([{"word": "a", "start": "abc", "end": None}])
        assert words[0].start == 0.0
        assert words[0].end == 0.0

    def test_non_finite_numbers_become_zero(self):
        words = parse_words([{"word": "a", "start": float("nan"), "end": float("inf")}])
        assert words[0].start == 0.0
        assert words[0].end == 0.0

    def test_segment_without_words_is_spread_evenly(self):
        words = parse_words({"segments": [
            {"text": "one two three four", "start": 2.0, "end": 4.0},
        ]})
        assert [w.text for w in words] == ["one", "two", "three", "four"]
        assert [(w.start, w.end) for w in words] == [
            (2.0, 2.5), (2.5, 3.0), (3.0, 3.5), (3.5, 4.0),
        ]

    def test_segment_with_empty_words_list_falls_back_to_text(self):
        words = parse_words([{"text": "a b", "start": 1.0, "end": 2.0, "words": []}])
        assert [(w.text, w.start, w.end) for w in words] == [("a", 1.0, 1.5), ("b", 1.5, 2.0)]

    def test_mixed_segments(self):
        words = parse_words({"segments": [
            {"text": "hi there", "words": [{"word": "hi", "start": 0.0, "end": 0.3},
                                          {"word": "there", "start": 0.3, "end": 0.6}]},
            {"text": "no timings here", "start": 1.0, "end": 1.6},
        ]})
        assert [w.text for w in words] == ["hi", "there", "no", "timings", "here"]
        assert words[3].start == pytest.approx(1.2)

    def test_word_key_is_never_split(self):
        words = parse_words([{"word": "New York", "start": 0.0, "end": 1.0}])
        assert [w.text for w in words] == ["New York"]

    @pytest.mark.parametrize("data", [None, "garbage", 42, {}, {"words": "nope"}])
    def test_unknown_shapes_yield_empty(self, data):
        assert parse_words(data) == []


# ---------------------------------------------------------------------------
# try_parse_json
# ---------------------------------------------------------------------------


class TestTryParseJson:
    """Recovers truncated transcript files."""

    def test_valid_json(self):
        assert try_parse_json('[{"word": "a", "start": 0, "end": 1}]') == [
            {"word": "a", "start": 0, "end": 1},
        ]

    def test_missing_closing_bracket(self):
        data = try_parse_json('[{"word": "a", "start": 0, "end": 1}')
        assert data == [{"word": "a", "start": 0, "end": 1}]

    def test_trailing_comma_and_missing_bracket(self):
        data = try_parse_json('[{"word": "a", "start": 0, "end": 1},\n')
        assert data == [{"word": "a", "start": 0, "end": 1}]

    def test_missing_list_and_object_close(self):
        data = try_parse_json('{"words": [{"word": "a", "start": 0, "end": 1}')
        assert data == {"words": [{"word": "a", "start": 0, "end": 1}]}

    def test_windows_line_endings(self):
        assert try_parse_json('[\r\n{"word": "a"}\r\n]') == [{"word": "a"}]

    def test_unrecoverable_raises_value_error(self):
        with pytest.raises(ValueError):
            try_parse_json("this is not json")


# ---------------------------------------------------------------------------
# normalize_words
# ---------------------------------------------------------------------------


class TestLongWordFix:
    """A word longer than 0.8s is a silence-merge artifact."""

    def test_long_word_start_is_reset(self):
        result = normalize_words([Word("waited", 2.0, 3.0)])
        assert result[0].start == pytest.approx(2.6)
        assert result[0].end == pytest.approx(3.0)

    def test_word_at_threshold_is_untouched(self):
        result = normalize_words([Word("ok", 1.0, 1.75)])
        assert result[0].start == 1.0
        assert result[0].end == 1.75

    def test_reset_never_goes_negative(self):
        result = normalize_words([Word("a", -5.0, 0.2)])
        assert result[0].start >= 0.0


class TestTimestampRepair:
    """Negative, inverted, zero-length and out-of-order timings."""

    def test_negative_times_are_clamped(self):
        result = normalize_words([Word("a", -1.0, -0.5)])
        assert result[0].start == 0.0
        assert result[0].end == pytest.approx(MIN_DURATION_S)

    def test_inverted_word_gets_minimum_duration(self):
        result = normalize_words([Word("a", 1.0, 0.5)])
        assert result[0].start == 1.0
        assert result[0].end == pytest.approx(1.0 + MIN_DURATION_S)

    def test_zero_length_word_gets_minimum_duration(self):
        result = normalize_words([Word("a", 2.0, 2.0)])
        assert result[0].end - result[0].start == pytest.approx(MIN_DURATION_S)

    def test_starts_strictly_increase(self):
        result = normalize_words([
            Word("a", 1.0, 1.2),
            Word("b", 0.5, 0.7),
            Word("c", 1.5, 1.8),
        ])
        starts = [w.start for w in result]
        assert starts == sorted(starts)
        assert result[1].start == pytest.approx(1.0 + MIN_DURATION_S)
        assert result[1].end == pytest.approx(1.0 + 2 * MIN_DURATION_S)

    def test_identical_timestamps_are_spread_apart(self):
        result = normalize_words([Word("a", 1.0, 1.0), Word("b", 1.0, 1.0), Word("c", 1.0, 1.0)])
        assert [w.start for w in result] == pytest.approx([1.0, 1.05, 1.10])
        for prev, nxt in zip(result, result[1:]):
            assert prev.end <= nxt.start
            assert nxt.start - prev.start >= MIN_DURATION_S - 1e-9

    def test_shared_start_keeps_minimum_duration_after_trim(self):
        result = normalize_words([Word("a", 1.0, 1.2), Word("b", 1.0, 1.05)])
        assert result[0].end == result[1].start
        assert result[0].end - result[0].start == pytest.approx(MIN_DURATION_S)

    def test_overlap_is_trimmed_to_next_start(self):
        result = normalize_words([Word("a", 0.0, 0.6), Word("b", 0.4, 0.8)])
        assert result[0].end == pytest.approx(0.4)
        assert result[1].start == pytest.approx(0.4)

    def test_every_word_has_positive_duration(self, make_words):
        raw = make_words([
            ("a", 0.0, 0.0), ("b", -1.0, 3.0), ("c", 0.2, 0.1), ("d", 0.1, 0.15),
        ])
        for word in normalize_words(raw):
            assert word.end > word.start
            assert math.isfinite(word.start)


class TestNormalizeShape:
    """Normalization never drops, adds, or reorders words."""

    def test_empty_input(self):
        assert normalize_words([]) == []

    def test_length_and_text_preserved(self, sample_words):
        result = normalize_words(sample_words)
        assert [w.text for w in result] == [w.text for w in sample_words]

    def test_clean_input_is_unchanged(self, sample_words):
        assert normalize_words(sample_words) == sample_words

    def test_input_is_not_mutated(self):
        raw = [Word("a", 2.0, 3.0)]
        normalize_words(raw)
        assert raw[0].start == 2.0


# ---------------------------------------------------------------------------
# slice_clip
# ---------------------------------------------------------------------------


class TestSliceClip:
    """Cutting a clip out of a longer transcript."""

    def test_no_bounds_returns_copy(self, sample_words):
        result = slice_clip(sample_words)
        assert result == sample_words
        assert result is not sample_words

    def test_words_inside_window_are_rebased(self, sample_words):
        result = slice_clip(sample_words, 2.5, 3.25)
        assert [w.text for w in result] == ["that", "pop", "on"]
        assert result[0].start == pytest.approx(0.0)
        assert result[-1].end == pytest.approx(0.75)

    def test_words_crossing_a_bound_are_dropped(self, sample_words):
        result = slice_clip(sample_words, 1.0, 3.0)
        assert [w.text for w in result] == ["captions", "that"]

    def test_open_end(self, sample_words):
        result = slice_clip(sample_words, clip_start=3.55)
        assert [w.text for w in result] == ["single", "frame"]

    def test_open_start_keeps_times(self, sample_words):
        result = slice_clip(sample_words, clip_end=0.45)
        assert [(w.text, w.start) for w in result] == [("This", 0.0), ("is", 0.30)]

    def test_empty_window(self, sample_words):
        assert slice_clip(sample_words, 5.0, 4.0) == []
