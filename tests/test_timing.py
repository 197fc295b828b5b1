"""Tests for the timing resolver (seconds ↔ frames ↔ cue timestamps).

WHY: Both renderers must agree on every boundary to within one frame.
That only holds if every conversion uses the same rounding rule and the
frame-domain lookup finds exactly the page the seconds domain would.

HOW: Unit checks of the rounding primitive and timestamp formatters,
then cross-domain checks over the sample track: every frame's lookup is
compared against a brute-force scan and against the seconds domain.

RULES:
- Rounding is half-up, never banker's rounding
- Cross-domain checks allow at most one frame of difference
"""

from __future__ import annotations

import pytest

from short_captions.core.pipeline import build_track
from short_captions.core.style import StyleConfig
from short_captions.core.timing import (
    _round_half_up,
    chunk_at_time,
    chunk_visible_at,
    find_chunk_index,
    format_ass_time,
    format_srt_time,
    start_frames,
    start_times,
    to_centiseconds,
    to_frame,
    to_frame_chunks,
    to_milliseconds,
    word_active_at,
)

FPS = 30


def _linear_scan(frame_chunks, frame):
    for i, fc in enumerate(frame_chunks):
        if fc.visible_at(frame):
            return i
    return None


# ---------------------------------------------------------------------------
# Canonical conversions
# ---------------------------------------------------------------------------


class TestRounding:
    """One rounding rule for every domain."""

    @pytest.mark.parametrize("value,expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (2.4999, 2), (-0.4, 0), (0.0, 0),
    ])
    def test_half_up(self, value, expected):
        assert _round_half_up(value) == expected

    def test_to_frame(self):
        assert to_frame(0.0, FPS) == 0
        assert to_frame(0.5, FPS) == 15
        assert to_frame(1.0, 24) == 24
        assert to_frame(2.0, 60) == 120

    def test_to_centiseconds(self):
        assert to_centiseconds(0.125) == 13
        assert to_centiseconds(1.0) == 100
        assert to_centiseconds(-2.0) == 0

    def test_to_milliseconds(self):
        assert to_milliseconds(0.5) == 500
        assert to_milliseconds(0.0005) == 1
        assert to_milliseconds(-1.0) == 0


class TestTimestampFormats:
    """ASS and SRT timestamp strings."""

    def test_ass_time(self):
        assert format_ass_time(0.0) == "0:00:00.00"
        assert format_ass_time(3661.5) == "1:01:01.50"
        assert format_ass_time(59.999) == "0:01:00.00"

    def test_srt_time(self):
        assert format_srt_time(0.0) == "00:00:00,000"
        assert format_srt_time(3661.5) == "01:01:01,500"
        assert format_srt_time(1.25) == "00:00:01,250"


# ---------------------------------------------------------------------------
# Continuous domain
# ---------------------------------------------------------------------------


class TestChunkAtTime:
    """Visibility is half-open: [start, end)."""

    def test_chunk_visible_at_edges(self, sample_track):
        chunk = sample_track.chunks[0]
        assert chunk_visible_at(chunk, chunk.start)
        assert not chunk_visible_at(chunk, chunk.end)

    def test_word_active_at_edges(self, sample_track):
        window = sample_track.chunks[0].windows[1]
        assert word_active_at(window, window.start)
        assert word_active_at(window, (window.start + window.end) / 2)
        assert not word_active_at(window, window.end)

    def test_first_page_at_zero(self, sample_track):
        assert chunk_at_time(sample_track.chunks, 0.0) == 0

    def test_stitched_boundary_belongs_to_next_page(self, sample_track):
        boundary = sample_track.chunks[0].end
        assert chunk_at_time(sample_track.chunks, boundary) == 1

    def test_silence_shows_nothing(self, sample_track):
        assert chunk_at_time(sample_track.chunks, 2.2) is None

    def test_outside_track(self, sample_track):
        assert chunk_at_time(sample_track.chunks, -1.0) is None
        assert chunk_at_time(sample_track.chunks, 60.0) is None

    def test_empty_track(self):
        assert chunk_at_time([], 1.0) is None


# ---------------------------------------------------------------------------
# Discrete domain
# ---------------------------------------------------------------------------


class TestFrameChunks:
    """Boundaries are converted once and reused."""

    def test_one_frame_chunk_per_chunk(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        assert [fc.index for fc in frame_chunks] == [0, 1, 2, 3]
        assert [len(fc.words) for fc in frame_chunks] == [3, 3, 3, 3]

    def test_stitched_pages_touch_in_frames(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        for chunk, fc, nxt in zip(sample_track.chunks, frame_chunks, frame_chunks[1:]):
            if chunk.stitched:
                assert fc.end_frame == nxt.start_frame
            else:
                assert fc.end_frame <= nxt.start_frame

    def test_boundaries_within_one_frame_of_seconds(self, sample_track):
        for fps in (24, 30, 60):
            frame_chunks = to_frame_chunks(sample_track.chunks, fps)
            for chunk, fc in zip(sample_track.chunks, frame_chunks):
                assert abs(fc.start_frame - chunk.start * fps) <= 0.5 + 1e-9
                assert abs(fc.end_frame - chunk.end * fps) <= 0.5 + 1e-9
                for window, fw in zip(chunk.windows, fc.words):
                    assert abs(fw.start_frame - window.start * fps) <= 0.5 + 1e-9
                    assert abs(fw.end_frame - window.end * fps) <= 0.5 + 1e-9


class TestFindChunkIndex:
    """Binary search agrees with a brute-force scan on every frame."""

    def test_matches_linear_scan(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        last = frame_chunks[-1].end_frame
        for frame in range(-3, last + 10):
            assert find_chunk_index(frame_chunks, frame) == _linear_scan(frame_chunks, frame)

    def test_silence_frame(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        assert find_chunk_index(frame_chunks, to_frame(2.2, FPS)) is None

    def test_agrees_with_seconds_domain(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        for frame in range(0, frame_chunks[-1].end_frame):
            idx = find_chunk_index(frame_chunks, frame)
            # A frame near a boundary may land on either side; check one
            # frame inward on each side instead of the exact edge.
            t = frame / float(FPS)
            seconds_idx = chunk_at_time(sample_track.chunks, t)
            if idx != seconds_idx:
                neighbours = {
                    chunk_at_time(sample_track.chunks, t - 1.0 / FPS),
                    chunk_at_time(sample_track.chunks, t + 1.0 / FPS),
                }
                assert idx in neighbours

    def test_empty(self):
        assert find_chunk_index([], 0) is None

    def test_precomputed_starts_give_same_answer(self, sample_track):
        frame_chunks = to_frame_chunks(sample_track.chunks, FPS)
        starts = start_frames(frame_chunks)
        assert starts == tuple(fc.start_frame for fc in frame_chunks)
        for frame in range(0, frame_chunks[-1].end_frame + 5):
            assert find_chunk_index(frame_chunks, frame, starts) == find_chunk_index(frame_chunks, frame)

    def test_precomputed_start_times(self, sample_track):
        starts = start_times(sample_track.chunks)
        assert starts[0] == 0.0
        assert chunk_at_time(sample_track.chunks, 2.6, starts) == 2
        assert chunk_at_time(sample_track.chunks, 2.2, starts) is None


# ---------------------------------------------------------------------------
# Broken transcripts
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("size", ["1", "3", "full"])
class TestCrossDomainOnMessyInput:
    """Frame and seconds domains agree for every transcript case."""

    def test_pages_never_overlap_in_frames(self, messy_words, size):
        track = build_track(messy_words, style=StyleConfig(words_per_chunk=size))
        frame_chunks = to_frame_chunks(track.chunks, FPS)
        for chunk, fc, nxt in zip(track.chunks, frame_chunks, frame_chunks[1:]):
            if chunk.stitched:
                assert fc.end_frame == nxt.start_frame
            else:
                assert fc.end_frame <= nxt.start_frame

    def test_lookup_matches_linear_scan(self, messy_words, size):
        track = build_track(messy_words, style=StyleConfig(words_per_chunk=size))
        frame_chunks = to_frame_chunks(track.chunks, FPS)
        starts = start_frames(frame_chunks)
        for frame in range(-2, frame_chunks[-1].end_frame + 3):
            assert find_chunk_index(frame_chunks, frame, starts) == _linear_scan(frame_chunks, frame)

    @pytest.mark.parametrize("fps", [24, 30, 60])
    def test_boundaries_within_one_frame(self, messy_words, size, fps):
        track = build_track(messy_words, style=StyleConfig(words_per_chunk=size, fps=fps))
        for chunk, fc in zip(track.chunks, to_frame_chunks(track.chunks, fps)):
            assert abs(fc.start_frame - chunk.start * fps) <= 1
            assert abs(fc.end_frame - chunk.end * fps) <= 1
            for window, fw in zip(chunk.windows, fc.words):
                assert fw.start_frame <= fw.end_frame
                assert abs(fw.start_frame - window.start * fps) <= 1
