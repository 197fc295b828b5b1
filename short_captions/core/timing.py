"""Timing resolver: continuous-seconds and discrete-frame time domains.

WHY: The frame renderer steps through integer frames while the cue files
carry float seconds rendered as centiseconds or milliseconds. If each
consumer rounded boundaries its own way, captions would flicker or drift
by a frame. All conversions therefore go through one rounding rule, and
each boundary is converted exactly once.

HOW: _round_half_up() is the only rounding primitive. to_frame(),
to_centiseconds() and to_milliseconds() build on it. to_frame_chunks()
converts a chunk list into FrameChunk/FrameWord values whose integer
boundaries are reused for every comparison afterwards. Because a stitched
chunk's end is the same float as the next chunk's start, both round to
the same frame and pages never overlap or gap in the frame domain.

RULES:
- Rounding: floor(x + 0.5), never banker's rounding
- Continuous visibility: start <= t < end
- Discrete visibility: start_frame <= frame < end_frame
- Frame lookup uses binary search over time-ordered, non-overlapping chunks;
  callers stepping through many frames build the start index once
"""

from __future__ import annotations

import bisect
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from short_captions.core.ir import Chunk, HighlightWindow


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# =============================================================================
# Canonical conversions
# =============================================================================

def to_frame(seconds: float, fps: int) -> int:
    """Convert seconds to a frame index. The single seconds→frame path."""
    return _round_half_up(seconds * fps)


def to_centiseconds(seconds: float) -> int:
    """Convert seconds to integer centiseconds (ASS resolution)."""
    return max(0, _round_half_up(seconds * 100))


def to_milliseconds(seconds: float) -> int:
    """Convert seconds to integer milliseconds (SRT resolution)."""
    return max(0, _round_half_up(seconds * 1000))


def format_ass_time(seconds: float) -> str:
    """Format seconds as an ASS timestamp: H:MM:SS.cc"""
    cs = to_centiseconds(seconds)
    s, cs = divmod(cs, 100)
    m, s = divmod(s, 60)
    h, m = divmod(m, 60)
    return "{}:{:02d}:{:02d}.{:02d}".format(h, m, s, cs)


def format_srt_time(seconds: float) -> str:
    """Format seconds as an SRT timestamp: HH:MM:SS,mmm"""
    ms = to_milliseconds(seconds)
    s, ms = divmod(ms, 1000)
    m, s = divmod(s, 60)
    h, m = divmod(m, 60)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(h, m, s, ms)


# =============================================================================
# Continuous domain
# =============================================================================

def chunk_visible_at(chunk: Chunk, t: float) -> bool:
    return chunk.start <= t < chunk.end


def word_active_at(window: HighlightWindow, t: float) -> bool:
    return window.start <= t < window.end


def start_times(chunks: Sequence[Chunk]) -> Tuple[float, ...]:
    """Sorted chunk starts for chunk_at_time(); build once per track."""
    return tuple(c.start for c in chunks)


def chunk_at_time(
    chunks: Sequence[Chunk],
    t: float,
    starts: Optional[Sequence[float]] = None,
) -> Optional[int]:
    """Index of the chunk visible at time ``t`` (seconds), or None.

    ``starts`` is start_times(chunks); it is rebuilt when omitted.
    """
    if starts is None:
        starts = start_times(chunks)
    idx = bisect.bisect_right(starts, t) - 1
    if idx >= 0 and chunk_visible_at(chunks[idx], t):
        return idx
    return None


# =============================================================================
# Discrete domain
# =============================================================================

@dataclass(frozen=True)
class FrameWord:
    """A word with its highlight window converted to frames."""

    text: str
    start_frame: int
    end_frame: int

    def active_at(self, frame: int) -> bool:
        return self.start_frame <= frame < self.end_frame


@dataclass(frozen=True)
class FrameChunk:
    """A chunk with its visible interval converted to frames.

    RULES:
    - Built only by to_frame_chunks(); never re-derived from seconds
    - A chunk shorter than half a frame may have start_frame == end_frame
      and is then never visible
    """

    index: int
    start_frame: int
    end_frame: int
    words: Tuple[FrameWord, ...]

    def visible_at(self, frame: int) -> bool:
        return self.start_frame <= frame < self.end_frame


def to_frame_chunks(chunks: Sequence[Chunk], fps: int) -> List[FrameChunk]:
    """Convert every chunk and highlight boundary to frames, once.

    Args:
        chunks: Chunker output.
        fps: Frames per second (positive).

    Returns:
        One FrameChunk per chunk, same order.
    """
    result: List[FrameChunk] = []
    for i, chunk in enumerate(chunks):
        frame_words = tuple(
            FrameWord(
                text=word.text,
                start_frame=to_frame(window.start, fps),
                end_frame=to_frame(window.end, fps),
            )
            for word, window in zip(chunk.words, chunk.windows)
        )
        result.append(FrameChunk(
            index=i,
            start_frame=to_frame(chunk.start, fps),
            end_frame=to_frame(chunk.end, fps),
            words=frame_words,
        ))
    return result


def start_frames(frame_chunks: Sequence[FrameChunk]) -> Tuple[int, ...]:
    """Sorted start frames for find_chunk_index(); build once per track."""
    return tuple(fc.start_frame for fc in frame_chunks)


def find_chunk_index(
    frame_chunks: Sequence[FrameChunk],
    frame: int,
    starts: Optional[Sequence[int]] = None,
) -> Optional[int]:
    """Binary-search the chunk visible at ``frame``.

    Args:
        frame_chunks: Output of to_frame_chunks().
        frame: Frame index.
        starts: start_frames(frame_chunks). Pass it when looking up many
            frames; it is rebuilt on every call otherwise.

    Returns:
        Position in ``frame_chunks`` of the visible chunk, or None when
        the frame falls in a silence or outside the track.
    """
    if starts is None:
        starts = start_frames(frame_chunks)
    idx = bisect.bisect_right(starts, frame) - 1
    if idx >= 0 and frame_chunks[idx].visible_at(frame):
        return idx
    return None
