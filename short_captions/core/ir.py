"""Intermediate representation dataclasses for caption tracks.

WHY: The transcriber returns a flat list of word timings with no
structure. Both renderers (the frame-stepped overlay and the cue-file
compositor) need the same caption pages with the same boundaries. The IR
is the single, well-typed form that every emitter consumes, so no emitter
ever re-derives segmentation.

HOW: Five frozen dataclasses form a hierarchy:
  Word            — one word with start/end in seconds
  HighlightWindow — the half-open interval during which a word is active
  Chunk           — consecutive words shown together as one caption page
  Overlay         — optional title / part-number text for the clip
  CaptionTrack    — chunks + style + overlay, the emitter input

RULES:
- All times are float seconds
- Everything is frozen; a track is built once per render and never mutated
- Chunk.words is never empty and Chunk.windows has one entry per word
- Chunk.start == Chunk.words[0].start
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from short_captions.core.style import StyleConfig


@dataclass(frozen=True)
class Word:
    """A single transcribed word.

    Used both for untrusted transcriber input and for normalized output;
    only the normalizer guarantees ``end > start`` and ordered starts.
    """

    text: str
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class HighlightWindow:
    """Half-open ``[start, end)`` interval during which a word is highlighted."""

    start: float
    end: float

    def contains(self, t: float) -> bool:
        return self.start <= t < self.end


@dataclass(frozen=True)
class Chunk:
    """A group of consecutive words displayed together as one caption page.

    WHY: Caption pages are the unit both renderers agree on. The chunk
    carries its visible interval and the per-word highlight windows so
    that renderers only compare against "now", never recompute timing.

    RULES:
    - words: 1..N normalized words, in transcript order
    - start: first word's start
    - end: next chunk's start when stitched, else last word end + tail pad
    - windows: one HighlightWindow per word, computed by the chunker
    - stitched: True when end was extended to the next chunk's start
    """

    words: Tuple[Word, ...]
    start: float
    end: float
    windows: Tuple[HighlightWindow, ...]
    stitched: bool = False

    @property
    def text(self) -> str:
        return " ".join(w.text.strip() for w in self.words)


@dataclass(frozen=True)
class Overlay:
    """Static clip overlays drawn for the whole clip (title and part number)."""

    top_title: str = ""
    part_number: str = ""
    duration_s: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return not self.top_title and not self.part_number


@dataclass(frozen=True)
class CaptionTrack:
    """The complete input for every emitter.

    RULES:
    - chunks: time-ordered and non-overlapping
    - style: the validated StyleConfig for this render
    - overlay: optional title / part text (may be empty)
    """

    chunks: Tuple[Chunk, ...]
    style: "StyleConfig"
    overlay: Overlay = Overlay()

    @property
    def duration_s(self) -> float:
        """Clip duration: explicit overlay duration, else the last chunk end."""
        if self.overlay.duration_s is not None:
            return self.overlay.duration_s
        if self.chunks:
            return self.chunks[-1].end
        return 0.0
