"""Caption page segmentation — the single source of truth for boundaries.

WHY: The frame renderer and the cue files must agree on every caption
page and every highlight interval. Computing segmentation once, here, and
handing the result to both emitters removes any chance of the two drifting
apart through slightly different constants or loop shapes.

HOW: A single left-to-right pass keeps one open chunk. After appending a
word, the chunk closes when it reached the cap, when the silence before
the next word exceeds SILENCE_GAP_S, or when there is no next word.
Closing on count during fast speech stitches the chunk's end to the next
word's start (no dead air between pages); closing on silence or at the
end of the transcript adds TAIL_PAD_S after the last word instead.

RULES:
- Input must already be normalized (see core.normalizer)
- Cap: "1" → 1, "3" → 3, "full" → 8 words; unknown values use "3"
- Count is checked before gap; closure is idempotent per word
- Highlight windows: word i runs until word i+1 starts; the last word runs
  until its end + TAIL_PAD_S, clipped to the chunk end
- Any window with end <= start is widened to MIN_DURATION_S
- A chunk whose end had to be widened is never marked stitched
- Empty input → empty list
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from short_captions.config import (
    DEFAULT_WORDS_PER_CHUNK,
    MIN_DURATION_S,
    SILENCE_GAP_S,
    TAIL_PAD_S,
    WORDS_PER_CHUNK_CAPS,
)
from short_captions.core.ir import Chunk, HighlightWindow, Word


def chunk_cap(words_per_chunk: str) -> int:
    """Maximum words per chunk for a words-per-chunk setting."""
    key = str(getattr(words_per_chunk, "value", words_per_chunk))
    return WORDS_PER_CHUNK_CAPS.get(key, WORDS_PER_CHUNK_CAPS[DEFAULT_WORDS_PER_CHUNK])


def _highlight_windows(words: Sequence[Word], chunk_end: float) -> List[HighlightWindow]:
    """Compute the connected highlight windows for the words of one chunk."""
    windows: List[HighlightWindow] = []
    last = len(words) - 1
    for i, word in enumerate(words):
        if i < last:
            end = words[i + 1].start
        else:
            end = min(word.end + TAIL_PAD_S, chunk_end)
        if end <= word.start:
            end = word.start + MIN_DURATION_S
        windows.append(HighlightWindow(start=word.start, end=end))
    return windows


def _close_chunk(words: List[Word], next_word: Optional[Word], gap: float) -> Chunk:
    start = words[0].start
    stitched = next_word is not None and gap <= SILENCE_GAP_S
    if stitched:
        end = next_word.start
    else:
        end = words[-1].end + TAIL_PAD_S
    if end <= start:
        # Widened ends no longer meet the next chunk.
        end = start + MIN_DURATION_S
        stitched = False

    return Chunk(
        words=tuple(words),
        start=start,
        end=end,
        windows=tuple(_highlight_windows(words, end)),
        stitched=stitched,
    )


def chunk_words(words: Sequence[Word], words_per_chunk: str = DEFAULT_WORDS_PER_CHUNK) -> List[Chunk]:
    """Group normalized words into caption chunks.

    Args:
        words: Normalized words (see normalize_words), possibly empty.
        words_per_chunk: "1", "3", or "full".

    Returns:
        Time-ordered, non-overlapping chunks covering every input word
        exactly once, in order.
    """
    cap = chunk_cap(words_per_chunk)
    chunks: List[Chunk] = []
    current: List[Word] = []

    for i, word in enumerate(words):
        current.append(word)
        next_word = words[i + 1] if i + 1 < len(words) else None
        gap = next_word.start - word.end if next_word is not None else 0.0

        if len(current) >= cap or gap > SILENCE_GAP_S or next_word is None:
            chunks.append(_close_chunk(current, next_word, gap))
            current = []

    return chunks
