"""Auto-fit sizer: shrink long caption pages instead of wrapping them.

WHY: Vertical captions read best on a single line. When a page has too
many characters for a 1080px-wide canvas, the cue file scales the whole
line down uniformly rather than letting the compositor wrap it.

HOW: Count visible characters (trimmed words plus one space between
each pair). Above AUTOFIT_MAX_CHARS the scale is floor(20 / total * 100),
computed with integer division so the result is exact and deterministic.

RULES:
- Scale is an integer percentage, 100 when total <= AUTOFIT_MAX_CHARS
- Scale never increases as total grows; it drops at every step up to 2x the limit
- The frame renderer gets the same guarantee from layout constraints
  (nowrap + max width) and does not use this number
"""

from __future__ import annotations

from short_captions.config import AUTOFIT_MAX_CHARS
from short_captions.core.ir import Chunk


def chunk_char_count(chunk: Chunk) -> int:
    """Visible characters in a chunk, counting inter-word spaces."""
    total = sum(len(w.text.strip()) for w in chunk.words)
    return total + max(0, len(chunk.words) - 1)


def autofit_scale(chunk: Chunk) -> int:
    """Uniform font scale (percent) that keeps ``chunk`` on one line."""
    return scale_for_chars(chunk_char_count(chunk))


def scale_for_chars(total_chars: int) -> int:
    if total_chars <= AUTOFIT_MAX_CHARS:
        return 100
    return (AUTOFIT_MAX_CHARS * 100) // total_chars
