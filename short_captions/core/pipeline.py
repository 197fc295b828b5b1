"""Track construction: raw transcript + config → CaptionTrack.

WHY: The CLI, the HTTP API, and tests all need the same sequence of
steps to go from transcriber output to emitter input. One function keeps
that sequence identical everywhere.

HOW: parse_words() → slice_clip() → normalize_words() → chunk_words(),
then bundle the chunks with the style config and overlay.

RULES:
- Pure and synchronous; safe to call concurrently for independent clips
- Accepts raw JSON data or already-built Word objects
- Clip bounds are in source seconds; the track starts at clip_start
- Never raises on bad transcript data
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Optional

from short_captions.core.chunker import chunk_words
from short_captions.core.ir import CaptionTrack, Overlay, Word
from short_captions.core.normalizer import normalize_words, parse_words, slice_clip
from short_captions.core.style import StyleConfig

logger = logging.getLogger(__name__)


def build_track(
    transcript: Any,
    style: Optional[StyleConfig] = None,
    overlay: Optional[Overlay] = None,
    clip_start: Optional[float] = None,
    clip_end: Optional[float] = None,
) -> CaptionTrack:
    """Build a CaptionTrack from a transcript.

    Args:
        transcript: Parsed JSON (see parse_words) or a list of Word objects.
            None is treated as an empty transcript.
        style: Render configuration; defaults to StyleConfig().
        overlay: Optional title / part overlay.
        clip_start: Keep only words starting at or after this time and
            shift them so the clip starts at 0.
        clip_end: Keep only words ending at or before this time.

    Returns:
        CaptionTrack ready for any emitter.
    """
    style = style or StyleConfig()
    overlay = overlay or Overlay()

    if isinstance(transcript, list) and transcript and all(isinstance(w, Word) for w in transcript):
        words = list(transcript)
    else:
        words = parse_words(transcript)

    words = slice_clip(words, clip_start, clip_end)
    if clip_end is not None and overlay.duration_s is None:
        # Overlays span the whole clip, not just its last caption.
        overlay = dataclasses.replace(overlay, duration_s=max(0.0, clip_end - (clip_start or 0.0)))

    normalized = normalize_words(words)
    chunks = chunk_words(normalized, style.words_per_chunk.value)
    logger.debug("Built %d chunks from %d words", len(chunks), len(normalized))

    return CaptionTrack(chunks=tuple(chunks), style=style, overlay=overlay)
