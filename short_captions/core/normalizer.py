"""Transcript parsing and word-timing normalization.

WHY: Word timings come from an external transcriber and are untrusted.
They may be negative, inverted, zero-length, out of order, or contain
the silence-merge artifact where one word swallows a multi-second pause.
Every later stage (chunker, frame conversion, cue files) assumes clean,
ordered timings, so all repairs happen once, here.

HOW: parse_words() turns loosely shaped JSON into Word objects.
slice_clip() cuts a clip window out of a longer transcript.
normalize_words() applies five repairs in a fixed order and returns a
new list of the same length.

RULES:
- Never raises on bad data; an empty or garbage input yields []
- Output length == input length (no word is dropped or reordered)
- Long-word fix: end - start > 0.8s  →  start = max(0, end - 0.4)
- Starts are strictly increasing: start_{i+1} >= start_i + MIN_DURATION_S
- Every word has end >= start + MIN_DURATION_S
- Overlaps are trimmed: end_i <= start_{i+1}
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, List, Optional

from short_captions.config import LONG_WORD_MAX_S, LONG_WORD_RESET_S, MIN_DURATION_S
from short_captions.core.ir import Word

logger = logging.getLogger(__name__)


# =============================================================================
# Input Parsing
# =============================================================================

def _to_seconds(value: Any) -> float:
    """Coerce a JSON timestamp to a finite float, 0.0 when unusable."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(seconds):
        return 0.0
    return seconds


def _word_from_dict(item: dict) -> Word:
    text = item.get("word", item.get("text", ""))
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    start = _to_seconds(item.get("start", 0))
    end = _to_seconds(item.get("end", start))
    return Word(text=text.strip(), start=start, end=end)


def _spread_segment(item: dict) -> List[Word]:
    """Spread a segment's text evenly across its time span.

    Used for segments that carry text but no word timings. Each token
    gets (end - start) / n seconds, back to back from the segment start.
    """
    text = item.get("text", "")
    if not isinstance(text, str):
        text = "" if text is None else str(text)
    tokens = text.split()
    if not tokens:
        return []
    start = _to_seconds(item.get("start", 0))
    end = _to_seconds(item.get("end", start))
    per_word = (end - start) / len(tokens)
    logger.debug(
        "Segment %.3f-%.3f has no word timings, spreading %d words evenly",
        start, end, len(tokens),
    )
    return [
        Word(text=token, start=start + i * per_word, end=start + (i + 1) * per_word)
        for i, token in enumerate(tokens)
    ]


def parse_words(data: Any) -> List[Word]:
    """Parse transcriber output into a flat word list.

    WHY: Transcription services wrap word lists differently. The engine
    accepts the common shapes so callers can pass the response through.

    HOW: Accepts three input shapes:
      1. A flat list of word objects
      2. A dict with a top-level "words" list
      3. A dict (or list) of segments with nested "words" lists
    The text field may be "word" or "text". A segment with a multi-word
    "text" and no (or an empty) "words" list is spread evenly over its
    start/end span.

    RULES:
    - Non-dict items are skipped
    - An item keyed "word" is always a single word, never split
    - Unparsable or non-finite numbers become 0.0 (repaired later)
    - None or any other shape yields []

    Args:
        data: Parsed JSON data.

    Returns:
        Flat list of Word objects in input order.
    """
    if isinstance(data, dict):
        if isinstance(data.get("words"), list):
            data = data["words"]
        elif isinstance(data.get("segments"), list):
            data = data["segments"]
        else:
            return []

    if not isinstance(data, list):
        return []

    words: List[Word] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        # Segment with nested words
        if isinstance(item.get("words"), list) and item["words"]:
            for w in item["words"]:
                if isinstance(w, dict):
                    words.append(_word_from_dict(w))
        elif "word" in item:
            words.append(_word_from_dict(item))
        elif "text" in item:
            text = item["text"]
            if isinstance(text, str) and len(text.split()) > 1:
                words.extend(_spread_segment(item))
            else:
                words.append(_word_from_dict(item))

    return words


def slice_clip(
    words: List[Word],
    clip_start: Optional[float] = None,
    clip_end: Optional[float] = None,
) -> List[Word]:
    """Keep the words inside [clip_start, clip_end] and rebase them to 0.

    WHY: Clips are usually cut from a longer recording that was transcribed
    once. The caption track must start at the clip's first frame.

    RULES:
    - A word is kept only if start >= clip_start and end <= clip_end
    - Kept words are shifted by -clip_start
    - A missing bound is open; both missing returns the input unchanged
    """
    if clip_start is None and clip_end is None:
        return list(words)

    lower = clip_start if clip_start is not None else 0.0
    kept = [
        Word(text=w.text, start=w.start - lower, end=w.end - lower)
        for w in words
        if w.start >= lower and (clip_end is None or w.end <= clip_end)
    ]
    logger.debug(
        "Clip %.3f-%s kept %d of %d words",
        lower, "end" if clip_end is None else "{:.3f}".format(clip_end),
        len(kept), len(words),
    )
    return kept


def try_parse_json(raw: str) -> Any:
    """Try to parse JSON, attempting to fix incomplete input.

    WHY: Transcript files are sometimes copied out of larger responses or
    truncated by an interrupted download, leaving closing brackets off.

    HOW:
      1. Normalize line endings, strip whitespace.
      2. Try direct json.loads().
      3. If that fails, strip a trailing comma and try closing brackets.

    Raises:
        ValueError: If JSON cannot be parsed even with attempted fixes.
    """
    raw = raw.replace("\r\n", "\n").replace("\r", "\n").strip()

    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass

    raw_clean = re.sub(r",\s*$", "", raw)
    suffixes = ["]", "}]", "}]}", "]}", "]}}", "]}]"]

    for candidate in (raw_clean, raw):
        for suffix in suffixes:
            try:
                return json.loads(candidate + suffix)
            except json.JSONDecodeError:
                continue

    raise ValueError("Could not parse JSON input (even with attempted fixes)")


# =============================================================================
# Normalization
# =============================================================================

def _repair_word(word: Word) -> Word:
    """Apply the per-word repairs: non-negative times and the long-word fix."""
    start = max(0.0, word.start) if math.isfinite(word.start) else 0.0
    end = max(0.0, word.end) if math.isfinite(word.end) else 0.0

    # Silence-merge artifact: the transcriber folded a pause into the word.
    if end - start > LONG_WORD_MAX_S:
        logger.debug(
            "Long word %r (%.3f-%.3f) treated as silence artifact",
            word.text, start, end,
        )
        start = max(0.0, end - LONG_WORD_RESET_S)

    return Word(text=word.text, start=start, end=end)


def normalize_words(words: List[Word]) -> List[Word]:
    """Repair pathological word timings.

    WHY: Downstream code relies on ordered, strictly positive-duration
    words. Repairing here means the chunker and emitters never need to
    special-case transcriber noise.

    HOW: Two passes. The first repairs each word on its own (negatives,
    long-word fix), then pushes each start to at least MIN_DURATION_S past
    the previous one and each end to at least MIN_DURATION_S past its
    start. The second trims an end that runs past the next word's start.
    Because starts are at least MIN_DURATION_S apart, the trim never
    leaves a word shorter than MIN_DURATION_S.

    Args:
        words: Raw words, possibly empty.

    Returns:
        A new list of the same length with clean timings.
    """
    if not words:
        return []

    repaired: List[Word] = []
    prev_start: Optional[float] = None
    for word in words:
        w = _repair_word(word)
        start = w.start
        if prev_start is not None:
            start = max(start, prev_start + MIN_DURATION_S)
        end = w.end
        if end < start + MIN_DURATION_S:
            end = start + MIN_DURATION_S
        if start != word.start or end != word.end:
            logger.debug(
                "Normalized %r: %.3f-%.3f -> %.3f-%.3f",
                word.text, word.start, word.end, start, end,
            )
        repaired.append(Word(text=w.text, start=start, end=end))
        prev_start = start

    result: List[Word] = []
    for i, word in enumerate(repaired):
        if i + 1 < len(repaired):
            next_start = repaired[i + 1].start
            if word.start < next_start < word.end:
                word = Word(text=word.text, start=word.start, end=next_start)
        result.append(word)

    return result
