"""Shared test fixtures for the short_captions test suite.

WHY: Most test modules need the same small transcripts: the three-word
"THIS IS VIRAL" clip used to pin chunk boundaries, and a longer sample
with fast speech and one real pause. Centralizing them here keeps the
expected numbers in one place.

HOW: Plain module-level data plus pytest fixtures returning fresh Word
lists, a default StyleConfig, and a pre-built CaptionTrack.

RULES:
- Times are chosen so the expected chunk boundaries are easy to read
- SAMPLE_WORDS has exactly one pause longer than the silence gap
  (after "captions", 1.80 → 2.50)
- TRANSCRIPT_CASES pairs the sample with degenerate transcriber output
- Fixtures return new objects on every call
"""

from typing import Callable, List, Sequence, Tuple

import pytest

from short_captions.core.ir import CaptionTrack, Overlay, Word
from short_captions.core.pipeline import build_track
from short_captions.core.style import StyleConfig


# ---------------------------------------------------------------------------
# Sample transcripts
# ---------------------------------------------------------------------------

VIRAL_WORDS: List[Tuple[str, float, float]] = [
    ("THIS", 0.0, 0.5),
    ("IS", 0.5, 1.0),
    ("VIRAL", 1.0, 1.5),
]

SAMPLE_WORDS: List[Tuple[str, float, float]] = [
    ("This",     0.00, 0.30),
    ("is",       0.30, 0.45),
    ("how",      0.45, 0.70),
    ("you",      0.70, 0.90),
    ("make",     0.90, 1.20),
    ("captions", 1.20, 1.80),
    ("that",     2.50, 2.70),
    ("pop",      2.70, 3.10),
    ("on",       3.10, 3.25),
    ("every",    3.25, 3.55),
    ("single",   3.55, 3.90),
    ("frame",    3.90, 4.40),
]

# Transcriber output as it arrives in the wild. Every case must come out of
# build_track() with the same guarantees as the clean sample.
TRANSCRIPT_CASES = {
    "sample": SAMPLE_WORDS,
    "identical_timestamps": [("A", 1.0, 1.0), ("B", 1.0, 1.0), ("C", 1.0, 1.0)],
    "shared_start": [("a", 1.0, 1.2), ("b", 1.0, 1.05), ("c", 1.0, 1.3)],
    "zero_length_burst": [("w{}".format(i), 2.0, 2.0) for i in range(10)],
    "unsorted": [("c", 2.0, 2.3), ("a", 0.5, 0.8), ("b", 1.0, 1.2), ("d", 0.0, 0.1)],
    "negative": [("a", -1.0, -0.5), ("b", -0.2, 0.3), ("c", 0.3, 0.6)],
    "inverted": [("a", 0.5, 0.2), ("b", 0.6, 0.4), ("c", 1.0, 0.9)],
    "long_word": [("So", 0.0, 0.3), ("umm", 0.3, 3.0), ("okay", 3.0, 3.2), ("then", 3.2, 5.0)],
}


def words_from(rows: Sequence[Tuple[str, float, float]]) -> List[Word]:
    return [Word(text=text, start=start, end=end) for text, start, end in rows]


@pytest.fixture
def make_words() -> Callable[[Sequence[Tuple[str, float, float]]], List[Word]]:
    """Factory turning (text, start, end) tuples into Word objects."""
    return words_from


@pytest.fixture
def viral_words() -> List[Word]:
    """The three back-to-back words THIS / IS / VIRAL."""
    return words_from(VIRAL_WORDS)


@pytest.fixture
def sample_words() -> List[Word]:
    """Twelve words of fast speech with one pause after 'captions'."""
    return words_from(SAMPLE_WORDS)


@pytest.fixture
def sample_json() -> List[dict]:
    """SAMPLE_WORDS as raw transcriber JSON (word/start/end objects)."""
    return [{"word": text, "start": start, "end": end} for text, start, end in SAMPLE_WORDS]


@pytest.fixture
def default_style() -> StyleConfig:
    return StyleConfig()


@pytest.fixture
def sample_track(sample_words, default_style) -> CaptionTrack:
    """SAMPLE_WORDS chunked three words per page with the default style.

    Expected pages:
      0: This is how         0.00 → 0.70 (stitched)
      1: you make captions   0.70 → 1.95 (pause, tail pad)
      2: that pop on         2.50 → 3.25 (stitched)
      3: every single frame  3.25 → 4.55 (end, tail pad)
    """
    return build_track(sample_words, style=default_style)


@pytest.fixture
def empty_track(default_style) -> CaptionTrack:
    return build_track([], style=default_style, overlay=Overlay())


@pytest.fixture(params=sorted(TRANSCRIPT_CASES))
def messy_words(request) -> List[Word]:
    """Each entry of TRANSCRIPT_CASES as raw, unrepaired Word objects."""
    return words_from(TRANSCRIPT_CASES[request.param])
