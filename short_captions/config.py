"""Configuration constants, engine thresholds, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Timing thresholds, the words-per-chunk cap table,
and canvas layout defaults are plain data, not buried in logic, so the
chunker, the timing resolver, and every emitter read the same numbers.

HOW: python-dotenv loads the .env file on import. Engine thresholds are
module-level constants. Layout and render defaults can be overridden
via environment variables.

RULES:
- Engine thresholds (gap, tail pad, long-word fix) are NOT env-overridable;
  both renderers depend on them being identical
- WORDS_PER_CHUNK_CAPS is read-only (MappingProxyType)
- Layout defaults target a 1080x1920 vertical canvas
"""

from __future__ import annotations

import os
from types import MappingProxyType

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Engine thresholds (seconds)
# ---------------------------------------------------------------------------

LONG_WORD_MAX_S = 0.8
"""A single word lasting longer than this is treated as a silence-merge artifact."""

LONG_WORD_RESET_S = 0.4
"""Repaired long words start this long before their end."""

SILENCE_GAP_S = 0.4
"""An inter-word gap larger than this closes the open chunk."""

TAIL_PAD_S = 0.15
"""Extra visible time after the last word of an unstitched chunk."""

MIN_DURATION_S = 0.05
"""Minimum duration for any word, highlight window, or cue."""

AUTOFIT_MAX_CHARS = 20
"""Chunks longer than this (in characters) are scaled down to stay on one line."""

# ---------------------------------------------------------------------------
# Words-per-chunk cap table
# ---------------------------------------------------------------------------

WORDS_PER_CHUNK_CAPS = MappingProxyType({
    "1": 1,
    "3": 3,
    "full": 8,
})

DEFAULT_WORDS_PER_CHUNK = "3"

# ---------------------------------------------------------------------------
# Render and layout defaults
# ---------------------------------------------------------------------------

DEFAULT_FPS = int(os.getenv("CAPTION_FPS", "30"))
CANVAS_WIDTH = int(os.getenv("CANVAS_WIDTH", "1080"))
CANVAS_HEIGHT = int(os.getenv("CANVAS_HEIGHT", "1920"))

DEFAULT_FONT = os.getenv("DEFAULT_FONT", "Impact")
SUBTITLE_FONT_SIZE = int(os.getenv("SUBTITLE_FONT_SIZE", "70"))
SUBTITLE_Y_POS = int(os.getenv("SUBTITLE_Y_POS", "380"))
TITLE_FONT_SIZE = int(os.getenv("TITLE_FONT_SIZE", "90"))
TITLE_Y_POS = int(os.getenv("TITLE_Y_POS", "200"))
PART_FONT_SIZE = int(os.getenv("PART_FONT_SIZE", "130"))
PART_Y_POS = int(os.getenv("PART_Y_POS", "150"))

FONT_SCALE = 1.2
"""Cue-file font sizes are the UI size times this factor (1080p canvas)."""

CAPTION_MAX_WIDTH_PCT = 90
"""Frame renderer max caption width, as a percentage of the canvas width."""

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()
