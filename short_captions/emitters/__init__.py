"""Emitter registry — pluggable output format hub.

WHY: The CLI and the HTTP API need a single lookup to find the right
emitter by name. A central dict makes it trivial to add new formats:
create the emitter class, import it here, add one line.

HOW: EMITTERS maps string keys to emitter *classes* (not instances).
Callers instantiate as needed: ``emitter = EMITTERS["ass_word_cues"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseEmitter subclasses (not instances)
- Every emitter listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from short_captions.emitters.ass_cues import ASSChunkCuesEmitter, ASSWordCuesEmitter
from short_captions.emitters.frame_props import FramePropsEmitter
from short_captions.emitters.srt_cues import SRTChunkCuesEmitter

if TYPE_CHECKING:
    from short_captions.emitters.base import BaseEmitter

EMITTERS: dict[str, type[BaseEmitter]] = {
    "frame_props": FramePropsEmitter,
    "ass_word_cues": ASSWordCuesEmitter,
    "ass_chunk_cues": ASSChunkCuesEmitter,
    "srt_chunks": SRTChunkCuesEmitter,
}
