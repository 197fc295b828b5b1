"""Frame props emitter — input for the frame-stepped animated overlay.

WHY: The preview/compositing renderer draws one frame at a time and asks
"which caption page is visible at frame f, how far into its entrance is
it, and which word is lit?". It must get exactly the same pages and
highlight intervals as the burned-in cue file, only on an integer clock.

HOW: to_frame_chunks() converts every boundary once. frame_state()
answers the per-frame question with a binary search plus integer
comparisons. FramePropsEmitter serializes the converted chunks and the
resolved style into one JSON document, validated against the bundled
JSON Schema.

RULES:
- Never re-derives boundaries from seconds after to_frame_chunks()
- Layout is always single-line (whiteSpace: nowrap + maxWidth); this is
  the frame renderer's equivalent of the cue file's auto-fit scale
- Empty track → frame_state() returns None, emit() returns []
- Output suffix: -captions.frames.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import jsonschema

from short_captions.config import CANVAS_HEIGHT, CANVAS_WIDTH, CAPTION_MAX_WIDTH_PCT
from short_captions.core.animation import EntranceState, entrance_state
from short_captions.core.ir import CaptionTrack
from short_captions.core.style import StyleConfig, display_text, resolve_style
from short_captions.core.timing import FrameChunk, find_chunk_index, to_frame, to_frame_chunks
from short_captions.emitters.base import BaseEmitter, EmitterOutput

_SCHEMA_PATH = Path(__file__).resolve().parent / "frame_props.schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def _get_schema() -> dict:
    """Load and cache the frame props JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


@dataclass(frozen=True)
class WordState:
    text: str
    active: bool


@dataclass(frozen=True)
class FrameState:
    """Everything the overlay renderer needs to draw one frame."""

    chunk_index: int
    start_frame: int
    end_frame: int
    entrance: EntranceState
    words: Tuple[WordState, ...]


def frame_state(
    frame_chunks: Sequence[FrameChunk],
    frame: int,
    style: StyleConfig,
    starts: Optional[Sequence[int]] = None,
) -> Optional[FrameState]:
    """Resolve the caption state at ``frame``.

    Args:
        frame_chunks: Output of to_frame_chunks() for this track.
        frame: Frame index to render.
        style: The render's StyleConfig (animation, casing).
        starts: start_frames(frame_chunks), built once when stepping
            through every frame of a track.

    Returns:
        FrameState for the visible page, or None when no page is visible.
    """
    idx = find_chunk_index(frame_chunks, frame, starts)
    if idx is None:
        return None

    fc = frame_chunks[idx]
    resolved = resolve_style(style)
    entrance = entrance_state(resolved.entrance, frame - fc.start_frame, style.fps)
    words = tuple(
        WordState(text=display_text(w.text, style), active=w.active_at(frame))
        for w in fc.words
    )
    return FrameState(
        chunk_index=fc.index,
        start_frame=fc.start_frame,
        end_frame=fc.end_frame,
        entrance=entrance,
        words=words,
    )


def _style_props(style: StyleConfig) -> Dict[str, Any]:
    resolved = resolve_style(style)
    entrance = resolved.entrance
    return {
        "fontFamily": resolved.font,
        "fontSize": resolved.font_size,
        "color": resolved.base.css,
        "highlightColor": resolved.highlight.css,
        "uppercase": resolved.uppercase,
        "background": resolved.background.kind.value,
        "container": dict(resolved.background.css),
        "layout": {
            "whiteSpace": "nowrap",
            "maxWidth": "{}%".format(CAPTION_MAX_WIDTH_PCT),
            "textAlign": "center",
        },
        "entrance": {
            "animation": entrance.animation.value,
            "curve": entrance.curve,
            "damping": entrance.damping,
            "stiffness": entrance.stiffness,
            "mass": entrance.mass,
            "durationInFrames": to_frame(entrance.duration_s, style.fps),
            "fromScale": entrance.from_scale,
            "fromOffsetPx": entrance.from_offset_px,
            "fade": entrance.fade,
        },
    }


def build_frame_props(track: CaptionTrack) -> Dict[str, Any]:
    """Serialize a track into the frame props document (a plain dict)."""
    fps = track.style.fps
    frame_chunks = to_frame_chunks(track.chunks, fps)

    chunks: List[Dict[str, Any]] = []
    for fc in frame_chunks:
        chunks.append({
            "index": fc.index,
            "startFrame": fc.start_frame,
            "endFrame": fc.end_frame,
            "words": [
                {
                    "text": display_text(w.text, track.style),
                    "startFrame": w.start_frame,
                    "endFrame": w.end_frame,
                }
                for w in fc.words
            ],
        })

    last_end = frame_chunks[-1].end_frame if frame_chunks else 0
    duration_frames = max(1, last_end, to_frame(track.duration_s, fps))

    return {
        "fps": fps,
        "width": CANVAS_WIDTH,
        "height": CANVAS_HEIGHT,
        "durationInFrames": duration_frames,
        "style": _style_props(track.style),
        "overlay": {
            "topTitle": track.overlay.top_title,
            "partNumber": track.overlay.part_number,
        },
        "chunks": chunks,
    }


class FramePropsEmitter(BaseEmitter):
    """Emitter producing the frame props JSON for the overlay renderer.

    RULES:
    - One output file, validated against frame_props.schema.json
    - No output for a track without chunks
    """

    media_type = "application/json"

    @property
    def name(self) -> str:
        return "Frame props JSON"

    @property
    def suffix(self) -> str:
        return "-captions.frames.json"

    def emit(self, track: CaptionTrack) -> List[EmitterOutput]:
        """Render the track into one frame props document.

        Raises:
            jsonschema.ValidationError: If the generated document does
                not conform to the bundled schema.
        """
        if not track.chunks:
            return []

        props = build_frame_props(track)
        jsonschema.validate(instance=props, schema=_get_schema())

        return [EmitterOutput(
            suffix=self.suffix,
            content=json.dumps(props, indent=2, ensure_ascii=False),
            media_type=self.media_type,
        )]
