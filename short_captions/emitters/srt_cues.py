"""SRT cue emitter — one plain caption block per page.

WHY: Some compositors and upload targets only take SRT. SRT cannot
express per-word colour, but it can carry the same pages at the same
times, so a clip burned from SRT still lines up with the frame preview.

HOW: One block per chunk, [chunk.start, chunk.end), text joined with
single spaces. Timestamps go through the canonical millisecond rounding.

RULES:
- SRT indices are 1-based
- No styling markup; casing follows force_uppercase
- Empty track → emit() returns []
- Output suffix: -captions.srt
"""

from __future__ import annotations

from typing import List

from short_captions.core.ir import CaptionTrack
from short_captions.core.style import display_text
from short_captions.core.timing import format_srt_time
from short_captions.emitters.base import BaseEmitter, EmitterOutput


def generate_srt(track: CaptionTrack) -> str:
    """Render the track's chunks as SRT content."""
    lines: List[str] = []
    for i, chunk in enumerate(track.chunks, 1):
        text = " ".join(display_text(w.text, track.style) for w in chunk.words)
        lines.append(str(i))
        lines.append("{} --> {}".format(format_srt_time(chunk.start), format_srt_time(chunk.end)))
        lines.append(text)
        lines.append("")
    return "\n".join(lines)


class SRTChunkCuesEmitter(BaseEmitter):
    """Emitter producing one SRT file of caption pages."""

    media_type = "application/x-subrip"

    @property
    def name(self) -> str:
        return "SRT captions"

    @property
    def suffix(self) -> str:
        return "-captions.srt"

    def emit(self, track: CaptionTrack) -> List[EmitterOutput]:
        if not track.chunks:
            return []
        return [EmitterOutput(
            suffix=self.suffix,
            content=generate_srt(track),
            media_type=self.media_type,
        )]
