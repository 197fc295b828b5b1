"""ASS cue-file emitters — subtitle files for the burn-in compositor.

WHY: The final video is composited by an external tool that burns an
ASS subtitle file into the frames. ASS has no native "highlight the word
being spoken" feature, so progressive highlighting has to be encoded
either as one cue per word or as timed override codes inside one cue
per page. Either way, the boundaries must match the frame props exactly.

HOW: Both emitters share one header builder (canvas resolution, one
style record per role: Subtitle, TopTitle, PartNum) and one overlay
builder (title / part events spanning the clip). Chunk and window times
are converted to centiseconds once per boundary through the canonical
timing functions.

  ASSWordCuesEmitter  — per word: [window.start, window.end), whole page
                        text with the active word in the highlight colour
  ASSChunkCuesEmitter — per page: [chunk.start, chunk.end), each word
                        switches colour via \\t(t,t,\\c...) at its window
                        boundaries, relative to the event start

RULES:
- Every Dialogue line starts with the auto-fit \\fscx\\fscy scale
- WrapStyle 2: the compositor never wraps a caption onto two lines
- Word text has braces escaped, backslashes swapped for a look-alike, and
  is upper-cased when configured
- Empty track without overlay text → emit() returns []
"""

from __future__ import annotations

from abc import abstractmethod
from typing import List

from short_captions.config import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    FONT_SCALE,
    PART_FONT_SIZE,
    PART_Y_POS,
    SUBTITLE_Y_POS,
    TITLE_FONT_SIZE,
    TITLE_Y_POS,
)
from short_captions.core.autofit import autofit_scale
from short_captions.core.ir import CaptionTrack, Chunk
from short_captions.core.style import ResolvedStyle, StyleConfig, display_text, resolve_style
from short_captions.core.timing import format_ass_time, to_centiseconds
from short_captions.emitters.base import BaseEmitter, EmitterOutput

_STYLE_FORMAT = (
    "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
    "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, "
    "ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, "
    "MarginL, MarginR, MarginV, Encoding"
)

_EVENT_FORMAT = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"


_BACKSLASH_LOOKALIKE = "⧵"


def escape_ass_text(text: str) -> str:
    """Escape ASS control characters in plain text.

    Braces become \\{ and \\}. ASS has no escape for a literal backslash
    (a doubled one still renders \\N, \\n and \\h as breaks), so it is
    replaced with the look-alike U+29F5.
    """
    text = " ".join(text.split())
    text = text.replace("\\", _BACKSLASH_LOOKALIKE)
    return text.replace("{", "\\{").replace("}", "\\}")


def _color_tag(ass_color: str) -> str:
    return "\\c{}&".format(ass_color)


def _style_line(
    name: str,
    resolved: ResolvedStyle,
    font_size: int,
    primary: str,
    secondary: str,
    alignment: int,
    margin_lr: int,
    margin_v: int,
) -> str:
    bg = resolved.background
    return "Style: {},{},{},{},{},{},{},-1,0,0,0,100,100,0,0,{},{},{},{},{},{},{},1".format(
        name, resolved.font, font_size, primary, secondary, resolved.outline.ass,
        bg.ass_back_colour, bg.ass_border_style, bg.ass_outline, bg.ass_shadow,
        alignment, margin_lr, margin_lr, margin_v,
    )


def build_header(style: StyleConfig) -> str:
    """ASS script header: script info, style records, events format line."""
    resolved = resolve_style(style)
    lines = [
        "[Script Info]",
        "ScriptType: v4.00+",
        "PlayResX: {}".format(CANVAS_WIDTH),
        "PlayResY: {}".format(CANVAS_HEIGHT),
        "ScaledBorderAndShadow: yes",
        "WrapStyle: 2",
        "",
        "[V4+ Styles]",
        _STYLE_FORMAT,
        _style_line(
            "Subtitle", resolved, resolved.cue_font_size,
            resolved.highlight.ass, resolved.base.ass, 2, 15, SUBTITLE_Y_POS,
        ),
        _style_line(
            "TopTitle", resolved, int(round(TITLE_FONT_SIZE * FONT_SCALE)),
            resolved.base.ass, resolved.base.ass, 8, 40, TITLE_Y_POS,
        ),
        _style_line(
            "PartNum", resolved, int(round(PART_FONT_SIZE * FONT_SCALE)),
            resolved.base.ass, resolved.base.ass, 2, 40, PART_Y_POS,
        ),
        "",
        "[Events]",
        _EVENT_FORMAT,
    ]
    return "\n".join(lines) + "\n"


def dialogue(start: float, end: float, style_name: str, text: str) -> str:
    return "Dialogue: 0,{},{},{},,0,0,0,,{}".format(
        format_ass_time(start), format_ass_time(end), style_name, text,
    )


def overlay_events(track: CaptionTrack) -> List[str]:
    """TopTitle / PartNum events spanning the whole clip."""
    events: List[str] = []
    end = track.duration_s
    if end <= 0:
        return events
    if track.overlay.top_title:
        events.append(dialogue(0.0, end, "TopTitle", escape_ass_text(track.overlay.top_title.upper())))
    if track.overlay.part_number:
        events.append(dialogue(0.0, end, "PartNum", escape_ass_text(track.overlay.part_number)))
    return events


def _line_prefix(chunk: Chunk, resolved: ResolvedStyle) -> str:
    scale = autofit_scale(chunk)
    tags = "\\fscx{0}\\fscy{0}".format(scale)
    if resolved.background.ass_blur:
        tags += "\\blur{}".format(resolved.background.ass_blur)
    return "{" + tags + "}"


def word_cue_events(track: CaptionTrack) -> List[str]:
    """One Dialogue per word; the whole page is repeated in every cue."""
    resolved = resolve_style(track.style)
    events: List[str] = []
    for chunk in track.chunks:
        prefix = _line_prefix(chunk, resolved)
        texts = [escape_ass_text(display_text(w.text, track.style)) for w in chunk.words]
        for i, window in enumerate(chunk.windows):
            parts = []
            for j, text in enumerate(texts):
                color = resolved.highlight.ass if j == i else resolved.base.ass
                parts.append("{" + _color_tag(color) + "}" + text)
            events.append(dialogue(window.start, window.end, "Subtitle", prefix + " ".join(parts)))
    return events


def chunk_cue_events(track: CaptionTrack) -> List[str]:
    """One Dialogue per page with timed colour switches per word."""
    resolved = resolve_style(track.style)
    base = _color_tag(resolved.base.ass)
    highlight = _color_tag(resolved.highlight.ass)
    events: List[str] = []

    for chunk in track.chunks:
        chunk_start_cs = to_centiseconds(chunk.start)
        chunk_end_cs = to_centiseconds(chunk.end)
        parts = []
        for word, window in zip(chunk.words, chunk.windows):
            rel_start = (to_centiseconds(window.start) - chunk_start_cs) * 10
            rel_end = (to_centiseconds(window.end) - chunk_start_cs) * 10
            if rel_start <= 0:
                tags = highlight
            else:
                tags = base + "\\t({0},{0},{1})".format(rel_start, highlight)
            if rel_end < (chunk_end_cs - chunk_start_cs) * 10:
                tags += "\\t({0},{0},{1})".format(rel_end, base)
            text = escape_ass_text(display_text(word.text, track.style))
            parts.append("{" + tags + "}" + text)
        events.append(dialogue(chunk.start, chunk.end, "Subtitle", _line_prefix(chunk, resolved) + " ".join(parts)))

    return events


class _ASSEmitter(BaseEmitter):
    media_type = "text/x-ssa"

    @abstractmethod
    def _cue_events(self, track: CaptionTrack) -> List[str]:
        """Dialogue lines for the caption pages, in time order."""

    def emit(self, track: CaptionTrack) -> List[EmitterOutput]:
        if not track.chunks and track.overlay.is_empty:
            return []
        events = overlay_events(track) + self._cue_events(track)
        content = build_header(track.style) + "".join(e + "\n" for e in events)
        return [EmitterOutput(suffix=self.suffix, content=content, media_type=self.media_type)]


class ASSWordCuesEmitter(_ASSEmitter):
    """ASS file with one cue per word (progressive highlight by repetition)."""

    @property
    def name(self) -> str:
        return "ASS per-word cues"

    @property
    def suffix(self) -> str:
        return "-captions.words.ass"

    def _cue_events(self, track: CaptionTrack) -> List[str]:
        return word_cue_events(track)


class ASSChunkCuesEmitter(_ASSEmitter):
    """ASS file with one cue per page and timed colour override codes."""

    @property
    def name(self) -> str:
        return "ASS per-chunk cues"

    @property
    def suffix(self) -> str:
        return "-captions.chunks.ass"

    def _cue_events(self, track: CaptionTrack) -> List[str]:
        return chunk_cue_events(track)
