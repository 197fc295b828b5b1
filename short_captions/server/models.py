"""Pydantic request/response models for the HTTP API.

WHY: The web editor posts a transcript plus its caption settings and
expects caption files back. Pydantic models validate that payload,
serialize the response, and generate the JSON Schema shown in /docs.

HOW: CaptionRequest embeds StyleConfig directly, so the same camelCase
keys the editor already sends (highlightColor, wordsPerChunk,
animationStyle) are accepted here. Enums represent closed sets like
output format names.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match keys in short_captions.emitters.EMITTERS exactly
- Unknown style values never fail validation (StyleConfig falls back)
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from short_captions.core.style import StyleConfig


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """Available output format identifiers.

    RULES:
    - Values match keys in short_captions.emitters.EMITTERS exactly
    """

    frame_props = "frame_props"
    ass_word_cues = "ass_word_cues"
    ass_chunk_cues = "ass_chunk_cues"
    srt_chunks = "srt_chunks"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CaptionRequest(BaseModel):
    """Transcript plus render settings for one clip.

    WHY: The editor sends everything needed for one render in a single
    JSON body: the word timings, the caption style, and the overlay text.

    RULES:
    - transcript accepts a word list, {"words": [...]}, or segments with words
    - style defaults to StyleConfig() when omitted
    - formats defaults to all available formats
    - clipStart / clipEnd cut a window out of a longer transcript
    """

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        json_schema_extra={"examples": [{
            "transcript": [
                {"word": "Hello", "start": 0.0, "end": 0.5},
                {"word": "world", "start": 0.5, "end": 1.0},
            ],
            "style": {"highlightColor": "Yellow", "wordsPerChunk": "3", "animationStyle": "pop"},
            "topTitle": "My clip",
            "partNumber": "Part 1",
        }]},
    )

    transcript: Any = Field(
        default=None,
        description="Word-level transcript: list of {word, start, end} in seconds.",
    )
    style: StyleConfig = Field(
        default_factory=StyleConfig,
        description="Caption style (font, colour, background, animation, page size, fps).",
    )
    top_title: str = Field(default="", description="Title overlay shown at the top of the clip.")
    part_number: str = Field(default="", description="Part-number overlay (e.g. 'Part 1').")
    duration_s: Optional[float] = Field(
        default=None,
        description="Clip duration in seconds; defaults to the end of the last caption.",
    )
    clip_start: Optional[float] = Field(
        default=None,
        ge=0,
        description="Start of the clip in transcript seconds; captions are shifted to start at 0.",
    )
    clip_end: Optional[float] = Field(
        default=None,
        ge=0,
        description="End of the clip in transcript seconds; later words are dropped.",
    )
    formats: Optional[List[OutputFormat]] = Field(
        default=None,
        description="Output formats to produce. Defaults to all available formats.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RenderedFile(BaseModel):
    """One produced caption file."""

    format: OutputFormat = Field(description="Format identifier that produced this file.")
    suffix: str = Field(description="File suffix (e.g. '-captions.srt').")
    media_type: str = Field(description="MIME type of the content.")
    content: str = Field(description="File content as UTF-8 text.")


class CaptionResponse(BaseModel):
    """Result of a caption render.

    WHY: The editor needs the page count to show a summary, and the file
    contents to preview or download.
    """

    chunk_count: int = Field(description="Number of caption pages produced.")
    word_count: int = Field(description="Number of words after normalization.")
    duration_s: float = Field(description="Clip duration in seconds used for overlays.")
    files: List[RenderedFile] = Field(description="Produced files, in request order.")

    model_config = {"json_schema_extra": {
        "examples": [{
            "chunk_count": 1,
            "word_count": 2,
            "duration_s": 1.15,
            "files": [{
                "format": "srt_chunks",
                "suffix": "-captions.srt",
                "media_type": "application/x-subrip",
                "content": "1\n00:00:00,000 --> 00:00:01,150\nHELLO WORLD\n",
            }],
        }],
    }}


class FormatInfo(BaseModel):
    """Description of an available output format.

    WHY: Clients can query the /formats endpoint to discover which
    output formats are supported and what they produce.
    """

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '-captions.srt').")
    media_type: str = Field(description="MIME type of the produced file.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
