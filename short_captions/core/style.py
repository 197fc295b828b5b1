"""Style configuration and resolution shared by both renderers.

WHY: Callers describe caption looks with a handful of enumerated choices
(font, highlight colour, background treatment, animation, words per
page). Both renderers need the same concrete parameters from those
choices (colour values, outline and box settings, entrance curves), so
the mapping lives in one pure function instead of inside each emitter.

HOW: StyleConfig is a frozen pydantic model. "Before" validators map
unknown or missing enum values to documented defaults (logging a
warning) instead of failing the render. resolve_style() turns a config
into a ResolvedStyle holding both ASS and CSS representations.

RULES:
- highlight_color ∈ White / Yellow / Red / Cyan / Green; unknown → Yellow
- background_style ∈ outline / box / shadow / 3d; unknown → outline
- animation ∈ pop / bounce / slide / fade; unknown → pop
- words_per_chunk ∈ "1" / "3" / "full"; unknown → "3"
- fps must be a positive integer; anything else → DEFAULT_FPS
- Exactly one background treatment applies per render
- The colour table is read-only
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from short_captions.config import (
    DEFAULT_FONT,
    DEFAULT_FPS,
    DEFAULT_WORDS_PER_CHUNK,
    FONT_SCALE,
    SUBTITLE_FONT_SIZE,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class HighlightColor(str, Enum):
    WHITE = "White"
    YELLOW = "Yellow"
    RED = "Red"
    CYAN = "Cyan"
    GREEN = "Green"


class BackgroundStyle(str, Enum):
    OUTLINE = "outline"
    BOX = "box"
    SHADOW = "shadow"
    THREE_D = "3d"


class AnimationStyle(str, Enum):
    POP = "pop"
    BOUNCE = "bounce"
    SLIDE = "slide"
    FADE = "fade"


class WordsPerChunk(str, Enum):
    ONE = "1"
    THREE = "3"
    FULL = "full"


@dataclass(frozen=True)
class ColorValue:
    """One colour in both renderer notations."""

    css: str
    ass: str  # &HAABBGGRR


COLOR_TABLE = MappingProxyType({
    HighlightColor.WHITE: ColorValue(css="#FFFFFF", ass="&H00FFFFFF"),
    HighlightColor.YELLOW: ColorValue(css="#FFFF00", ass="&H0000FFFF"),
    HighlightColor.RED: ColorValue(css="#FF0000", ass="&H000000FF"),
    HighlightColor.CYAN: ColorValue(css="#00FFFF", ass="&H00FFFF00"),
    HighlightColor.GREEN: ColorValue(css="#00FF00", ass="&H0000FF00"),
})

BASE_COLOR = ColorValue(css="#FFFFFF", ass="&H00FFFFFF")
OUTLINE_COLOR = ColorValue(css="#000000", ass="&H00000000")


def _lookup_enum(enum_cls: type, value: Any, default: Enum, field_name: str) -> Enum:
    """Match ``value`` against an enum by value or name, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    text = str(value).strip()
    for member in enum_cls:
        if text.lower() in (member.value.lower(), member.name.lower()):
            return member
    logger.warning(
        "Unknown %s %r, falling back to %r", field_name, value, default.value
    )
    return default


# ---------------------------------------------------------------------------
# StyleConfig
# ---------------------------------------------------------------------------


class StyleConfig(BaseModel):
    """Closed, validated caption configuration for one render.

    Accepts both snake_case names and the camelCase names used by the
    web client (``highlightColor``, ``wordsPerChunk``, ``animationStyle``).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    font: str = Field(default=DEFAULT_FONT, description="Caption font family.")
    font_size: int = Field(
        default=SUBTITLE_FONT_SIZE,
        description="Caption font size in UI points (scaled for the 1080p canvas).",
    )
    highlight_color: HighlightColor = Field(
        default=HighlightColor.YELLOW,
        description="Colour of the currently spoken word.",
    )
    background_style: BackgroundStyle = Field(
        default=BackgroundStyle.OUTLINE,
        description="Background treatment: outline, box, shadow, or 3d.",
    )
    force_uppercase: bool = Field(default=True, description="Render captions in upper case.")
    words_per_chunk: WordsPerChunk = Field(
        default=WordsPerChunk(DEFAULT_WORDS_PER_CHUNK),
        description="Words per caption page: '1', '3', or 'full'.",
    )
    animation: AnimationStyle = Field(
        default=AnimationStyle.POP,
        alias="animationStyle",
        description="Entrance animation: pop, bounce, slide, or fade.",
    )
    fps: int = Field(default=DEFAULT_FPS, description="Frame rate of the discrete domain.")

    @field_validator("font", mode="before")
    @classmethod
    def _font_default(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            return DEFAULT_FONT
        return value.strip()

    @field_validator("font_size", mode="before")
    @classmethod
    def _font_size_default(cls, value: Any) -> int:
        try:
            size = int(value)
        except (TypeError, ValueError):
            logger.warning("Invalid font size %r, using %d", value, SUBTITLE_FONT_SIZE)
            return SUBTITLE_FONT_SIZE
        return size if size > 0 else SUBTITLE_FONT_SIZE

    @field_validator("highlight_color", mode="before")
    @classmethod
    def _color_default(cls, value: Any) -> HighlightColor:
        return _lookup_enum(HighlightColor, value, HighlightColor.YELLOW, "highlight colour")

    @field_validator("background_style", mode="before")
    @classmethod
    def _background_default(cls, value: Any) -> BackgroundStyle:
        return _lookup_enum(BackgroundStyle, value, BackgroundStyle.OUTLINE, "background style")

    @field_validator("animation", mode="before")
    @classmethod
    def _animation_default(cls, value: Any) -> AnimationStyle:
        return _lookup_enum(AnimationStyle, value, AnimationStyle.POP, "animation style")

    @field_validator("words_per_chunk", mode="before")
    @classmethod
    def _words_default(cls, value: Any) -> WordsPerChunk:
        return _lookup_enum(
            WordsPerChunk, value, WordsPerChunk(DEFAULT_WORDS_PER_CHUNK), "words per chunk"
        )

    @field_validator("force_uppercase", mode="before")
    @classmethod
    def _uppercase_default(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() not in ("false", "0", "no", "off", "")
        if value is None:
            return True
        return bool(value)

    @field_validator("fps", mode="before")
    @classmethod
    def _fps_default(cls, value: Any) -> int:
        try:
            fps = int(value)
        except (TypeError, ValueError):
            fps = 0
        if fps <= 0:
            logger.warning("Invalid fps %r, using %d", value, DEFAULT_FPS)
            return DEFAULT_FPS
        return fps


# ---------------------------------------------------------------------------
# Resolved style
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BackgroundSpec:
    """One background treatment in both renderer notations.

    RULES:
    - ass_border_style: 1 = outline + drop shadow, 3 = opaque box
    - ass_blur: > 0 adds a \\blur override (soft shadow)
    - css: style properties for the frame renderer's caption container
    """

    kind: BackgroundStyle
    ass_border_style: int
    ass_outline: int
    ass_shadow: int
    ass_back_colour: str
    ass_blur: int = 0
    css: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class EntranceSpec:
    """Parameters of the entrance curve.

    ``curve`` is "spring" or "linear". Spring curves use damping,
    stiffness and mass; linear curves run for ``duration_s``.
    """

    animation: AnimationStyle
    curve: str
    damping: float = 0.0
    stiffness: float = 0.0
    mass: float = 1.0
    duration_s: float = 0.0
    from_scale: float = 1.0
    from_offset_px: float = 0.0
    fade: bool = False


@dataclass(frozen=True)
class ResolvedStyle:
    font: str
    font_size: int
    cue_font_size: int
    uppercase: bool
    highlight: ColorValue
    base: ColorValue
    outline: ColorValue
    background: BackgroundSpec
    entrance: EntranceSpec


_BACKGROUNDS = MappingProxyType({
    BackgroundStyle.OUTLINE: BackgroundSpec(
        kind=BackgroundStyle.OUTLINE,
        ass_border_style=1,
        ass_outline=5,
        ass_shadow=3,
        ass_back_colour="&H00000000",
        css={
            "WebkitTextStroke": "6px black",
            "textShadow": "4px 4px 0px rgba(0,0,0,0.8)",
        },
    ),
    BackgroundStyle.BOX: BackgroundSpec(
        kind=BackgroundStyle.BOX,
        ass_border_style=3,
        ass_outline=12,
        ass_shadow=3,
        ass_back_colour="&H99000000",
        css={
            "backgroundColor": "rgba(0,0,0,0.6)",
            "padding": "20px 40px",
            "borderRadius": "20px",
        },
    ),
    BackgroundStyle.SHADOW: BackgroundSpec(
        kind=BackgroundStyle.SHADOW,
        ass_border_style=1,
        ass_outline=0,
        ass_shadow=8,
        ass_back_colour="&H00000000",
        ass_blur=4,
        css={"textShadow": "0px 0px 24px rgba(0,0,0,0.9)"},
    ),
    BackgroundStyle.THREE_D: BackgroundSpec(
        kind=BackgroundStyle.THREE_D,
        ass_border_style=1,
        ass_outline=2,
        ass_shadow=6,
        ass_back_colour="&H00000000",
        css={"textShadow": "6px 6px 0px rgba(0,0,0,0.8)"},
    ),
})

_ENTRANCES = MappingProxyType({
    AnimationStyle.POP: EntranceSpec(
        animation=AnimationStyle.POP, curve="spring",
        damping=12.0, stiffness=200.0, mass=0.5, from_scale=0.8,
    ),
    AnimationStyle.BOUNCE: EntranceSpec(
        animation=AnimationStyle.BOUNCE, curve="spring",
        damping=8.0, stiffness=180.0, mass=0.6, from_offset_px=40.0,
    ),
    AnimationStyle.SLIDE: EntranceSpec(
        animation=AnimationStyle.SLIDE, curve="linear",
        duration_s=0.2, from_offset_px=60.0, fade=True,
    ),
    AnimationStyle.FADE: EntranceSpec(
        animation=AnimationStyle.FADE, curve="linear",
        duration_s=0.2, fade=True,
    ),
})


def resolve_style(config: StyleConfig) -> ResolvedStyle:
    """Map a StyleConfig to concrete render parameters.

    Pure function of ``config``; identical configs resolve to equal
    ResolvedStyle values.
    """
    return ResolvedStyle(
        font=config.font,
        font_size=config.font_size,
        cue_font_size=int(round(config.font_size * FONT_SCALE)),
        uppercase=config.force_uppercase,
        highlight=COLOR_TABLE[config.highlight_color],
        base=BASE_COLOR,
        outline=OUTLINE_COLOR,
        background=_BACKGROUNDS[config.background_style],
        entrance=_ENTRANCES[config.animation],
    )


def display_text(text: str, config: StyleConfig) -> str:
    """Word text as displayed: trimmed, upper-cased when configured."""
    text = text.strip()
    return text.upper() if config.force_uppercase else text
