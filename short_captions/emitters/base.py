"""Abstract base emitter and output container.

WHY: Every output format consumes the same CaptionTrack but produces
different file content. This base class enforces a consistent interface
so the CLI and the HTTP API can work with any emitter generically.

HOW: BaseEmitter is an ABC requiring a ``name`` property,
a ``suffix`` property and an ``emit()`` method. EmitterOutput is a plain
dataclass that bundles a file suffix with its content and MIME type.

RULES:
- Emitters never compute segmentation; they only project track.chunks
- ``emit()`` returns a list, empty when there is nothing to render
- ``suffix`` starts with a hyphen, e.g. ``"-captions.srt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from short_captions.core.ir import CaptionTrack


@dataclass
class EmitterOutput:
    """One output file produced by an emitter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-captions.words.ass"`` → ``"clip-captions.words.ass"``.
        content: The file content as a string.
        media_type: MIME type for the content, e.g. ``"text/x-ssa"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseEmitter(ABC):
    """Abstract base for all caption emitters.

    To add a new output format:
    1. Create a new file in emitters/
    2. Subclass BaseEmitter
    3. Implement name, suffix and emit()
    4. Register in EMITTERS dict in emitters/__init__.py
    """

    media_type = "text/plain"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'ASS per-word cues'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """File suffix of the produced file."""

    @abstractmethod
    def emit(self, track: CaptionTrack) -> list[EmitterOutput]:
        """Render the track into zero or more output files.

        Args:
            track: Chunks, style and overlay for one clip.

        Returns:
            List of EmitterOutput objects; empty for an empty track.
        """
