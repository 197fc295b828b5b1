"""Short Captions — caption segmentation and dual-renderer sync engine.

WHY: Vertical short-form clips need word-highlighted captions rendered in
two places: an animated, frame-stepped overlay preview and a subtitle file
that an external compositor burns into the video. Both must show exactly
the same caption pages at exactly the same moments.

HOW: Three-stage pipeline: normalize (repair transcriber timings), chunk
(one deterministic segmentation pass), emit (pluggable emitters that only
project the chunk list into frames, ASS, or SRT). Each stage is
independently testable.

RULES:
- All emitters consume the same CaptionTrack
- Segmentation happens exactly once, in core.chunker
- Adding a new output format = one new emitter module, no core changes
"""

__version__ = "0.1.0"
