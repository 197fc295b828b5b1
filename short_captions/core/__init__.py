"""Core normalization, segmentation, timing, and style modules.

WHY: The core package contains the engine proper: the IR dataclasses,
the normalizer and chunker that fix every caption boundary, and the
resolvers that turn boundaries and config into render parameters. These
are consumed by all emitters and must stay renderer-agnostic.

HOW: ir.py defines the data structures, normalizer.py repairs raw word
timings, chunker.py groups words into pages, timing.py converts between
seconds and frames, autofit.py and style.py compute visual parameters,
animation.py evaluates entrance curves, pipeline.py wires it together.

RULES:
- No emitter-specific logic here
- Nothing in core raises on bad transcript data
"""
