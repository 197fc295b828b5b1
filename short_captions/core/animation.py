"""Entrance animation curves for caption pages.

WHY: The frame renderer animates each caption page as it appears. The
curve must be a pure function of the frame offset so any frame can be
rendered on its own (scrubbing, parallel rendering) with the same result.

HOW: spring() is the closed-form step response of a damped harmonic
oscillator (mass, stiffness, damping), the same model motion libraries
use for "spring" easing. Under-damped settings overshoot (bounce);
near-critical settings settle quickly (pop). linear() is a clamped ramp.
entrance_state() maps a curve value to scale / opacity / y-offset.

RULES:
- progress is 0.0 at the first frame of a page and tends to 1.0
- Springs may overshoot 1.0; linear curves are clamped to [0, 1]
- Negative frame offsets are treated as 0
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from short_captions.core.style import EntranceSpec


@dataclass(frozen=True)
class EntranceState:
    """Visual state of a caption page at one frame of its entrance."""

    progress: float
    scale: float
    opacity: float
    translate_y: float


def spring(t: float, damping: float, stiffness: float, mass: float) -> float:
    """Displacement of a unit spring released from 0 towards 1 at time t (s)."""
    if t <= 0:
        return 0.0
    omega = math.sqrt(stiffness / mass)
    zeta = damping / (2.0 * math.sqrt(stiffness * mass))

    if zeta < 1.0:
        omega_d = omega * math.sqrt(1.0 - zeta * zeta)
        envelope = math.exp(-zeta * omega * t)
        return 1.0 - envelope * (
            math.cos(omega_d * t) + (zeta * omega / omega_d) * math.sin(omega_d * t)
        )
    if zeta == 1.0:
        return 1.0 - math.exp(-omega * t) * (1.0 + omega * t)

    # Over-damped
    root = math.sqrt(zeta * zeta - 1.0)
    r1 = -omega * (zeta - root)
    r2 = -omega * (zeta + root)
    c2 = r1 / (r2 - r1)
    c1 = -1.0 - c2
    return 1.0 + c1 * math.exp(r1 * t) + c2 * math.exp(r2 * t)


def linear(t: float, duration_s: float) -> float:
    if duration_s <= 0:
        return 1.0
    return min(1.0, max(0.0, t / duration_s))


def entrance_state(spec: EntranceSpec, frame_offset: int, fps: int) -> EntranceState:
    """Evaluate the entrance curve ``frame_offset`` frames into a page."""
    t = max(0, frame_offset) / float(fps)

    if spec.curve == "spring":
        progress = spring(t, spec.damping, spec.stiffness, spec.mass)
    else:
        progress = linear(t, spec.duration_s)

    scale = spec.from_scale + (1.0 - spec.from_scale) * progress
    translate_y = spec.from_offset_px * (1.0 - progress)
    opacity = min(1.0, max(0.0, progress)) if spec.fade else 1.0

    return EntranceState(
        progress=progress,
        scale=scale,
        opacity=opacity,
        translate_y=translate_y,
    )
