from __future__ import annotations

import math
from dataclasses import dataclass

# Below this, cos/sin are treated as zero when extending.
AXIS_EPSILON = 1e-4
# Extended gradients within this many degrees of an axis snap onto it.
AXIS_SNAP_DEGREES = 15
# Absorbs float noise before truncating extents to whole pixels.
PIXEL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Canvas:
    width: int
    height: int
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class Geometry:
    """Canvas plus the gradient end-point vector ``(rx, ry)`` of length ``r``."""
    canvas: Canvas
    rx: float
    ry: float
    r: int


def clamp_angle(angle: int, extend: bool) -> int:
    """
    Clamp an angle to [0, 360] and normalize it to [0, 360).

    With ``extend`` set, angles within 15 degrees of a multiple of 90 fold
    onto it, avoiding near-degenerate canvases.
    """
    angle = max(0, min(int(angle), 360))
    if extend:
        rem = angle % 90
        if rem < AXIS_SNAP_DEGREES:
            angle -= rem
        elif rem > 90 - AXIS_SNAP_DEGREES:
            angle += 90 - rem
    return angle % 360


def _extent(length: int, trig: float, extend: bool) -> float:
    if extend and abs(trig) > AXIS_EPSILON:
        return length / trig
    return length * trig


def _pixels(extent: float, min_width: int) -> int:
    return max(int(math.floor(abs(extent) + PIXEL_TOLERANCE)), int(min_width))


def resolve_geometry(length: int, angle: float, extend: bool, min_width: int = 4) -> Geometry:
    """
    Compute the canvas and direction vector for a linear gradient.

    The gradient runs from the origin to ``R = (r cos θ, r sin θ)`` with
    ``r = length - 1`` so that the last pixel lands exactly on the end
    color. Negative extents become offsets so that rendering covers the
    gradient's footprint with non-negative canvas coordinates. Angles are
    measured clockwise because image rows grow downward.

    Args:
        length: Gradient length in pixels
        angle: Angle in degrees; 0 runs left to right, 90 top to bottom
        extend: Stretch the canvas so the gradient fills the whole box
        min_width: Lower bound on both canvas dimensions

    Returns:
        Geometry with integer canvas dimensions
    """
    r = length - 1
    theta = math.radians(angle)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)

    w0 = _extent(length, cos_t, extend)
    h0 = _extent(length, sin_t, extend)

    canvas = Canvas(
        width=_pixels(w0, min_width),
        height=_pixels(h0, min_width),
        offset_x=min(w0, 0.0),
        offset_y=min(h0, 0.0),
    )
    return Geometry(canvas=canvas, rx=r * cos_t, ry=r * sin_t, r=r)
