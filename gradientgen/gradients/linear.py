from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ..colors.argb import ColorARGB
from .diffusion import diffusion_corrections, round_half_away
from .geometry import Geometry, resolve_geometry

logger = logging.getLogger(__name__)

# Per-channel upper bounds in (a, r, g, b) order.
CHANNEL_MAXIMA = np.array(ColorARGB.maxima, dtype=np.float64)


@dataclass(frozen=True)
class LinearGradientSpec:
    start: ColorARGB
    end: ColorARGB
    length: int
    angle: int = 0
    extend: bool = False

    def geometry(self, min_width: int = 4) -> Geometry:
        return resolve_geometry(self.length, self.angle, self.extend, min_width)


# Pixels blended per block; bounds the float working set of a render.
BLOCK_PIXELS = 1 << 16


def projection_fraction(
    geometry: Geometry, col_start: int = 0, col_stop: Optional[int] = None
) -> NDArray:
    """
    Position of every pixel along the gradient vector, shape (height, columns).

    ``m = (x*Rx + y*Ry) / r^2`` where ``(x, y)`` are canvas coordinates
    shifted by the canvas offset. A zero-length gradient yields 0 everywhere.
    ``col_start``/``col_stop`` select a band of columns; the default is the
    whole canvas.
    """
    canvas = geometry.canvas
    if col_stop is None:
        col_stop = canvas.width
    if geometry.r == 0:
        return np.zeros((canvas.height, col_stop - col_start), dtype=np.float64)

    x = np.arange(col_start, col_stop, dtype=np.float64) + canvas.offset_x
    y = np.arange(canvas.height, dtype=np.float64) + canvas.offset_y
    den = float(geometry.r * geometry.r)
    return (geometry.rx * x[np.newaxis, :] + geometry.ry * y[:, np.newaxis]) / den


def blend_linear_gradient(
    spec: LinearGradientSpec,
    geometry: Geometry,
    col_start: int = 0,
    col_stop: Optional[int] = None,
) -> NDArray:
    """Unrounded (height, columns, 4) float channel values in (a, r, g, b) order."""
    m = np.clip(projection_fraction(geometry, col_start, col_stop), 0.0, 1.0)[..., np.newaxis]
    start = np.array(spec.start.channels, dtype=np.float64)
    end = np.array(spec.end.channels, dtype=np.float64)
    return start * (1.0 - m) + end * m


def quantize(
    blended: NDArray, error_diffusion: bool = True, errors: Optional[NDArray] = None
) -> NDArray:
    """
    Round blended channel values to integers in their valid ranges.

    With error diffusion the rounding residuals are carried through a single
    accumulator per channel, scanned column by column (every row of column 0,
    then column 1, ...). Changing that order changes the output.

    ``errors`` holds the four accumulators between calls, so quantizing
    adjacent column bands in order gives the same result as one call.
    """
    rounded = round_half_away(blended)

    if error_diffusion:
        height, width, channels = blended.shape
        # column-major scan: (width, height, ch) flattened
        residuals = (blended - rounded).transpose(1, 0, 2).reshape(-1, channels)
        corrections = diffusion_corrections(residuals, errors)
        rounded += corrections.reshape(width, height, channels).transpose(1, 0, 2)

    return np.clip(rounded, 0, CHANNEL_MAXIMA).astype(np.uint8)


def render_linear_gradient(
    spec: LinearGradientSpec,
    geometry: Optional[Geometry] = None,
    error_diffusion: bool = True,
    min_width: int = 4,
    block_columns: Optional[int] = None,
) -> NDArray:
    """
    Rasterize a two-color linear gradient.

    The canvas is blended and quantized in bands of whole columns, each
    written straight into the output, with the diffusion accumulators
    carried from one band to the next.

    Args:
        spec: Colors, length, angle and extend flag
        geometry: Precomputed geometry; resolved from ``spec`` when omitted
        error_diffusion: Carry rounding error forward to reduce banding
        min_width: Minimum canvas dimension used when resolving geometry
        block_columns: Columns per band; sized from ``BLOCK_PIXELS`` when omitted

    Returns:
        uint8 array of shape (height, width, 4) with channels (a, r, g, b);
        alpha uses the 7-bit range where 0 is opaque.
    """
    if geometry is None:
        geometry = spec.geometry(min_width)

    canvas = geometry.canvas
    logger.debug(
        "rendering %dx%d gradient (angle=%s, extend=%s, diffusion=%s)",
        canvas.width, canvas.height, spec.angle, spec.extend, error_diffusion,
        extra={"event": "gradient_rasterize"},
    )
    out = np.empty((canvas.height, canvas.width, 4), dtype=np.uint8)
    errors = np.zeros(4, dtype=np.float64)
    step = block_columns or max(1, BLOCK_PIXELS // max(canvas.height, 1))

    for c0 in range(0, canvas.width, step):
        c1 = min(c0 + step, canvas.width)
        band = blend_linear_gradient(spec, geometry, c0, c1)
        out[:, c0:c1] = quantize(band, error_diffusion, errors)
    return out
