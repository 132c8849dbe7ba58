"""1-D error diffusion for quantizing blended channel values."""

from __future__ import annotations

import math
from typing import Optional

import numpy as np
from numpy.typing import NDArray


def abs_floor(x: float) -> int:
    """
    Round toward zero (floor for positive x, ceil for negative x).

    Examples:
        abs_floor(1.999)  ->  1
        abs_floor(0.9)    ->  0
        abs_floor(-0.9)   ->  0
        abs_floor(-1.2)   -> -1
    """
    return math.ceil(x) if x < 0 else math.floor(x)


def round_half_away(values: NDArray) -> NDArray:
    """Round to nearest, ties away from zero (numpy rounds ties to even)."""
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


def diffusion_corrections(residuals: NDArray, errors: Optional[NDArray] = None) -> NDArray:
    """
    Integer corrections for a sequence of rounding residuals.

    ``residuals`` is ``blended - rounded`` in scan order. A single running
    accumulator collects the residuals; whenever it reaches a whole unit
    that unit is emitted as a correction for the current sample and
    removed from the accumulator, so it always stays in (-1, 1).

    Works over the first axis; trailing axes are independent channels.

    Args:
        residuals: Rounding residuals, scan order along axis 0
        errors: Optional float64 accumulators, one per channel. They seed
            the scan and are updated in place, so consecutive calls over
            adjacent pieces of a scan match a single call over all of it.
    """
    residuals = np.asarray(residuals, dtype=np.float64)
    flat = residuals.reshape(residuals.shape[0], -1)
    out = np.zeros(flat.shape, dtype=np.int8)

    for ch in range(flat.shape[1]):
        error = 0.0 if errors is None else float(errors[ch])
        column = out[:, ch]
        for i, d in enumerate(flat[:, ch].tolist()):
            error += d
            cor = abs_floor(error)
            if cor:
                error -= cor
                column[i] = cor
        if errors is not None:
            errors[ch] = error

    return out.reshape(residuals.shape)
