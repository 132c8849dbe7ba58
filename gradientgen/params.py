"""
Normalization of raw, untrusted gradient parameters.

Every function here is permissive: malformed values degrade to 0 (or the
nearest valid value) instead of raising, so a request always maps to some
renderable gradient.
"""

from __future__ import annotations

import re
import sys
from typing import Any, Optional

from .colors.argb import parse_color
from .config import GradientConfig
from .gradients.geometry import clamp_angle
from .gradients.linear import LinearGradientSpec

_LEADING_INT = re.compile(r"\s*([+-]?)(\d+)")
# Longer digit runs saturate instead of being converted.
MAX_INT_DIGITS = 18

HORIZONTAL = "h"
VERTICAL = "v"


def parse_int(value: Any) -> int:
    """Leading integer of ``value``; 0 when there is none."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else 0
    if value is None:
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    sign, digits = match.group(1), match.group(2).lstrip("0")
    if len(digits) > MAX_INT_DIGITS:
        # saturate; callers clamp to far smaller ranges
        return -sys.maxsize if sign == "-" else sys.maxsize
    value = int(digits or "0")
    return -value if sign == "-" else value


def parse_extend(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ("", "0")
    return bool(value)


def parse_angle(value: Any, extend: bool) -> int:
    if value == HORIZONTAL:
        return 0
    if value == VERTICAL:
        return 90
    return clamp_angle(parse_int(value), extend)


def parse_length(value: Any, min_length: int, max_length: int) -> int:
    return max(min_length, min(parse_int(value), max_length))


def normalize_params(
    start: Any,
    end: Any,
    length: Any = None,
    angle: Any = None,
    extend: Any = None,
    config: Optional[GradientConfig] = None,
) -> LinearGradientSpec:
    config = config or GradientConfig()
    do_extend = parse_extend(extend)
    return LinearGradientSpec(
        start=parse_color("" if start is None else start),
        end=parse_color("" if end is None else end),
        length=parse_length(length, config.min_length, config.max_length),
        angle=parse_angle(angle, do_extend),
        extend=do_extend,
    )


def cache_key(spec: LinearGradientSpec) -> str:
    """``{start_hex}-{end_hex}-{length}-{angle}-{extend}``, e.g. ``00ff0000-000000ff-10-0-0``."""
    return f"{spec.start.hex}-{spec.end.hex}-{spec.length}-{spec.angle}-{int(spec.extend)}"
