from .geometry import Canvas, Geometry, clamp_angle, resolve_geometry
from .diffusion import abs_floor, diffusion_corrections, round_half_away
from .linear import (
    LinearGradientSpec,
    blend_linear_gradient,
    projection_fraction,
    quantize,
    render_linear_gradient,
)

__all__ = [
    "Canvas",
    "Geometry",
    "clamp_angle",
    "resolve_geometry",
    "abs_floor",
    "diffusion_corrections",
    "round_half_away",
    "LinearGradientSpec",
    "blend_linear_gradient",
    "projection_fraction",
    "quantize",
    "render_linear_gradient",
]
