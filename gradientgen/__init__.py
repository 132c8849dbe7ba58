"""
GradientGen - Cached Linear Gradient Images
===========================================

Renders two-color linear gradients at any angle into PNG images and keeps
them in a size-bounded, recency-trimmed cache.

Quick Start
-----------
>>> from pathlib import Path
>>> from gradientgen import GradientService, GradientConfig
>>>
>>> service = GradientService(GradientConfig(cache_dir=Path("/tmp/gradients")))
>>> result = service.get_from_params("ff0000", "00f", length=200, angle=45)
>>> result.key
'00ff0000-000000ff-200-45-0'

Modules
-------
- colors: hex parsing and the packed 7-bit-alpha ARGB color
- gradients: canvas geometry, rasterization and error diffusion
- image_sink: PNG encoding
- cache: cache store and storage backends
- params: permissive normalization of raw parameters
- service: render-and-cache entry point
"""

from .colors import ColorARGB, parse_color
from .gradients import (
    Canvas,
    Geometry,
    LinearGradientSpec,
    clamp_angle,
    resolve_geometry,
    render_linear_gradient,
)
from .image_sink import encode_png
from .cache import CacheStore, CacheEntry, FileSystemBackend, MemoryBackend
from .config import GradientConfig, load_config, save_config
from .errors import GradientGenError, StorageError
from .params import cache_key, normalize_params
from .service import GradientService, RenderedGradient

__version__ = "1.0.0"

__all__ = [
    # colors
    "ColorARGB",
    "parse_color",
    # geometry and rendering
    "Canvas",
    "Geometry",
    "LinearGradientSpec",
    "clamp_angle",
    "resolve_geometry",
    "render_linear_gradient",
    "encode_png",
    # cache
    "CacheStore",
    "CacheEntry",
    "FileSystemBackend",
    "MemoryBackend",
    # configuration and errors
    "GradientConfig",
    "load_config",
    "save_config",
    "GradientGenError",
    "StorageError",
    # entry points
    "cache_key",
    "normalize_params",
    "GradientService",
    "RenderedGradient",
    "__version__",
]
