from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from .cache.backends import FileSystemBackend
from .cache.store import CacheStore
from .config import GradientConfig
from .gradients.linear import LinearGradientSpec, render_linear_gradient
from .image_sink import PNG_MEDIA_TYPE, encode_png
from .params import cache_key, normalize_params

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedGradient:
    key: str
    last_modified: float
    data: Optional[bytes] = None
    not_modified: bool = False
    media_type: str = PNG_MEDIA_TYPE


class GradientService:
    """
    Render-and-cache entry point for a request handler.

    Holds one configuration and one cache store. A handler passes raw
    parameters (or a normalized spec) and an optional ``If-Modified-Since``
    timestamp and gets back the PNG bytes with their modification time.
    Storage faults surface as ``StorageError``.
    """

    def __init__(self, config: Optional[GradientConfig] = None, store: Optional[CacheStore] = None) -> None:
        self.config = config or GradientConfig()
        if store is None:
            store = CacheStore(FileSystemBackend(self.config.cache_dir), self.config.cache_size_budget)
        self.store = store

    def normalize(self, start: Any, end: Any, length: Any = None, angle: Any = None, extend: Any = None) -> LinearGradientSpec:
        return normalize_params(start, end, length, angle, extend, self.config)

    def render(self, spec: LinearGradientSpec) -> bytes:
        """Render and encode without touching the cache."""
        geometry = spec.geometry(self.config.min_width)
        pixels = render_linear_gradient(spec, geometry, self.config.error_diffusion)
        return encode_png(pixels)

    def get(self, spec: LinearGradientSpec, if_modified_since: Optional[float] = None) -> RenderedGradient:
        key = cache_key(spec)

        if if_modified_since is not None:
            mtime = self.store.last_modified(key)
            if mtime is not None and if_modified_since >= mtime:
                self.store.touch(key)
                return RenderedGradient(key=key, last_modified=mtime, not_modified=True)

        hit = self.store.lookup(key)
        if hit is not None:
            data, mtime = hit
            return RenderedGradient(key=key, last_modified=mtime, data=data)

        data = self.render(spec)
        self.store.store(key, data)
        logger.info("rendered %s (%d bytes)", key, len(data), extra={"event": "gradient_rendered"})

        mtime = self.store.last_modified(key)
        if mtime is None:
            # evicted by its own write
            mtime = time.time()
        return RenderedGradient(key=key, last_modified=mtime, data=data)

    def get_from_params(
        self,
        start: Any,
        end: Any,
        length: Any = None,
        angle: Any = None,
        extend: Any = None,
        if_modified_since: Optional[float] = None,
    ) -> RenderedGradient:
        spec = self.normalize(start, end, length, angle, extend)
        return self.get(spec, if_modified_since)
