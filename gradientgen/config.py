"""Gradient generator settings and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "GRADIENTGEN_"


def default_cache_dir() -> Path:
    xdg = os.environ.get("XDG_CACHE_HOME")
    cache_root = Path(xdg) if xdg else (Path.home() / ".cache")
    return cache_root / "gradientgen"


def default_config_path() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    config_root = Path(xdg) if xdg else (Path.home() / ".config")
    return config_root / "gradientgen" / "config.json"


@dataclass
class GradientConfig:
    cache_dir: Path = field(default_factory=default_cache_dir)
    cache_size_budget: int = 5 * 1024 * 1024
    min_width: int = 4
    min_length: int = 4
    max_length: int = 9999
    error_diffusion: bool = True


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in ("", "0", "false", "no", "off")
    return bool(value)


def _coerce(name: str, value: Any) -> Any:
    if name == "cache_dir":
        return Path(value).expanduser()
    if name == "error_diffusion":
        return _coerce_bool(value)
    return int(value)


def _merge(cfg: GradientConfig, raw: Mapping[str, Any], source: str) -> None:
    known = {f.name for f in fields(GradientConfig)}
    for k, v in raw.items():
        if k not in known:
            continue
        try:
            setattr(cfg, k, _coerce(k, v))
        except (TypeError, ValueError):
            logger.warning("ignoring invalid %s value %r from %s", k, v, source)


def _env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    out = {}
    for f in fields(GradientConfig):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            out[f.name] = environ[key]
    return out


def normalize_config(cfg: GradientConfig) -> GradientConfig:
    cfg.min_width = max(1, int(cfg.min_width))
    cfg.min_length = max(1, int(cfg.min_length))
    cfg.max_length = max(cfg.min_length, int(cfg.max_length))
    cfg.cache_size_budget = max(0, int(cfg.cache_size_budget))
    return cfg


def load_config(path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> GradientConfig:
    """
    Build a GradientConfig from defaults, an optional JSON file and the
    ``GRADIENTGEN_*`` environment variables, in that order of precedence.

    A missing or unreadable file leaves the defaults in place.
    """
    path = path or default_config_path()
    environ = os.environ if environ is None else environ
    cfg = GradientConfig()

    if path.exists():
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("could not read config %s: %s", path, exc)
            raw = {}
        if isinstance(raw, dict):
            _merge(cfg, raw, str(path))

    _merge(cfg, _env_overrides(environ), "environment")
    return normalize_config(cfg)


def save_config(cfg: GradientConfig, path: Optional[Path] = None) -> Path:
    path = path or default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = asdict(cfg)
    data["cache_dir"] = str(cfg.cache_dir)
    path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
    return path
