"""Command line entry point: render gradients and manage the cache."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import GradientConfig, load_config
from .errors import GradientGenError
from .logging_setup import configure_logging
from .params import cache_key
from .service import GradientService


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _build_config(args: argparse.Namespace) -> GradientConfig:
    cfg = load_config(Path(args.config) if args.config else None)
    if args.cache_dir:
        cfg.cache_dir = Path(args.cache_dir).expanduser()
    return cfg


def _spec(service: GradientService, args: argparse.Namespace):
    return service.normalize(args.start, args.end, args.length, args.angle, args.extend)


def cmd_render(args: argparse.Namespace, service: GradientService) -> int:
    result = service.get(_spec(service, args))
    if args.output in (None, "-"):
        sys.stdout.buffer.write(result.data or b"")
        sys.stdout.buffer.flush()
    else:
        Path(args.output).write_bytes(result.data or b"")
        print(result.key)
    return 0


def cmd_key(args: argparse.Namespace, service: GradientService) -> int:
    print(cache_key(_spec(service, args)))
    return 0


def cmd_cache_info(_args: argparse.Namespace, service: GradientService) -> int:
    entries = service.store.entries()
    _print_json(
        {
            "cache_dir": service.config.cache_dir,
            "entries": len(entries),
            "total_bytes": sum(e.size for e in entries),
            "budget_bytes": service.store.size_budget,
        }
    )
    return 0


def cmd_cache_clear(_args: argparse.Namespace, service: GradientService) -> int:
    removed = service.store.clear()
    print(f"removed {removed} entries")
    return 0


def _add_gradient_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("start", help="start color, 3/6/8 hex digits (alpha 00 opaque .. 7f transparent)")
    p.add_argument("end", help="end color, 3/6/8 hex digits")
    p.add_argument("--length", default="0", help="gradient length in pixels")
    p.add_argument("--angle", default="0", help="degrees 0-360, or 'h' / 'v'")
    p.add_argument("--extend", action="store_true", help="extend the image to fill the bounding box")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gradientgen", description="Linear gradient image generator")
    parser.add_argument("--config", help="path to a JSON config file")
    parser.add_argument("--cache-dir", help="override the cache directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--log-json", action="store_true", help="emit log records as JSON lines")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="render a gradient PNG through the cache")
    _add_gradient_args(render)
    render.add_argument("-o", "--output", help="output file, '-' for stdout")
    render.set_defaults(func=cmd_render)

    key = sub.add_parser("key", help="print the cache key for a gradient")
    _add_gradient_args(key)
    key.set_defaults(func=cmd_key)

    info = sub.add_parser("cache-info", help="show cache usage")
    info.set_defaults(func=cmd_cache_info)

    clear = sub.add_parser("cache-clear", help="delete every cached gradient")
    clear.set_defaults(func=cmd_cache_clear)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING, json_format=args.log_json)

    service = GradientService(_build_config(args))
    try:
        return args.func(args, service)
    except GradientGenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
