from .argb import ColorARGB, parse_color, ALPHA_MAX, CHANNEL_MAX, MAX_PACKED

__all__ = [
    "ColorARGB",
    "parse_color",
    "ALPHA_MAX",
    "CHANNEL_MAX",
    "MAX_PACKED",
]
