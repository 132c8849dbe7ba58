from __future__ import annotations
from typing import Any, ClassVar, Tuple

MAX_PACKED: int = 0x7FFFFFFF
ALPHA_MAX: int = 0x7F
CHANNEL_MAX: int = 0xFF

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class ColorARGB:
    """
    Packed 31-bit ARGB color with a 7-bit alpha channel.

    Alpha follows the GD convention: 0 is fully opaque and 127 is fully
    transparent. Instances are immutable and compare by packed value.
    """
    __slots__ = ('_value', '_frozen')

    # (alpha, red, green, blue)
    maxima: ClassVar[Tuple[int, int, int, int]] = (ALPHA_MAX, CHANNEL_MAX, CHANNEL_MAX, CHANNEL_MAX)

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f"{self.__class__.__name__} is immutable; cannot assign to {name}")
        super().__setattr__(name, value)

    def __init__(self, value: int = 0) -> None:
        self._value = max(0, min(int(value), MAX_PACKED))
        super().__setattr__('_frozen', True)

    # ------------------ READ-ONLY PROPERTIES ------------------
    @property
    def value(self) -> int:
        return self._value

    @property
    def alpha(self) -> int:
        return (self._value >> 24) & ALPHA_MAX

    @property
    def red(self) -> int:
        return (self._value >> 16) & CHANNEL_MAX

    @property
    def green(self) -> int:
        return (self._value >> 8) & CHANNEL_MAX

    @property
    def blue(self) -> int:
        return self._value & CHANNEL_MAX

    @property
    def channels(self) -> Tuple[int, int, int, int]:
        return (self.alpha, self.red, self.green, self.blue)

    @property
    def hex(self) -> str:
        """8-digit lowercase hex of the packed value."""
        return f"{self._value:08x}"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ColorARGB):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"ColorARGB(0x{self.hex})"


def _hexdec(text: str) -> int:
    digits = "".join(ch for ch in text if ch in _HEX_DIGITS)
    if not digits:
        return 0
    return int(digits, 16)


def parse_color(text: Any) -> ColorARGB:
    """
    Parse a 3-, 6- or 8-digit hex string into a ColorARGB.

    Parsing is permissive and never raises: characters that are not hex
    digits are skipped, an empty string is 0, and any value above 0x7fffffff
    (including 8-digit strings with the top bit set) is capped there.

    Examples:
        parse_color("f00")      -> ColorARGB(0x00ff0000)
        parse_color("7f0000ff") -> ColorARGB(0x7f0000ff)
        parse_color("zz")       -> ColorARGB(0x00000000)
    """
    text = "" if text is None else str(text)
    if len(text) == 3:
        text = text[0] * 2 + text[1] * 2 + text[2] * 2
    return ColorARGB(_hexdec(text))
