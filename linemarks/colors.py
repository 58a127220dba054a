"""
Group color assignment.

Pure functions; results are memoized by their input tuple.
"""

import math
import random
import re
from functools import lru_cache

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")

NEW_GROUP_SATURATION = 70
NEW_GROUP_LIGHTNESS = 80


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


@lru_cache(maxsize=1024)
def hsl_to_hex(h: float, s: float, l: float) -> str:
    """
    Convert HSL (hue in degrees, saturation/lightness in percent) to #rrggbb.
    """
    s /= 100.0
    l /= 100.0
    a = s * min(l, 1 - l)

    def channel(n: int) -> int:
        k = (n + h / 30.0) % 12
        x = l - a * max(-1.0, min(k - 3, 9 - k, 1.0))
        return _round_half_up(255 * x)

    return "#%02x%02x%02x" % (channel(0), channel(8), channel(4))


def color_for_new_group(rng=None) -> str:
    rng = rng or random
    return hsl_to_hex(rng.random() * 360, NEW_GROUP_SATURATION, NEW_GROUP_LIGHTNESS)


@lru_cache(maxsize=1024)
def with_alpha(hex_color: str, opacity: float) -> str:
    """
    Append an alpha byte to a #rrggbb color: #rrggbbaa.
    """
    opacity = max(0.0, min(1.0, float(opacity)))
    return "%s%02x" % (hex_color[:7], _round_half_up(opacity * 255))


def is_hex_color(value) -> bool:
    return isinstance(value, str) and HEX_COLOR_RE.match(value) is not None
