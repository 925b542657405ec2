"""Colour math: hex parsing, WCAG relative luminance and contrast ratio."""

import re

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

BLACK = "#000000"
WHITE = "#FFFFFF"


def parse_hex(color: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` (or ``RRGGBB``) into an RGB tuple.

    Raises:
        ValueError: if *color* is not a 6-digit hex colour.
    """
    m = _HEX_RE.match(color.strip())
    if not m:
        raise ValueError(f"Not a #RRGGBB colour: {color!r}")
    h = m.group(1)
    return tuple(int(h[i : i + 2], 16) for i in (0, 2, 4))


def _linearize(channel: int) -> float:
    """Convert an sRGB channel (0-255) to linear light."""
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def luminance(color: str) -> float:
    """Relative luminance per WCAG 2.0, in [0, 1]."""
    r, g, b = [_linearize(ch) for ch in parse_hex(color)]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(a: str, b: str) -> float:
    """WCAG contrast ratio between two colours (1.0 - 21.0)."""
    l1 = luminance(a)
    l2 = luminance(b)
    if l1 < l2:
        l1, l2 = l2, l1
    return (l1 + 0.05) / (l2 + 0.05)
