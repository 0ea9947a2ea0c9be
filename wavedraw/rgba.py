"""RGBA colour values and parsing of ``rrggbb[aa]`` hex strings."""

from __future__ import annotations

import re
from dataclasses import dataclass

from wavedraw.errors import WaveformError

_COLOR_PATTERN = re.compile(
    r"([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})?"
)


@dataclass(frozen=True)
class RGBA:
    """A colour with 8-bit components; alpha 255 is fully opaque."""

    red: int = 0
    green: int = 0
    blue: int = 0
    alpha: int = 255

    def has_alpha(self) -> bool:
        """Return True if the colour is not fully opaque."""
        return self.alpha != 255


def parse_rgba(value: str) -> RGBA:
    """Parse the first whitespace-separated word of ``value`` as ``rrggbb[aa]``.

    Raises WaveformError if it is not a valid colour.
    """
    words = value.split()
    word = words[0] if words else ""

    match = _COLOR_PATTERN.fullmatch(word)
    if match is None:
        raise WaveformError("Invalid color value")

    red, green, blue, alpha = match.groups()
    return RGBA(
        red=int(red, 16),
        green=int(green, 16),
        blue=int(blue, 16),
        alpha=int(alpha, 16) if alpha is not None else 255,
    )