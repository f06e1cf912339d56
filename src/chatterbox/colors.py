"""CSS colour normalisation.

Colour values from configuration are parsed with :mod:`tinycss2`'s CSS
colour parser and re-serialised as lowercase 8-digit hex (``#rrggbbaa``)
so renderers receive one canonical form regardless of how the user wrote
the colour (keyword, ``#rgb``, ``rgb()``, ``hsla()``...).
"""

from __future__ import annotations

import re

from tinycss2.color3 import RGBA, parse_color

_HEX8_RE = re.compile(r"^#[0-9a-fA-F]{8}\Z")


def _channel_to_hex(channel: float) -> str:
    return f"{round(min(max(channel, 0.0), 1.0) * 255):02x}"


def normalize_color(value: str) -> str | None:
    """Normalise a CSS colour string to ``#rrggbbaa``.

    Args:
        value: Any CSS colour expression.

    Returns:
        The normalised hex string, or ``None`` when *value* is not a
        concrete CSS colour (``currentColor`` included).
    """
    value = value.strip()
    if _HEX8_RE.match(value):
        return value.lower()

    parsed = parse_color(value)
    if not isinstance(parsed, RGBA):
        return None

    return "#" + "".join(_channel_to_hex(channel) for channel in parsed)
