"""Text helpers for the raster exporter — font lookup and greedy word wrap."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import lru_cache

from PIL import ImageFont

logger = logging.getLogger(__name__)

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


@lru_cache(maxsize=64)
def load_font(path: str, size: int) -> Font:
    """TrueType font at ``size`` px, or Pillow's built-in font when ``path`` is missing."""
    try:
        return ImageFont.truetype(path, size)
    except OSError:
        logger.debug("Font %s unavailable, using built-in font at %dpx", path, size)
        return ImageFont.load_default(size=size)


def wrap_text(
    text: str | None,
    max_width: float,
    measure: Callable[[str], float],
) -> list[str]:
    """Greedy word wrap on single spaces.

    Words are added to the current line while ``measure(line)`` stays within
    ``max_width``. On overflow the current line is committed and the
    overflowing word starts the next one. The first word is always kept on the
    first line even if it alone is too wide.

    Returns:
        The wrapped lines; ``[""]`` for empty input.
    """
    words = (text or "").split(" ")
    lines: list[str] = []
    line = ""
    for n, word in enumerate(words):
        candidate = f"{line} {word}" if line else word
        if measure(candidate) > max_width and n > 0:
            lines.append(line)
            line = word
        else:
            line = candidate
    lines.append(line)
    return lines
