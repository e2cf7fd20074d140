"""Badge configuration — geometry and typography ratios shared by both renderers."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class BadgeConfig:
    """Ratios that place the badge on the background art.

    Every length is a fraction of the background size or of the badge radius,
    so a layout scales linearly with the image.
    """

    # Badge centre as a fraction of width / height
    center_x_ratio: float = 0.157
    center_y_ratio: float = 0.105

    # Badge radius as a fraction of min(width, height)
    circle_radius_ratio: float = 0.12

    # Curved label baseline, fraction of the badge radius
    label_radius_ratio: float = 0.70

    # Numeral placement, fraction of the badge radius (preview and export)
    number_radius_ratio: float = 0.40

    # Inward nudge of the bottom label, fraction of the badge radius
    bottom_label_inset: float = 0.99

    # Font size = max(floor, round(ratio * reference))
    label_font_ratio: float = 0.15
    label_font_floor: int = 10
    number_font_ratio: float = 0.30
    number_font_floor: int = 12
    title_font_ratio: float = 0.035
    title_font_floor: int = 18
    body_font_ratio: float = 0.02
    body_font_floor: int = 12


DEFAULT_BADGE_CONFIG = BadgeConfig()


def scaled_font_size(reference: float, ratio: float, floor: int) -> int:
    """Font size proportional to ``reference`` (rounded half up), never below ``floor``."""
    return max(floor, math.floor(reference * ratio + 0.5))
