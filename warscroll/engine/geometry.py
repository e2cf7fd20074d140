"""Badge geometry — circle, quadrant placement and arc paths from image size only.

Angles are in degrees, 0° along +x, increasing clockwise on screen (y grows
downward), which is the SVG and Pillow convention.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from warscroll.engine.config import DEFAULT_BADGE_CONFIG, BadgeConfig
from warscroll.models.layout import ArcPath, BadgeLayout, Point, Quadrant, QuadrantName
from warscroll.models.stats import StatKind


class LayoutError(ValueError):
    """Raised when no sane badge layout exists for the given image size."""


# Fixed four-quadrant design: (name, centre angle, stat, reverse path)
_QUADRANTS: tuple[tuple[QuadrantName, float, StatKind, bool], ...] = (
    (QuadrantName.RIGHT, 0.0, StatKind.SAVE, False),
    (QuadrantName.BOTTOM, 90.0, StatKind.CONTROL, True),
    (QuadrantName.LEFT, 180.0, StatKind.HEALTH, False),
    (QuadrantName.TOP, 270.0, StatKind.MOVE, False),
)


def _check_dimension(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise LayoutError(f"{name} must be a number, got {value!r}") from e
    if not math.isfinite(value) or value <= 0:
        raise LayoutError(f"{name} must be positive, got {value!r}")
    return value


def layout(
    width: float,
    height: float,
    labels: dict[str, str] | None = None,
    config: BadgeConfig | None = None,
) -> BadgeLayout:
    """Compute the badge layout for a background of ``width`` × ``height`` pixels.

    Args:
        width: Background width in pixels.
        height: Background height in pixels.
        labels: Quadrant labels keyed by quadrant name (top/right/bottom/left).
        config: Ratio overrides; defaults to ``DEFAULT_BADGE_CONFIG``.

    Returns:
        A fresh ``BadgeLayout``. Callers recompute it for every render.

    Raises:
        LayoutError: if either dimension is not a positive finite number.
    """
    cfg = config or DEFAULT_BADGE_CONFIG
    width = _check_dimension("width", width)
    height = _check_dimension("height", height)
    labels = labels or {}

    circle_radius = cfg.circle_radius_ratio * min(width, height)
    quadrants = [
        Quadrant(
            name=name,
            angle=angle,
            stat=stat,
            label=str(labels.get(name.value) or ""),
            reverse=reverse,
        )
        for name, angle, stat, reverse in _QUADRANTS
    ]
    return BadgeLayout(
        width=width,
        height=height,
        center=(cfg.center_x_ratio * width, cfg.center_y_ratio * height),
        circle_radius=circle_radius,
        label_radius=cfg.label_radius_ratio * circle_radius,
        number_radius=cfg.number_radius_ratio * circle_radius,
        quadrants=quadrants,
    )


def polar_to_point(center: Point, radius: float, angle_deg: float) -> Point:
    """x = cx + r·cos θ, y = cy + r·sin θ."""
    rad = math.radians(angle_deg)
    cx, cy = center
    return (cx + radius * math.cos(rad), cy + radius * math.sin(rad))


def polar_to_points(
    center: Point,
    radius: float,
    angles_deg: NDArray[np.float64] | list[float],
) -> NDArray[np.float64]:
    """Vectorized ``polar_to_point``: Nx2 array of points for N angles."""
    rad = np.deg2rad(np.asarray(angles_deg, dtype=np.float64))
    cx, cy = center
    return np.column_stack((cx + radius * np.cos(rad), cy + radius * np.sin(rad)))


def arc_path(center: Point, radius: float, start_deg: float, end_deg: float) -> ArcPath:
    """Arc from ``start_deg`` to ``end_deg`` on the circle around ``center``.

    The delta is normalized into [0, 360). Up to 180° the arc sweeps clockwise
    the short way (sweep=1); beyond that the large-arc flag is set and sweep is
    0, which takes the long way. A zero or full-turn delta yields both flags 0.
    """
    delta = (end_deg - start_deg) % 360.0
    return ArcPath(
        start=polar_to_point(center, radius, start_deg),
        end=polar_to_point(center, radius, end_deg),
        radius=radius,
        delta=delta,
        large_arc=1 if delta > 180 else 0,
        sweep=1 if 0 < delta <= 180 else 0,
    )


def quadrant_arc(badge: BadgeLayout, quadrant: Quadrant) -> ArcPath:
    """Label arc of a quadrant at the label radius, reversed where needed."""
    if quadrant.reverse:
        return arc_path(badge.center, badge.label_radius, quadrant.end_angle, quadrant.start_angle)
    return arc_path(badge.center, badge.label_radius, quadrant.start_angle, quadrant.end_angle)


def label_offset(
    badge: BadgeLayout,
    quadrant: Quadrant,
    inset: float | None = None,
) -> Point:
    """Translation applied to the rendered bottom label (not to its path).

    Moves the text ``inset × circle_radius`` against the quadrant's centre
    angle. Other quadrants are not moved.
    """
    if quadrant.name is not QuadrantName.BOTTOM:
        return (0.0, 0.0)
    if inset is None:
        inset = DEFAULT_BADGE_CONFIG.bottom_label_inset
    rad = math.radians(quadrant.angle)
    offset = badge.circle_radius * inset
    return (-math.cos(rad) * offset, -math.sin(rad) * offset)


def numeral_positions(badge: BadgeLayout) -> dict[StatKind, Point]:
    """Centre of each stat numeral, at the shared numeral radius."""
    points = polar_to_points(
        badge.center,
        badge.number_radius,
        [q.angle for q in badge.quadrants],
    )
    return {
        q.stat: (float(x), float(y))
        for q, (x, y) in zip(badge.quadrants, points)
    }
