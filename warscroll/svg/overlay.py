"""Vector overlay for the live preview — curved quadrant labels and stat numerals.

The overlay is a nested ``<svg>`` whose viewBox equals the background's pixel
size, so every coordinate is in image pixels and lines up with the raster
export. Rendering replaces the previous overlay, so it can run on every edit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from warscroll.engine.config import DEFAULT_BADGE_CONFIG, BadgeConfig, scaled_font_size
from warscroll.engine.formatter import format_stat, stat_numerics
from warscroll.engine.geometry import label_offset, numeral_positions, quadrant_arc
from warscroll.models.layout import BadgeLayout
from warscroll.models.scene import PreviewSurface, SceneNode
from warscroll.models.stats import RawStat, StatSet

logger = logging.getLogger(__name__)

OVERLAY_CLASS = "quarter-labels-overlay"

_TEXT_FILL = "#ffffff"


def _text_attrs(font_size: int) -> dict[str, str]:
    return {
        "fill": _TEXT_FILL,
        "font-weight": "700",
        "font-size": str(font_size),
        "text-anchor": "middle",
        "dominant-baseline": "middle",
    }


def build_overlay(
    badge: BadgeLayout,
    labels: Mapping[str, str] | None = None,
    stats: StatSet | Mapping[str, RawStat] | None = None,
    config: BadgeConfig | None = None,
) -> SceneNode:
    """Build the overlay scene for one badge layout.

    Args:
        badge: Layout for the current background size.
        labels: Quadrant labels by quadrant name; falls back to the labels
            already carried by ``badge``.
        stats: ``StatSet`` or raw ``{"move": "6", ...}`` mapping.
        config: Typography and inset ratios.
    """
    cfg = config or DEFAULT_BADGE_CONFIG
    labels = labels or {}
    numerics = stat_numerics(stats)

    defs = SceneNode(tag="defs")
    label_nodes: list[SceneNode] = []
    label_font = scaled_font_size(badge.circle_radius, cfg.label_font_ratio, cfg.label_font_floor)

    for quadrant in badge.quadrants:
        arc = quadrant_arc(badge, quadrant)
        defs.children.append(
            SceneNode(tag="path", attributes={"id": quadrant.path_id, "d": arc.d})
        )

        attrs = _text_attrs(label_font)
        tx, ty = label_offset(badge, quadrant, cfg.bottom_label_inset)
        if tx or ty:
            attrs["transform"] = f"translate({tx:.2f} {ty:.2f})"
        text = labels.get(quadrant.name.value, quadrant.label) or ""
        label_nodes.append(
            SceneNode(
                tag="text",
                attributes=attrs,
                children=[
                    SceneNode(
                        tag="textPath",
                        attributes={"href": f"#{quadrant.path_id}", "startOffset": "50%"},
                        text=str(text),
                    )
                ],
            )
        )

    number_font = scaled_font_size(badge.circle_radius, cfg.number_font_ratio, cfg.number_font_floor)
    positions = numeral_positions(badge)
    number_nodes: list[SceneNode] = []
    for quadrant in badge.quadrants:
        formatted = format_stat(quadrant.stat, numerics.get(quadrant.stat))
        if not formatted:
            continue
        x, y = positions[quadrant.stat]
        attrs = {"x": f"{x:.2f}", "y": f"{y:.2f}", **_text_attrs(number_font)}
        attrs["class"] = f"stat-{quadrant.stat.value}"
        number_nodes.append(SceneNode(tag="text", attributes=attrs, text=formatted))

    return SceneNode(
        tag="svg",
        attributes={
            "class": OVERLAY_CLASS,
            "width": "100%",
            "height": "100%",
            "viewBox": f"0 0 {badge.width:g} {badge.height:g}",
            "preserveAspectRatio": "xMinYMin meet",
            "style": "position:absolute;left:0;top:0;pointer-events:none;overflow:visible",
        },
        children=[defs, *label_nodes, *number_nodes],
    )


def render_overlay(
    container: PreviewSurface,
    badge: BadgeLayout,
    labels: Mapping[str, str] | None = None,
    stats: StatSet | Mapping[str, RawStat] | None = None,
    config: BadgeConfig | None = None,
) -> SceneNode:
    """Replace the overlay in ``container`` with a freshly built one.

    Idempotent: any previous overlay is removed first, other children of the
    container are left alone. Returns the inserted node.
    """
    overlay = build_overlay(badge, labels, stats, config)
    removed = container.remove(OVERLAY_CLASS)
    container.append(overlay)
    logger.debug(
        "Overlay rendered: %d numerals, %d replaced",
        sum(1 for n in overlay.children if n.attributes.get("class", "").startswith("stat-")),
        removed,
    )
    return overlay
