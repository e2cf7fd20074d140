"""Raster export — draws the finished warscroll into a Pillow image.

Reproduces the preview composition in immediate mode: background, border,
title, badge numerals and the body block. Geometry and stat text come from the
same engine functions the preview uses, recomputed on every export.
"""

from __future__ import annotations

import io
import logging
import re
from collections.abc import Mapping
from pathlib import Path

from PIL import Image, ImageDraw, ImageFilter

from warscroll.config import Settings, settings as default_settings
from warscroll.engine.config import DEFAULT_BADGE_CONFIG, BadgeConfig, scaled_font_size
from warscroll.engine.formatter import format_stat, stat_numerics
from warscroll.engine.geometry import layout as badge_layout
from warscroll.engine.geometry import numeral_positions
from warscroll.models.layout import BadgeLayout
from warscroll.models.stats import RawStat, StatKind, StatSet
from warscroll.raster.text import Font, load_font, wrap_text

logger = logging.getLogger(__name__)

# ── Composition constants (pixels unless noted) ──

FALLBACK_FILL = (255, 255, 255, 255)

BORDER_COLOR = "#222222"
BORDER_INSET = 12
BORDER_WIDTH = 4

TITLE_COLOR = "#111111"
TITLE_TOP = 36
# Title wraps within width minus this margin (40px each side)
TITLE_SIDE_MARGIN = 80
TITLE_LINE_GAP = 6

NUMERAL_COLOR = "#ffffff"

BODY_COLOR = "#333333"
BODY_LEFT = 48
BODY_GAP_BELOW_TITLE = 16
BODY_LINE_SPACING = 1.5

# Canvas-style soft shadow behind numerals and body text
SHADOW_COLOR = (0, 0, 0, 128)
SHADOW_BLUR = 1

# (caption, stat) per body line; None stat lines are printed verbatim
_BODY_LINES: tuple[tuple[str, StatKind | None], ...] = (
    ("Unit Type: Custom", None),
    ("Move", StatKind.MOVE),
    ("Wounds", StatKind.HEALTH),
    ("Save", StatKind.SAVE),
    ("Control", StatKind.CONTROL),
    ("", None),
    ("Abilities:", None),
    ("- Example ability 1", None),
    ("- Example ability 2", None),
)

_PLACEHOLDER = "-"


def body_lines(numerics: Mapping[StatKind, int | float | None]) -> list[str]:
    """The fixed body block, with ``-`` for stats that are not set."""
    lines = []
    for caption, kind in _BODY_LINES:
        if kind is None:
            lines.append(caption)
        else:
            lines.append(f"{caption}: {format_stat(kind, numerics.get(kind)) or _PLACEHOLDER}")
    return lines


def _draw_background(background: Image.Image | None, width: int, height: int) -> Image.Image:
    if background is not None:
        try:
            return background.convert("RGBA").resize((width, height), Image.Resampling.LANCZOS)
        except Exception as e:
            logger.warning("Background could not be drawn, using solid fill: %s", e)
    return Image.new("RGBA", (width, height), FALLBACK_FILL)


def _draw_shadowed(
    canvas: Image.Image,
    items: list[tuple[tuple[float, float], str, Font, str, str]],
) -> None:
    """Draw ``(xy, text, font, fill, anchor)`` items over a blurred dark copy."""
    if not items:
        return
    shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    shadow_draw = ImageDraw.Draw(shadow)
    for xy, text, font, _, anchor in items:
        shadow_draw.text(xy, text, font=font, fill=SHADOW_COLOR, anchor=anchor)
    canvas.alpha_composite(shadow.filter(ImageFilter.GaussianBlur(SHADOW_BLUR)))

    draw = ImageDraw.Draw(canvas)
    for xy, text, font, fill, anchor in items:
        draw.text(xy, text, font=font, fill=fill, anchor=anchor)


def export_image(
    background: Image.Image | None,
    title: str | None,
    badge: BadgeLayout,
    stats: StatSet | Mapping[str, RawStat] | None,
    width: int,
    height: int,
    config: BadgeConfig | None = None,
    app_settings: Settings | None = None,
) -> Image.Image:
    """Render the warscroll at ``width`` × ``height``.

    Args:
        background: Loaded background art, or None when unavailable. A
            background that fails to draw falls back to a white fill.
        title: Card title, word-wrapped and centred at the top.
        badge: Badge layout for this width and height.
        stats: ``StatSet`` or raw stat mapping.
        width: Output width in pixels.
        height: Output height in pixels.
        config: Typography ratios.
        app_settings: Font paths.

    Returns:
        An RGB image ready for PNG encoding.
    """
    cfg = config or DEFAULT_BADGE_CONFIG
    conf = app_settings or default_settings
    width, height = int(width), int(height)
    numerics = stat_numerics(stats)

    canvas = _draw_background(background, width, height)
    draw = ImageDraw.Draw(canvas)

    # Decorative border; Pillow grows the outline inward from the box
    edge = BORDER_INSET - BORDER_WIDTH // 2
    draw.rectangle(
        (edge, edge, width - edge - 1, height - edge - 1),
        outline=BORDER_COLOR,
        width=BORDER_WIDTH,
    )

    # Title
    title_size = scaled_font_size(width, cfg.title_font_ratio, cfg.title_font_floor)
    title_font = load_font(conf.serif_font, title_size)
    y = float(TITLE_TOP)
    for line in wrap_text(title, width - TITLE_SIDE_MARGIN, lambda s: draw.textlength(s, font=title_font)):
        draw.text((width / 2, y), line, font=title_font, fill=TITLE_COLOR, anchor="ma")
        y += title_size + TITLE_LINE_GAP

    # Badge numerals
    number_size = scaled_font_size(badge.circle_radius, cfg.number_font_ratio, cfg.number_font_floor)
    number_font = load_font(conf.sans_font, number_size)
    positions = numeral_positions(badge)
    items = []
    for quadrant in badge.quadrants:
        formatted = format_stat(quadrant.stat, numerics.get(quadrant.stat))
        if formatted:
            items.append((positions[quadrant.stat], formatted, number_font, NUMERAL_COLOR, "mm"))

    # Body block
    body_size = scaled_font_size(width, cfg.body_font_ratio, cfg.body_font_floor)
    body_font = load_font(conf.sans_font, body_size)
    top = round(TITLE_TOP + title_size + BODY_GAP_BELOW_TITLE)
    line_height = round(body_size * BODY_LINE_SPACING)
    for idx, line in enumerate(body_lines(numerics)):
        if line:
            items.append(((BODY_LEFT, top + idx * line_height), line, body_font, BODY_COLOR, "lm"))

    _draw_shadowed(canvas, items)

    logger.debug("Rendered warscroll %dx%d with %d text items", width, height, len(items))
    return canvas.convert("RGB")


def export_size(
    background: Image.Image | None,
    app_settings: Settings | None = None,
) -> tuple[int, int]:
    """Natural size of the background, or the configured fallback size."""
    conf = app_settings or default_settings
    if background is not None:
        width, height = background.size
        if width > 0 and height > 0:
            return width, height
    return conf.fallback_width, conf.fallback_height


def export_warscroll(
    background: Image.Image | None,
    title: str | None,
    stats: StatSet | Mapping[str, RawStat] | None,
    config: BadgeConfig | None = None,
    app_settings: Settings | None = None,
) -> Image.Image:
    """Export at the background's natural size, recomputing the layout."""
    width, height = export_size(background, app_settings)
    badge = badge_layout(width, height, config=config)
    logger.info(
        "Exporting warscroll %dx%d (%s background)",
        width,
        height,
        "with" if background is not None else "no",
    )
    return export_image(background, title, badge, stats, width, height, config, app_settings)


def to_png_bytes(image: Image.Image) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def save_png(image: Image.Image, path: str | Path) -> Path:
    path = Path(path)
    image.save(path, format="PNG")
    return path


_WHITESPACE = re.compile(r"\s+")


def export_filename(title: str | None, prefix: str | None = None) -> str:
    """Download name: ``Warscroll_of-my-unit.png`` for prefix "Warscroll of", title "My Unit"."""
    safe = _WHITESPACE.sub("-", title or "warscroll").lower()
    head = _WHITESPACE.sub("_", prefix or "warscroll")
    return f"{head}-{safe}.png"
