"""Warscroll layout engine: stat formatting and badge geometry."""

from warscroll.engine.formatter import display, format_stat, normalize
from warscroll.engine.geometry import LayoutError, arc_path, layout, polar_to_point

__all__ = [
    "display",
    "format_stat",
    "normalize",
    "LayoutError",
    "arc_path",
    "layout",
    "polar_to_point",
]
