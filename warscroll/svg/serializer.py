"""Write SVG markup from scene nodes."""

from __future__ import annotations

import html

from warscroll.models.scene import PreviewSurface, SceneNode

SVG_NS = "http://www.w3.org/2000/svg"

# Elements whose content is text; written inline to keep whitespace out
_TEXT_CONTENT_TAGS = frozenset({"text", "textPath", "tspan", "title", "desc"})


def _attr_str(attributes: dict[str, str]) -> str:
    return " ".join(f'{k}="{html.escape(str(v), quote=True)}"' for k, v in attributes.items())


def serialize_node(node: SceneNode, depth: int = 0) -> list[str]:
    """Serialize a node and its subtree, one element per line.

    Nodes carrying text are written on a single line so the text content is
    not padded with indentation whitespace.
    """
    pad = "  " * depth
    attrs = _attr_str(node.attributes)
    open_tag = f"<{node.tag} {attrs}>" if attrs else f"<{node.tag}>"

    if node.text is not None or node.tag in _TEXT_CONTENT_TAGS:
        return [pad + _inline(node)]
    if not node.children:
        return [pad + (f"<{node.tag} {attrs} />" if attrs else f"<{node.tag} />")]

    lines = [pad + open_tag]
    for child in node.children:
        lines.extend(serialize_node(child, depth + 1))
    lines.append(f"{pad}</{node.tag}>")
    return lines


def _inline(node: SceneNode) -> str:
    attrs = _attr_str(node.attributes)
    open_tag = f"<{node.tag} {attrs}>" if attrs else f"<{node.tag}>"
    inner = html.escape(node.text, quote=False) if node.text is not None else ""
    inner += "".join(_inline(child) for child in node.children)
    return f"{open_tag}{inner}</{node.tag}>"


def serialize_svg(node: SceneNode) -> str:
    """A single scene node as an SVG fragment."""
    return "\n".join(serialize_node(node))


def serialize_surface(surface: PreviewSurface) -> str:
    """Standalone SVG document: background image first, then the overlays."""
    w = f"{surface.width:g}"
    h = f"{surface.height:g}"
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<svg viewBox="0 0 {w} {h}" width="{w}" height="{h}" xmlns="{SVG_NS}"'
        f' role="img">',
    ]
    if surface.background_href:
        href = html.escape(surface.background_href, quote=True)
        lines.append(
            f'  <image href="{href}" x="0" y="0" width="{w}" height="{h}"'
            ' preserveAspectRatio="none" />'
        )
    for child in surface.children:
        lines.extend(serialize_node(child, 1))
    lines.append("</svg>")
    return "\n".join(lines)
