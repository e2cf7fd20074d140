"""Preview scene graph — declarative SVG nodes and the surface that hosts them."""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, Field


class SceneNode(BaseModel):
    tag: str
    attributes: dict[str, str] = Field(default_factory=dict)
    children: list[SceneNode] = Field(default_factory=list)
    text: str | None = None

    @property
    def css_class(self) -> str:
        return self.attributes.get("class", "")

    def walk(self, tag: str | None = None) -> Iterator[SceneNode]:
        """Depth-first walk over this node and its descendants."""
        if tag is None or self.tag == tag:
            yield self
        for child in self.children:
            yield from child.walk(tag)

    def find_by_id(self, node_id: str) -> SceneNode | None:
        for node in self.walk():
            if node.attributes.get("id") == node_id:
                return node
        return None


SceneNode.model_rebuild()


class PreviewSurface(BaseModel):
    """The preview box: a CSS-style raster background with overlay children."""

    width: float = 0.0
    height: float = 0.0
    background_href: str = ""
    children: list[SceneNode] = Field(default_factory=list)

    @property
    def has_size(self) -> bool:
        return self.width > 0 and self.height > 0

    def find(self, css_class: str) -> list[SceneNode]:
        return [c for c in self.children if c.css_class == css_class]

    def remove(self, css_class: str) -> int:
        """Drop every direct child with ``css_class``; returns how many went."""
        kept = [c for c in self.children if c.css_class != css_class]
        removed = len(self.children) - len(kept)
        self.children = kept
        return removed

    def append(self, node: SceneNode) -> None:
        self.children.append(node)

    def to_svg(self) -> str:
        from warscroll.svg.serializer import serialize_surface

        return serialize_surface(self)
