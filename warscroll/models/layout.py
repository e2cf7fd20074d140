"""Badge layout models."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from warscroll.models.stats import StatKind

Point = tuple[float, float]


class QuadrantName(str, enum.Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


class Quadrant(BaseModel):
    """A 90° sector of the badge, centred on ``angle`` (0° = +x, clockwise)."""

    name: QuadrantName
    angle: float
    stat: StatKind
    label: str = ""
    # Path runs end -> start so the label stays upright
    reverse: bool = False

    @property
    def start_angle(self) -> float:
        return self.angle - 45.0

    @property
    def end_angle(self) -> float:
        return self.angle + 45.0

    @property
    def path_id(self) -> str:
        return f"q-{self.name.value}"


class ArcPath(BaseModel):
    """Circular arc between two points, in SVG elliptical-arc terms."""

    start: Point
    end: Point
    radius: float
    delta: float
    large_arc: int = 0
    sweep: int = 0

    @property
    def d(self) -> str:
        sx, sy = self.start
        ex, ey = self.end
        return (
            f"M {sx:.2f} {sy:.2f} "
            f"A {self.radius:g} {self.radius:g} 0 {self.large_arc} {self.sweep} "
            f"{ex:.2f} {ey:.2f}"
        )


class BadgeLayout(BaseModel):
    """Badge geometry derived from the background's pixel size."""

    width: float
    height: float
    center: Point
    circle_radius: float
    label_radius: float
    number_radius: float
    quadrants: list[Quadrant] = Field(default_factory=list)

    def quadrant(self, name: QuadrantName | str) -> Quadrant:
        name = QuadrantName(name)
        for quadrant in self.quadrants:
            if quadrant.name is name:
                return quadrant
        raise KeyError(name.value)

    def quadrant_for(self, kind: StatKind | str) -> Quadrant:
        kind = StatKind(kind)
        for quadrant in self.quadrants:
            if quadrant.stat is kind:
                return quadrant
        raise KeyError(kind.value)
