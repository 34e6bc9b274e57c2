"""Axis-aligned rectangle used for region bounds and view fitting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from affine import Affine


@dataclass(slots=True)
class BoundingRect:
    """Mutable rectangle anchored at its minimum corner."""

    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_bounds(cls, min_x: float, min_y: float, max_x: float, max_y: float) -> BoundingRect:
        return cls(float(min_x), float(min_y), float(max_x - min_x), float(max_y - min_y))

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> BoundingRect:
        xs: list[float] = []
        ys: list[float] = []
        for point in points:
            xs.append(float(point[0]))
            ys.append(float(point[1]))
        if not xs:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls.from_bounds(min(xs), min(ys), max(xs), max(ys))

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def clone(self) -> BoundingRect:
        return BoundingRect(self.x, self.y, self.width, self.height)

    def copy(self, other: BoundingRect) -> None:
        self.x = other.x
        self.y = other.y
        self.width = other.width
        self.height = other.height

    def union(self, other: BoundingRect) -> None:
        """Grow this rectangle in place so it also encloses `other`."""
        x = min(other.x, self.x)
        y = min(other.y, self.y)
        self.width = max(other.x + other.width, self.x + self.width) - x
        self.height = max(other.y + other.height, self.y + self.height) - y
        self.x = x
        self.y = y

    def contain(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def intersect(self, other: BoundingRect) -> bool:
        ax0, ay0, ax1, ay1 = self.bounds
        bx0, by0, bx1, by1 = other.bounds
        return not (ax1 < bx0 or bx1 < ax0 or ay1 < by0 or by1 < ay0)

    def calculate_transform(self, target: BoundingRect) -> Affine:
        """Affine mapping this rectangle onto `target` (scale + translation).

        An axis with zero extent keeps scale 1 so the result stays finite.
        """
        sx = target.width / self.width if self.width else 1.0
        sy = target.height / self.height if self.height else 1.0
        return (
            Affine.translation(target.x, target.y)
            * Affine.scale(sx, sy)
            * Affine.translation(-self.x, -self.y)
        )

    def apply_transform(self, transform: Affine) -> None:
        """Replace this rectangle by the bounds of its transformed corners."""
        x0, y0, x1, y1 = self.bounds
        corners = [transform * (x, y) for x, y in ((x0, y0), (x1, y0), (x1, y1), (x0, y1))]
        self.copy(BoundingRect.from_points(corners))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.width, self.height]
