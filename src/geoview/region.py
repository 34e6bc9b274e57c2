"""Named geographic region backed by shapely polygons."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from affine import Affine
from shapely import affinity
from shapely.geometry import Point, Polygon

from .rect import BoundingRect


Ring = Sequence[Sequence[float]]


class Region:
    """One named area: polygons, a representative center and lazy bounds.

    `center` is taken from the caller when given, otherwise it is the center
    of the bounding rect at construction time.
    """

    def __init__(
        self,
        name: str,
        geometries: Iterable[Polygon],
        center: Sequence[float] | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.geometries: list[Polygon] = list(geometries)
        self.properties: dict[str, Any] = dict(properties or {})
        self._rect: BoundingRect | None = None
        if center is None:
            self.center = self.get_bounding_rect().center
        else:
            self.center = (float(center[0]), float(center[1]))

    def __repr__(self) -> str:
        return f"Region(name={self.name!r}, polygons={len(self.geometries)}, center={self.center!r})"

    def get_bounding_rect(self) -> BoundingRect:
        if self._rect is not None:
            return self._rect
        if not self.geometries:
            self._rect = BoundingRect(0.0, 0.0, 0.0, 0.0)
            return self._rect
        min_x, min_y, max_x, max_y = self.geometries[0].bounds
        for polygon in self.geometries[1:]:
            x0, y0, x1, y1 = polygon.bounds
            min_x, min_y = min(min_x, x0), min(min_y, y0)
            max_x, max_y = max(max_x, x1), max(max_y, y1)
        self._rect = BoundingRect.from_bounds(min_x, min_y, max_x, max_y)
        return self._rect

    def invalidate_bounding_rect(self) -> None:
        self._rect = None

    def contain(self, coord: Sequence[float]) -> bool:
        x, y = float(coord[0]), float(coord[1])
        if not self.get_bounding_rect().contain(x, y):
            return False
        point = Point(x, y)
        # Holes are part of each polygon, so a point inside a hole is not covered.
        return any(polygon.covers(point) for polygon in self.geometries)

    def add_polygon(self, exterior: Ring, interiors: Sequence[Ring] = ()) -> Polygon:
        polygon = Polygon(exterior, list(interiors))
        self.geometries.append(polygon)
        self.invalidate_bounding_rect()
        return polygon

    def apply_transform(self, transform: Affine) -> None:
        matrix = transform.to_shapely()
        self.geometries = [affinity.affine_transform(polygon, matrix) for polygon in self.geometries]
        self.invalidate_bounding_rect()

    def transform_to(
        self,
        x: float,
        y: float,
        width: float | None = None,
        height: float | None = None,
    ) -> None:
        """Fit this region's bounds onto the given frame, in place.

        A missing width or height is derived from the current aspect ratio.
        """
        rect = self.get_bounding_rect()
        aspect = rect.width / rect.height if rect.height else 1.0
        if not width:
            width = aspect * (height or 0.0)
        elif not height:
            height = width / aspect if aspect else width
        target = BoundingRect(float(x), float(y), float(width), float(height))
        self.apply_transform(rect.calculate_transform(target))
        self._rect = target.clone()
        self.center = target.center
