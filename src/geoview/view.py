"""Generic 2D view: a fitted view transform plus pan/zoom (roam) state."""

from __future__ import annotations

import math
from typing import Any, Sequence

from affine import Affine

from .rect import BoundingRect


class Transformable:
    """Position/scale/rotation/origin components and the matrix they compose to.

    `transform` is the composed matrix. `decompose_transform` refreshes the
    components from it and `update_transform` goes the other way, so a caller
    can fit a matrix, tweak one component and recompose.
    """

    def __init__(self) -> None:
        self.position: list[float] = [0.0, 0.0]
        self.scale: list[float] = [1.0, 1.0]
        self.rotation: float = 0.0
        self.origin: list[float] = [0.0, 0.0]
        self.transform: Affine | None = None

    def get_local_transform(self) -> Affine:
        ox, oy = self.origin
        return (
            Affine.translation(self.position[0] + ox, self.position[1] + oy)
            * Affine.rotation(math.degrees(self.rotation))
            * Affine.scale(self.scale[0], self.scale[1])
            * Affine.translation(-ox, -oy)
        )

    def update_transform(self) -> None:
        self.transform = self.get_local_transform()

    def decompose_transform(self) -> None:
        t = self.transform
        if t is None:
            return
        sx = math.hypot(t.a, t.d)
        sy = math.hypot(t.b, t.e)
        if t.a < 0:
            sx = -sx
        if t.e < 0:
            sy = -sy
        self.position = [t.c, t.f]
        self.scale = [sx, sy]
        self.rotation = math.atan2(t.d / sx, t.a / sx) if sx else 0.0


class View:
    """Coordinate system mapping a source rectangle into an output rectangle.

    The combined transform applies the fitted view transform first and the
    roam (pan/zoom) transform second.
    """

    type = "view"
    dimensions: tuple[str, ...] = ("x", "y")

    def __init__(self, name: str) -> None:
        self.name = name
        self.zoom_limit: tuple[float, float] | None = None
        self.transform: Affine | None = None
        self.inv_transform: Affine | None = None
        self._view_transform = Transformable()
        self._roam_transform = Transformable()
        self._raw_transform: Affine | None = None
        self._rect: BoundingRect | None = None
        self._view_rect: BoundingRect | None = None
        self._center: tuple[float, float] | None = None
        self._zoom = 1.0

    def set_bounding_rect(self, x: float, y: float, width: float, height: float) -> BoundingRect:
        self._rect = BoundingRect(x, y, width, height)
        return self._rect

    def get_bounding_rect(self) -> BoundingRect:
        if self._rect is None:
            return BoundingRect(0.0, 0.0, 0.0, 0.0)
        return self._rect

    def set_view_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.transform_to(x, y, width, height)
        self._view_rect = BoundingRect(x, y, width, height)
        self._update_center_and_zoom()

    def transform_to(self, x: float, y: float, width: float, height: float) -> None:
        rect = self.get_bounding_rect()
        view_transform = self._view_transform
        view_transform.transform = rect.calculate_transform(BoundingRect(x, y, width, height))
        view_transform.decompose_transform()
        self._update_transform()

    def set_center(self, center: Sequence[float]) -> None:
        self._center = (float(center[0]), float(center[1]))
        self._update_center_and_zoom()

    def set_zoom(self, zoom: float) -> None:
        zoom = float(zoom)
        if self.zoom_limit is not None:
            low, high = self.zoom_limit
            zoom = max(min(zoom, high), low)
        self._zoom = zoom
        self._update_center_and_zoom()

    def get_default_center(self) -> tuple[float, float]:
        return self.get_bounding_rect().center

    def get_center(self) -> tuple[float, float]:
        return self._center or self.get_default_center()

    def get_zoom(self) -> float:
        return self._zoom

    def get_roam_transform(self) -> Affine:
        return self._roam_transform.get_local_transform()

    def get_view_rect(self) -> BoundingRect | None:
        return self._view_rect

    def get_view_rect_after_roam(self) -> BoundingRect | None:
        if self._view_rect is None:
            return None
        rect = self._view_rect.clone()
        rect.apply_transform(self.get_roam_transform())
        return rect

    def get_transform_info(self) -> dict[str, Any]:
        view_transform = self._view_transform
        return {
            "roam_transform": self.get_roam_transform(),
            "raw_transform": self._raw_transform,
            "raw_position": tuple(view_transform.position),
            "raw_scale": tuple(view_transform.scale),
            "raw_rotation": view_transform.rotation,
        }

    def data_to_point(self, data: Sequence[float]) -> tuple[float, float] | None:
        if self.transform is None:
            return None
        return self.transform * (float(data[0]), float(data[1]))

    def point_to_data(self, point: Sequence[float]) -> tuple[float, float] | None:
        if self.inv_transform is None:
            return None
        return self.inv_transform * (float(point[0]), float(point[1]))

    def _update_center_and_zoom(self) -> None:
        raw_transform = self._view_transform.get_local_transform()
        default_x, default_y = raw_transform * self.get_default_center()
        center_x, center_y = raw_transform * self.get_center()
        roam = self._roam_transform
        roam.origin = [center_x, center_y]
        roam.position = [default_x - center_x, default_y - center_y]
        roam.scale = [self._zoom, self._zoom]
        self._update_transform()

    def _update_transform(self) -> None:
        roam = self._roam_transform
        view_transform = self._view_transform
        roam.transform = roam.get_local_transform()
        view_transform.transform = view_transform.get_local_transform()
        self.transform = roam.transform * view_transform.transform
        self._raw_transform = view_transform.transform
        self.inv_transform = None if self.transform.is_degenerate else ~self.transform
