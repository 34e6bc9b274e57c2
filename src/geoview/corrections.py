"""Post-load corrections for known geometry and label-anchor issues.

Each step is a named callable taking the loaded coordinate system. Steps run
in the order they are given, mutate regions or the name-coordinate index in
place, and silently do nothing when their target region is absent. A step
that changes geometry must invalidate the coordinate system's bounds cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from shapely.geometry import Polygon

from .region import Region

if TYPE_CHECKING:
    from .geo import GeoCoordinateSystem


_LOGGER = logging.getLogger("geoview.corrections")

# Pixel offsets in the correction tables are converted to degrees with these.
PIXELS_PER_DEGREE = 10.5
LAT_ASPECT = 0.75

Point2 = tuple[float, float]


@dataclass(frozen=True, slots=True)
class CorrectionStep:
    """One named, independently testable post-load correction."""

    name: str
    apply: Callable[[GeoCoordinateSystem], None]

    def __call__(self, geo: GeoCoordinateSystem) -> None:
        self.apply(geo)


def _applies_to(geo: GeoCoordinateSystem, map_type: str | None) -> bool:
    return map_type is None or geo.map == map_type


def _pixel_to_degree(dx: float, dy: float, divisor: float, aspect: float) -> Point2:
    return (dx / divisor, -dy / (divisor / aspect))


def _set_center(geo: GeoCoordinateSystem, region: Region, center: Point2) -> None:
    region.center = center
    geo.add_geo_coord(region.name, center)


def text_offset_step(
    name: str,
    map_type: str | None,
    offsets: Mapping[str, Point2],
    *,
    divisor: float = PIXELS_PER_DEGREE,
    aspect: float = LAT_ASPECT,
) -> CorrectionStep:
    """Shift label anchors of named regions by a pixel offset."""
    table = dict(offsets)

    def apply(geo: GeoCoordinateSystem) -> None:
        if not _applies_to(geo, map_type):
            return
        for region in geo.regions:
            offset = table.get(region.name)
            if offset is None:
                continue
            dx, dy = _pixel_to_degree(offset[0], offset[1], divisor, aspect)
            _set_center(geo, region, (region.center[0] + dx, region.center[1] + dy))
            _LOGGER.debug("[%s] shifted anchor of %s by (%.4f, %.4f)", name, region.name, dx, dy)

    return CorrectionStep(name, apply)


def geo_coord_step(name: str, map_type: str | None, coords: Mapping[str, Point2]) -> CorrectionStep:
    """Pin the representative coordinate of named regions."""
    table = dict(coords)

    def apply(geo: GeoCoordinateSystem) -> None:
        if not _applies_to(geo, map_type):
            return
        for region in geo.regions:
            coord = table.get(region.name)
            if coord is None:
                continue
            _set_center(geo, region, (float(coord[0]), float(coord[1])))
            _LOGGER.debug("[%s] pinned %s to %s", name, region.name, coord)

    return CorrectionStep(name, apply)


def insert_region_step(
    name: str,
    map_type: str | None,
    region_name: str,
    anchor: Point2,
    rings: Sequence[Sequence[Point2]],
    *,
    divisor: float = PIXELS_PER_DEGREE,
    aspect: float = LAT_ASPECT,
) -> CorrectionStep:
    """Insert a region drawn in pixel units next to `anchor`.

    Ring points are scaled like label offsets and placed relative to the
    anchor, which also becomes the region's center. Re-running is a no-op.
    """
    placed = [
        [
            (anchor[0] + dx, anchor[1] + dy)
            for dx, dy in (_pixel_to_degree(x, y, divisor, aspect) for x, y in ring)
        ]
        for ring in rings
    ]

    def apply(geo: GeoCoordinateSystem) -> None:
        if not _applies_to(geo, map_type) or geo.get_region(region_name) is not None:
            return
        region = Region(region_name, [Polygon(ring) for ring in placed], anchor)
        geo.add_region(region)
        _LOGGER.debug("[%s] inserted region %s with %d polygons", name, region_name, len(placed))

    return CorrectionStep(name, apply)


def append_polygon_step(
    name: str,
    map_type: str | None,
    region_name: str,
    ring: Sequence[Point2],
) -> CorrectionStep:
    """Add a missing polygon to every region carrying `region_name`."""
    exterior = [(float(x), float(y)) for x, y in ring]
    candidate = Polygon(exterior)

    def apply(geo: GeoCoordinateSystem) -> None:
        if not _applies_to(geo, map_type):
            return
        changed = False
        for region in geo.regions:
            if region.name != region_name:
                continue
            if any(polygon.equals(candidate) for polygon in region.geometries):
                continue
            region.add_polygon(exterior)
            changed = True
        if changed:
            geo.invalidate_bounding_rect()
            _LOGGER.debug("[%s] appended polygon to %s", name, region_name)

    return CorrectionStep(name, apply)


_NANHAI_RINGS: tuple[tuple[Point2, ...], ...] = (
    ((0, 3.5), (7, 11.2), (15, 11.9), (30, 7), (42, 0.7), (52, 0.7), (56, 7.7), (59, 0.7), (64, 0.7), (64, 0), (5, 0), (0, 3.5)),
    ((13, 16.1), (19, 14.7), (16, 21.7), (11, 23.1), (13, 16.1)),
    ((12, 32.2), (14, 38.5), (15, 38.5), (13, 32.2), (12, 32.2)),
    ((16, 47.6), (12, 53.2), (13, 53.2), (18, 47.6), (16, 47.6)),
    ((6, 64.4), (8, 70), (9, 70), (8, 64.4), (6, 64.4)),
    ((23, 82.6), (29, 79.8), (30, 79.8), (25, 82.6), (23, 82.6)),
    ((37, 70.7), (43, 62.3), (44, 62.3), (39, 70.7), (37, 70.7)),
    ((48, 51.1), (51, 45.5), (53, 45.5), (50, 51.1), (48, 51.1)),
    ((51, 35), (51, 28.7), (53, 28.7), (53, 35), (51, 35)),
    ((52, 22.4), (55, 17.5), (56, 17.5), (53, 22.4), (52, 22.4)),
    ((58, 12.6), (62, 7), (63, 7), (60, 12.6), (58, 12.6)),
    ((0, 3.5), (0, 93.1), (64, 93.1), (64, 0), (63, 0), (63, 92.4), (1, 92.4), (1, 3.5), (0, 3.5)),
)

_DIAOYU_RING: tuple[Point2, ...] = (
    (123.45165252685547, 25.73527164402261),
    (123.49731445312499, 25.73527164402261),
    (123.49731445312499, 25.750734064600884),
    (123.45165252685547, 25.750734064600884),
    (123.45165252685547, 25.73527164402261),
)

NANHAI = insert_region_step("nanhai", "china", "南海诸岛", (126.0, 25.0), _NANHAI_RINGS)
TEXT_COORD = text_offset_step(
    "text_coord",
    "china",
    {
        "南海诸岛": (32, 80),
        "广东": (0, -10),
        "香港": (10, 5),
        "澳门": (-10, 10),
        "天津": (5, 5),
    },
)
GEO_COORD = geo_coord_step(
    "geo_coord",
    "world",
    {
        "Russia": (100, 60),
        "United States": (-99, 38),
        "United States of America": (-99, 38),
    },
)
DIAOYU_ISLAND = append_polygon_step("diaoyu_island", "china", "台湾", _DIAOYU_RING)

DEFAULT_CORRECTIONS: tuple[CorrectionStep, ...] = (NANHAI, TEXT_COORD, GEO_COORD, DIAOYU_ISLAND)

BUILTIN_CORRECTIONS: Mapping[str, CorrectionStep] = MappingProxyType(
    {step.name: step for step in DEFAULT_CORRECTIONS}
)


def run_corrections(geo: GeoCoordinateSystem, steps: Sequence[CorrectionStep]) -> None:
    for step in steps:
        step(geo)
    _LOGGER.debug("Applied %d corrections to %s", len(steps), geo.name)
