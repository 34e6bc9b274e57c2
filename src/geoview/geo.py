"""Geographic coordinate system over a set of named regions."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .boundary import parse_geo_json
from .corrections import DEFAULT_CORRECTIONS, CorrectionStep, run_corrections
from .models import Coordinate, NamedReference, SpecialArea, to_geo_input
from .rect import BoundingRect
from .region import Region
from .view import View

if TYPE_CHECKING:
    from .locator import CoordinateSystemHost, Locator


_LOGGER = logging.getLogger("geoview.geo")

Point2 = tuple[float, float]


def _special_area(value: SpecialArea | Mapping[str, Any], name: str) -> SpecialArea:
    if isinstance(value, SpecialArea):
        return value
    return SpecialArea.from_mapping(value, f"special_areas.{name}")


class GeoCoordinateSystem(View):
    """Regions of one map plus the lng/lat <-> output-space transform.

    The boundary document is loaded at construction. `load_geo_json` may be
    called again to rebuild regions and indices from scratch.
    """

    type = "geo"
    dimensions = ("lng", "lat")

    def __init__(
        self,
        name: str,
        map_type: str,
        document: Mapping[str, Any] | None,
        special_areas: Mapping[str, SpecialArea | Mapping[str, Any]] | None = None,
        name_map: Mapping[str, str] | None = None,
        corrections: Sequence[CorrectionStep] | None = None,
    ) -> None:
        super().__init__(name)
        self.map = map_type
        self.corrections: tuple[CorrectionStep, ...] = tuple(
            DEFAULT_CORRECTIONS if corrections is None else corrections
        )
        self.regions: list[Region] = []
        self._regions_map: dict[str, Region] = {}
        self._name_coord_map: dict[str, Point2] = {}
        self.load_geo_json(document, special_areas, name_map)

    @property
    def region_index(self) -> Mapping[str, Region]:
        return MappingProxyType(self._regions_map)

    def load_geo_json(
        self,
        document: Mapping[str, Any] | None,
        special_areas: Mapping[str, SpecialArea | Mapping[str, Any]] | None = None,
        name_map: Mapping[str, str] | None = None,
    ) -> None:
        """Rebuild regions, indices and the bounds cache from a boundary document.

        Raises `InvalidFormat` when the document cannot be parsed.
        """
        self.regions = parse_geo_json(document) if document is not None else []
        special_areas = special_areas or {}
        name_map = name_map or {}

        regions_map: dict[str, Region] = {}
        self._name_coord_map = {}
        for region in self.regions:
            region_name = name_map.get(region.name, region.name)
            region.name = region_name
            regions_map[region_name] = region
            self.add_geo_coord(region_name, region.center)

        self._regions_map = regions_map
        self._rect = None

        # Some areas, like Alaska on a USA map, are drawn away from their real position.
        for region in self.regions:
            special = special_areas.get(region.name)
            if special is not None:
                area = _special_area(special, region.name)
                region.transform_to(area.left, area.top, area.width, area.height)

        run_corrections(self, self.corrections)
        _LOGGER.info(
            "Loaded %d regions (%d unique names) into %s [%s]",
            len(self.regions),
            len(self._regions_map),
            self.name,
            self.map,
        )

    def contains_point(self, coord: Sequence[float]) -> bool:
        return self.get_region_by_coord(coord) is not None

    def get_region(self, name: str) -> Region | None:
        return self._regions_map.get(name)

    def get_region_by_coord(self, coord: Sequence[float]) -> Region | None:
        for region in self.regions:
            if region.contain(coord):
                return region
        return None

    def add_region(self, region: Region) -> None:
        """Append a region and index it by name. Used by correction steps."""
        self.regions.append(region)
        self._regions_map[region.name] = region
        self.add_geo_coord(region.name, region.center)
        self.invalidate_bounding_rect()

    def add_geo_coord(self, name: str, geo_coord: Sequence[float]) -> None:
        self._name_coord_map[name] = (float(geo_coord[0]), float(geo_coord[1]))

    def get_geo_coord(self, name: str) -> Point2 | None:
        return self._name_coord_map.get(name)

    def get_bounding_rect(self) -> BoundingRect:
        if self._rect is not None:
            return self._rect
        rect: BoundingRect | None = None
        for region in self.regions:
            region_rect = region.get_bounding_rect()
            if rect is None:
                rect = region_rect.clone()
            else:
                rect.union(region_rect)
        self._rect = rect or BoundingRect(0.0, 0.0, 0.0, 0.0)
        return self._rect

    def invalidate_bounding_rect(self) -> None:
        self._rect = None

    def transform_to(self, x: float, y: float, width: float, height: float) -> None:
        rect = self.get_bounding_rect().clone()
        # Latitude grows northward while output y grows downward.
        rect.y = -rect.y - rect.height

        view_transform = self._view_transform
        view_transform.transform = rect.calculate_transform(BoundingRect(x, y, width, height))
        view_transform.decompose_transform()
        view_transform.scale[1] = -view_transform.scale[1]
        view_transform.update_transform()

        self._update_transform()

    def data_to_point(self, data: Any) -> Point2 | None:
        value = to_geo_input(data)
        if isinstance(value, NamedReference):
            coord = self.get_geo_coord(value.name)
            if coord is None:
                return None
            value = Coordinate(*coord)
        if value is None:
            return None
        return super().data_to_point(value.as_tuple())

    def point_to_data(self, point: Any) -> Point2 | None:
        if point is None:
            return None
        return super().point_to_data(point)

    def convert_to_pixel(self, host: CoordinateSystemHost, locator: Locator, value: Any) -> Point2 | None:
        coord_sys = host.find_coordinate_system(locator)
        return coord_sys.data_to_point(value) if coord_sys is self else None

    def convert_from_pixel(self, host: CoordinateSystemHost, locator: Locator, value: Any) -> Point2 | None:
        coord_sys = host.find_coordinate_system(locator)
        return coord_sys.point_to_data(value) if coord_sys is self else None
