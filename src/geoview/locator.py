"""Resolution of logical references to coordinate-system instances."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class Locator:
    """Logical reference to a coordinate system.

    `geo` names a geo component directly; `series` names a data series whose
    coordinate system (or referenced geo component) should be used.
    """

    geo: str | None = None
    series: str | None = None


class CoordinateSystemHost(Protocol):
    """Anything that hosts several named coordinate systems."""

    def find_coordinate_system(self, locator: Locator) -> Any | None:
        ...


@dataclass(frozen=True, slots=True)
class SeriesBinding:
    coordinate_system: Any | None = None
    geo: str | None = None


class CoordinateSystemRegistry:
    """In-memory host mapping geo components and series to coordinate systems."""

    def __init__(self) -> None:
        self._geos: dict[str, Any] = {}
        self._series: dict[str, SeriesBinding] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._geos

    @property
    def geo_names(self) -> tuple[str, ...]:
        return tuple(self._geos)

    def register_geo(self, name: str, coordinate_system: Any) -> None:
        self._geos[name] = coordinate_system

    def register_series(
        self,
        name: str,
        *,
        coordinate_system: Any | None = None,
        geo: str | None = None,
    ) -> None:
        """Bind a series to its own coordinate system, a geo component, or both."""
        self._series[name] = SeriesBinding(coordinate_system=coordinate_system, geo=geo)

    def get_geo(self, name: str) -> Any | None:
        return self._geos.get(name)

    def find_coordinate_system(self, locator: Locator) -> Any | None:
        if locator.geo is not None:
            return self._geos.get(locator.geo)
        if locator.series is not None:
            binding = self._series.get(locator.series)
            if binding is None:
                return None
            if binding.coordinate_system is not None:
                return binding.coordinate_system
            if binding.geo is not None:
                return self._geos.get(binding.geo)
        return None
