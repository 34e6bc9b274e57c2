"""Domain models shared across geoview modules."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence, Union


def _require_str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _require_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Expected numeric value for '{field_name}'")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Expected finite value for '{field_name}'")
    return number


def _optional_positive(value: Any, field_name: str) -> float | None:
    if value is None:
        return None
    number = _require_number(value, field_name)
    if number <= 0:
        raise ValueError(f"'{field_name}' must be > 0")
    return number


@dataclass(frozen=True, slots=True)
class SpecialArea:
    """Target frame for a region drawn away from its natural position.

    Units match the region geometry (degrees). When only one of width/height
    is given the other follows the region's own aspect ratio.
    """

    left: float
    top: float
    width: float | None = None
    height: float | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], field_name: str = "special_area") -> SpecialArea:
        left = _require_number(data.get("left"), f"{field_name}.left")
        top = _require_number(data.get("top"), f"{field_name}.top")
        width = _optional_positive(data.get("width"), f"{field_name}.width")
        height = _optional_positive(data.get("height"), f"{field_name}.height")
        if width is None and height is None:
            raise ValueError(f"'{field_name}' needs at least one of width/height")
        return cls(left=left, top=top, width=width, height=height)

    def to_dict(self) -> dict[str, float | None]:
        return {"left": self.left, "top": self.top, "width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class NamedReference:
    """Conversion input addressing a region by its resolved name."""

    name: str


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Conversion input given as an explicit (lng, lat) pair."""

    lng: float
    lat: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lng, self.lat)


GeoInput = Union[NamedReference, Coordinate]


def to_geo_input(value: Any) -> GeoInput | None:
    """Normalize a raw conversion argument into the tagged input type.

    Strings become `NamedReference`, 2-sequences become `Coordinate`.
    Anything else (including None) yields None.
    """
    if isinstance(value, (NamedReference, Coordinate)):
        return value
    if isinstance(value, str):
        return NamedReference(value)
    if isinstance(value, Sequence) and len(value) >= 2:
        return Coordinate(float(value[0]), float(value[1]))
    return None
