"""Boundary document parsing into typed regions."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping, Sequence

from shapely.errors import ShapelyError
from shapely.geometry import Polygon

from .region import Region


_LOGGER = logging.getLogger("geoview.boundary")

NAME_PROPERTIES = ("name", "NAME", "name_en", "NAME_EN", "ADMIN", "admin", "NAME_LONG")
DEFAULT_ENCODE_SCALE = 1024


class InvalidFormat(ValueError):
    """Raised when a boundary document is not a usable named-geometry collection."""


def _first_existing_key(keys: Iterable[str], candidates: Sequence[str]) -> str | None:
    existing = set(keys)
    for candidate in candidates:
        if candidate in existing:
            return candidate
    return None


def decode_polygon(
    coordinate: str,
    encode_offsets: Sequence[float],
    encode_scale: float,
) -> list[list[float]]:
    """Decode one ring from the zigzag/delta character encoding."""
    result: list[list[float]] = []
    prev_x = int(encode_offsets[0])
    prev_y = int(encode_offsets[1])
    for i in range(0, len(coordinate) - 1, 2):
        x = ord(coordinate[i]) - 64
        y = ord(coordinate[i + 1]) - 64
        x = (x >> 1) ^ (-(x & 1))
        y = (y >> 1) ^ (-(y & 1))
        x += prev_x
        y += prev_y
        prev_x = x
        prev_y = y
        result.append([x / encode_scale, y / encode_scale])
    return result


def decode_document(document: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return a decoded copy of a `UTF8Encoding` document, or the document itself."""
    if not document.get("UTF8Encoding"):
        return document
    decoded = copy.deepcopy(dict(document))
    encode_scale = decoded.get("UTF8Scale")
    if encode_scale is None:
        encode_scale = DEFAULT_ENCODE_SCALE
    for feature in decoded["features"]:
        geometry = feature.get("geometry")
        if not geometry:
            continue
        coordinates = geometry["coordinates"]
        encode_offsets = geometry["encodeOffsets"]
        for c, coordinate in enumerate(coordinates):
            if geometry["type"] == "Polygon":
                coordinates[c] = decode_polygon(coordinate, encode_offsets[c], encode_scale)
            elif geometry["type"] == "MultiPolygon":
                for c2, polygon in enumerate(coordinate):
                    coordinate[c2] = decode_polygon(polygon, encode_offsets[c][c2], encode_scale)
    decoded["UTF8Encoding"] = False
    return decoded


def parse_geo_json(document: Any) -> list[Region]:
    """Parse a named-geometry collection into regions, in document order.

    Raises `InvalidFormat` carrying the underlying failure message when the
    document cannot be interpreted.
    """
    try:
        if not isinstance(document, Mapping):
            raise TypeError(f"expected a mapping document, got {type(document).__name__}")
        decoded = decode_document(document)
        regions = [_feature_to_region(feature) for feature in decoded["features"] if _is_usable(feature)]
    except (AttributeError, KeyError, IndexError, TypeError, ValueError, ShapelyError) as exc:
        raise InvalidFormat(f"Invalid geoJson format\n{_describe(exc)}") from exc
    _LOGGER.debug("Parsed %d regions from boundary document", len(regions))
    return regions


def _is_usable(feature: Mapping[str, Any]) -> bool:
    # Output of mapshaper may carry null geometry.
    geometry = feature.get("geometry")
    return bool(geometry) and feature.get("properties") is not None and len(geometry["coordinates"]) > 0


def _feature_to_region(feature: Mapping[str, Any]) -> Region:
    properties = feature["properties"]
    geometry = feature["geometry"]
    coordinates = geometry["coordinates"]
    geom_type = geometry.get("type")

    polygons: list[Polygon] = []
    if geom_type == "Polygon":
        polygons.append(_polygon(coordinates[0], coordinates[1:]))
    elif geom_type == "MultiPolygon":
        for item in coordinates:
            if item and item[0]:
                polygons.append(_polygon(item[0], item[1:]))

    name_key = _first_existing_key(properties.keys(), NAME_PROPERTIES)
    name = str(properties[name_key]) if name_key is not None else ""
    if name_key is None:
        _LOGGER.debug("Feature without a name property; keys=%s", sorted(properties.keys()))

    return Region(name, polygons, _center_property(properties.get("cp")), properties)


def _polygon(exterior: Sequence[Sequence[float]], interiors: Sequence[Sequence[Sequence[float]]]) -> Polygon:
    shell = [(float(p[0]), float(p[1])) for p in exterior]
    if not shell:
        raise ValueError("polygon exterior ring is empty")
    holes = [[(float(p[0]), float(p[1])) for p in ring] for ring in interiors]
    return Polygon(shell, holes)


def _center_property(raw: Any) -> tuple[float, float] | None:
    if raw is None:
        return None
    return (float(raw[0]), float(raw[1]))


def _describe(exc: BaseException) -> str:
    if isinstance(exc, KeyError):
        return f"missing key {exc.args[0]!r}" if exc.args else "missing key"
    return str(exc)
