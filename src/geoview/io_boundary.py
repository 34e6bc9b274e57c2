"""Boundary document loading from disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any


_LOGGER = logging.getLogger("geoview.io_boundary")

GEOJSON_SUFFIXES = (".json", ".geojson")


def load_boundary_document(path: Path) -> dict[str, Any]:
    """Read a boundary file into a feature-collection mapping.

    GeoJSON (including the compressed UTF8Encoding variant) is read as-is.
    Other vector formats go through GeoPandas and are exported via
    `__geo_interface__`.
    """
    if not path.exists():
        raise FileNotFoundError(f"Boundary file not found: {path}")
    if path.suffix.lower() in GEOJSON_SUFFIXES:
        with path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
        if not isinstance(document, dict):
            raise ValueError(f"Expected JSON object in {path}")
        return document

    gpd = _require_geopandas()
    frame = gpd.read_file(path)
    _LOGGER.debug("Read %d rows from %s via geopandas", len(frame), path)
    return dict(frame.__geo_interface__)


def _require_geopandas() -> Any:
    try:
        import geopandas as gpd
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError("geopandas is required to read non-GeoJSON boundary files") from exc
    return gpd
