from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest


def square_ring(x: float, y: float, size: float = 10.0) -> list[list[float]]:
    return [[x, y], [x + size, y], [x + size, y + size], [x, y + size], [x, y]]


def square_feature(name: str | None, x: float, y: float, size: float = 10.0, **props: Any) -> dict[str, Any]:
    properties: dict[str, Any] = dict(props)
    if name is not None:
        properties["name"] = name
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Polygon", "coordinates": [square_ring(x, y, size)]},
    }


def feature_collection(*features: dict[str, Any]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


@pytest.fixture
def two_squares() -> dict[str, Any]:
    """Regions A [0,0,10,10] and B [20,0,10,10]."""
    return feature_collection(square_feature("A", 0, 0), square_feature("B", 20, 0))


@pytest.fixture
def china_document() -> dict[str, Any]:
    return feature_collection(
        square_feature("广东", 110, 20, 2),
        square_feature("台湾", 120, 22, 2),
        square_feature("北京", 115, 39, 2),
    )


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a boundary file plus geoview.yaml into tmp_path and return the config path."""

    def _write(yaml_text: str, document: dict[str, Any] | None = None, boundary: str = "regions.geojson") -> Path:
        if document is not None:
            (tmp_path / boundary).write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
        cfg_path = tmp_path / "geoview.yaml"
        cfg_path.write_text(yaml_text, encoding="utf-8")
        return cfg_path

    return _write
