from __future__ import annotations

import pytest
import yaml

from geoview.models import Coordinate, NamedReference, SpecialArea, to_geo_input
from geoview.overrides import load_name_map, load_special_areas, parse_name_map


def test_missing_override_files_are_empty(tmp_path):
    assert load_name_map(tmp_path / "names.yaml") == {}
    assert load_special_areas(tmp_path / "areas.yaml") == {}


def test_empty_override_file_is_empty(tmp_path):
    path = tmp_path / "names.yaml"
    path.write_text("", encoding="utf-8")
    assert load_name_map(path) == {}


def test_load_name_map_strips_values(tmp_path):
    path = tmp_path / "names.yaml"
    path.write_text("United States of America: ' USA '\nRussia: Russian Federation\n", encoding="utf-8")
    assert load_name_map(path) == {"United States of America": "USA", "Russia": "Russian Federation"}


def test_name_map_rejects_blank_values():
    with pytest.raises(ValueError, match="must be a non-empty string"):
        parse_name_map({"a": " "}, "inline")


def test_load_special_areas(tmp_path):
    path = tmp_path / "areas.yaml"
    path.write_text(
        yaml.safe_dump({"Alaska": {"left": -131, "top": 25, "width": 15}, "Hawaii": {"left": -110, "top": 28, "height": 5}}),
        encoding="utf-8",
    )
    areas = load_special_areas(path)
    assert areas["Alaska"] == SpecialArea(left=-131, top=25, width=15)
    assert areas["Hawaii"].width is None
    assert areas["Hawaii"].to_dict() == {"left": -110, "top": 28, "width": None, "height": 5}


def test_special_areas_require_mapping_file(tmp_path):
    path = tmp_path / "areas.yaml"
    path.write_text("- Alaska\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Expected mapping"):
        load_special_areas(path)


@pytest.mark.parametrize(
    "raw",
    [
        {"top": 1, "width": 1},
        {"left": "x", "top": 1, "width": 1},
        {"left": 0, "top": 0, "width": -1},
        {"left": True, "top": 0, "width": 1},
    ],
)
def test_special_area_validation(raw):
    with pytest.raises(ValueError):
        SpecialArea.from_mapping(raw)


def test_to_geo_input_tags_values():
    assert to_geo_input("Texas") == NamedReference("Texas")
    assert to_geo_input([1, 2]) == Coordinate(1.0, 2.0)
    assert to_geo_input((1, 2, 3)) == Coordinate(1.0, 2.0)
    assert to_geo_input(Coordinate(3, 4)) == Coordinate(3, 4)
    assert to_geo_input(None) is None
    assert to_geo_input([1]) is None
    assert to_geo_input(5) is None
