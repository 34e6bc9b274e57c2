from __future__ import annotations

import pytest

from conftest import feature_collection, square_feature
from geoview.boundary import InvalidFormat
from geoview.geo import GeoCoordinateSystem
from geoview.models import Coordinate, NamedReference, SpecialArea


def _geo(document, **kwargs) -> GeoCoordinateSystem:
    return GeoCoordinateSystem("test", "custom", document, **kwargs)


def test_single_region_center_and_name_coord():
    geo = _geo(feature_collection(square_feature("A", 5, 15)))
    assert geo.get_region("A").center == pytest.approx((10, 20))
    assert geo.get_geo_coord("A") == pytest.approx((10, 20))
    assert geo.type == "geo"
    assert geo.dimensions == ("lng", "lat")


def test_bounding_rect_is_union_of_regions():
    geo = _geo(feature_collection(square_feature("A", 0, 0, 10), square_feature("B", 20, 20, 5)))
    assert geo.get_bounding_rect().to_list() == [0, 0, 25, 25]


def test_bounding_rect_is_cached():
    geo = _geo(feature_collection(square_feature("A", 0, 0)))
    first = geo.get_bounding_rect()
    assert geo.get_bounding_rect() is first


def test_empty_document_gives_zero_rect():
    geo = _geo(None)
    assert geo.regions == []
    assert geo.get_bounding_rect().to_list() == [0, 0, 0, 0]


def test_aliases_apply_exactly_once():
    document = feature_collection(square_feature("raw-a", 0, 0), square_feature("B", 20, 0))
    geo = _geo(document, name_map={"raw-a": "Alpha", "Alpha": "Twice"})
    assert [region.name for region in geo.regions] == ["Alpha", "B"]
    assert set(geo.region_index) == {"Alpha", "B"}
    assert geo.get_geo_coord("Alpha") == pytest.approx((5, 5))
    assert geo.get_region("raw-a") is None


def test_duplicate_names_after_aliasing_last_wins():
    document = feature_collection(square_feature("a1", 0, 0), square_feature("a2", 20, 0))
    geo = _geo(document, name_map={"a1": "X", "a2": "X"})
    assert len(geo.regions) == 2
    assert geo.region_index["X"] is geo.regions[1]
    assert geo.get_geo_coord("X") == pytest.approx((25, 5))


def test_region_index_is_read_only(two_squares):
    geo = _geo(two_squares)
    with pytest.raises(TypeError):
        geo.region_index["C"] = geo.regions[0]  # type: ignore[index]


def test_special_area_repositions_region(two_squares):
    geo = _geo(two_squares, special_areas={"B": SpecialArea(left=100, top=50, width=4)})
    region = geo.get_region("B")
    assert region.get_bounding_rect().to_list() == pytest.approx([100, 50, 4, 4])
    assert region.center == pytest.approx((102, 52))
    # name-coord index keeps the pre-repositioning center
    assert geo.get_geo_coord("B") == pytest.approx((25, 5))
    assert geo.get_bounding_rect().to_list() == pytest.approx([0, 0, 104, 54])


def test_special_area_accepts_plain_mapping(two_squares):
    geo = _geo(two_squares, special_areas={"A": {"left": -10, "top": -10, "width": 2, "height": 3}})
    assert geo.get_region("A").get_bounding_rect().to_list() == pytest.approx([-10, -10, 2, 3])


def test_contains_point_and_region_by_coord(two_squares):
    geo = _geo(two_squares)
    assert geo.contains_point((5, 5))
    assert geo.get_region_by_coord((25, 5)).name == "B"
    assert geo.get_region_by_coord((15, 5)) is None
    assert not geo.contains_point((15, 5))


def test_fit_inverts_vertical_axis():
    geo = _geo(feature_collection(square_feature("A", 0, 0, 10)))
    geo.transform_to(0, 0, 100, 100)
    assert geo.data_to_point([0, 10]) == pytest.approx((0, 0))
    assert geo.data_to_point([0, 0]) == pytest.approx((0, 100))
    assert geo.data_to_point([10, 5]) == pytest.approx((100, 50))


def test_round_trip_through_fitted_transform(two_squares):
    geo = _geo(two_squares)
    geo.set_view_rect(40, 30, 600, 200)
    for coord in [(0, 0), (30, 10), (12.5, 7.25), (29.9, 0.1)]:
        point = geo.data_to_point(coord)
        assert geo.point_to_data(point) == pytest.approx(coord)


def test_data_to_point_by_name(two_squares):
    geo = _geo(two_squares)
    geo.set_view_rect(0, 0, 300, 100)
    assert geo.data_to_point("A") == pytest.approx(geo.data_to_point([5, 5]))
    assert geo.data_to_point(NamedReference("B")) == pytest.approx(geo.data_to_point(Coordinate(25, 5)))
    assert geo.data_to_point("missing") is None
    assert geo.data_to_point(None) is None
    assert geo.point_to_data(None) is None


def test_conversion_before_fit_is_absent(two_squares):
    geo = _geo(two_squares)
    assert geo.data_to_point([1, 1]) is None
    assert geo.point_to_data([1, 1]) is None


def test_add_region_and_geo_coord(two_squares):
    from shapely.geometry import Polygon

    from geoview.region import Region

    geo = _geo(two_squares)
    assert geo.get_bounding_rect().to_list() == [0, 0, 30, 10]
    geo.add_region(Region("C", [Polygon([(40, 0), (50, 0), (50, 10), (40, 10)])]))
    assert geo.get_region("C") is geo.regions[-1]
    assert geo.get_geo_coord("C") == (45.0, 5.0)
    assert geo.get_bounding_rect().to_list() == [0, 0, 50, 10]

    geo.add_geo_coord("label", [1, 2])
    assert geo.get_geo_coord("label") == (1.0, 2.0)
    assert geo.get_geo_coord("nowhere") is None


def test_reload_rebuilds_indices(two_squares):
    geo = _geo(two_squares)
    rect = geo.get_bounding_rect()
    geo.load_geo_json(feature_collection(square_feature("Z", 100, 100)))
    assert [region.name for region in geo.regions] == ["Z"]
    assert geo.get_region("A") is None
    assert geo.get_geo_coord("A") is None
    assert geo.get_bounding_rect() is not rect
    assert geo.get_bounding_rect().to_list() == [100, 100, 10, 10]


def test_invalid_document_raises():
    with pytest.raises(InvalidFormat):
        _geo({"type": "FeatureCollection"})


def test_empty_mapping_document_raises():
    with pytest.raises(InvalidFormat, match="missing key 'features'"):
        _geo({})
