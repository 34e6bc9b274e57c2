from __future__ import annotations

import pytest
from affine import Affine

from geoview.view import Transformable, View


def _fitted_view() -> View:
    view = View("plain")
    view.set_bounding_rect(0, 0, 10, 10)
    view.set_view_rect(0, 0, 100, 100)
    return view


def test_transformable_decompose_then_update_round_trips():
    node = Transformable()
    node.transform = Affine(2, 0, 5, 0, -3, 7)
    node.decompose_transform()
    assert node.scale == pytest.approx([2, -3])
    assert node.position == pytest.approx([5, 7])
    assert node.rotation == pytest.approx(0.0)
    node.update_transform()
    t = node.transform
    assert (t.a, t.b, t.c, t.d, t.e, t.f) == pytest.approx((2, 0, 5, 0, -3, 7))


def test_unfitted_view_has_no_conversion():
    view = View("empty")
    assert view.get_bounding_rect().to_list() == [0, 0, 0, 0]
    assert view.data_to_point((1, 1)) is None
    assert view.point_to_data((1, 1)) is None


def test_plain_view_fit_and_inverse():
    view = _fitted_view()
    assert view.data_to_point((5, 5)) == pytest.approx((50, 50))
    assert view.data_to_point((10, 0)) == pytest.approx((100, 0))
    assert view.point_to_data((50, 50)) == pytest.approx((5, 5))


def test_zoom_scales_around_center():
    view = _fitted_view()
    view.set_zoom(2)
    assert view.get_zoom() == 2
    assert view.data_to_point((5, 5)) == pytest.approx((50, 50))
    assert view.data_to_point((10, 10)) == pytest.approx((150, 150))
    assert view.point_to_data((150, 150)) == pytest.approx((10, 10))


def test_zoom_limit_clamps():
    view = _fitted_view()
    view.zoom_limit = (1, 4)
    view.set_zoom(10)
    assert view.get_zoom() == 4
    view.set_zoom(0.1)
    assert view.get_zoom() == 1


def test_set_center_moves_it_to_view_center():
    view = _fitted_view()
    assert view.get_center() == (5, 5)
    view.set_center((0, 0))
    assert view.get_center() == (0, 0)
    assert view.data_to_point((0, 0)) == pytest.approx((50, 50))


def test_view_rect_after_roam():
    view = _fitted_view()
    assert view.get_view_rect_after_roam().to_list() == pytest.approx([0, 0, 100, 100])
    view.set_zoom(2)
    assert view.get_view_rect_after_roam().to_list() == pytest.approx([-50, -50, 200, 200])
    assert view.get_view_rect().to_list() == [0, 0, 100, 100]


def test_transform_info_reports_raw_components():
    info = _fitted_view().get_transform_info()
    assert info["raw_scale"] == pytest.approx((10, 10))
    assert info["raw_position"] == pytest.approx((0, 0))
    assert info["raw_rotation"] == pytest.approx(0.0)
