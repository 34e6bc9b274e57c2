from __future__ import annotations

import pytest
from affine import Affine

from geoview.rect import BoundingRect


def test_from_bounds_and_center():
    rect = BoundingRect.from_bounds(2, 4, 12, 8)
    assert rect.to_list() == [2.0, 4.0, 10.0, 4.0]
    assert rect.bounds == (2.0, 4.0, 12.0, 8.0)
    assert rect.center == (7.0, 6.0)


def test_from_points_empty_is_zero_rect():
    assert BoundingRect.from_points([]).to_list() == [0.0, 0.0, 0.0, 0.0]


def test_union_grows_in_place():
    rect = BoundingRect(0, 0, 10, 10)
    rect.union(BoundingRect(20, 20, 5, 5))
    assert rect.to_list() == [0, 0, 25, 25]


def test_contain_is_edge_inclusive():
    rect = BoundingRect(0, 0, 10, 10)
    assert rect.contain(0, 0)
    assert rect.contain(10, 10)
    assert not rect.contain(10.01, 5)


def test_intersect():
    rect = BoundingRect(0, 0, 10, 10)
    assert rect.intersect(BoundingRect(5, 5, 10, 10))
    assert not rect.intersect(BoundingRect(11, 0, 2, 2))


def test_clone_is_independent():
    rect = BoundingRect(1, 2, 3, 4)
    clone = rect.clone()
    clone.x = 99
    assert rect.x == 1


def test_calculate_transform_maps_corners():
    transform = BoundingRect(0, 0, 10, 10).calculate_transform(BoundingRect(100, 50, 200, 100))
    assert transform * (0, 0) == pytest.approx((100, 50))
    assert transform * (10, 10) == pytest.approx((300, 150))
    assert transform * (5, 5) == pytest.approx((200, 100))


def test_calculate_transform_zero_extent_axis_keeps_unit_scale():
    transform = BoundingRect(5, 0, 0, 10).calculate_transform(BoundingRect(0, 0, 100, 100))
    assert transform.a == 1.0
    assert transform.e == pytest.approx(10.0)
    assert not transform.is_degenerate


def test_apply_transform_uses_transformed_corners():
    rect = BoundingRect(0, 0, 2, 3)
    rect.apply_transform(Affine.scale(-1, 1))
    assert rect.to_list() == pytest.approx([-2, 0, 2, 3])
