"""Build configured coordinate systems and register them with a host."""

from __future__ import annotations

import logging
from typing import Sequence

from .config import AppConfig, MapConfig
from .corrections import BUILTIN_CORRECTIONS, CorrectionStep
from .geo import GeoCoordinateSystem
from .io_boundary import load_boundary_document
from .locator import CoordinateSystemRegistry
from .models import SpecialArea
from .overrides import load_name_map, load_special_areas


_LOGGER = logging.getLogger("geoview.maps")


def resolve_corrections(cfg: AppConfig, map_cfg: MapConfig) -> tuple[CorrectionStep, ...]:
    """Correction steps for one map, in declared order.

    Without an explicit list a map gets every built-in step followed by every
    custom step from the config.
    """
    if map_cfg.corrections is None:
        custom = tuple(item.build() for item in cfg.corrections.values())
        return tuple(BUILTIN_CORRECTIONS.values()) + custom

    steps: list[CorrectionStep] = []
    for name in map_cfg.corrections:
        if name in cfg.corrections:
            steps.append(cfg.corrections[name].build())
        elif name in BUILTIN_CORRECTIONS:
            steps.append(BUILTIN_CORRECTIONS[name])
        else:
            raise ValueError(f"Unknown correction '{name}' for map '{map_cfg.name}'")
    return tuple(steps)


def resolve_name_map(map_cfg: MapConfig) -> dict[str, str]:
    if map_cfg.name_map_path is not None:
        return load_name_map(map_cfg.name_map_path)
    return dict(map_cfg.name_map)


def resolve_special_areas(map_cfg: MapConfig) -> dict[str, SpecialArea]:
    if map_cfg.special_areas_path is not None:
        return load_special_areas(map_cfg.special_areas_path)
    return dict(map_cfg.special_areas)


def load_map(cfg: AppConfig, map_cfg: MapConfig) -> GeoCoordinateSystem:
    """Load one configured map and fit it to its configured view rect."""
    document = load_boundary_document(map_cfg.boundary)
    geo = GeoCoordinateSystem(
        map_cfg.name,
        map_cfg.map_type,
        document,
        special_areas=resolve_special_areas(map_cfg),
        name_map=resolve_name_map(map_cfg),
        corrections=resolve_corrections(cfg, map_cfg),
    )
    view = map_cfg.view
    geo.set_view_rect(view.x, view.y, view.width, view.height)
    return geo


def build_registry(cfg: AppConfig, names: Sequence[str] = ()) -> CoordinateSystemRegistry:
    """Load the requested maps (all when `names` is empty) into a registry."""
    registry = CoordinateSystemRegistry()
    selected = [cfg.get_map(name) for name in names] if names else list(cfg.maps)
    for map_cfg in selected:
        registry.register_geo(map_cfg.name, load_map(cfg, map_cfg))
    _LOGGER.info("Registered %d coordinate systems", len(selected))
    return registry
