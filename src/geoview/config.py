"""Typed configuration loader for `geoview.yaml`."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, cast

import yaml

from .corrections import (
    CorrectionStep,
    append_polygon_step,
    geo_coord_step,
    insert_region_step,
    text_offset_step,
)
from .models import SpecialArea
from .overrides import parse_name_map, parse_special_areas

CORRECTION_KINDS = ("text_offset", "geo_coord", "insert_region", "append_polygon")


def _mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(f"Expected mapping for '{field_name}'")
    return cast(Mapping[str, Any], value)


def _str(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Expected non-empty string for '{field_name}'")
    return value.strip()


def _optional_str(value: Any, field_name: str) -> str | None:
    return None if value is None else _str(value, field_name)


def _float(value: Any, field_name: str) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValueError(f"Expected float for '{field_name}'")


def _str_list(value: Any, field_name: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Expected list for '{field_name}'")
    out: list[str] = []
    for idx, item in enumerate(value):
        out.append(_str(item, f"{field_name}[{idx}]"))
    return tuple(out)


def _pair(value: Any, field_name: str) -> tuple[float, float]:
    if not isinstance(value, list) or len(value) != 2:
        raise ValueError(f"Expected [x, y] pair for '{field_name}'")
    return (_float(value[0], f"{field_name}[0]"), _float(value[1], f"{field_name}[1]"))


def _ring(value: Any, field_name: str) -> tuple[tuple[float, float], ...]:
    if not isinstance(value, list) or len(value) < 3:
        raise ValueError(f"Expected list of at least 3 points for '{field_name}'")
    return tuple(_pair(item, f"{field_name}[{idx}]") for idx, item in enumerate(value))


def _pair_table(value: Any, field_name: str) -> dict[str, tuple[float, float]]:
    raw = _mapping(value, field_name)
    return {_str(key, f"{field_name} key"): _pair(item, f"{field_name}.{key}") for key, item in raw.items()}


def _path_from_cfg(value: Any, field_name: str, root_dir: Path) -> Path:
    raw = _str(value, field_name)
    p = Path(raw)
    return p if p.is_absolute() else root_dir / p


@dataclass(frozen=True, slots=True)
class PathsConfig:
    logs_dir: Path
    reports_dir: Path

    @property
    def build_directories(self) -> tuple[Path, ...]:
        return (self.logs_dir, self.reports_dir)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path) -> PathsConfig:
        return cls(
            logs_dir=_path_from_cfg(raw.get("logs_dir", "build/logs"), "paths.logs_dir", root_dir),
            reports_dir=_path_from_cfg(
                raw.get("reports_dir", "build/reports"), "paths.reports_dir", root_dir
            ),
        )


@dataclass(frozen=True, slots=True)
class ViewRectConfig:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], field_name: str) -> ViewRectConfig:
        width = _float(raw.get("width"), f"{field_name}.width")
        height = _float(raw.get("height"), f"{field_name}.height")
        if width <= 0 or height <= 0:
            raise ValueError(f"{field_name}.width and {field_name}.height must be > 0")
        return cls(
            x=_float(raw.get("x", 0), f"{field_name}.x"),
            y=_float(raw.get("y", 0), f"{field_name}.y"),
            width=width,
            height=height,
        )

    @classmethod
    def default(cls) -> ViewRectConfig:
        return cls(x=0.0, y=0.0, width=800.0, height=600.0)


@dataclass(frozen=True, slots=True)
class CorrectionConfig:
    """Declarative correction step built from one of the step factories."""

    name: str
    kind: str
    map_type: str | None
    table: Mapping[str, tuple[float, float]] = field(default_factory=dict)
    region_name: str | None = None
    anchor: tuple[float, float] | None = None
    rings: tuple[tuple[tuple[float, float], ...], ...] = ()

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Any]) -> CorrectionConfig:
        prefix = f"corrections.{name}"
        kind = _str(raw.get("kind"), f"{prefix}.kind")
        if kind not in CORRECTION_KINDS:
            raise ValueError(f"{prefix}.kind must be one of: " + ", ".join(CORRECTION_KINDS))
        map_type = _optional_str(raw.get("map"), f"{prefix}.map")

        if kind == "text_offset":
            return cls(name, kind, map_type, table=_pair_table(raw.get("offsets"), f"{prefix}.offsets"))
        if kind == "geo_coord":
            return cls(name, kind, map_type, table=_pair_table(raw.get("coords"), f"{prefix}.coords"))

        region_name = _str(raw.get("region"), f"{prefix}.region")
        if kind == "insert_region":
            rings_raw = raw.get("rings")
            if not isinstance(rings_raw, list) or not rings_raw:
                raise ValueError(f"Expected non-empty list for '{prefix}.rings'")
            return cls(
                name,
                kind,
                map_type,
                region_name=region_name,
                anchor=_pair(raw.get("anchor"), f"{prefix}.anchor"),
                rings=tuple(_ring(ring, f"{prefix}.rings[{idx}]") for idx, ring in enumerate(rings_raw)),
            )
        return cls(
            name,
            kind,
            map_type,
            region_name=region_name,
            rings=(_ring(raw.get("ring"), f"{prefix}.ring"),),
        )

    def build(self) -> CorrectionStep:
        if self.kind == "text_offset":
            return text_offset_step(self.name, self.map_type, self.table)
        if self.kind == "geo_coord":
            return geo_coord_step(self.name, self.map_type, self.table)
        if self.region_name is None:
            raise ValueError(f"corrections.{self.name} is missing its target region")
        if self.kind == "insert_region":
            if self.anchor is None:
                raise ValueError(f"corrections.{self.name} is missing its anchor")
            return insert_region_step(self.name, self.map_type, self.region_name, self.anchor, self.rings)
        return append_polygon_step(self.name, self.map_type, self.region_name, self.rings[0])


@dataclass(frozen=True, slots=True)
class MapConfig:
    name: str
    map_type: str
    boundary: Path
    name_map_path: Path | None
    name_map: Mapping[str, str]
    special_areas_path: Path | None
    special_areas: Mapping[str, SpecialArea]
    corrections: tuple[str, ...] | None
    view: ViewRectConfig

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], root_dir: Path, field_name: str) -> MapConfig:
        name_map_raw = raw.get("name_map")
        name_map_path: Path | None = None
        name_map: dict[str, str] = {}
        if isinstance(name_map_raw, Mapping):
            name_map = parse_name_map(name_map_raw, f"{field_name}.name_map")
        elif name_map_raw is not None:
            name_map_path = _path_from_cfg(name_map_raw, f"{field_name}.name_map", root_dir)

        special_raw = raw.get("special_areas")
        special_path: Path | None = None
        special_areas: dict[str, SpecialArea] = {}
        if isinstance(special_raw, Mapping):
            special_areas = parse_special_areas(special_raw, f"{field_name}.special_areas")
        elif special_raw is not None:
            special_path = _path_from_cfg(special_raw, f"{field_name}.special_areas", root_dir)

        corrections_raw = raw.get("corrections")
        corrections = (
            None if corrections_raw is None else _str_list(corrections_raw, f"{field_name}.corrections")
        )

        view_raw = raw.get("view")
        view = (
            ViewRectConfig.default()
            if view_raw is None
            else ViewRectConfig.from_mapping(_mapping(view_raw, f"{field_name}.view"), f"{field_name}.view")
        )

        return cls(
            name=_str(raw.get("name"), f"{field_name}.name"),
            map_type=_str(raw.get("map"), f"{field_name}.map"),
            boundary=_path_from_cfg(raw.get("boundary"), f"{field_name}.boundary", root_dir),
            name_map_path=name_map_path,
            name_map=name_map,
            special_areas_path=special_path,
            special_areas=special_areas,
            corrections=corrections,
            view=view,
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    source_path: Path
    paths: PathsConfig
    maps: tuple[MapConfig, ...]
    corrections: Mapping[str, CorrectionConfig]

    def get_map(self, name: str) -> MapConfig:
        for map_cfg in self.maps:
            if map_cfg.name == name:
                return map_cfg
        known = ", ".join(m.name for m in self.maps)
        raise ValueError(f"Unknown map '{name}'. Configured maps: {known}")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], source_path: Path) -> AppConfig:
        root_dir = source_path.parent.resolve()
        maps_raw = raw.get("maps")
        if not isinstance(maps_raw, list) or not maps_raw:
            raise ValueError("Expected non-empty list for 'maps'")
        maps = tuple(
            MapConfig.from_mapping(_mapping(item, f"maps[{idx}]"), root_dir, f"maps[{idx}]")
            for idx, item in enumerate(maps_raw)
        )
        seen: set[str] = set()
        for map_cfg in maps:
            if map_cfg.name in seen:
                raise ValueError(f"Duplicate map name '{map_cfg.name}'")
            seen.add(map_cfg.name)

        corrections_raw = raw.get("corrections") or {}
        corrections = {
            _str(key, "corrections key"): CorrectionConfig.from_mapping(
                str(key), _mapping(value, f"corrections.{key}")
            )
            for key, value in _mapping(corrections_raw, "corrections").items()
        }
        return cls(
            source_path=source_path.resolve(),
            paths=PathsConfig.from_mapping(_mapping(raw.get("paths") or {}, "paths"), root_dir),
            maps=maps,
            corrections=corrections,
        )


def load_config(path: str | Path) -> AppConfig:
    """Load and validate the YAML config file into typed settings."""
    cfg_path = Path(path).resolve()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if not isinstance(raw, Mapping):
        raise ValueError("Top-level config must be a YAML mapping")
    return AppConfig.from_mapping(cast(Mapping[str, Any], raw), cfg_path)
