"""Name alias and special-area override loading."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from .models import SpecialArea


def _read_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected mapping in {path}")
    return raw


def parse_name_map(raw: Mapping[Any, Any], source: str) -> dict[str, str]:
    name_map: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"Name map key must be a non-empty string in {source}")
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Name map value for '{key}' must be a non-empty string in {source}")
        name_map[key] = value.strip()
    return name_map


def parse_special_areas(raw: Mapping[Any, Any], source: str) -> dict[str, SpecialArea]:
    areas: dict[str, SpecialArea] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key.strip():
            raise ValueError(f"Special area key must be a region name string in {source}")
        if not isinstance(value, Mapping):
            raise ValueError(f"Special area value for '{key}' must be a mapping in {source}")
        areas[key] = SpecialArea.from_mapping(value, f"{source}:{key}")
    return areas


def load_name_map(path: Path) -> dict[str, str]:
    """Load an optional raw-name -> display-name alias table."""
    return parse_name_map(_read_yaml_mapping(path), str(path))


def load_special_areas(path: Path) -> dict[str, SpecialArea]:
    """Load optional per-region target frames keyed by resolved region name."""
    return parse_special_areas(_read_yaml_mapping(path), str(path))
