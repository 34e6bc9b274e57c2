"""Validation layer for config, override files and boundary documents."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

import yaml

from .boundary import InvalidFormat, parse_geo_json
from .config import AppConfig, MapConfig
from .io_boundary import load_boundary_document
from .maps import resolve_corrections, resolve_name_map, resolve_special_areas


@dataclass(slots=True)
class ValidationReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    infos: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def add_error(self, msg: str) -> None:
        self.errors.append(msg)

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)

    def add_info(self, msg: str) -> None:
        self.infos.append(msg)


class Validator:
    """Checks every configured map without building coordinate systems."""

    def __init__(self, cfg: AppConfig) -> None:
        self.cfg = cfg

    def run(self) -> ValidationReport:
        report = ValidationReport()
        report.add_info(f"Validating {len(self.cfg.maps)} configured maps from {self.cfg.source_path}")
        for map_cfg in self.cfg.maps:
            self._validate_map(report, map_cfg)
        return report

    def _validate_map(self, report: ValidationReport, map_cfg: MapConfig) -> None:
        label = f"[{map_cfg.name}]"
        try:
            resolve_corrections(self.cfg, map_cfg)
        except ValueError as exc:
            report.add_error(f"{label} {exc}")

        name_map = self._load_override(report, label, "name map", lambda: resolve_name_map(map_cfg))
        special_areas = self._load_override(
            report, label, "special areas", lambda: resolve_special_areas(map_cfg)
        )

        if not map_cfg.boundary.exists():
            report.add_error(f"{label} Missing boundary file: {map_cfg.boundary}")
            return
        try:
            document = load_boundary_document(map_cfg.boundary)
            regions = parse_geo_json(document)
        except InvalidFormat as exc:
            report.add_error(f"{label} {exc}".replace("\n", ": "))
            return
        except (OSError, ValueError, RuntimeError) as exc:
            report.add_error(f"{label} Failed reading boundary file '{map_cfg.boundary}': {exc}")
            return

        if not regions:
            report.add_warning(f"{label} Boundary document has no usable regions")
            return
        report.add_info(f"{label} Parsed {len(regions)} regions from {map_cfg.boundary}")

        raw_names = [region.name for region in regions]
        unused_aliases = sorted(set(name_map) - set(raw_names))
        if unused_aliases:
            report.add_warning(
                f"{label} Name map entries match no region: " + _format_name_list(unused_aliases)
            )

        resolved = [name_map.get(name, name) for name in raw_names]
        duplicates = sorted(name for name, count in Counter(resolved).items() if count > 1)
        if duplicates:
            report.add_warning(
                f"{label} Duplicate region names after aliasing (last one wins): "
                + _format_name_list(duplicates)
            )

        unknown_special = sorted(set(special_areas) - set(resolved))
        if unknown_special:
            report.add_warning(
                f"{label} Special areas match no region: " + _format_name_list(unknown_special)
            )

    @staticmethod
    def _load_override(
        report: ValidationReport,
        label: str,
        what: str,
        loader: Callable[[], Mapping[str, Any]],
    ) -> Mapping[str, Any]:
        try:
            loaded = loader()
        except (OSError, ValueError, yaml.YAMLError) as exc:
            report.add_error(f"{label} Failed parsing {what}: {exc}")
            return {}
        report.add_info(f"{label} Loaded {len(loaded)} {what} entries")
        return loaded


def format_report_lines(report: ValidationReport) -> Iterable[str]:
    for info in report.infos:
        yield f"[INFO] {info}"
    for warning in report.warnings:
        yield f"[WARN] {warning}"
    for error in report.errors:
        yield f"[ERROR] {error}"
    if report.ok:
        yield "[OK] Validation completed with no errors."


def _format_name_list(values: list[str], limit: int = 12) -> str:
    if len(values) <= limit:
        return ", ".join(values)
    shown = ", ".join(values[:limit])
    return f"{shown}, ... (+{len(values) - limit} more)"
