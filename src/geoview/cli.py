"""CLI entrypoint for geoview."""

from __future__ import annotations

import argparse
import logging
from typing import Sequence

from .config import AppConfig, load_config
from .geo import GeoCoordinateSystem
from .inspect_report import generate_inspection_report
from .locator import CoordinateSystemRegistry, Locator
from .maps import build_registry
from .util import ensure_directories, format_point, setup_logging
from .validate import Validator, format_report_lines

LOGGER = logging.getLogger("geoview.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geoview",
        description="Geographic coordinate-system tooling for region maps.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("--config", default="geoview.yaml", help="Path to YAML config.")
        p.add_argument("--verbose", action="store_true", help="Enable debug logs.")

    validate_p = subparsers.add_parser("validate", help="Validate config, overrides and boundary files.")
    add_common(validate_p)

    inspect_p = subparsers.add_parser(
        "inspect",
        help="Generate HTML + JSON inspection report of loaded regions and transforms.",
    )
    add_common(inspect_p)
    inspect_p.add_argument(
        "--map",
        action="append",
        default=[],
        help="Map name filter. Can be repeated. If omitted, all maps are shown.",
    )
    inspect_p.add_argument(
        "--limit",
        type=int,
        default=200,
        help="Max regions listed per map.",
    )

    to_pixel_p = subparsers.add_parser("to-pixel", help="Convert a region name or lng/lat to output space.")
    add_common(to_pixel_p)
    to_pixel_p.add_argument("--map", required=True, help="Configured map name.")
    to_pixel_p.add_argument("--name", default=None, help="Resolved region name.")
    to_pixel_p.add_argument("--lng", type=float, default=None, help="Longitude.")
    to_pixel_p.add_argument("--lat", type=float, default=None, help="Latitude.")

    from_pixel_p = subparsers.add_parser("from-pixel", help="Convert an output-space point to lng/lat.")
    add_common(from_pixel_p)
    from_pixel_p.add_argument("--map", required=True, help="Configured map name.")
    from_pixel_p.add_argument("--x", type=float, required=True, help="Output-space x.")
    from_pixel_p.add_argument("--y", type=float, required=True, help="Output-space y.")

    return parser


def _load_and_setup(args: argparse.Namespace) -> AppConfig:
    cfg = load_config(args.config)
    log_path = cfg.paths.logs_dir / "geoview.log"
    setup_logging(log_path, verbose=args.verbose)
    ensure_directories(cfg.paths.build_directories)
    return cfg


def _run_validate(cfg: AppConfig) -> int:
    report = Validator(cfg).run()
    for line in format_report_lines(report):
        LOGGER.info(line)
    return 0 if report.ok else 1


def _run_inspect(cfg: AppConfig, *, maps: Sequence[str], limit: int) -> int:
    try:
        html_path, json_path = generate_inspection_report(cfg, map_names=maps, limit=limit)
    except (OSError, ValueError, RuntimeError) as exc:
        LOGGER.error("Inspection report failed: %s", exc)
        return 1
    LOGGER.info("Inspection HTML report written to %s", html_path)
    LOGGER.info("Inspection JSON report written to %s", json_path)
    return 0


def _load_single_map(
    cfg: AppConfig, map_name: str
) -> tuple[CoordinateSystemRegistry, GeoCoordinateSystem] | None:
    try:
        registry = build_registry(cfg, [map_name])
    except (OSError, ValueError) as exc:
        LOGGER.error("Failed loading map %s: %s", map_name, exc)
        return None
    return registry, registry.get_geo(map_name)


def _run_to_pixel(
    cfg: AppConfig,
    *,
    map_name: str,
    name: str | None,
    lng: float | None,
    lat: float | None,
) -> int:
    if name is None and (lng is None or lat is None):
        LOGGER.error("to-pixel needs --name or both --lng and --lat")
        return 2
    loaded = _load_single_map(cfg, map_name)
    if loaded is None:
        return 1
    registry, geo = loaded
    value = name if name is not None else [lng, lat]
    point = geo.convert_to_pixel(registry, Locator(geo=map_name), value)
    if point is None:
        LOGGER.error("No position for %r on map %s", value, map_name)
        return 1
    LOGGER.info("[%s] %s -> %s", map_name, value, format_point(point, 3))
    return 0


def _run_from_pixel(cfg: AppConfig, *, map_name: str, x: float, y: float) -> int:
    loaded = _load_single_map(cfg, map_name)
    if loaded is None:
        return 1
    registry, geo = loaded
    coord = geo.convert_from_pixel(registry, Locator(geo=map_name), [x, y])
    if coord is None:
        LOGGER.error("Map %s has a degenerate transform; cannot invert (%s, %s)", map_name, x, y)
        return 1
    region = geo.get_region_by_coord(coord)
    LOGGER.info(
        "[%s] (%s, %s) -> %s in %s",
        map_name,
        x,
        y,
        format_point(coord),
        region.name if region is not None else "no region",
    )
    return 0


def _dispatch(args: argparse.Namespace) -> int:
    cfg = _load_and_setup(args)
    command = str(args.command)
    if command == "validate":
        return _run_validate(cfg)
    if command == "inspect":
        maps = [str(item) for item in args.map]
        return _run_inspect(cfg, maps=maps, limit=int(args.limit))
    if command == "to-pixel":
        return _run_to_pixel(cfg, map_name=str(args.map), name=args.name, lng=args.lng, lat=args.lat)
    if command == "from-pixel":
        return _run_from_pixel(cfg, map_name=str(args.map), x=float(args.x), y=float(args.y))
    raise ValueError(f"Unknown command: {command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    return _dispatch(args)


if __name__ == "__main__":
    raise SystemExit(main())
