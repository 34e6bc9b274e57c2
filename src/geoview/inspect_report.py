"""Inspection report for loaded maps: regions, anchors and fitted transforms."""

from __future__ import annotations

import json
from html import escape
from pathlib import Path
from typing import Any, Sequence

from .boundary import NAME_PROPERTIES
from .config import AppConfig
from .geo import GeoCoordinateSystem
from .maps import load_map, resolve_special_areas
from .util import format_point, write_json


def generate_inspection_report(
    cfg: AppConfig,
    *,
    map_names: Sequence[str],
    limit: int,
) -> tuple[Path, Path]:
    """Write a JSON + HTML overview of the requested maps (all when none given)."""
    if limit < 1:
        raise ValueError("--limit must be >= 1")
    selected = [cfg.get_map(name) for name in map_names] if map_names else list(cfg.maps)

    maps_payload: list[dict[str, Any]] = []
    for map_cfg in selected:
        geo = load_map(cfg, map_cfg)
        special_names = set(resolve_special_areas(map_cfg))
        maps_payload.append(_analyze_map(geo, special_names=special_names, limit=limit))

    payload = {
        "meta": {
            "config": str(cfg.source_path),
            "maps_in_report": [item["name"] for item in maps_payload],
            "region_limit": limit,
        },
        "maps": maps_payload,
    }
    json_path = cfg.paths.reports_dir / "inspect_report.json"
    html_path = cfg.paths.reports_dir / "inspect.html"
    write_json(json_path, payload)
    _write_html_report(payload=payload, output_html=html_path)
    return (html_path, json_path)


def _analyze_map(geo: GeoCoordinateSystem, *, special_names: set[str], limit: int) -> dict[str, Any]:
    rect = geo.get_bounding_rect()
    view_rect = geo.get_view_rect()
    rows: list[dict[str, Any]] = []
    for region in geo.regions[:limit]:
        raw_name = next(
            (str(region.properties[key]) for key in NAME_PROPERTIES if key in region.properties),
            region.name,
        )
        geo_coord = geo.get_geo_coord(region.name)
        pixel = geo.data_to_point(region.name)
        rows.append(
            {
                "name": region.name,
                "raw_name": raw_name,
                "polygons": len(region.geometries),
                "center": list(region.center),
                "geo_coord": list(geo_coord) if geo_coord is not None else None,
                "pixel": list(pixel) if pixel is not None else None,
                "bbox": region.get_bounding_rect().to_list(),
                "special_area": region.name in special_names,
                "indexed": geo.get_region(region.name) is region,
            }
        )
    return {
        "name": geo.name,
        "map": geo.map,
        "region_count": len(geo.regions),
        "unique_names": len(geo.region_index),
        "corrections": [step.name for step in geo.corrections],
        "bounding_rect": rect.to_list(),
        "view_rect": view_rect.to_list() if view_rect is not None else None,
        "regions": rows,
    }


def _write_html_report(*, payload: dict[str, Any], output_html: Path) -> None:
    sections: list[str] = []
    for item in payload["maps"]:
        table_rows: list[str] = []
        for row in item["regions"]:
            status = "ok" if row["indexed"] else "shadowed"
            table_rows.append(
                "\n".join(
                    [
                        "<tr>",
                        f"  <td>{escape(row['name'])}</td>",
                        f"  <td>{escape(row['raw_name'])}</td>",
                        f"  <td>{row['polygons']}</td>",
                        f"  <td>{escape(format_point(row['center'], 3))}</td>",
                        f"  <td>{escape(format_point(row['geo_coord'], 3))}</td>",
                        f"  <td>{escape(format_point(row['pixel'], 1))}</td>",
                        f"  <td>{escape(format_point(row['bbox'], 3))}</td>",
                        f"  <td>{'yes' if row['special_area'] else '-'}</td>",
                        f"  <td class='{status}'>{status}</td>",
                        "</tr>",
                    ]
                )
            )
        meta_json = json.dumps(
            {key: item[key] for key in ("map", "region_count", "unique_names", "corrections", "bounding_rect", "view_rect")},
            ensure_ascii=False,
            indent=2,
        )
        sections.append(
            "\n".join(
                [
                    f"<h2>{escape(item['name'])}</h2>",
                    f"<pre class='meta'>{escape(meta_json)}</pre>",
                    "<table>",
                    "  <thead><tr><th>Name</th><th>Raw name</th><th>Polygons</th><th>Center</th>"
                    "<th>Name coord</th><th>Pixel</th><th>BBox</th><th>Special</th><th>Index</th></tr></thead>",
                    "  <tbody>",
                    *table_rows,
                    "  </tbody>",
                    "</table>",
                ]
            )
        )

    html = "\n".join(
        [
            "<!doctype html>",
            "<html lang='en'>",
            "<head>",
            "  <meta charset='utf-8'>",
            "  <title>geoview inspect report</title>",
            "  <style>",
            "    body { font-family: Segoe UI, Arial, sans-serif; margin: 20px; color: #111; }",
            "    h1, h2 { margin: 0 0 12px 0; }",
            "    .meta { margin: 0 0 18px 0; padding: 12px; border: 1px solid #ddd; border-radius: 8px; }",
            "    table { border-collapse: collapse; width: 100%; margin-bottom: 24px; }",
            "    th, td { border: 1px solid #ddd; padding: 6px; vertical-align: top; text-align: left; }",
            "    th { background: #f4f4f4; }",
            "    td.ok { color: #1f7a1f; font-weight: 700; }",
            "    td.shadowed { color: #b22d2d; font-weight: 700; }",
            "  </style>",
            "</head>",
            "<body>",
            "  <h1>geoview inspect report</h1>",
            *sections,
            "</body>",
            "</html>",
        ]
    )
    output_html.parent.mkdir(parents=True, exist_ok=True)
    output_html.write_text(html + "\n", encoding="utf-8")
