"""Logging, filesystem and formatting helpers shared by the CLI and reports."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Vector-file readers behind geopandas log every opened layer at INFO/DEBUG.
_NOISY_LOGGERS = ("fiona", "pyogrio", "shapely.geos")


def setup_logging(log_file: Path | None = None, verbose: bool = False) -> None:
    """Send root logging to stderr and, when given, to `log_file` as well."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def ensure_directories(paths: Iterable[Path]) -> None:
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
    path.write_text(text + "\n", encoding="utf-8")


def format_point(point: Iterable[float] | None, digits: int = 6) -> str:
    """Render a coordinate pair (or any flat number sequence) for logs and reports."""
    if point is None:
        return "-"
    return "(" + ", ".join(f"{value:.{digits}f}" for value in point) + ")"
