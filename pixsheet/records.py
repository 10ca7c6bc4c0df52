"""
Plain-record form of a SheetLayout.

Layouts convert to JSON-compatible dicts and back so they can be saved next to
the rendered sheet, diffed, or fed to another renderer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .core import LayoutConfig, PlacedRectangle, RectangleItem, SheetLayout


RECORD_VERSION = 1


def layout_to_record(layout: SheetLayout) -> Dict[str, Any]:
    cfg = layout.config
    return {
        "version": RECORD_VERSION,
        "total_width": layout.total_width,
        "total_height": layout.total_height,
        "scale": layout.scale,
        "config": {
            "max_row_width": cfg.max_row_width,
            "gap": cfg.gap,
            "label_band_height": cfg.label_band_height,
            "margin": cfg.margin,
        },
        "placements": [
            {
                "label": p.item.label,
                "order": p.item.order,
                "width": p.item.width,
                "height": p.item.height,
                "source": str(p.item.source) if p.item.source is not None else None,
                "x": p.x,
                "y": p.y,
                "scaled_width": p.scaled_width,
                "scaled_height": p.scaled_height,
            }
            for p in layout.placements
        ],
    }


def layout_from_record(record: Dict[str, Any]) -> SheetLayout:
    """
    Rebuild a SheetLayout from layout_to_record output.

    Raises:
        ValueError: if the record is not a dict, is missing fields or has a
            newer version
    """
    if not isinstance(record, dict):
        raise ValueError(f"Malformed layout record: expected an object, got {type(record).__name__}")

    try:
        version = record.get("version", RECORD_VERSION)
        if version > RECORD_VERSION:
            raise ValueError(f"Unsupported layout record version: {version}")

        config = LayoutConfig(**record["config"])
        placements = []
        for entry in record["placements"]:
            source = entry.get("source")
            item = RectangleItem(
                width=entry["width"],
                height=entry["height"],
                label=entry["label"],
                order=entry["order"],
                source=Path(source) if source else None,
            )
            placements.append(PlacedRectangle(
                item, entry["x"], entry["y"], entry["scaled_width"], entry["scaled_height"],
                config.label_band_height,
            ))
        return SheetLayout(
            total_width=record["total_width"],
            total_height=record["total_height"],
            placements=tuple(placements),
            scale=float(record["scale"]),
            config=config,
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed layout record: {e}") from e


def save_layout_json(layout: SheetLayout, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(layout_to_record(layout), f, indent=2)
    logging.getLogger(__name__).info(f"Layout record written: {path}")
    return path


def load_layout_json(path: Union[str, Path]) -> SheetLayout:
    with open(path, 'r', encoding='utf-8') as f:
        return layout_from_record(json.load(f))
