#!/usr/bin/env python3
"""
Tests for saving and loading layouts as plain records.
"""

import json
from pathlib import Path

import pytest

from pixsheet.core import LayoutConfig, RectangleItem, SheetPacker
from pixsheet.records import layout_from_record, layout_to_record, load_layout_json, save_layout_json


def sample_layout():
    items = [
        RectangleItem(1200, 800, "cover.png", 0, Path("scans/cover.png")),
        RectangleItem(640, 480, "page 2.jpg", 1),
        RectangleItem(7000, 300, "panorama.jpg", 2, Path("scans/panorama.jpg")),
    ]
    config = LayoutConfig(max_row_width=6000, gap=10, label_band_height=24, margin=12)
    return SheetPacker(config).layout(items, 0.75)


def test_record_has_expected_shape():
    record = layout_to_record(sample_layout())

    assert record["version"] == 1
    assert record["scale"] == 0.75
    assert record["config"] == {"max_row_width": 6000, "gap": 10, "label_band_height": 24, "margin": 12}
    first = record["placements"][0]
    assert first["label"] == "cover.png"
    assert first["source"] == str(Path("scans/cover.png"))
    assert (first["x"], first["y"], first["scaled_width"], first["scaled_height"]) == (12, 12, 900, 600)
    assert record["placements"][1]["source"] is None
    json.dumps(record)


def test_record_round_trip_restores_layout():
    layout = sample_layout()
    assert layout_from_record(layout_to_record(layout)) == layout


def test_json_file_round_trip(tmp_path):
    layout = sample_layout()
    path = save_layout_json(layout, tmp_path / "out" / "layout.json")

    assert path.exists()
    restored = load_layout_json(path)
    assert restored == layout
    assert restored.placements[0].box_height == 600 + 24


def test_missing_fields_raise_value_error():
    record = layout_to_record(sample_layout())
    del record["placements"][0]["x"]
    with pytest.raises(ValueError):
        layout_from_record(record)


def test_unknown_config_key_raises_value_error():
    record = layout_to_record(sample_layout())
    record["config"]["rotation"] = 90
    with pytest.raises(ValueError):
        layout_from_record(record)


def test_newer_version_is_rejected():
    record = layout_to_record(sample_layout())
    record["version"] = 2
    with pytest.raises(ValueError):
        layout_from_record(record)


@pytest.mark.parametrize("record", [[], "layout", None, 42])
def test_non_object_record_raises_value_error(record):
    with pytest.raises(ValueError):
        layout_from_record(record)


def test_non_numeric_version_raises_value_error():
    record = layout_to_record(sample_layout())
    record["version"] = "2"
    with pytest.raises(ValueError):
        layout_from_record(record)


def test_non_object_placement_raises_value_error():
    record = layout_to_record(sample_layout())
    record["placements"][1] = ["page 2.jpg", 640, 480]
    with pytest.raises(ValueError):
        layout_from_record(record)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
