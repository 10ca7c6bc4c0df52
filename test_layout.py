#!/usr/bin/env python3
"""
Tests for the row layout engine.

Covers the documented scenarios (single row, forced wrap, oversized item,
empty input) and the geometric properties every layout must keep.
"""

import pytest

from pixsheet.core import LayoutConfig, RectangleItem, SheetPacker, round_half_up


def make_items(sizes):
    return [RectangleItem(w, h, f"img{i + 1}.png", i) for i, (w, h) in enumerate(sizes)]


MIXED_SIZES = [(1200, 800), (640, 480), (3000, 2000), (800, 1200), (5000, 300),
               (150, 150), (4096, 2160), (333, 777), (2500, 2500), (7999, 10), (20, 4000)]


def row_spans(layout):
    spans = []
    for row in layout.rows():
        row_height = max(p.box_height for p in row)
        spans.append((row[0].y, row[0].y + row_height))
    return spans


def test_single_row_scenario():
    packer = SheetPacker()
    layout = packer.layout([RectangleItem(100, 50, "a", 0), RectangleItem(100, 50, "b", 1)], 1)

    a, b = layout.placements
    assert (a.x, a.y) == (15, 15)
    assert (b.x, b.y) == (130, 15)
    assert layout.total_width == 245
    assert layout.total_height == 100
    assert a.box_height == 70


def test_forced_wrap_scenario():
    packer = SheetPacker()
    layout = packer.layout(make_items([(5000, 100), (5000, 100)]), 1)

    first, second = layout.placements
    assert len(layout.rows()) == 2
    assert (first.x, first.y) == (15, 15)
    assert (second.x, second.y) == (15, 15 + 120 + 15)
    assert layout.total_width == 5030
    assert layout.total_height == 150 + 120 + 15


def test_oversized_single_item_stays_on_its_row():
    packer = SheetPacker()
    layout = packer.layout(make_items([(10000, 400)]), 1)

    (only,) = layout.placements
    assert only.x == 15 and only.y == 15
    assert layout.total_width >= 10000 + 2 * 15
    assert layout.total_width == 10030


def test_oversized_item_after_others_starts_new_row_and_next_item_wraps_again():
    packer = SheetPacker()
    layout = packer.layout(make_items([(100, 100), (10000, 100), (100, 100)]), 1)

    rows = layout.rows()
    assert [len(r) for r in rows] == [1, 1, 1]
    assert all(p.x == 15 for p in layout.placements)
    assert layout.total_width == 10030


def test_empty_input_gives_margin_only_sheet():
    layout = SheetPacker().layout([], 1)
    assert layout.placements == ()
    assert layout.total_width == 30
    assert layout.total_height == 30


def test_custom_config_is_used():
    config = LayoutConfig(max_row_width=300, gap=10, label_band_height=0, margin=5)
    layout = SheetPacker(config).layout(make_items([(100, 100)] * 4), 1)

    # 5 + 100 + 10 + 100 + 10 + 100 + 5 = 330 > 300, so two per row
    assert [len(r) for r in layout.rows()] == [2, 2]
    assert layout.total_width == 5 + 100 + 10 + 100 + 5
    assert layout.total_height == 5 + 100 + 10 + 100 + 5
    assert layout.config == config


def test_scale_rounds_half_up():
    layout = SheetPacker().layout(make_items([(5, 3), (7, 9)]), 0.5)
    assert [(p.scaled_width, p.scaled_height) for p in layout.placements] == [(3, 2), (4, 5)]
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


def test_scale_is_applied_to_original_dimensions():
    items = make_items([(1001, 999)])
    p = SheetPacker().layout(items, 0.75).placements[0]
    assert (p.scaled_width, p.scaled_height) == (751, 749)


def test_non_positive_scale_is_rejected():
    with pytest.raises(ValueError):
        SheetPacker().layout(make_items([(10, 10)]), 0)


def test_item_dimensions_are_validated():
    with pytest.raises(ValueError):
        RectangleItem(0, 10, "zero", 0)
    with pytest.raises(ValueError):
        RectangleItem(10, -5, "negative", 0)
    with pytest.raises(ValueError):
        RectangleItem(10.5, 10, "float", 0)


def test_layout_is_deterministic():
    packer = SheetPacker()
    items = make_items(MIXED_SIZES)
    assert packer.layout(items, 0.75) == packer.layout(items, 0.75)


def test_order_is_preserved():
    items = make_items(MIXED_SIZES)
    layout = SheetPacker().layout(items, 1)
    assert [p.item for p in layout.placements] == items


@pytest.mark.parametrize("scale", [1, 0.75, 0.5])
def test_rows_never_overlap(scale):
    layout = SheetPacker().layout(make_items(MIXED_SIZES), scale)
    spans = row_spans(layout)
    assert len(spans) > 1
    for (_, bottom), (next_top, _) in zip(spans, spans[1:]):
        assert bottom <= next_top


@pytest.mark.parametrize("scale", [1, 0.75, 0.5])
def test_width_bound_for_items_after_row_start(scale):
    cfg = LayoutConfig()
    layout = SheetPacker(cfg).layout(make_items(MIXED_SIZES), scale)
    for row in layout.rows():
        for p in row[1:]:
            assert p.x + p.scaled_width + cfg.margin <= layout.total_width
            assert p.x + p.scaled_width + cfg.margin <= cfg.max_row_width


def test_height_does_not_grow_as_scale_shrinks():
    packer = SheetPacker()
    items = make_items(MIXED_SIZES)
    heights = [packer.layout(items, s).total_height for s in (1, 0.75, 0.5)]
    assert heights[2] <= heights[1] <= heights[0]


def test_total_height_closes_last_row():
    layout = SheetPacker().layout(make_items(MIXED_SIZES), 1)
    last_row = layout.rows()[-1]
    assert layout.total_height == last_row[0].y + max(p.box_height for p in last_row) + 15


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
