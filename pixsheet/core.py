"""
Core layout algorithms for PixMix.

Places images left to right in rows on a single sheet, wrapping when a row
would exceed the maximum width, and shrinks the whole set along a fixed scale
ladder until the sheet fits under the height limit.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Sequence
from enum import Enum
from pathlib import Path


MAX_ROW_WIDTH = 8000
MAX_TOTAL_HEIGHT = 8000
GAP = 15  # spacing between boxes
LABEL_BAND_HEIGHT = 20  # caption band above each image
MARGIN = 15  # border around the whole sheet
DEFAULT_SCALES = (1.0, 0.75, 0.5)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class LayoutConfig:
    """Spacing constants for the row layout."""
    max_row_width: int = MAX_ROW_WIDTH
    gap: int = GAP
    label_band_height: int = LABEL_BAND_HEIGHT
    margin: int = MARGIN


@dataclass(frozen=True)
class RectangleItem:
    """One image to place: natural pixel size plus its caption."""
    width: int
    height: int
    label: str
    order: int  # position in caller's sorted sequence
    source: Optional[Path] = None

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r} for '{self.label}'")


@dataclass(frozen=True)
class PlacedRectangle:
    """An item positioned on the sheet at a given scale."""
    item: RectangleItem
    x: int
    y: int
    scaled_width: int
    scaled_height: int
    label_band_height: int = LABEL_BAND_HEIGHT

    @property
    def box_height(self) -> int:
        """Height of the drawn box: caption band plus image."""
        return self.scaled_height + self.label_band_height


@dataclass(frozen=True)
class SheetLayout:
    """Result of one layout pass."""
    total_width: int
    total_height: int
    placements: Tuple[PlacedRectangle, ...]
    scale: float = 1.0
    config: LayoutConfig = field(default_factory=LayoutConfig)

    def rows(self) -> List[List[PlacedRectangle]]:
        """Group placements by row, top to bottom."""
        rows: List[List[PlacedRectangle]] = []
        for p in self.placements:
            if rows and rows[-1][0].y == p.y:
                rows[-1].append(p)
            else:
                rows.append([p])
        return rows


class FitStatus(Enum):
    """Outcome of the fit loop."""
    FITTED = "fitted"
    OVER_HEIGHT = "over_height"


@dataclass(frozen=True)
class FitResult:
    """Terminal outcome of fitting a sheet under the height limit."""
    status: FitStatus
    scale: float
    height: int
    layout: SheetLayout  # last layout tried; over the limit when not ok
    max_total_height: int
    attempts: Tuple[Tuple[float, int], ...] = ()

    @property
    def ok(self) -> bool:
        return self.status == FitStatus.FITTED

    @property
    def was_scaled(self) -> bool:
        return self.scale != 1.0


class SheetPacker:
    """Row-wrapping layout engine plus the downscaling fit loop."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()
        self.logger = logging.getLogger(__name__)

    def layout(self, items: Sequence[RectangleItem], scale: float = 1.0) -> SheetLayout:
        """
        Place items row by row at the given scale.

        Args:
            items: Items in display order
            scale: Uniform factor applied to every item's natural size

        Returns:
            SheetLayout with one placement per item, in input order
        """
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")

        cfg = self.config
        x = cfg.margin
        y = cfg.margin
        row_height = 0
        max_right_edge = 0
        placements = []

        for item in items:
            w = round_half_up(item.width * scale)
            h = round_half_up(item.height * scale)

            # the first box of a row always stays, even when it alone is too wide
            if x + w + cfg.margin > cfg.max_row_width and x > cfg.margin:
                x = cfg.margin
                y += row_height + cfg.gap
                row_height = 0

            placements.append(PlacedRectangle(item, x, y, w, h, cfg.label_band_height))

            x += w + cfg.gap
            row_height = max(row_height, h + cfg.label_band_height)
            max_right_edge = max(max_right_edge, x - cfg.gap + cfg.margin)

        if not placements:
            self.logger.debug("Layout called with no items, returning empty sheet")
            return SheetLayout(2 * cfg.margin, 2 * cfg.margin, (), scale, cfg)

        total_height = y + row_height + cfg.margin
        self.logger.debug(f"Layout at {scale:.0%}: {len(placements)} items, "
                          f"{format_size(max_right_edge, total_height)}")
        return SheetLayout(max_right_edge, total_height, tuple(placements), scale, cfg)

    def fit(self, items: Sequence[RectangleItem], max_total_height: int = MAX_TOTAL_HEIGHT,
            allowed_scales: Sequence[float] = DEFAULT_SCALES) -> FitResult:
        """
        Lay out items at each allowed scale until the sheet is short enough.

        Every attempt scales the original item sizes, never a previous result.

        Args:
            items: Items in display order
            max_total_height: Height limit in pixels
            allowed_scales: Strictly descending factors in (0, 1]

        Returns:
            FitResult, FITTED at the first scale that fits or OVER_HEIGHT
            with the last attempt when the ladder runs out
        """
        scales = validate_scales(allowed_scales)
        attempts = []
        layout = None

        for index, scale in enumerate(scales):
            if index > 0:
                self.logger.info(f"Sheet height {layout.total_height}px exceeds {max_total_height}px, "
                                 f"trying scale {scale:.0%}")
            layout = self.layout(items, scale)
            attempts.append((scale, layout.total_height))

            if layout.total_height <= max_total_height:
                self.logger.info(f"Sheet fits at {scale:.0%}: "
                                 f"{format_size(layout.total_width, layout.total_height)}")
                return FitResult(FitStatus.FITTED, scale, layout.total_height, layout,
                                 max_total_height, tuple(attempts))

        self.logger.warning(f"Sheet height {layout.total_height}px still exceeds {max_total_height}px "
                            f"at smallest scale {layout.scale:.0%}")
        return FitResult(FitStatus.OVER_HEIGHT, layout.scale, layout.total_height, layout,
                         max_total_height, tuple(attempts))


def validate_scales(scales: Sequence[float]) -> List[float]:
    """Check a scale ladder and return it as a list."""
    result = [float(s) for s in scales]
    if not result:
        raise ValueError("Scale ladder must contain at least one factor")
    for s in result:
        if not 0 < s <= 1:
            raise ValueError(f"Scale factors must be in (0, 1], got {s}")
    for prev, cur in zip(result, result[1:]):
        if cur >= prev:
            raise ValueError(f"Scale ladder must be strictly descending: {result}")
    return result


def format_size(width: int, height: int) -> str:
    return f"{width}x{height}px"
