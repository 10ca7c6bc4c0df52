"""
Raster output for PixMix sheets.

Draws a SheetLayout into a single Pillow image, builds bounded previews and
writes the JPEG file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from PIL import Image, ImageDraw, ImageFont, ImageOps

from .core import SheetLayout, RectangleItem, round_half_up


PREVIEW_MAX = 4000
JPEG_QUALITY = 90
FONT_SIZE = 16
LABEL_OFFSET = (8, 3)  # caption position inside the label band


@dataclass(frozen=True)
class Theme:
    """Colors used when drawing a sheet."""
    name: str
    background: str
    box: str
    text: str
    border: str


THEMES: Dict[str, Theme] = {
    "light": Theme("light", background="#eeeeee", box="#ffffff", text="#202020", border="#f0f0f0"),
    "dark": Theme("dark", background="#1f1f1f", box="#303030", text="#ffffff", border="#434343"),
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name."""
    try:
        return THEMES[name]
    except KeyError:
        raise ValueError(f"Unknown theme '{name}', expected one of: {', '.join(THEMES)}") from None


def _load_font(size: int) -> ImageFont.ImageFont:
    try:
        return ImageFont.truetype("DejaVuSans.ttf", size)
    except OSError:
        return ImageFont.load_default(size=size)


class SheetRenderer:
    """Renders layouts computed by SheetPacker."""

    def __init__(self, font_size: int = FONT_SIZE):
        self.logger = logging.getLogger(__name__)
        self.font = _load_font(font_size)

    def render_sheet(self, layout: SheetLayout, theme: Theme) -> Image.Image:
        """
        Draw every placement of a layout onto a new RGB image.

        Each box gets a filled background, its caption in the label band,
        the image scaled into the space below and a 1px border. Items without
        a source file are drawn as empty boxes.

        Args:
            layout: Layout to draw
            theme: Colors to use

        Returns:
            Image of size (total_width, total_height)
        """
        self.logger.info(f"Rendering {len(layout.placements)} images onto "
                         f"{layout.total_width}x{layout.total_height} sheet ({theme.name} theme)")
        sheet = Image.new("RGB", (layout.total_width, layout.total_height), color=theme.background)
        draw = ImageDraw.Draw(sheet)

        for idx, p in enumerate(layout.placements):
            if p.scaled_width <= 0 or p.box_height <= 0:
                self.logger.warning(f"'{p.item.label}' scaled to an empty box, skipping")
                continue
            box = [p.x, p.y, p.x + p.scaled_width - 1, p.y + p.box_height - 1]
            draw.rectangle(box, fill=theme.box)
            draw.text((p.x + LABEL_OFFSET[0], p.y + LABEL_OFFSET[1]), p.item.label,
                      fill=theme.text, font=self.font)

            if p.item.source is not None and p.scaled_height > 0:
                tile = self._load_tile(p.item, p.scaled_width, p.scaled_height)
                # alpha blends over the box fill
                sheet.paste(tile, (p.x, p.y + p.label_band_height), tile)
            else:
                self.logger.debug(f"No source for '{p.item.label}', drawing empty box")

            draw.rectangle(box, outline=theme.border, width=1)
            self.logger.debug(f"Drew {idx + 1}/{len(layout.placements)}: '{p.item.label}' at ({p.x}, {p.y}) "
                              f"{p.scaled_width}x{p.scaled_height}")

        return sheet

    def _load_tile(self, item: RectangleItem, width: int, height: int) -> Image.Image:
        with Image.open(item.source) as img:
            tile = ImageOps.exif_transpose(img).convert("RGBA")
        if tile.size != (width, height):
            tile = tile.resize((width, height), Image.LANCZOS)
        return tile

    def generate_preview(self, image: Image.Image, max_dimension: int = PREVIEW_MAX) -> Image.Image:
        """Return a copy no larger than max_dimension on either side, or the image itself if it already fits."""
        scale = min(max_dimension / image.width, max_dimension / image.height, 1)
        if scale == 1:
            return image

        new_size = (max(1, round_half_up(image.width * scale)), max(1, round_half_up(image.height * scale)))
        self.logger.info(f"Downsampling preview from {image.width}x{image.height} to {new_size[0]}x{new_size[1]}")
        return image.resize(new_size, Image.LANCZOS)

    def export_jpeg(self, image: Image.Image, path: Union[str, Path], quality: int = JPEG_QUALITY) -> Path:
        """Write the image as JPEG, creating the parent folder if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image.convert("RGB").save(path, format="JPEG", quality=quality)
        self.logger.info(f"Wrote JPEG: {path} ({image.width}x{image.height}, quality {quality})")
        return path


def default_output_name(items: Sequence[RectangleItem], suffix: str = "_preview.jpg") -> str:
    """Name the output after the first item, e.g. 'img01.png' -> 'img01_preview.jpg'."""
    stem: Optional[str] = None
    if items:
        stem = Path(items[0].label).stem
    return f"{stem or 'output'}{suffix}"
