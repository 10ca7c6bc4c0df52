from __future__ import annotations

import argparse
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from .core import (
    DEFAULT_SCALES,
    GAP,
    LABEL_BAND_HEIGHT,
    MARGIN,
    MAX_ROW_WIDTH,
    MAX_TOTAL_HEIGHT,
    FitResult,
    LayoutConfig,
    RectangleItem,
    SheetPacker,
    validate_scales,
)
from .loader import collect_images
from .logger import DEFAULT_LOG_FILE, log_fit_result, log_load_results, setup_logging, write_project_log
from .records import save_layout_json
from .renderer import JPEG_QUALITY, PREVIEW_MAX, THEMES, SheetRenderer, default_output_name, get_theme


EXIT_OK = 0
EXIT_NO_INPUT = 1
EXIT_OVER_HEIGHT = 3
EXIT_IO_ERROR = 5


def _parse_scales(text: str) -> List[float]:
    try:
        return validate_scales([float(part) for part in text.split(",") if part.strip()])
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid scale ladder '{text}': {e}") from e


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {text}")
    return value


def _load_and_fit(args: argparse.Namespace) -> Tuple[List[RectangleItem], Optional[FitResult]]:
    logging.info(f"Loading images from: {', '.join(args.input)}")
    items, errors = collect_images(args.input)
    log_load_results(len(items) + len(errors), len(items), errors)
    if not items:
        return items, None

    config = LayoutConfig(
        max_row_width=args.max_row_width,
        gap=args.gap,
        label_band_height=args.label_band,
        margin=args.margin,
    )
    logging.debug(f"Layout config: {config}")

    start = time.perf_counter()
    result = SheetPacker(config).fit(items, args.max_height, args.scales)
    log_fit_result(result, time.perf_counter() - start)
    return items, result


def cli_plan(args: argparse.Namespace) -> int:
    """Compute the layout only and print it."""
    items, result = _load_and_fit(args)
    if result is None:
        print("No images found in the given paths.")
        return EXIT_NO_INPUT

    layout = result.layout
    print(f"Sheet: {layout.total_width} x {layout.total_height} px at {result.scale:.0%} "
          f"({len(layout.rows())} rows, {len(items)} images)")
    for row_index, row in enumerate(layout.rows(), start=1):
        print(f"  Row {row_index} (y={row[0].y}):")
        for p in row:
            print(f"    {p.item.label}: x={p.x} {p.scaled_width}x{p.scaled_height}")

    if args.layout_json:
        save_layout_json(layout, args.layout_json)
        print(f"Wrote layout: {args.layout_json}")

    if not result.ok:
        print(f"Sheet height {result.height}px exceeds limit {result.max_total_height}px "
              f"even at {result.scale:.0%}.")
        return EXIT_OVER_HEIGHT
    return EXIT_OK


def cli_compose(args: argparse.Namespace) -> int:
    """Load images, fit them onto one sheet and write the JPEG."""
    started = datetime.now()
    start = time.perf_counter()
    logging.info("Starting compose operation")
    logging.debug(f"Args: {vars(args)}")

    def finish(code: int, result: Optional[FitResult] = None, output: Optional[Path] = None,
               size: Tuple[int, int] = (0, 0), error: Optional[str] = None) -> int:
        if args.project_log:
            write_project_log(args.project_log, started, list(args.input),
                              len(result.layout.placements) if result else 0,
                              result, output, size, time.perf_counter() - start, error)
        return code

    items, result = _load_and_fit(args)
    if result is None:
        logging.error("No usable images found")
        print("No images found in the given paths.")
        return finish(EXIT_NO_INPUT, error="No usable images found")

    if not result.ok:
        message = (f"Sheet height {result.height}px exceeds limit {result.max_total_height}px "
                   f"even at {result.scale:.0%}")
        if not args.allow_over_height:
            logging.error(message)
            print(f"{message}. Use --allow-over-height to render it anyway.")
            return finish(EXIT_OVER_HEIGHT, result, error=message)
        logging.warning(f"{message}; rendering anyway")

    layout = result.layout
    output = Path(args.output) if args.output else Path(default_output_name(items))
    renderer = SheetRenderer()

    try:
        sheet = renderer.render_sheet(layout, get_theme(args.theme))
        logging.info(f"Raster composition complete. Image size: {sheet.width}x{sheet.height} pixels")
        renderer.export_jpeg(sheet, output, args.quality)

        if args.preview:
            preview = renderer.generate_preview(sheet, args.preview_max)
            renderer.export_jpeg(preview, args.preview, args.quality)
            print(f"Wrote preview: {args.preview}")

        if args.layout_json:
            save_layout_json(layout, args.layout_json)
    except OSError as e:
        logging.error(f"Error writing sheet: {e}", exc_info=True)
        print(f"Error writing sheet: {e}")
        return finish(EXIT_IO_ERROR, result, output, error=str(e))

    summary = f"Sheet size: {sheet.width} x {sheet.height} px"
    if result.was_scaled:
        summary += f" (scaled to {result.scale:.0%})"
    print(summary)
    print(f"Wrote JPEG: {output}")

    return finish(EXIT_OK, result, output, sheet.size)


def _add_layout_args(c: argparse.ArgumentParser) -> None:
    c.add_argument("input", nargs="+", help="Image files or folders of images")
    c.add_argument("--max-row-width", type=_positive_int, default=MAX_ROW_WIDTH,
                   help=f"Row width before wrapping in pixels (default: {MAX_ROW_WIDTH})")
    c.add_argument("--max-height", type=_positive_int, default=MAX_TOTAL_HEIGHT,
                   help=f"Maximum sheet height in pixels (default: {MAX_TOTAL_HEIGHT})")
    c.add_argument("--gap", type=_non_negative_int, default=GAP,
                   help=f"Spacing between images in pixels (default: {GAP})")
    c.add_argument("--label-band", type=_non_negative_int, default=LABEL_BAND_HEIGHT,
                   help=f"Caption band height above each image (default: {LABEL_BAND_HEIGHT})")
    c.add_argument("--margin", type=_non_negative_int, default=MARGIN,
                   help=f"Border around the sheet in pixels (default: {MARGIN})")
    c.add_argument("--scales", type=_parse_scales, default=list(DEFAULT_SCALES),
                   help="Comma-separated descending scale ladder (default: 1,0.75,0.5)")
    c.add_argument("--layout-json", help="Write the computed layout as JSON to this path")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pixmix", description="Combine images into one labelled sheet")
    p.add_argument("--log-file", default=DEFAULT_LOG_FILE, help=f"Debug log path (default: {DEFAULT_LOG_FILE})")
    sub = p.add_subparsers(dest="cmd")

    c = sub.add_parser("compose", help="Render images onto a single JPEG sheet")
    _add_layout_args(c)
    c.add_argument("-o", "--output", help="Output JPEG path (default: <first image>_preview.jpg)")
    c.add_argument("--preview", help="Also write a downsized preview JPEG to this path")
    c.add_argument("--preview-max", type=_positive_int, default=PREVIEW_MAX,
                   help=f"Longest preview side in pixels (default: {PREVIEW_MAX})")
    c.add_argument("--theme", choices=sorted(THEMES), default="light")
    c.add_argument("--quality", type=int, choices=range(1, 96), default=JPEG_QUALITY, metavar="1-95",
                   help=f"JPEG quality (default: {JPEG_QUALITY})")
    c.add_argument("--allow-over-height", action="store_true",
                   help="Render the smallest-scale sheet even if it is still too tall")
    c.add_argument("--project-log", help="Write a run summary to this path")
    c.set_defaults(func=cli_compose)

    pl = sub.add_parser("plan", help="Compute and print the layout without rendering")
    _add_layout_args(pl)
    pl.set_defaults(func=cli_plan)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    setup_logging(args.log_file)

    try:
        result = args.func(args)
        logging.info(f"Operation completed with exit code: {result}")
        return result
    except Exception as e:
        logging.error(f"Unhandled exception: {e}", exc_info=True)
        print(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
