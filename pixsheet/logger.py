"""
Logging utilities for PixMix.

Sets up console and debug-file logging and writes per-run summary logs.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .core import FitResult


DEFAULT_LOG_FILE = "pixmix_debug.log"


def setup_logging(log_file: Union[str, Path] = DEFAULT_LOG_FILE) -> None:
    """Setup logging to both file and console."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # File handler - detailed logs
    file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'))

    # Console handler - important messages only
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logging.info(f"Logging initialized. Debug log: {log_file}")


def log_load_results(total_files: int, valid_files: int, errors: List[str]) -> None:
    """
    Log image loading results.

    Args:
        total_files: Files considered
        valid_files: Files that became layout items
        errors: Error messages collected while loading
    """
    logger = logging.getLogger(__name__)

    logger.info(f"Image loading: {valid_files} of {total_files} files usable")

    if errors:
        logger.warning(f"Loading errors: {len(errors)}")
        for error in errors[:10]:
            logger.warning(f"  - {error}")
        if len(errors) > 10:
            logger.warning(f"  ... and {len(errors) - 10} more errors")


def log_fit_result(result: FitResult, calculation_time: float) -> None:
    logger = logging.getLogger(__name__)
    layout = result.layout

    logger.info("Fit result:")
    logger.info(f"  Status: {result.status.value}")
    logger.info(f"  Scale: {result.scale:.0%}")
    logger.info(f"  Sheet: {layout.total_width}x{layout.total_height} pixels "
                f"(limit {result.max_total_height}px)")
    logger.info(f"  Rows: {len(layout.rows())}, images: {len(layout.placements)}")
    for scale, height in result.attempts:
        logger.debug(f"  Attempt at {scale:.0%}: height {height}px")
    logger.info(f"  Calculation time: {calculation_time:.3f} seconds")


def write_project_log(log_path: Union[str, Path], timestamp: datetime, inputs: List[str],
                      num_images: int, result: Optional[FitResult], output_path: Optional[Path],
                      final_size: Tuple[int, int], process_time: float,
                      error: Optional[str] = None) -> None:
    """
    Write a plain-text summary of one run.

    Args:
        log_path: Where to write the summary
        timestamp: Run start time
        inputs: Input paths as given on the command line
        num_images: Number of images placed on the sheet
        result: Fit outcome, or None if the run stopped before fitting
        output_path: Written JPEG, if any
        final_size: Rendered sheet size (width, height)
        process_time: Processing time in seconds
        error: Error message if the run failed
    """
    if result is not None:
        cfg = result.layout.config
        fit_section = f"""Layout:
    Status: {result.status.value}
    Scale: {result.scale:.0%}
    Attempts: {', '.join(f'{s:.0%} -> {h}px' for s, h in result.attempts)}
    Height Limit: {result.max_total_height} pixels
    Max Row Width: {cfg.max_row_width} pixels
    Gap / Label Band / Margin: {cfg.gap} / {cfg.label_band_height} / {cfg.margin} pixels
"""
    else:
        fit_section = "Layout:\n    Not computed\n"

    log_content = f"""PixMix - Sheet Log
{'=' * 50}

Run Information:
    Timestamp: {timestamp.strftime('%Y-%m-%d %H:%M:%S')}
    Status: {'SUCCESS' if error is None else 'FAILED'}

Input:
    Paths: {', '.join(inputs)}
    Images Placed: {num_images}

{fit_section}
Output:
    Output Path: {output_path or '-'}
    Sheet Size: {final_size[0]} x {final_size[1]} pixels

Process:
    Processing Time: {process_time:.2f} seconds
    Completion Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}
"""

    if error:
        log_content += f"""
Error Information:
    Error: {error}
"""

    logger = logging.getLogger(__name__)
    try:
        with open(log_path, 'w', encoding='utf-8') as f:
            f.write(log_content)
        logger.info(f"Project log written: {log_path}")
    except OSError as e:
        logger.error(f"Failed to write project log {log_path}: {e}")
