"""
PixMix - Combine images into a single labelled sheet

Lays images out in wrapped rows, shrinks the whole set when the sheet would be
too tall, and renders the result as one JPEG.
"""

from .core import (
    FitResult,
    FitStatus,
    LayoutConfig,
    PlacedRectangle,
    RectangleItem,
    SheetLayout,
    SheetPacker,
)

__version__ = "1.0.0"
__author__ = "PixMix Team"

__all__ = [
    'FitResult',
    'FitStatus',
    'LayoutConfig',
    'PlacedRectangle',
    'RectangleItem',
    'SheetLayout',
    'SheetPacker',
]
