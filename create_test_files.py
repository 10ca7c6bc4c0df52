#!/usr/bin/env python3
"""
Create sample image sets for trying out PixMix by hand.

Each scenario lands in its own folder under test_scenarios/ and exercises one
layout behaviour: a single row, row wrapping, downscaling and a set that
cannot fit even at the smallest scale.
"""

import random
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont


COLORS = ['red', 'blue', 'green', 'purple', 'orange', 'teal', 'navy', 'maroon', 'olive', 'gray']


def create_scenario(name: str, sizes):
    """Write one labelled PNG per (width, height) into test_scenarios/<name>."""
    scenario_dir = Path("test_scenarios") / name
    scenario_dir.mkdir(parents=True, exist_ok=True)

    print(f"\nCreating scenario: {name} ({len(sizes)} images)")
    font = ImageFont.load_default()

    for i, (width, height) in enumerate(sizes, start=1):
        img = Image.new('RGB', (width, height), color=random.choice(COLORS))
        draw = ImageDraw.Draw(img)
        draw.text((10, 10), f"{name} #{i}", fill='white', font=font)
        draw.text((10, 30), f"{width}x{height}", fill='white', font=font)
        draw.rectangle([0, 0, width - 1, height - 1], outline='white', width=3)

        # unpadded numbers so the numeric-aware sort is visible
        img.save(scenario_dir / f"{name}_{i}.png")

    print(f"  Saved to: {scenario_dir}")
    return scenario_dir


def main():
    print("PixMix - Sample Image Generator")
    print("=" * 50)

    scenarios = [
        # fits on one row at full size
        ("single_row", [(400, 300), (640, 480), (300, 500)]),
        # wraps into several rows at full size
        ("wrapping", [(random.randint(800, 2500), random.randint(400, 1600)) for _ in range(20)]),
        # too tall at 100%, fits after shrinking
        ("downscale", [(3000, 2600) for _ in range(8)]),
        # one image taller than the limit even at 50%
        ("unfittable", [(1000, 18000)]),
    ]

    for name, sizes in scenarios:
        create_scenario(name, sizes)

    print(f"\n{'=' * 50}")
    print("Try:")
    print("  python pixmix.py plan test_scenarios/downscale")
    print("  python pixmix.py compose test_scenarios/wrapping -o wrapping.jpg --preview wrapping_small.jpg")
    print("  python pixmix.py compose test_scenarios/unfittable --allow-over-height")


if __name__ == "__main__":
    main()
