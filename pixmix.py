#!/usr/bin/env python3
"""
PixMix - combine a folder of images into one labelled JPEG sheet.

    python pixmix.py compose photos/ -o sheet.jpg
    python pixmix.py plan photos/ --max-height 6000
"""

from pixsheet.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
