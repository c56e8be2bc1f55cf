"""
Record OCR fixtures for the cached text detector.

Runs a live detector on each screenshot and stores the response as
<md5>.json so later runs (and tests) can use --engine cached.

Usage:
    python tools/generate_ocr_fixture.py screenshots/*.png
    python tools/generate_ocr_fixture.py shot.png --engine easyocr --out fixtures/ocr
"""

import sys
import argparse
import logging
from pathlib import Path

from rosterscan.text import CachedTextDetector, create_detector

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Record OCR responses as JSON fixtures")
    parser.add_argument("images", nargs="+", type=Path, help="Screenshots to record")
    parser.add_argument("--engine", default="easyocr", help="Live detector to record from")
    parser.add_argument("--out", type=Path, default=Path("fixtures/ocr"), help="Fixture directory")
    args = parser.parse_args()

    detector = create_detector(args.engine)
    cache = CachedTextDetector(fixtures_dir=args.out)

    failures = 0
    for image_path in args.images:
        image_bytes = image_path.read_bytes()
        detections = detector.detect_text(image_bytes)
        if not detections:
            logger.warning(f"{image_path}: no text detected, skipping")
            failures += 1
            continue
        path = cache.record(image_bytes, detections)
        logger.info(f"{image_path}: {len(detections)} detections -> {path}")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
