"""
Roster Scan - Entry Point

Runs the roster recognition pipeline on a screenshot and prints the
recognized grid as JSON.

Example:
    python main.py roster.png
    python main.py roster.png --engine cached --debug-image roster_debug.png
"""

import sys
import json
import asyncio
import logging
import argparse
from pathlib import Path
from typing import Optional

from rosterscan import RosterScanError, create_service, load_settings
from rosterscan.roster import ProcessResult


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    handlers=[logging.StreamHandler(sys.stderr)]
)
logger = logging.getLogger(__name__)


async def run(image_path: Path, settings: dict, debug_mode: bool) -> ProcessResult:
    """
    Process one screenshot with a freshly initialized service.

    Args:
        image_path: Screenshot file
        settings: Loaded settings
        debug_mode: Render the debug overlay

    Returns:
        Pipeline result
    """
    service = create_service(settings)
    await service.initialize()
    return await service.process_stats_view(image_path.read_bytes(), debug_mode=debug_mode)


def parse_args(argv: Optional[list] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Roster Scan - recognize champions on a battlegrounds roster screenshot"
    )
    parser.add_argument("image", type=Path, help="Roster screenshot to process")
    parser.add_argument(
        "--settings", "-s",
        type=Path,
        default=None,
        help="Settings JSON file (default: rosterscan.json)"
    )
    parser.add_argument(
        "--engine", "-e",
        default=None,
        help="Text detector to use, overrides the settings file (easyocr, cached)"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging and the debug overlay"
    )
    parser.add_argument(
        "--debug-image",
        type=Path,
        default=None,
        help="Where to save the debug overlay PNG (implies --debug)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Write the grid JSON to this file instead of stdout"
    )
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Run the pipeline from the command line."""
    args = parse_args(argv)

    settings = load_settings(args.settings)
    if args.engine:
        settings["ocr_engine"] = args.engine

    debug_mode = args.debug or args.debug_image is not None or settings.get("debug_enabled", False)
    if debug_mode:
        logging.getLogger().setLevel(logging.DEBUG)

    if not args.image.exists():
        logger.error(f"Image not found: {args.image}")
        return 1

    try:
        result = asyncio.run(run(args.image, settings, debug_mode))
    except RosterScanError as e:
        logger.error(f"Roster scan failed: {e}")
        return 2

    payload = json.dumps(result.to_dict(), indent=2)
    if args.output:
        args.output.write_text(payload, encoding="utf-8")
        logger.info(f"Grid written to {args.output}")
    else:
        print(payload)

    if result.debug_image:
        debug_path = args.debug_image or args.image.with_name(f"{args.image.stem}_debug.png")
        debug_path.write_bytes(result.debug_image)
        logger.info(f"Debug image saved: {debug_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
