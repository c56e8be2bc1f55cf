"""
Roster Image Pipeline

Turns a roster screenshot into a grid of identified champions:

1. Text detection (external detector, bounded by a timeout)
2. Grid estimation from power rating labels
3. One RGBA decode shared by every classifier
4. Class, star and ascension classification for all cells concurrently
5. Reference catalog prefetch, once per distinct detected class
6. Champion identification for all classified cells concurrently
7. Optional debug overlay

Only an empty text detection or a grid without power ratings fails the
call; everything else degrades to missing or default cell fields.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional, Set

import numpy as np

from ..exceptions import NoTextDetectedError, ServiceNotInitializedError
from ..pixels import decode_rgba, image_size
from ..text import TextDetector, create_detector
from . import config
from .catalog import JsonChampionCatalog, RawImageStore
from .champions import ChampionReferenceCache, identify_champion
from .class_icons import ClassIconBank
from .debug import draw_debug_image
from .features import (
    Outcome,
    Status,
    identify_ascension,
    identify_class,
    identify_stars,
)
from .layout import estimate_grid
from .result import ChampionClass, GridCell, ProcessResult

logger = logging.getLogger(__name__)


def _collapse(outcome: Outcome, default: Any, field_name: str, cell: GridCell) -> Any:
    """Cell value for a classifier outcome; errors are logged and replaced by *default*."""
    if outcome.status is Status.ERROR:
        logger.warning(
            f"{field_name} failed for cell PI {cell.power_rating}: {outcome.reason}, "
            f"using {default!r}"
        )
    return outcome.value_or(default)


class RosterImageService:
    """
    Long-lived roster recognition service.

    Owns the class icon bank and the champion reference cache. Build it
    once per process, await initialize(), then call process_stats_view()
    for each screenshot.
    """

    def __init__(
        self,
        detector: TextDetector,
        references: ChampionReferenceCache,
        icons_dir: Optional[Path] = None,
        icon_bank: Optional[ClassIconBank] = None,
        ocr_timeout: Optional[float] = None,
    ):
        """
        Initialize the service.

        Args:
            detector: Text detector used for every screenshot
            references: Champion reference cache
            icons_dir: Directory with class icons, loaded by initialize()
            icon_bank: Preloaded icon bank (takes precedence over icons_dir)
            ocr_timeout: Seconds to wait for text detection, None for no limit
        """
        if icon_bank is None and icons_dir is None:
            raise ValueError("Either icons_dir or icon_bank is required")

        self._detector = detector
        self._references = references
        self._icons_dir = Path(icons_dir) if icons_dir is not None else None
        self._icon_bank = icon_bank
        self._ocr_timeout = ocr_timeout
        self._initialized = False

    @property
    def icon_bank(self) -> Optional[ClassIconBank]:
        return self._icon_bank

    @property
    def references(self) -> ChampionReferenceCache:
        return self._references

    async def initialize(self) -> None:
        """Load class icons and prepare the reference cache directory."""
        if self._icon_bank is None:
            self._icon_bank = await asyncio.to_thread(ClassIconBank.load, self._icons_dir)
        await self._references.initialize()
        self._initialized = True

    async def _detect_text(self, image_bytes: bytes):
        call = asyncio.to_thread(self._detector.detect_text, image_bytes)
        if self._ocr_timeout is None:
            return await call
        return await asyncio.wait_for(call, timeout=self._ocr_timeout)

    def _classify_cell(self, image: np.ndarray, cell: GridCell) -> None:
        """Class, stars and ascension for one cell; runs in a worker thread."""
        cell.champion_class = _collapse(
            identify_class(image, cell, self._icon_bank), None, "class", cell)
        cell.stars = _collapse(
            identify_stars(image, cell), config.DEFAULT_STARS, "stars", cell)
        cell.is_ascended = _collapse(
            identify_ascension(image, cell), config.DEFAULT_ASCENDED, "ascension", cell)

    async def _prefetch(self, champion_class: ChampionClass) -> None:
        try:
            entries = await self._references.get_by_class(champion_class)
            logger.debug(f"Prefetched {len(entries)} references for {champion_class.value}")
        except Exception as e:
            logger.warning(f"Reference prefetch failed for {champion_class.value}: {e}")

    async def _identify_cell(self, image: np.ndarray, cell: GridCell) -> None:
        outcome = await identify_champion(image, cell, self._references)
        cell.champion_name = _collapse(outcome, None, "champion", cell)

    async def process_stats_view(self, image_bytes: bytes, debug_mode: bool = False) -> ProcessResult:
        """
        Recognize every champion card on a roster screenshot.

        Args:
            image_bytes: Encoded screenshot
            debug_mode: Also render the debug overlay

        Returns:
            ProcessResult with the row-major grid and optional debug PNG

        Raises:
            ServiceNotInitializedError: If initialize() was not awaited
            NoTextDetectedError: If the detector found no text
            NoPowerRatingsError: If no power rating could anchor the grid
            asyncio.TimeoutError: If text detection exceeded the timeout
        """
        if not self._initialized:
            raise ServiceNotInitializedError()

        t0 = time.perf_counter()

        detections = await self._detect_text(image_bytes)
        t1 = time.perf_counter()

        if not detections:
            raise NoTextDetectedError()

        width, _height = await asyncio.to_thread(image_size, image_bytes)
        estimate = estimate_grid(detections, width)
        grid = estimate.cells
        t2 = time.perf_counter()

        # Decoded once, read-only for every classifier below
        image = await asyncio.to_thread(decode_rgba, image_bytes)
        image.setflags(write=False)
        t3 = time.perf_counter()

        # Each task writes only its own cell
        await asyncio.gather(*(
            asyncio.to_thread(self._classify_cell, image, cell) for cell in grid
        ))
        t4 = time.perf_counter()

        detected_classes: Set[ChampionClass] = {
            cell.champion_class for cell in grid if cell.champion_class is not None
        }
        await asyncio.gather(*(self._prefetch(c) for c in detected_classes))
        t5 = time.perf_counter()

        await asyncio.gather(*(
            self._identify_cell(image, cell) for cell in grid if cell.champion_class is not None
        ))
        t6 = time.perf_counter()

        debug_image: Optional[bytes] = None
        if debug_mode:
            debug_image = await asyncio.to_thread(
                draw_debug_image,
                image_bytes,
                grid,
                estimate.cell_dimensions,
                self._icon_bank,
                estimate.header_min_y,
            )
        t7 = time.perf_counter()

        timings: Dict[str, int] = {
            "ocr": round((t1 - t0) * 1000),
            "layout": round((t2 - t1) * 1000),
            "decode": round((t3 - t2) * 1000),
            "features": round((t4 - t3) * 1000),
            "fetch": round((t5 - t4) * 1000),
            "matching": round((t6 - t5) * 1000),
            "total": round((t7 - t0) * 1000),
        }
        logger.debug(f"Roster processing timings (ms): {timings}")

        identified = sum(1 for cell in grid if cell.champion_name)
        logger.info(f"Processed {len(grid)} cells, {identified} champions identified")

        return ProcessResult(
            grid=grid,
            debug_image=debug_image,
            processing_time_ms=(t7 - t0) * 1000,
        )


def create_service(settings: Dict[str, Any], detector: Optional[TextDetector] = None) -> RosterImageService:
    """
    Wire a RosterImageService from settings.

    Args:
        settings: Dictionary from rosterscan.settings.load_settings()
        detector: Detector to use instead of settings["ocr_engine"]

    Returns:
        Service that still needs initialize() to be awaited
    """
    if detector is None:
        engine = settings.get("ocr_engine", "easyocr")
        if engine == "cached":
            detector = create_detector("cached", fixtures_dir=settings["ocr_fixtures_dir"])
        elif engine == "easyocr":
            detector = create_detector(
                "easyocr",
                languages=settings.get("ocr_languages"),
                gpu=settings.get("ocr_gpu", False),
            )
        else:
            detector = create_detector(engine)

    references = ChampionReferenceCache(
        catalog=JsonChampionCatalog(settings["catalog_file"]),
        store=RawImageStore(settings["cache_dir"]),
        download_timeout=float(settings.get("download_timeout_sec", 15.0)),
    )

    ocr_timeout = settings.get("ocr_timeout_sec")
    return RosterImageService(
        detector=detector,
        references=references,
        icons_dir=Path(settings["icons_dir"]),
        ocr_timeout=float(ocr_timeout) if ocr_timeout else None,
    )
