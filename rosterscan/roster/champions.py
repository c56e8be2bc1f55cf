"""
Champion Identification

Reference catalog cache and portrait matching. Reference portraits are
downloaded once per champion, kept raw on disk, and cropped, resized and
perceptually hashed in memory. A cell's portrait is hashed the same way
and matched by Hamming distance against every champion of its class.
"""

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import cv2
import imagehash
import numpy as np
from PIL import Image

from ..pixels import decode_rgba
from . import config
from .catalog import ChampionCatalog, ChampionRecord, RawImageStore, download_image
from .features import Outcome, crop_rect
from .result import ChampionClass, ChampionDebug, GridCell

logger = logging.getLogger(__name__)

Downloader = Callable[[str, float], bytes]


@dataclass(frozen=True)
class ReferenceEntry:
    """Processed reference portrait for one champion."""
    record: ChampionRecord
    perceptual_hash: str   # hex string from imagehash
    portrait: bytes        # PNG of the 128x128 processed portrait


def portrait_image(pixels: np.ndarray) -> Image.Image:
    """Resize an RGBA crop to the square portrait size used for hashing."""
    size = config.PORTRAIT_SIZE
    resized = cv2.resize(np.ascontiguousarray(pixels), (size, size), interpolation=cv2.INTER_AREA)
    return Image.fromarray(resized)


def compute_portrait_hash(pixels: np.ndarray) -> imagehash.ImageHash:
    """Perceptual hash of an RGBA portrait crop."""
    return imagehash.phash(portrait_image(pixels))


def hash_distance(hash_a: str, hash_b: str) -> int:
    """Hamming distance between two hex encoded hashes."""
    return imagehash.hex_to_hash(hash_a) - imagehash.hex_to_hash(hash_b)


def build_reference_entry(record: ChampionRecord, raw_image: bytes) -> ReferenceEntry:
    """
    Crop, resize and hash a downloaded reference image.

    Raises:
        ValueError: If the reference crop is empty
        OSError: If the bytes are not a decodable image
    """
    pixels = decode_rgba(raw_image)
    height, width = pixels.shape[:2]
    crop = config.REFERENCE_PORTRAIT_CROP

    left = int(round(width * crop.x))
    top = int(round(height * crop.y))
    crop_w = int(round(width * crop.width))
    crop_h = int(round(height * crop.height))
    region = pixels[top:top + crop_h, left:left + crop_w]
    if region.size == 0:
        raise ValueError(f"reference image {width}x{height} too small to crop")

    image = portrait_image(region)
    buffer = io.BytesIO()
    image.save(buffer, "PNG")

    return ReferenceEntry(
        record=record,
        perceptual_hash=str(imagehash.phash(image)),
        portrait=buffer.getvalue(),
    )


class ChampionReferenceCache:
    """
    Processed reference portraits, looked up by champion class.

    Entries live for the lifetime of the instance. Concurrent requests for
    the same uncached champion share one load. Raw downloads are kept in
    the RawImageStore indefinitely; processing always reruns from those
    bytes so the in-memory entries follow the current crop constants.
    """

    def __init__(
        self,
        catalog: ChampionCatalog,
        store: RawImageStore,
        downloader: Downloader = download_image,
        download_timeout: float = 15.0,
    ):
        self._catalog = catalog
        self._store = store
        self._downloader = downloader
        self._download_timeout = download_timeout

        self._entries: Dict[str, ReferenceEntry] = {}
        self._pending: Dict[str, "asyncio.Task[Optional[ReferenceEntry]]"] = {}
        self._records_by_class: Dict[ChampionClass, List[ChampionRecord]] = {}

    async def initialize(self) -> None:
        """Create the raw image store directory."""
        await asyncio.to_thread(self._store.ensure)

    def cached(self, name: str) -> Optional[ReferenceEntry]:
        return self._entries.get(name)

    async def get_by_class(self, champion_class: ChampionClass) -> List[ReferenceEntry]:
        """
        Reference entries for every loadable champion of a class.

        Champions whose reference cannot be loaded are logged and left out.

        Raises:
            Exception: Whatever the catalog raises when queried
        """
        records = self._records_by_class.get(champion_class)
        if records is None:
            records = await asyncio.to_thread(self._catalog.find_many, champion_class)
            self._records_by_class[champion_class] = records

        entries = await asyncio.gather(*(self._resolve(record) for record in records))
        return [entry for entry in entries if entry is not None]

    async def _resolve(self, record: ChampionRecord) -> Optional[ReferenceEntry]:
        entry = self._entries.get(record.name)
        if entry is not None:
            return entry

        task = self._pending.get(record.name)
        if task is None:
            task = asyncio.create_task(self._load(record))
            self._pending[record.name] = task
        # Shielded so one cancelled waiter does not cancel the shared load
        return await asyncio.shield(task)

    async def _load(self, record: ChampionRecord) -> Optional[ReferenceEntry]:
        try:
            url = record.image_url
            if not url:
                logger.warning(f"No reference image for champion {record.name}")
                return None

            raw = await asyncio.to_thread(self._store.read, record.name)
            if raw is None:
                raw = await asyncio.to_thread(self._downloader, url, self._download_timeout)
                await asyncio.to_thread(self._store.write, record.name, raw)

            entry = await asyncio.to_thread(build_reference_entry, record, raw)
            self._entries[record.name] = entry
            return entry
        except Exception as e:
            logger.warning(f"Failed to load image for champion {record.name}: {e}")
            return None
        finally:
            self._pending.pop(record.name, None)


def best_reference(portrait_hash: str, candidates: List[ReferenceEntry]) -> Tuple[Optional[ReferenceEntry], float]:
    """Closest candidate by hash distance, with that distance."""
    best: Optional[ReferenceEntry] = None
    min_distance = float("inf")
    for entry in candidates:
        distance = hash_distance(portrait_hash, entry.perceptual_hash)
        if distance < min_distance:
            min_distance = distance
            best = entry
    return best, min_distance


async def identify_champion(
    image: np.ndarray,
    cell: GridCell,
    references: ChampionReferenceCache,
) -> Outcome[str]:
    """
    Match the cell portrait against the references of the cell's class.

    Args:
        image: (H, W, 4) RGBA screenshot
        cell: Cell with champion_class already identified
        references: Reference catalog cache

    Returns:
        OK(name) within CHAMPION_MATCH_THRESHOLD, NOT_FOUND when the class
        is unknown, the crop leaves the image or nothing is close enough,
        ERROR on any failure including the catalog lookup
    """
    if cell.champion_class is None:
        return Outcome.not_found("class not identified")

    try:
        height, width = image.shape[:2]
        rect = crop_rect(cell.bounds, config.PORTRAIT_RATIO)
        if not rect.inside(width, height):
            return Outcome.not_found("portrait region outside image")

        portrait_hash = str(await asyncio.to_thread(compute_portrait_hash, rect.slice(image)))
        candidates = await references.get_by_class(cell.champion_class)

        best, min_distance = best_reference(portrait_hash, candidates)
        cell.debug.champion = ChampionDebug(
            best_match=best.record.name if best else None,
            min_distance=min_distance,
            thumbnail=best.portrait if best else None,
        )

        if best is not None and min_distance <= config.CHAMPION_MATCH_THRESHOLD:
            return Outcome.ok(best.record.name)
        return Outcome.not_found(f"closest portrait distance {min_distance}")
    except Exception as e:
        return Outcome.error(f"champion identification failed: {e}")
