"""
Cell Feature Classifiers

Per-cell analyzers for class icon, star count and ascension status. All of
them read one shared RGBA array decoded once per screenshot and crop it
using fixed ratios of the cell bounds.

Classifiers never raise: each returns an Outcome and the pipeline decides
what an error or a miss means for the cell.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, Tuple, TypeVar

import cv2
import numpy as np

from ..pixels import rgb_to_hsl
from . import config
from .class_icons import ClassIconBank
from .result import (
    AscensionDebug,
    Bounds,
    ChampionClass,
    ClassDebug,
    GridCell,
    StarDebug,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Status(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Classifier result: a value, a confident miss, or a failure."""
    status: Status
    value: Optional[T] = None
    reason: str = ""

    @classmethod
    def ok(cls, value: T) -> "Outcome[T]":
        return cls(Status.OK, value)

    @classmethod
    def not_found(cls, reason: str = "") -> "Outcome[T]":
        return cls(Status.NOT_FOUND, None, reason)

    @classmethod
    def error(cls, reason: str) -> "Outcome[T]":
        return cls(Status.ERROR, None, reason)

    @property
    def is_ok(self) -> bool:
        return self.status is Status.OK

    def value_or(self, default: Any) -> Any:
        """The value when OK, otherwise *default*."""
        return self.value if self.status is Status.OK else default


@dataclass(frozen=True)
class CropRect:
    """Integer pixel rectangle inside the source image."""
    left: int
    top: int
    width: int
    height: int

    def inside(self, image_width: int, image_height: int) -> bool:
        return (
            self.left >= 0 and self.top >= 0
            and self.left + self.width <= image_width
            and self.top + self.height <= image_height
        )

    def clamped(self, image_width: int, image_height: int) -> "CropRect":
        """Intersection with the image; width/height may become 0."""
        left = min(max(self.left, 0), image_width)
        top = min(max(self.top, 0), image_height)
        right = min(max(self.left + self.width, 0), image_width)
        bottom = min(max(self.top + self.height, 0), image_height)
        return CropRect(left, top, max(0, right - left), max(0, bottom - top))

    def slice(self, image: np.ndarray) -> np.ndarray:
        return image[self.top:self.top + self.height, self.left:self.left + self.width]


def crop_rect(bounds: Bounds, ratio: config.Ratio) -> CropRect:
    """Absolute crop rectangle for a ratio region of a cell."""
    return CropRect(
        left=int(round(bounds.x + bounds.width * ratio.x)),
        top=int(round(bounds.y + bounds.height * ratio.y)),
        width=int(round(bounds.width * ratio.width)),
        height=int(round(bounds.height * ratio.height)),
    )


def _image_size(image: np.ndarray) -> Tuple[int, int]:
    height, width = image.shape[:2]
    return width, height


def identify_class(image: np.ndarray, cell: GridCell, bank: ClassIconBank) -> Outcome[ChampionClass]:
    """
    Match the cell's class icon against the icon bank.

    Args:
        image: (H, W, 4) RGBA screenshot
        cell: Cell to inspect; its debug info is updated
        bank: Normalized class icons

    Returns:
        OK(class) if the closest icon is within CLASS_RMSE_THRESHOLD,
        NOT_FOUND if the crop leaves the image or nothing is close enough
    """
    try:
        rect = crop_rect(cell.bounds, config.CLASS_ICON_RATIO)
        if not rect.inside(*_image_size(image)):
            return Outcome.not_found("class icon region outside image")

        size = config.CLASS_ICON_SIZE
        crop = np.ascontiguousarray(rect.slice(image))
        icon = cv2.resize(crop, (size, size), interpolation=cv2.INTER_AREA)

        best_class, min_rmse = bank.best_match(icon)
        cell.debug.class_match = ClassDebug(best_match=best_class, min_rmse=min_rmse)

        if best_class is not None and min_rmse <= config.CLASS_RMSE_THRESHOLD:
            return Outcome.ok(best_class)
        return Outcome.not_found(f"closest class icon RMSE {min_rmse:.1f}")
    except Exception as e:
        return Outcome.error(f"class identification failed: {e}")


def stars_for_ratio(ratio: float) -> int:
    """Map a bright-span ratio to a star count."""
    for cutoff, stars in config.STAR_RATIO_LADDER:
        if ratio > cutoff:
            return stars
    return config.MIN_STARS


def identify_stars(image: np.ndarray, cell: GridCell) -> Outcome[int]:
    """
    Estimate the star count from how wide the lit part of the star row is.

    The star row crop is clamped to the image. Pixels brighter than
    STAR_BRIGHTNESS_THRESHOLD (luma) are lit; the span between the leftmost
    and rightmost lit columns relative to the crop width gives the count.

    Returns:
        OK(1-7), or ERROR if the clamped crop is empty
    """
    try:
        rect = crop_rect(cell.bounds, config.STARS_CHECK_RATIO).clamped(*_image_size(image))
        if rect.width == 0 or rect.height == 0:
            return Outcome.error("star row region is empty after clamping")

        rgb = rect.slice(image)[:, :, :3].astype(np.float64)
        gray = (299 * rgb[:, :, 0] + 587 * rgb[:, :, 1] + 114 * rgb[:, :, 2]) / 1000
        lit_columns = np.flatnonzero((gray > config.STAR_BRIGHTNESS_THRESHOLD).any(axis=0))

        content_width = 0
        if lit_columns.size:
            content_width = int(lit_columns[-1] - lit_columns[0])
        ratio = content_width / rect.width

        cell.debug.stars = StarDebug(ratio=ratio, content_width=content_width)
        return Outcome.ok(stars_for_ratio(ratio))
    except Exception as e:
        return Outcome.error(f"star estimation failed: {e}")


def is_gold(hue: float, saturation: float, lightness: float) -> bool:
    """Warm gold of the ascension border, as opposed to the gray card background."""
    low, high = config.ASCENSION_HUE_RANGE
    return (
        low <= hue <= high
        and saturation > config.ASCENSION_MIN_SATURATION
        and lightness > config.ASCENSION_MIN_LIGHTNESS
    )


def identify_ascension(image: np.ndarray, cell: GridCell) -> Outcome[bool]:
    """
    Detect the gold ascension icon from the average color of its region.

    Returns:
        OK(True/False), or ERROR if the clamped crop is empty
    """
    try:
        rect = crop_rect(cell.bounds, config.ASCENSION_ICON_RATIO).clamped(*_image_size(image))
        if rect.width == 0 or rect.height == 0:
            return Outcome.error("ascension region is empty after clamping")

        mean = rect.slice(image)[:, :, :3].reshape(-1, 3).mean(axis=0)
        avg_color = (float(mean[0]), float(mean[1]), float(mean[2]))
        hsl = rgb_to_hsl(*avg_color)

        cell.debug.ascension = AscensionDebug(avg_color=avg_color, hsl=hsl)
        return Outcome.ok(is_gold(*hsl))
    except Exception as e:
        return Outcome.error(f"ascension detection failed: {e}")
