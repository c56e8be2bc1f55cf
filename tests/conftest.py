"""Shared test configuration and fixtures.

Screenshots, icons and reference portraits are synthesized with numpy and
Pillow; no real game assets are needed.
"""

import threading
from typing import Dict, Tuple

import cv2
import numpy as np
import pytest
from PIL import Image

from rosterscan.roster import ChampionCatalog, ChampionClass, ClassIconBank, config, normalize_icon
from rosterscan.roster.features import crop_rect
from rosterscan.pixels import encode_png
from rosterscan.roster.class_icons import CLASS_ICON_FILES
from rosterscan.text import TextDetection

# Solid icon colors, far apart from each other and from BACKGROUND
CLASS_COLORS: Dict[ChampionClass, Tuple[int, int, int]] = {
    ChampionClass.COSMIC: (220, 40, 180),
    ChampionClass.TECH: (40, 80, 220),
    ChampionClass.MUTANT: (230, 200, 40),
    ChampionClass.SKILL: (200, 30, 30),
    ChampionClass.SCIENCE: (40, 200, 60),
    ChampionClass.MYSTIC: (150, 40, 200),
    ChampionClass.SUPERIOR: (0, 200, 200),
}

BACKGROUND = (10, 10, 10)
GOLD = (255, 200, 50)


def _solid_icon(color: Tuple[int, int, int]) -> Image.Image:
    return Image.new("RGBA", (64, 64), color + (255,))


@pytest.fixture
def icons_dir(tmp_path):
    """Directory with one solid-color icon file per class."""
    directory = tmp_path / "icons"
    directory.mkdir()
    for champion_class, filename in CLASS_ICON_FILES.items():
        _solid_icon(CLASS_COLORS[champion_class]).save(directory / filename)
    return directory


@pytest.fixture
def icon_bank():
    """Bank built in memory from the same solid colors as icons_dir."""
    return ClassIconBank({
        champion_class: normalize_icon(_solid_icon(color))
        for champion_class, color in CLASS_COLORS.items()
    })


@pytest.fixture
def detection():
    """Factory: detection from text and an axis-aligned box."""
    def make(text: str, x1: int, y1: int, x2: int, y2: int) -> TextDetection:
        return TextDetection(text=text, vertices=[(x1, y1), (x2, y1), (x2, y2), (x1, y2)])
    return make


@pytest.fixture
def blank_image():
    """Factory: RGBA screenshot array filled with BACKGROUND."""
    def make(width: int = 1400, height: int = 800) -> np.ndarray:
        image = np.zeros((height, width, 4), dtype=np.uint8)
        image[:, :, :3] = BACKGROUND
        image[:, :, 3] = 255
        return image
    return make


@pytest.fixture
def block_pattern():
    """Factory: seeded blocky RGBA pattern that survives resizing."""
    def make(height: int, width: int, seed: int = 7) -> np.ndarray:
        rng = np.random.default_rng(seed)
        blocks = rng.integers(0, 256, size=(8, 8, 3), dtype=np.uint8)
        tile = np.kron(blocks, np.ones((height // 8 + 1, width // 8 + 1, 1), dtype=np.uint8))
        pattern = np.full((height, width, 4), 255, dtype=np.uint8)
        pattern[:, :, :3] = tile[:height, :width]
        return pattern
    return make


to_png = encode_png


@pytest.fixture
def png():
    """Factory: encode an array as PNG bytes."""
    return to_png


REFERENCE_SIZE = 200


def reference_shape() -> Tuple[int, int]:
    """(height, width) of the portrait crop inside a REFERENCE_SIZE reference image."""
    crop = config.REFERENCE_PORTRAIT_CROP
    return int(round(REFERENCE_SIZE * crop.height)), int(round(REFERENCE_SIZE * crop.width))


def reference_png(pattern: np.ndarray) -> bytes:
    """Reference image whose portrait crop is exactly *pattern*."""
    image = np.zeros((REFERENCE_SIZE, REFERENCE_SIZE, 4), dtype=np.uint8)
    image[:, :, :3] = BACKGROUND
    image[:, :, 3] = 255
    crop = config.REFERENCE_PORTRAIT_CROP
    left = int(round(REFERENCE_SIZE * crop.x))
    top = int(round(REFERENCE_SIZE * crop.y))
    image[top:top + pattern.shape[0], left:left + pattern.shape[1]] = pattern
    return to_png(image)


def paint_portrait(image: np.ndarray, cell, pattern: np.ndarray) -> None:
    """Scale *pattern* into the portrait region of *cell*."""
    rect = crop_rect(cell.bounds, config.PORTRAIT_RATIO)
    image[rect.top:rect.top + rect.height, rect.left:rect.left + rect.width] = cv2.resize(
        pattern, (rect.width, rect.height), interpolation=cv2.INTER_AREA)


class FakeCatalog(ChampionCatalog):
    def __init__(self, records):
        self.records = records
        self.queries = []

    def find_many(self, champion_class):
        self.queries.append(champion_class)
        return [r for r in self.records if r.champion_class == champion_class]


class FakeDownloader:
    """Serves bytes per URL and counts requests."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []
        self._lock = threading.Lock()

    def __call__(self, url, timeout):
        with self._lock:
            self.requests.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response
