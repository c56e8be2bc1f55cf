"""
Cached Text Detector

Replays text detection responses recorded as Google Vision style JSON,
keyed by the MD5 of the image bytes. Used for offline runs and
regression fixtures.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import List, Union

from .base import TextDetector
from .result import TextDetection

logger = logging.getLogger(__name__)


def fixture_key(image_bytes: bytes) -> str:
    """Fixture file stem for an image."""
    return hashlib.md5(image_bytes).hexdigest()


class CachedTextDetector(TextDetector):
    """Read detections from <fixtures_dir>/<md5>.json."""

    def __init__(self, fixtures_dir: Union[str, Path] = "fixtures/ocr"):
        self._fixtures_dir = Path(fixtures_dir)

    @property
    def name(self) -> str:
        return "cached"

    @property
    def fixtures_dir(self) -> Path:
        return self._fixtures_dir

    def configure(self, **kwargs) -> None:
        if 'fixtures_dir' in kwargs:
            self._fixtures_dir = Path(kwargs['fixtures_dir'])

    def fixture_path(self, image_bytes: bytes) -> Path:
        return self._fixtures_dir / f"{fixture_key(image_bytes)}.json"

    def detect_text(self, image_bytes: bytes) -> List[TextDetection]:
        """
        Raises:
            FileNotFoundError: If no fixture was recorded for this image
        """
        path = self.fixture_path(image_bytes)
        if not path.exists():
            raise FileNotFoundError(f"No recorded OCR response for image: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            annotations = json.load(f)

        logger.debug(f"Loaded {len(annotations)} cached detections from {path}")
        return [TextDetection.from_vision(a) for a in annotations]

    def record(self, image_bytes: bytes, detections: List[TextDetection]) -> Path:
        """
        Store a detection response so detect_text() can replay it.

        Returns:
            Path of the written fixture
        """
        self._fixtures_dir.mkdir(parents=True, exist_ok=True)
        path = self.fixture_path(image_bytes)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump([d.to_vision() for d in detections], f, indent=2)
        return path
