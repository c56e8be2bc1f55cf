"""
EasyOCR Text Detector

Text detector backed by an EasyOCR reader. EasyOCR has no aggregate
block, so one is synthesized: all recognized runs joined by newlines,
spanning the full image.
"""

import io
import logging
from typing import List, Optional

import easyocr
import numpy as np
from PIL import Image

from .base import TextDetector
from .result import TextDetection

logger = logging.getLogger(__name__)


class EasyOCRTextDetector(TextDetector):
    """Detect text with easyocr.Reader.readtext()."""

    def __init__(self, languages: Optional[List[str]] = None, gpu: bool = False):
        """
        Initialize the detector.

        Args:
            languages: EasyOCR language codes (default ["en"])
            gpu: Run the reader on GPU
        """
        self._languages = list(languages or ["en"])
        self._gpu = gpu
        self._reader: Optional[easyocr.Reader] = None

    @property
    def name(self) -> str:
        return "easyocr"

    def configure(self, **kwargs) -> None:
        """
        Configure detector parameters.

        Args:
            languages: EasyOCR language codes
            gpu: Run the reader on GPU
        """
        if 'languages' in kwargs:
            self._languages = list(kwargs['languages'])
            self._reader = None
        if 'gpu' in kwargs:
            self._gpu = bool(kwargs['gpu'])
            self._reader = None

    def _get_reader(self) -> easyocr.Reader:
        if self._reader is None:
            logger.info(f"Loading EasyOCR reader for {self._languages} (gpu={self._gpu})")
            self._reader = easyocr.Reader(self._languages, gpu=self._gpu, verbose=False)
        return self._reader

    def detect_text(self, image_bytes: bytes) -> List[TextDetection]:
        with Image.open(io.BytesIO(image_bytes)) as img:
            rgb = np.array(img.convert("RGB"))
        height, width = rgb.shape[:2]

        results = self._get_reader().readtext(rgb, detail=1, paragraph=False)

        runs: List[TextDetection] = []
        for bbox, text, _confidence in results:
            vertices = [(int(round(x)), int(round(y))) for x, y in bbox]
            runs.append(TextDetection(text=text, vertices=vertices))

        logger.debug(f"EasyOCR recognized {len(runs)} text runs")

        if not runs:
            return []

        aggregate = TextDetection(
            text="\n".join(run.text for run in runs),
            vertices=[(0, 0), (width, 0), (width, height), (0, height)],
        )
        return [aggregate] + runs
