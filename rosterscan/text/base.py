"""
Text Detector Base Interface

Abstract base class defining the text detection contract.
"""

from abc import ABC, abstractmethod
from typing import List

from .result import TextDetection


class TextDetector(ABC):
    """
    Abstract base class for text detectors.

    All detector implementations must inherit from this class and implement
    detect_text(). The first returned element conventionally spans the whole
    image and aggregates every recognized run; the roster grid estimator
    skips it when looking for power ratings.
    """

    @abstractmethod
    def detect_text(self, image_bytes: bytes) -> List[TextDetection]:
        """
        Detect text runs in an encoded image.

        Args:
            image_bytes: Encoded screenshot (PNG/JPEG/WebP)

        Returns:
            List of TextDetection, aggregate block first. Empty if nothing
            was recognized.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Detector identifier.

        Returns:
            String name identifying this detector type (e.g., "easyocr", "cached")
        """
        pass

    def configure(self, **kwargs) -> None:
        """
        Configure detector parameters.

        Override in subclasses to support runtime configuration.
        Default implementation does nothing.

        Args:
            **kwargs: Detector-specific configuration options
        """
        pass
