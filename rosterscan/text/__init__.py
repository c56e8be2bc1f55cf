"""
Text Detection Module for Roster Scan

Pluggable text detectors that turn a screenshot into positioned text runs.

Usage:
    from rosterscan.text import create_detector

    detector = create_detector("easyocr", languages=["en"])
    detections = detector.detect_text(image_bytes)

    # detections[0] is the aggregate block, the rest are individual runs
    for detection in detections[1:]:
        print(detection.text, detection.vertices)
"""

# Public API - Result types
from .result import TextDetection

# Public API - Base class for custom detectors
from .base import TextDetector

# Public API - Factory functions
from .factory import (
    create_detector,
    register_detector,
    available_detectors,
)

# Public API - Offline detector (EasyOCR is loaded lazily by the factory)
from .cached_detector import CachedTextDetector, fixture_key

__all__ = [
    # Result types
    "TextDetection",
    # Base class
    "TextDetector",
    # Factory
    "create_detector",
    "register_detector",
    "available_detectors",
    # Detectors
    "CachedTextDetector",
    "fixture_key",
]
