"""
Text Detector Factory

Factory for creating text detector instances.
"""

import importlib
from typing import Dict, Type, Union

from .base import TextDetector


# Registry of available detectors: "module.Class" paths or registered classes
_DETECTOR_REGISTRY: Dict[str, Union[str, Type[TextDetector]]] = {
    "easyocr": "easyocr_detector.EasyOCRTextDetector",
    "cached": "cached_detector.CachedTextDetector",
}

# Cache for loaded detector classes
_DETECTOR_CACHE: Dict[str, Type[TextDetector]] = {}


def _load_detector_class(detector_type: str) -> Type[TextDetector]:
    """Lazily load a detector class by type."""
    if detector_type in _DETECTOR_CACHE:
        return _DETECTOR_CACHE[detector_type]

    entry = _DETECTOR_REGISTRY[detector_type]
    if isinstance(entry, str):
        module_name, class_name = entry.rsplit(".", 1)
        # Import lazily so heavy OCR backends load only when selected
        module = importlib.import_module(f".{module_name}", package=__package__)
        detector_class = getattr(module, class_name)
    else:
        detector_class = entry

    _DETECTOR_CACHE[detector_type] = detector_class
    return detector_class


def create_detector(detector_type: str = "easyocr", **config) -> TextDetector:
    """
    Create a text detector by type.

    Args:
        detector_type: Detector type identifier. Available types:
            - "easyocr" (default): EasyOCR reader
            - "cached": recorded JSON responses keyed by image hash
        **config: Detector-specific constructor options:
            For "easyocr":
                - languages: list of language codes
                - gpu: run the reader on GPU
            For "cached":
                - fixtures_dir: directory holding <md5>.json files

    Returns:
        Configured TextDetector instance

    Raises:
        ValueError: If detector_type is not recognized

    Example:
        detector = create_detector("cached", fixtures_dir="./fixtures/ocr")
        detections = detector.detect_text(image_bytes)
    """
    if detector_type not in _DETECTOR_REGISTRY:
        available = ", ".join(_DETECTOR_REGISTRY.keys())
        raise ValueError(f"Unknown detector type: {detector_type}. Available: {available}")

    detector_class = _load_detector_class(detector_type)
    return detector_class(**config)


def register_detector(name: str, detector_class: type) -> None:
    """
    Register a custom text detector type.

    Args:
        name: Detector type identifier
        detector_class: TextDetector subclass

    Example:
        from rosterscan.text import register_detector, TextDetector

        class VisionDetector(TextDetector):
            ...

        register_detector("vision", VisionDetector)
    """
    if not isinstance(detector_class, type) or not issubclass(detector_class, TextDetector):
        raise TypeError(f"{detector_class} must be a subclass of TextDetector")
    _DETECTOR_REGISTRY[name] = detector_class
    _DETECTOR_CACHE.pop(name, None)


def available_detectors() -> list[str]:
    """
    List available detector types.

    Returns:
        List of registered detector type names
    """
    return list(_DETECTOR_REGISTRY.keys())
