"""
Roster Scan Exceptions

Fatal errors raised by the recognition pipeline. Anything raised from here
means the screenshot cannot be turned into a grid; per-cell problems are
never reported through exceptions.
"""


class RosterScanError(Exception):
    """Base class for all fatal roster scan errors."""


class NoTextDetectedError(RosterScanError):
    """Raised when the text detector returns no detections at all."""

    def __init__(self) -> None:
        super().__init__("No text detected in image")


class NoPowerRatingsError(RosterScanError):
    """
    Raised when no detection survives power rating filtering.

    Args:
        detection_count: Number of detections that were scanned.
    """

    def __init__(self, detection_count: int = 0) -> None:
        self.detection_count = detection_count
        super().__init__(
            f"No power ratings found to anchor grid "
            f"({detection_count} detections scanned)"
        )


class ServiceNotInitializedError(RosterScanError):
    """Raised when the pipeline is used before initialize() completed."""

    def __init__(self) -> None:
        super().__init__(
            "RosterImageService.initialize() must be awaited before processing"
        )
