"""
Roster Scan

Recognizes champion rosters from battlegrounds screenshots: infers the
card grid from OCR text and identifies class, stars, ascension and
champion for every card.

Usage:
    import asyncio
    from rosterscan import create_service, load_settings

    async def scan(image_bytes):
        service = create_service(load_settings())
        await service.initialize()
        return await service.process_stats_view(image_bytes, debug_mode=True)

    result = asyncio.run(scan(image_bytes))
    for cell in result.grid:
        print(cell.champion_name, cell.stars, cell.rank, cell.power_rating)
"""

from .exceptions import (
    NoPowerRatingsError,
    NoTextDetectedError,
    RosterScanError,
    ServiceNotInitializedError,
)
from .settings import DEFAULT_SETTINGS, load_settings, save_settings
from .roster import (
    ChampionClass,
    GridCell,
    ProcessResult,
    RosterImageService,
    create_service,
    draw_debug_image,
)

__version__ = "0.1.0"

__all__ = [
    "NoPowerRatingsError",
    "NoTextDetectedError",
    "RosterScanError",
    "ServiceNotInitializedError",
    "DEFAULT_SETTINGS",
    "load_settings",
    "save_settings",
    "ChampionClass",
    "GridCell",
    "ProcessResult",
    "RosterImageService",
    "create_service",
    "draw_debug_image",
]
