"""
Roster Recognition Module

Grid inference and per-cell classification for battlegrounds roster
screenshots.

Usage:
    from rosterscan.roster import estimate_grid, identify_stars

    estimate = estimate_grid(detections, image_width)
    for cell in estimate.cells:
        print(cell.power_rating, cell.rank, cell.sig_level)
"""

# Public API - Result types
from .result import (
    AscensionDebug,
    Bounds,
    CellDebug,
    CellDimensions,
    ChampionClass,
    ChampionDebug,
    ClassDebug,
    GridCell,
    GridEstimate,
    ProcessResult,
    StarDebug,
)

# Public API - Grid estimation
from .layout import (
    anchor_x,
    cluster_columns,
    estimate_grid,
    is_power_rating,
    parse_power_rating,
)

# Public API - Classifiers
from .class_icons import ClassIconBank, CLASS_ICON_FILES, normalize_icon
from .features import (
    Outcome,
    Status,
    identify_ascension,
    identify_class,
    identify_stars,
)

# Public API - Champion catalog and identification
from .catalog import (
    ChampionCatalog,
    ChampionRecord,
    JsonChampionCatalog,
    RawImageStore,
    download_image,
)
from .champions import ChampionReferenceCache, ReferenceEntry, identify_champion

# Public API - Orchestration and diagnostics
from .debug import draw_debug_image
from .pipeline import RosterImageService, create_service

__all__ = [
    # Result types
    "AscensionDebug",
    "Bounds",
    "CellDebug",
    "CellDimensions",
    "ChampionClass",
    "ChampionDebug",
    "ClassDebug",
    "GridCell",
    "GridEstimate",
    "ProcessResult",
    "StarDebug",
    # Grid estimation
    "anchor_x",
    "cluster_columns",
    "estimate_grid",
    "is_power_rating",
    "parse_power_rating",
    # Classifiers
    "ClassIconBank",
    "CLASS_ICON_FILES",
    "normalize_icon",
    "Outcome",
    "Status",
    "identify_ascension",
    "identify_class",
    "identify_stars",
    # Catalog
    "ChampionCatalog",
    "ChampionRecord",
    "JsonChampionCatalog",
    "RawImageStore",
    "download_image",
    "ChampionReferenceCache",
    "ReferenceEntry",
    "identify_champion",
    # Orchestration
    "draw_debug_image",
    "RosterImageService",
    "create_service",
]
