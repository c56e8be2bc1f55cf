"""
Roster Result Dataclasses

Data model shared by the grid estimator, the classifiers and the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ChampionClass(str, Enum):
    """Champion classes shown as icons on roster cards."""
    COSMIC = "COSMIC"
    TECH = "TECH"
    MUTANT = "MUTANT"
    SKILL = "SKILL"
    SCIENCE = "SCIENCE"
    MYSTIC = "MYSTIC"
    SUPERIOR = "SUPERIOR"


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in source image pixels."""
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class CellDimensions:
    width: float
    height: float


# Per-classifier diagnostics. None of these are part of the result contract.

@dataclass
class ClassDebug:
    best_match: Optional[ChampionClass]
    min_rmse: float


@dataclass
class StarDebug:
    ratio: float
    content_width: int


@dataclass
class AscensionDebug:
    avg_color: Tuple[float, float, float]  # mean (r, g, b)
    hsl: Tuple[float, float, float]        # (hue degrees, saturation, lightness)


@dataclass
class ChampionDebug:
    best_match: Optional[str]
    min_distance: float
    thumbnail: Optional[bytes] = None  # PNG of the best reference portrait


@dataclass
class CellDebug:
    """Optional diagnostics, one slot per classifier."""
    class_match: Optional[ClassDebug] = None
    stars: Optional[StarDebug] = None
    ascension: Optional[AscensionDebug] = None
    champion: Optional[ChampionDebug] = None


@dataclass
class GridCell:
    """
    One champion card on the roster screenshot.

    Created by the grid estimator with bounds and power rating; classifier
    fields are filled in afterwards and never cleared once set.
    """
    bounds: Bounds
    power_rating: int
    pi_bounds: Optional[Bounds] = None
    rank: Optional[int] = None
    sig_level: Optional[int] = None
    stars: Optional[int] = None            # 1-7
    is_ascended: Optional[bool] = None
    champion_class: Optional[ChampionClass] = None
    champion_name: Optional[str] = None
    debug: CellDebug = field(default_factory=CellDebug)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary (diagnostics excluded)."""
        return {
            "bounds": self.bounds.to_dict(),
            "piBounds": self.pi_bounds.to_dict() if self.pi_bounds else None,
            "powerRating": self.power_rating,
            "rank": self.rank,
            "sigLevel": self.sig_level,
            "stars": self.stars,
            "isAscended": self.is_ascended,
            "class": self.champion_class.value if self.champion_class else None,
            "championName": self.champion_name,
        }


@dataclass
class GridEstimate:
    """Grid estimator output."""
    cells: List[GridCell]               # row-major order
    avg_column_spacing: float
    cell_dimensions: CellDimensions
    header_min_y: float = 0.0           # 0 when no header labels were seen


@dataclass
class ProcessResult:
    """Complete pipeline result for one screenshot."""
    grid: List[GridCell]
    debug_image: Optional[bytes] = None  # PNG, only in debug mode
    processing_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": [cell.to_dict() for cell in self.grid],
            "processingTimeMs": round(self.processing_time_ms, 1),
        }
