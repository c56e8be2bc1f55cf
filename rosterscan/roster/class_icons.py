"""
Class Icon Bank

Reference class icons normalized to the format cell crops are compared in:
32x32 RGBA, composited onto an opaque dark gray background.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
from PIL import Image, ImageOps

from ..pixels import rmse
from . import config
from .result import ChampionClass

logger = logging.getLogger(__name__)


# Icon file per class inside the icons directory
CLASS_ICON_FILES: Dict[ChampionClass, str] = {
    ChampionClass.COSMIC: "Cosmic.png",
    ChampionClass.TECH: "Tech.png",
    ChampionClass.MUTANT: "Mutant.png",
    ChampionClass.SKILL: "Skill.png",
    ChampionClass.SCIENCE: "Science.png",
    ChampionClass.MYSTIC: "Mystic.png",
    ChampionClass.SUPERIOR: "superior.png",
}


def normalize_icon(image: Image.Image) -> np.ndarray:
    """
    Fit an icon into the bank format.

    The icon is scaled to fit inside 32x32 keeping its aspect ratio,
    centered, and alpha-composited onto the dark gray background.

    Args:
        image: Icon image in any mode

    Returns:
        (32, 32, 4) uint8 RGBA array
    """
    size = config.CLASS_ICON_SIZE
    icon = ImageOps.contain(image.convert("RGBA"), (size, size))
    canvas = Image.new("RGBA", (size, size), config.CLASS_ICON_BACKGROUND)
    canvas.alpha_composite(icon, dest=((size - icon.width) // 2, (size - icon.height) // 2))
    return np.array(canvas, dtype=np.uint8)


class ClassIconBank:
    """Read-only set of normalized class icons."""

    def __init__(self, icons: Optional[Dict[ChampionClass, np.ndarray]] = None):
        self._icons: Dict[ChampionClass, np.ndarray] = dict(icons or {})
        for pixels in self._icons.values():
            pixels.setflags(write=False)

    @classmethod
    def load(cls, icons_dir: Path) -> "ClassIconBank":
        """
        Load and normalize every class icon found in a directory.

        Missing or unreadable icons are logged and skipped; that class can
        then never be matched.

        Args:
            icons_dir: Directory containing CLASS_ICON_FILES

        Returns:
            Loaded bank
        """
        icons_dir = Path(icons_dir)
        icons: Dict[ChampionClass, np.ndarray] = {}

        for champion_class, filename in CLASS_ICON_FILES.items():
            path = icons_dir / filename
            try:
                with Image.open(path) as img:
                    icons[champion_class] = normalize_icon(img)
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load class icon {path}: {e}")

        logger.info(f"Loaded {len(icons)}/{len(CLASS_ICON_FILES)} class icons from {icons_dir}")
        return cls(icons)

    def __len__(self) -> int:
        return len(self._icons)

    def get(self, champion_class: ChampionClass) -> Optional[np.ndarray]:
        """Normalized icon for a class, if loaded."""
        return self._icons.get(champion_class)

    def best_match(self, pixels: np.ndarray) -> Tuple[Optional[ChampionClass], float]:
        """
        Compare a normalized crop against every icon.

        Args:
            pixels: (32, 32, 4) RGBA crop

        Returns:
            Tuple of (closest class, its RMSE); (None, inf) for an empty bank
        """
        best_class: Optional[ChampionClass] = None
        min_rmse = float("inf")

        for champion_class, icon in self._icons.items():
            score = rmse(pixels, icon)
            if score < min_rmse:
                min_rmse = score
                best_class = champion_class

        return best_class, min_rmse
