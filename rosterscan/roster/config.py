"""
Roster Recognition Constants

Tuning values for grid inference and cell classification. Ratios are
relative to the inferred column spacing or cell size, pixel tolerances
are absolute. All of them were measured on battlegrounds roster
screenshots and none are re-derived per image.
"""

from typing import NamedTuple


class Ratio(NamedTuple):
    """Crop rectangle as fractions of a cell (or reference image)."""
    x: float
    y: float
    width: float
    height: float


# Power rating filter: labels are 4-6 digit numbers, ranks/sigs/nodes are smaller
MIN_POWER_RATING = 300

# OCR boxes that swallowed the class icon glyph (e.g. "T12345") are shifted
# right by the icon width, approximated as box height * this factor
ICON_PREFIX_SHIFT_RATIO = 1.15

# Anchors closer than this to the last accepted column join that column (pixels)
COLUMN_TOLERANCE_PX = 50

# Column count assumed when fewer than two columns were observed
FALLBACK_COLUMN_COUNT = 7

# Grid structure ratios (relative to average column spacing)
CELL_WIDTH_RATIO = 0.93
CELL_HEIGHT_RATIO = 1.16

# Cell placement offsets
PI_OFFSET_X_RATIO = 0.20    # of column spacing, left of the anchor
PI_OFFSET_Y_RATIO = 0.065   # of cell height, below the power rating bottom

# Rank/sig text search window
RANK_ALIGN_RATIO = 0.6      # max |text center x - anchor x| as a fraction of cell width
RANK_TOP_RATIO = 0.2        # text bottom must be below cell top + this * cell height

# Screen header labels; cells starting above them are partial rows
HEADER_KEYWORDS = ("MASTERIES", "CRAFTING")

# Crop regions (relative to cell width/height)
CLASS_ICON_RATIO = Ratio(x=0.04, y=0.82, width=0.16, height=0.14)
ASCENSION_ICON_RATIO = Ratio(x=0.78, y=0.84, width=0.16, height=0.10)
PORTRAIT_RATIO = Ratio(x=0.28, y=0.18, width=0.44, height=0.40)
STARS_CHECK_RATIO = Ratio(x=0.02, y=0.64, width=0.96, height=0.05)

# Crop applied to the catalog reference portrait (relative to its own size)
REFERENCE_PORTRAIT_CROP = Ratio(x=0.265, y=0.15, width=0.47, height=0.65)

# Class icon bank format
CLASS_ICON_SIZE = 32
CLASS_ICON_BACKGROUND = (40, 40, 40, 255)

# Portrait hashing
PORTRAIT_SIZE = 128

# Recognition thresholds
CLASS_RMSE_THRESHOLD = 80.0
CHAMPION_MATCH_THRESHOLD = 20

# Star row: luminance that counts as a lit star pixel
STAR_BRIGHTNESS_THRESHOLD = 120

# Bright-span ratio -> star count, checked top to bottom. Uncalibrated;
# the mechanism matters, not these exact cut-offs.
STAR_RATIO_LADDER = (
    (0.90, 7),
    (0.75, 6),
    (0.60, 5),
    (0.45, 4),
    (0.30, 3),
    (0.15, 2),
)
MIN_STARS = 1

# Ascension icon gold test (HSL)
ASCENSION_HUE_RANGE = (25.0, 65.0)
ASCENSION_MIN_SATURATION = 0.20
ASCENSION_MIN_LIGHTNESS = 0.20

# Values used when a classifier fails
DEFAULT_STARS = 6
DEFAULT_ASCENDED = False
