"""
Roster Grid Estimator

Infers the champion card grid from positioned OCR text alone. Each power
rating label anchors one cell: its column spacing fixes the cell size and
its position fixes the cell rectangle. Rank and sig labels above the power
rating are attached to the same cell.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from ..exceptions import NoPowerRatingsError
from ..text.result import TextDetection
from . import config
from .result import Bounds, CellDimensions, GridCell, GridEstimate

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_FIRST_DIGIT = re.compile(r"\d")
_RANK_PATTERN = re.compile(r"Rank\s*(\d+)", re.IGNORECASE)
_SIG_PATTERN = re.compile(r"Sig[.\s]*(\d+)", re.IGNORECASE)


def parse_power_rating(text: str) -> int:
    """Digits of *text* as an integer, 0 if there are none."""
    digits = _NON_DIGITS.sub("", text or "")
    return int(digits) if digits else 0


def is_power_rating(text: str) -> bool:
    """True if *text* reads as a power rating label rather than a stray number."""
    return parse_power_rating(text) > config.MIN_POWER_RATING


def anchor_x(detection: TextDetection) -> float:
    """
    Column anchor for a power rating detection.

    The left edge of the OCR box, moved right past a class icon glyph when
    the recognized text starts with non-digits.
    """
    x = float(detection.left)
    match = _FIRST_DIGIT.search(detection.text)
    if match is not None and match.start() > 0:
        x += detection.height * config.ICON_PREFIX_SHIFT_RATIO
    return x


def cluster_columns(anchors: Sequence[float], tolerance: float = config.COLUMN_TOLERANCE_PX) -> List[float]:
    """
    Collapse anchor x positions into distinct columns.

    Anchors are walked left to right; a new column starts only when an
    anchor lies more than *tolerance* past the last accepted column.

    Args:
        anchors: Anchor x positions in any order
        tolerance: Column merge distance in pixels

    Returns:
        Accepted column x positions, ascending
    """
    columns: List[float] = []
    for x in sorted(anchors):
        if not columns or x > columns[-1] + tolerance:
            columns.append(x)
    return columns


def average_column_spacing(columns: Sequence[float], image_width: float) -> float:
    """Mean distance between adjacent columns, or a 7-column guess from image width."""
    if len(columns) > 1:
        return (columns[-1] - columns[0]) / (len(columns) - 1)
    return image_width / config.FALLBACK_COLUMN_COUNT


def find_header_min_y(detections: Sequence[TextDetection]) -> float:
    """Bottom of the lowest screen header label, 0 if none was detected."""
    header_min_y = 0.0
    for detection in detections[1:]:
        text = (detection.text or "").upper()
        if any(keyword in text for keyword in config.HEADER_KEYWORDS):
            bottom = max(detection.vertices[2][1], detection.vertices[3][1])
            header_min_y = max(header_min_y, float(bottom))
    return header_min_y


def _find_rank_and_sig(
    detections: Sequence[TextDetection],
    anchor: float,
    pi: TextDetection,
    cell: Bounds,
) -> Tuple[Optional[int], Optional[int]]:
    """Parse "Rank N" / "Sig N" from text stacked above the power rating."""
    nearby = []
    for detection in detections:
        if not detection.text:
            continue
        aligned = abs(detection.center_x - anchor) < cell.width * config.RANK_ALIGN_RATIO
        above = cell.y + cell.height * config.RANK_TOP_RATIO < detection.bottom < pi.top
        if aligned and above:
            nearby.append(detection.text)

    combined = " ".join(nearby)
    rank_match = _RANK_PATTERN.search(combined)
    sig_match = _SIG_PATTERN.search(combined)

    rank = int(rank_match.group(1)) if rank_match else None
    sig_level = int(sig_match.group(1)) if sig_match else None
    return rank, sig_level


def sort_row_major(cells: List[GridCell], row_threshold: float) -> List[GridCell]:
    """
    Order cells top-to-bottom, left-to-right.

    Cells whose y is within *row_threshold* of the first cell in the
    current row share that row.
    """
    if not cells:
        return []

    by_y = sorted(cells, key=lambda c: c.bounds.y)
    rows: List[List[GridCell]] = []
    current_row = [by_y[0]]

    for cell in by_y[1:]:
        if abs(cell.bounds.y - current_row[0].bounds.y) <= row_threshold:
            current_row.append(cell)
        else:
            rows.append(sorted(current_row, key=lambda c: c.bounds.x))
            current_row = [cell]

    rows.append(sorted(current_row, key=lambda c: c.bounds.x))
    return [cell for row in rows for cell in row]


def estimate_grid(detections: Sequence[TextDetection], image_width: float) -> GridEstimate:
    """
    Infer the roster grid from text detections.

    Args:
        detections: Detector output, aggregate block first
        image_width: Source image width, used only when fewer than two
            columns were found

    Returns:
        GridEstimate with one GridCell per power rating, row-major

    Raises:
        NoPowerRatingsError: If no detection reads as a power rating, or
            every power rating sits above the screen header
    """
    candidates = [d for d in detections[1:] if is_power_rating(d.text)]
    logger.info(f"Power rating candidates found: {len(candidates)}")

    if not candidates:
        raise NoPowerRatingsError(len(detections))

    header_min_y = find_header_min_y(detections)
    if header_min_y > 0:
        logger.info(f"Detected header line at y={header_min_y:.0f}, ignoring cells above it")

    anchors = [(anchor_x(pi), pi) for pi in candidates]
    columns = cluster_columns([x for x, _ in anchors])
    spacing = average_column_spacing(columns, image_width)

    cell_width = spacing * config.CELL_WIDTH_RATIO
    cell_height = spacing * config.CELL_HEIGHT_RATIO

    cells: List[GridCell] = []
    for anchor, pi in anchors:
        cell_x = anchor - spacing * config.PI_OFFSET_X_RATIO
        cell_y = pi.bottom - cell_height + cell_height * config.PI_OFFSET_Y_RATIO

        if header_min_y > 0 and cell_y < header_min_y:
            continue

        bounds = Bounds(x=cell_x, y=cell_y, width=cell_width, height=cell_height)
        rank, sig_level = _find_rank_and_sig(detections, anchor, pi, bounds)

        cells.append(GridCell(
            bounds=bounds,
            power_rating=parse_power_rating(pi.text),
            pi_bounds=Bounds(x=pi.left, y=pi.top, width=pi.width, height=pi.height),
            rank=rank,
            sig_level=sig_level,
        ))

    if not cells:
        raise NoPowerRatingsError(len(detections))

    logger.debug(
        f"Grid: {len(columns)} columns, spacing {spacing:.1f}px, "
        f"cell {cell_width:.1f}x{cell_height:.1f}px, {len(cells)} cells"
    )

    return GridEstimate(
        cells=sort_row_major(cells, cell_height / 2),
        avg_column_spacing=spacing,
        cell_dimensions=CellDimensions(width=cell_width, height=cell_height),
        header_min_y=header_min_y,
    )
