"""
Roster Debug Rendering

Draws the inferred grid, every crop region and the recognized values on
top of the screenshot so a reviewer can check a scan at a glance.
"""

import io
from typing import List, Optional

from PIL import Image, ImageDraw, ImageFont

from . import config
from .class_icons import ClassIconBank
from .features import crop_rect
from .result import CellDimensions, GridCell

# Overlay colors
CELL_COLOR = "lime"
CLASS_ICON_COLOR = "blue"
PORTRAIT_COLOR = "yellow"
STARS_COLOR = "cyan"
ASCENSION_COLOR = "orange"
PI_COLOR = "magenta"
HEADER_COLOR = "red"

LABEL_HEIGHT = 70
THUMBNAIL_SIZE = 40


def _load_fonts():
    """Try to load Arial, fall back to the bundled bitmap font."""
    try:
        return (
            ImageFont.truetype("arial.ttf", 16),
            ImageFont.truetype("arial.ttf", 14),
        )
    except OSError:
        font = ImageFont.load_default()
        return font, font


def _outline(draw: ImageDraw.ImageDraw, cell: GridCell, ratio: config.Ratio, color: str) -> None:
    rect = crop_rect(cell.bounds, ratio)
    draw.rectangle(
        [rect.left, rect.top, rect.left + rect.width, rect.top + rect.height],
        outline=color,
        width=2,
    )


def _label_lines(cell: GridCell) -> List[str]:
    rank_sig = f"R{cell.rank} S{cell.sig_level or 0}" if cell.rank is not None else ""
    stars = f"{cell.stars}*" if cell.stars else ""
    ascended = "(ASC)" if cell.is_ascended else ""

    star_ratio = ""
    if cell.debug.stars:
        star_ratio = f"[{cell.debug.stars.ratio:.3f}]"

    asc_hsl = ""
    if cell.debug.ascension:
        hue, sat, _ = cell.debug.ascension.hsl
        asc_hsl = f"H:{hue:.0f} S:{sat:.2f}"

    class_line = ""
    if cell.debug.class_match:
        match = cell.debug.class_match
        name = match.best_match.value if match.best_match else "?"
        class_line = f"{name} rmse {match.min_rmse:.1f}"
    if cell.debug.champion and cell.debug.champion.best_match:
        class_line += f"  {cell.debug.champion.best_match} d={cell.debug.champion.min_distance:.0f}"

    return [
        cell.champion_name or "?",
        " ".join(part for part in (stars, rank_sig, ascended, star_ratio, asc_hsl) if part),
        class_line,
    ]


def draw_debug_image(
    image_bytes: bytes,
    grid: List[GridCell],
    cell_dimensions: CellDimensions,
    icon_bank: Optional[ClassIconBank] = None,
    header_min_y: float = 0.0,
) -> bytes:
    """
    Render the debug overlay.

    Annotations include:
    - Cell bounds (lime) and power rating box (magenta)
    - Class icon, portrait, star row and ascension crops
    - Recognized values and match scores
    - Class icon and best reference portrait thumbnails
    - Header cut-off line (red)

    Args:
        image_bytes: Original encoded screenshot
        grid: Processed cells
        cell_dimensions: Inferred cell size
        icon_bank: Class icons for the thumbnail, optional
        header_min_y: Header cut-off line, 0 to skip

    Returns:
        PNG bytes, or image_bytes unchanged if the grid is empty
    """
    if not grid:
        return image_bytes

    with Image.open(io.BytesIO(image_bytes)) as source:
        canvas = source.convert("RGBA")

    overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    font, small_font = _load_fonts()

    if header_min_y > 0:
        draw.line([(0, header_min_y), (canvas.width, header_min_y)], fill=HEADER_COLOR, width=4)

    label_width = int(cell_dimensions.width)

    for cell in grid:
        x, y = cell.bounds.x, cell.bounds.y
        width, height = cell.bounds.width, cell.bounds.height

        draw.rectangle([x, y, x + width, y + height], outline=CELL_COLOR, width=4)
        _outline(draw, cell, config.CLASS_ICON_RATIO, CLASS_ICON_COLOR)
        _outline(draw, cell, config.PORTRAIT_RATIO, PORTRAIT_COLOR)
        _outline(draw, cell, config.STARS_CHECK_RATIO, STARS_COLOR)
        _outline(draw, cell, config.ASCENSION_ICON_RATIO, ASCENSION_COLOR)

        if cell.pi_bounds:
            pi = cell.pi_bounds
            draw.rectangle([pi.x, pi.y, pi.x + pi.width, pi.y + pi.height], outline=PI_COLOR, width=2)

        if cell.champion_name or cell.champion_class or cell.rank is not None:
            top = y + height / 4
            draw.rectangle([x, top, x + label_width, top + LABEL_HEIGHT], fill=(0, 0, 0, 153))
            line1, line2, line3 = _label_lines(cell)
            draw.text((x + 5, top + 4), line1, fill="white", font=font)
            draw.text((x + 5, top + 26), line2, fill="#dddddd", font=small_font)
            draw.text((x + 5, top + 46), line3, fill="#aaaaff", font=small_font)

            if cell.champion_class and icon_bank is not None:
                icon = icon_bank.get(cell.champion_class)
                if icon is not None:
                    overlay.paste(Image.fromarray(icon), (int(round(x + 5)), int(round(y + 5))))

        if cell.debug.champion and cell.debug.champion.thumbnail:
            with Image.open(io.BytesIO(cell.debug.champion.thumbnail)) as ref:
                thumb = ref.convert("RGBA").resize((THUMBNAIL_SIZE, THUMBNAIL_SIZE))
            overlay.paste(thumb, (int(round(x + width - THUMBNAIL_SIZE - 5)), int(round(y + 5))))

    composed = Image.alpha_composite(canvas, overlay)
    buffer = io.BytesIO()
    composed.save(buffer, "PNG")
    return buffer.getvalue()
