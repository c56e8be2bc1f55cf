"""
Tests for the cell classifiers and the class icon bank.

Usage:
    pytest tests/test_features.py
"""

import pytest

from conftest import CLASS_COLORS, GOLD
from rosterscan.roster import (
    Bounds,
    ChampionClass,
    ClassIconBank,
    GridCell,
    Outcome,
    Status,
    identify_ascension,
    identify_class,
    identify_stars,
)
from rosterscan.roster import config
from rosterscan.roster.features import crop_rect, stars_for_ratio


def _cell(x=100.0, y=100.0, width=200.0, height=232.0) -> GridCell:
    return GridCell(bounds=Bounds(x, y, width, height), power_rating=5000)


def _paint(image, cell, ratio, color):
    rect = crop_rect(cell.bounds, ratio)
    image[rect.top:rect.top + rect.height, rect.left:rect.left + rect.width, :3] = color


class _FixedBank:
    """Bank stand-in that always reports the same best match."""

    def __init__(self, champion_class, score):
        self.result = (champion_class, score)

    def best_match(self, pixels):
        return self.result


# ---------------------------------------------------------------------------
# Class icon bank
# ---------------------------------------------------------------------------

def test_bank_loads_all_icons(icons_dir):
    bank = ClassIconBank.load(icons_dir)
    assert len(bank) == 7
    icon = bank.get(ChampionClass.TECH)
    assert icon.shape == (32, 32, 4)
    assert tuple(icon[16, 16, :3]) == CLASS_COLORS[ChampionClass.TECH]


def test_bank_skips_missing_icons(icons_dir):
    (icons_dir / "Tech.png").unlink()
    bank = ClassIconBank.load(icons_dir)
    assert len(bank) == 6
    assert bank.get(ChampionClass.TECH) is None


def test_bank_icons_are_read_only(icon_bank):
    icon = icon_bank.get(ChampionClass.MYSTIC)
    with pytest.raises(ValueError):
        icon[0, 0, 0] = 0


def test_transparent_icon_sits_on_dark_gray():
    from PIL import Image
    from rosterscan.roster import normalize_icon

    icon = normalize_icon(Image.new("RGBA", (10, 20), (255, 0, 0, 0)))
    assert tuple(icon[0, 0]) == config.CLASS_ICON_BACKGROUND


# ---------------------------------------------------------------------------
# Class identification
# ---------------------------------------------------------------------------

def test_identify_class_exact_icon(blank_image, icon_bank):
    image = blank_image(600, 500)
    cell = _cell()
    _paint(image, cell, config.CLASS_ICON_RATIO, CLASS_COLORS[ChampionClass.TECH])

    outcome = identify_class(image, cell, icon_bank)

    assert outcome.status is Status.OK
    assert outcome.value is ChampionClass.TECH
    assert cell.debug.class_match.min_rmse == pytest.approx(0.0)


def test_identify_class_background_is_not_found(blank_image, icon_bank):
    outcome = identify_class(blank_image(600, 500), _cell(), icon_bank)
    assert outcome.status is Status.NOT_FOUND
    assert outcome.value is None


def test_class_threshold_gating(blank_image):
    """RMSE 79 and 80 accept the class, 81 leaves it undefined."""
    image = blank_image(600, 500)

    rejected = identify_class(image, _cell(), _FixedBank(ChampionClass.SKILL, 81.0))
    accepted = identify_class(image, _cell(), _FixedBank(ChampionClass.SKILL, 79.0))
    boundary = identify_class(image, _cell(), _FixedBank(ChampionClass.SKILL, 80.0))

    assert rejected.value_or(None) is None
    assert accepted.value_or(None) is ChampionClass.SKILL
    assert boundary.value_or(None) is ChampionClass.SKILL


def test_identify_class_outside_image(blank_image, icon_bank):
    """Class crop leaving the image is a miss, never a clamp."""
    image = blank_image(600, 500)
    cell = _cell(x=-20.0)
    assert identify_class(image, cell, icon_bank).status is Status.NOT_FOUND


# ---------------------------------------------------------------------------
# Stars
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("ratio,stars", [
    (0.95, 7), (0.80, 6), (0.65, 5), (0.50, 4), (0.35, 3), (0.20, 2), (0.10, 1), (0.0, 1),
])
def test_star_ladder(ratio, stars):
    assert stars_for_ratio(ratio) == stars


def test_identify_stars_from_bright_span(blank_image):
    image = blank_image(400, 400)
    cell = _cell(x=0.0, y=0.0)
    rect = crop_rect(cell.bounds, config.STARS_CHECK_RATIO)
    # Lit columns 10..170 of a 192px strip -> ratio 0.833
    image[rect.top:rect.top + rect.height, rect.left + 10:rect.left + 171, :3] = 255

    outcome = identify_stars(image, cell)

    assert outcome.value == 6
    assert cell.debug.stars.content_width == 160
    assert cell.debug.stars.ratio == pytest.approx(160 / rect.width)


def test_identify_stars_dark_row_is_one_star(blank_image):
    outcome = identify_stars(blank_image(400, 400), _cell(x=0.0, y=0.0))
    assert outcome.status is Status.OK
    assert outcome.value == 1


def test_identify_stars_clamps_to_image(blank_image):
    """A strip running off the right edge is measured on its visible part."""
    image = blank_image(150, 400)
    image[:, :, :3] = 255
    outcome = identify_stars(image, _cell(x=0.0, y=0.0))
    assert outcome.value == 7


def test_identify_stars_error_falls_back_to_six(blank_image):
    outcome = identify_stars(blank_image(400, 400), _cell(x=1000.0, y=0.0))
    assert outcome.status is Status.ERROR
    assert outcome.value_or(config.DEFAULT_STARS) == 6


# ---------------------------------------------------------------------------
# Ascension
# ---------------------------------------------------------------------------

def test_identify_ascension_gold(blank_image):
    image = blank_image(400, 400)
    cell = _cell(x=0.0, y=0.0)
    _paint(image, cell, config.ASCENSION_ICON_RATIO, GOLD)

    outcome = identify_ascension(image, cell)

    assert outcome.value is True
    hue, _, _ = cell.debug.ascension.hsl
    assert 25 <= hue <= 65


def test_identify_ascension_gray(blank_image):
    image = blank_image(400, 400)
    cell = _cell(x=0.0, y=0.0)
    _paint(image, cell, config.ASCENSION_ICON_RATIO, (128, 128, 128))
    assert identify_ascension(image, cell).value is False


def test_identify_ascension_error_defaults_to_false(blank_image):
    outcome = identify_ascension(blank_image(400, 400), _cell(x=0.0, y=5000.0))
    assert outcome.status is Status.ERROR
    assert outcome.value_or(config.DEFAULT_ASCENDED) is False


def test_outcome_value_or():
    assert Outcome.ok(3).value_or(6) == 3
    assert Outcome.not_found("miss").value_or(6) == 6
    assert Outcome.error("boom").value_or(6) == 6
    assert Outcome.ok(False).value_or(True) is False
