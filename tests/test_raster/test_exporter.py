"""Tests for the raster exporter."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from warscroll.config import Settings
from warscroll.engine.geometry import layout, numeral_positions
from warscroll.models.stats import StatKind, StatSet
from warscroll.raster.exporter import (
    body_lines,
    export_filename,
    export_image,
    export_size,
    export_warscroll,
    save_png,
    to_png_bytes,
)
from tests.conftest import ART_COLOR, FULL_STATS, make_art

WHITE = (255, 255, 255)
BORDER = (34, 34, 34)


class BrokenImage:
    """Background whose pixels cannot be decoded."""

    size = (800, 1100)

    def convert(self, mode):
        raise OSError("image file is truncated")


def _bright_near(image: Image.Image, point: tuple[float, float], half: int = 12) -> bool:
    arr = np.asarray(image)
    x, y = int(round(point[0])), int(round(point[1]))
    region = arr[y - half : y + half, x - half : x + half]
    return bool((region.min(axis=2) > 200).any())


class TestBodyLines:
    def test_placeholders_when_empty(self):
        numerics = {kind: None for kind in StatKind}
        assert body_lines(numerics) == [
            "Unit Type: Custom",
            "Move: -",
            "Wounds: -",
            "Save: -",
            "Control: -",
            "",
            "Abilities:",
            "- Example ability 1",
            "- Example ability 2",
        ]

    def test_formatted_stats(self):
        numerics = StatSet.from_raw(FULL_STATS).numerics()
        lines = body_lines(numerics)
        assert lines[1:5] == ['Move: 6"', "Wounds: 4", "Save: 3+", "Control: 2"]


class TestExportImage:
    def test_numerals_drawn_at_quadrant_positions(self, art):
        badge = layout(800, 1100)
        image = export_image(art, "Warscroll of Foo", badge, FULL_STATS, 800, 1100)
        assert image.size == (800, 1100)
        assert image.mode == "RGB"
        for kind, point in numeral_positions(badge).items():
            assert _bright_near(image, point), kind

    def test_no_numerals_for_empty_stats(self, art):
        badge = layout(800, 1100)
        image = export_image(art, "Warscroll of Foo", badge, {}, 800, 1100)
        for kind, point in numeral_positions(badge).items():
            assert not _bright_near(image, point), kind

    def test_only_set_numerals_drawn(self, art):
        badge = layout(800, 1100)
        image = export_image(art, "", badge, {"save": "9"}, 800, 1100)
        positions = numeral_positions(badge)
        assert _bright_near(image, positions[StatKind.SAVE])
        assert not _bright_near(image, positions[StatKind.HEALTH])

    def test_background_scaled_to_output(self):
        art = make_art(200, 300)
        image = export_image(art, "", layout(400, 600), {}, 400, 600)
        assert image.size == (400, 600)
        corner = image.getpixel((400 - 3, 600 - 3))
        assert all(abs(a - b) <= 1 for a, b in zip(corner, ART_COLOR))

    def test_border_inset(self, art):
        image = export_image(art, "", layout(800, 1100), {}, 800, 1100)
        assert image.getpixel((11, 550)) == BORDER
        assert image.getpixel((800 - 12, 550)) == BORDER
        assert image.getpixel((400, 11)) == BORDER
        assert image.getpixel((4, 550)) == ART_COLOR

    def test_missing_background_is_white(self):
        image = export_image(None, "Title", layout(800, 1100), FULL_STATS, 800, 1100)
        assert image.getpixel((3, 3)) == WHITE
        assert image.getpixel((799 - 3, 1099 - 3)) == WHITE

    def test_broken_background_falls_back(self, caplog):
        with caplog.at_level("WARNING"):
            image = export_image(BrokenImage(), "Title", layout(800, 1100), FULL_STATS, 800, 1100)
        assert image.size == (800, 1100)
        assert image.getpixel((3, 3)) == WHITE
        assert "solid fill" in caplog.text

    def test_text_drawn_on_fallback(self):
        blank = export_image(None, "", layout(800, 1100), {}, 800, 1100)
        titled = export_image(None, "Warscroll of the Stormcast", layout(800, 1100), {}, 800, 1100)
        diff = np.abs(np.asarray(blank, dtype=np.int16) - np.asarray(titled, dtype=np.int16))
        # Title band only
        assert diff[30:80].any()
        assert not diff[200:].any()

    def test_long_title_wraps(self):
        badge = layout(800, 1100)
        short = np.asarray(export_image(None, "Lord-Celestant", badge, {}, 800, 1100))
        long = np.asarray(export_image(None, " ".join(["Lord-Celestant"] * 12), badge, {}, 800, 1100))
        # Second title line, centred, clear of the body column
        band = (slice(72, 100), slice(300, 500))
        assert not (short[band].min(axis=2) < 100).any()
        assert (long[band].min(axis=2) < 100).any()

    def test_accepts_stat_set(self, art):
        badge = layout(800, 1100)
        image = export_image(art, "", badge, StatSet.from_raw({"move": "6.5"}), 800, 1100)
        assert _bright_near(image, numeral_positions(badge)[StatKind.MOVE])


class TestExportWarscroll:
    def test_natural_size(self):
        image = export_warscroll(make_art(640, 900), "Foo", FULL_STATS)
        assert image.size == (640, 900)

    def test_fallback_size_without_background(self):
        image = export_warscroll(None, "Foo", {})
        assert image.size == (800, 1100)
        assert image.getpixel((3, 3)) == WHITE

    def test_fallback_size_from_settings(self):
        conf = Settings(fallback_width=300, fallback_height=400)
        assert export_size(None, conf) == (300, 400)
        assert export_warscroll(None, "Foo", {}, app_settings=conf).size == (300, 400)

    def test_broken_background_keeps_natural_size(self):
        image = export_warscroll(BrokenImage(), "Foo", FULL_STATS)
        assert image.size == (800, 1100)


class TestEncoding:
    def test_png_bytes(self):
        data = to_png_bytes(export_warscroll(None, "Foo", {}))
        assert data.startswith(b"\x89PNG\r\n\x1a\n")
        assert Image.open(io.BytesIO(data)).size == (800, 1100)

    def test_save_png(self, tmp_path):
        path = save_png(export_warscroll(None, "Foo", {}), tmp_path / "card.png")
        assert path.exists()
        assert Image.open(path).format == "PNG"

    @pytest.mark.parametrize(
        "title,prefix,expected",
        [
            ("My Unit", "Warscroll of", "Warscroll_of-my-unit.png"),
            ("Lord  Celestant", "Schriftrolle der", "Schriftrolle_der-lord-celestant.png"),
            (None, None, "warscroll-warscroll.png"),
            ("", "Warscroll of", "Warscroll_of-warscroll.png"),
        ],
    )
    def test_export_filename(self, title, prefix, expected):
        assert export_filename(title, prefix) == expected
