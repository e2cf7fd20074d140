"""Shared test fixtures."""

from __future__ import annotations

import io

import pytest
from PIL import Image

# Scenario inputs

FULL_STATS = {"move": "6", "health": "4", "save": "3", "control": "2"}

LABELS_EN = {"top": "MOVE", "left": "HEALTH", "right": "SAVE", "bottom": "CONTROL"}

# Dark art so white numerals stand out
ART_COLOR = (40, 60, 90)


def make_art(width: int = 800, height: int = 1100, color=ART_COLOR) -> Image.Image:
    return Image.new("RGB", (width, height), color)


def make_png(width: int = 800, height: int = 1100, color=ART_COLOR) -> bytes:
    buf = io.BytesIO()
    make_art(width, height, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def art() -> Image.Image:
    return make_art()


@pytest.fixture
def art_png() -> bytes:
    return make_png()


@pytest.fixture
def full_stats() -> dict[str, str]:
    return dict(FULL_STATS)


@pytest.fixture
def labels() -> dict[str, str]:
    return dict(LABELS_EN)
