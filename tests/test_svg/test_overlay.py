"""Tests for the preview overlay renderer."""

from __future__ import annotations

import pytest

from warscroll.engine.geometry import layout, numeral_positions
from warscroll.models.scene import PreviewSurface, SceneNode
from warscroll.models.stats import StatKind, StatSet
from warscroll.svg.overlay import OVERLAY_CLASS, build_overlay, render_overlay


def _numerals(overlay: SceneNode) -> dict[str, SceneNode]:
    return {
        n.attributes["class"].removeprefix("stat-"): n
        for n in overlay.children
        if n.tag == "text" and n.attributes.get("class", "").startswith("stat-")
    }


def _surface() -> PreviewSurface:
    return PreviewSurface(width=800, height=1100, background_href="art.jpg")


class TestBuildOverlay:
    def test_root_attributes(self, labels, full_stats):
        overlay = build_overlay(layout(800, 1100), labels, full_stats)
        assert overlay.tag == "svg"
        assert overlay.attributes["class"] == OVERLAY_CLASS
        assert overlay.attributes["viewBox"] == "0 0 800 1100"
        assert overlay.attributes["preserveAspectRatio"] == "xMinYMin meet"

    def test_one_arc_path_per_quadrant(self, labels):
        overlay = build_overlay(layout(800, 1100), labels)
        defs = overlay.children[0]
        assert defs.tag == "defs"
        ids = sorted(p.attributes["id"] for p in defs.children)
        assert ids == ["q-bottom", "q-left", "q-right", "q-top"]
        assert all(p.attributes["d"].startswith("M ") for p in defs.children)

    def test_curved_labels_follow_their_paths(self, labels):
        overlay = build_overlay(layout(800, 1100), labels)
        paths = list(overlay.walk("textPath"))
        assert len(paths) == 4
        by_href = {p.attributes["href"]: p for p in paths}
        assert by_href["#q-top"].text == "MOVE"
        assert by_href["#q-left"].text == "HEALTH"
        assert by_href["#q-right"].text == "SAVE"
        assert by_href["#q-bottom"].text == "CONTROL"
        assert all(p.attributes["startOffset"] == "50%" for p in paths)

    def test_only_bottom_label_translated(self, labels):
        overlay = build_overlay(layout(800, 1100), labels)
        label_texts = [n for n in overlay.children if n.tag == "text" and n.children]
        transformed = [n for n in label_texts if "transform" in n.attributes]
        assert len(transformed) == 1
        assert transformed[0].children[0].attributes["href"] == "#q-bottom"
        assert transformed[0].attributes["transform"].endswith(" -95.04)")

    def test_bottom_path_is_reversed(self, labels):
        overlay = build_overlay(layout(800, 1100), labels)
        bottom = overlay.find_by_id("q-bottom")
        # large-arc 1, sweep 0
        assert " 0 1 0 " in bottom.attributes["d"]
        top = overlay.find_by_id("q-top")
        assert " 0 0 1 " in top.attributes["d"]

    def test_numerals_formatted_and_placed(self, full_stats):
        badge = layout(800, 1100)
        overlay = build_overlay(badge, None, full_stats)
        numerals = _numerals(overlay)
        assert {k: n.text for k, n in numerals.items()} == {
            "move": '6"',
            "health": "4",
            "save": "3+",
            "control": "2",
        }
        positions = numeral_positions(badge)
        for kind, node in numerals.items():
            x, y = positions[StatKind(kind)]
            assert node.attributes["x"] == f"{x:.2f}"
            assert node.attributes["y"] == f"{y:.2f}"
            assert node.children == []

    def test_absent_stats_omitted(self):
        overlay = build_overlay(layout(800, 1100), None, {"move": "", "save": "abc"})
        assert _numerals(overlay) == {}

    def test_partial_stats(self):
        overlay = build_overlay(layout(800, 1100), None, {"save": "0"})
        numerals = _numerals(overlay)
        assert list(numerals) == ["save"]
        assert numerals["save"].text == "1+"

    def test_accepts_stat_set(self):
        stats = StatSet.from_raw({"move": "6.5"})
        overlay = build_overlay(layout(800, 1100), None, stats)
        assert _numerals(overlay)["move"].text == '6.5"'

    def test_font_sizes_scale_with_badge(self, labels, full_stats):
        overlay = build_overlay(layout(800, 1100), labels, full_stats)
        label = next(n for n in overlay.children if n.tag == "text" and n.children)
        assert label.attributes["font-size"] == "14"
        assert _numerals(overlay)["move"].attributes["font-size"] == "29"

    def test_labels_fall_back_to_layout(self, labels):
        overlay = build_overlay(layout(800, 1100, labels=labels))
        texts = sorted(p.text for p in overlay.walk("textPath"))
        assert texts == ["CONTROL", "HEALTH", "MOVE", "SAVE"]


class TestRenderOverlay:
    def test_rerender_replaces_overlay(self, labels, full_stats):
        surface = _surface()
        badge = layout(800, 1100)
        render_overlay(surface, badge, labels, full_stats)
        render_overlay(surface, badge, labels, {"move": "3"})
        overlays = surface.find(OVERLAY_CLASS)
        assert len(overlays) == 1
        assert list(_numerals(overlays[0])) == ["move"]

    def test_other_children_untouched(self, labels):
        surface = _surface()
        title = SceneNode(tag="text", attributes={"class": "title"}, text="Warscroll of Foo")
        surface.append(title)
        render_overlay(surface, layout(800, 1100), labels, {})
        render_overlay(surface, layout(800, 1100), labels, {})
        assert surface.find("title") == [title]
        assert len(surface.children) == 2

    def test_returns_inserted_node(self, labels):
        surface = _surface()
        node = render_overlay(surface, layout(800, 1100), labels, {})
        assert surface.children[-1] is node

    @pytest.mark.parametrize("count", [1, 5, 20])
    def test_repeated_renders_stay_single(self, count, labels):
        surface = _surface()
        for i in range(count):
            render_overlay(surface, layout(800, 1100), labels, {"health": str(i)})
        assert len(surface.find(OVERLAY_CLASS)) == 1
