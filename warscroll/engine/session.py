"""WarscrollSession — the single state object of one editing session.

Holds the faction, language, quadrant labels, stats and background of the
card being edited. The card title is derived: the language's prefix followed
by the faction ("Warscroll of Stormcast Eternals"), so it follows language
changes. Every mutation notifies subscribers synchronously, in
subscription order; the preview overlay is one of those subscribers. The
session lives for one page session and is never persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from PIL import Image

from warscroll.config import Settings, settings as default_settings
from warscroll.engine.background import BackgroundLoader
from warscroll.engine.config import DEFAULT_BADGE_CONFIG, BadgeConfig
from warscroll.engine.geometry import layout as badge_layout
from warscroll.models.scene import PreviewSurface, SceneNode
from warscroll.models.stats import RawStat, StatKind, StatSet, StatValue
from warscroll.raster.exporter import export_filename, export_warscroll, to_png_bytes
from warscroll.svg.overlay import render_overlay

logger = logging.getLogger(__name__)

DEFAULT_QUADRANT_LABELS: dict[str, dict[str, str]] = {
    "en": {"top": "MOVE", "left": "HEALTH", "right": "SAVE", "bottom": "CONTROL"},
    "de": {"top": "BEWEGUNG", "left": "LEBEN", "right": "RÜSTUNG", "bottom": "KONTROLLE"},
}

TITLE_PREFIXES: dict[str, str] = {
    "en": "Warscroll of",
    "de": "Schriftrolle der",
}

Listener = Callable[["WarscrollSession"], None]


def _language(lang: str | None) -> str:
    """Any ``de-*`` tag maps to German, everything else to English."""
    return "de" if (lang or "").lower().startswith("de") else "en"


class WarscrollSession:
    def __init__(
        self,
        background: BackgroundLoader | None = None,
        language: str | None = None,
        labels: Mapping[str, str] | None = None,
        faction: str = "",
        config: BadgeConfig | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        self.settings = app_settings or default_settings
        self.config = config or DEFAULT_BADGE_CONFIG
        self.background = background
        self.language = _language(language or self.settings.warscroll_language)
        self.faction = (faction or "").strip()
        self.stats = StatSet()
        self._custom_labels = labels is not None
        self.labels: dict[str, str] = dict(labels) if labels is not None else self._default_labels()
        self.preview = PreviewSurface(background_href=background.href if background else "")
        self._listeners: list[Listener] = [WarscrollSession.refresh_preview]

    # ── Observers ──

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(session)`` after every change; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ── Mutations ──

    def set_stat(self, kind: StatKind | str, raw: RawStat) -> StatValue:
        value = self.stats.update(kind, raw)
        logger.debug("Stat %s <- %r (%r)", value.kind.value, raw, value.numeric)
        self._notify()
        return value

    def set_stats(self, raw: Mapping[str, RawStat]) -> None:
        """Update several stats with one notification; unknown keys are skipped."""
        changed = False
        for key, value in raw.items():
            try:
                kind = StatKind(key)
            except ValueError:
                logger.debug("Ignoring unknown stat %r", key)
                continue
            self.stats.update(kind, value)
            changed = True
        if changed:
            self._notify()

    def set_faction(self, faction: str) -> None:
        self.faction = (faction or "").strip()
        self._notify()

    def set_labels(self, labels: Mapping[str, str]) -> None:
        self.labels = {**self.labels, **labels}
        self._custom_labels = True
        self._notify()

    def set_language(self, language: str) -> None:
        self.language = _language(language)
        if not self._custom_labels:
            self.labels = self._default_labels()
        self._notify()

    def _default_labels(self) -> dict[str, str]:
        return dict(DEFAULT_QUADRANT_LABELS[self.language])

    # ── Preview ──

    def resolve_background(self, timeout: float | None = None) -> Image.Image | None:
        """Wait for the background outcome and size the preview from it."""
        if self.background is None:
            return None
        if timeout is None:
            timeout = self.settings.background_timeout
        image = self.background.result(timeout)
        self.refresh_preview()
        return image

    def refresh_preview(self) -> SceneNode | None:
        """Re-render the overlay for the current state.

        Nothing is drawn until the background size is known, matching a
        preview box that only takes its size from the loaded art.
        """
        if not self.preview.has_size and self.background is not None:
            size = self.background.size()
            if size is not None:
                self.preview.width, self.preview.height = size
        if not self.preview.has_size:
            return None
        badge = badge_layout(self.preview.width, self.preview.height, config=self.config)
        return render_overlay(self.preview, badge, self.labels, self.stats, self.config)

    def preview_svg(self) -> str:
        return self.preview.to_svg()

    # ── Export ──

    @property
    def title_prefix(self) -> str:
        return TITLE_PREFIXES[self.language]

    @property
    def title(self) -> str:
        """Prefix and faction, e.g. "Warscroll of Stormcast"; empty without a faction."""
        if not self.faction:
            return ""
        return f"{self.title_prefix} {self.faction}"

    def export(self, timeout: float | None = None) -> Image.Image:
        """Raster export at the background's natural size (fallback size without one)."""
        image = None
        if self.background is not None:
            if timeout is None:
                timeout = self.settings.background_timeout
            image = self.background.result(timeout)
        title = self.title or self.title_prefix
        return export_warscroll(image, title, self.stats, self.config, self.settings)

    def export_png(self, timeout: float | None = None) -> bytes:
        return to_png_bytes(self.export(timeout))

    def export_filename(self) -> str:
        return export_filename(self.title or None, self.title_prefix)
