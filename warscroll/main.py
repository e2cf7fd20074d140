"""Application entry: logging setup and the session factory."""

from __future__ import annotations

import logging
from pathlib import Path

from warscroll.config import settings
from warscroll.engine.background import BackgroundLoader
from warscroll.engine.session import WarscrollSession


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.warscroll_log_level).upper(), logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


configure_logging()


def create_session(
    background_path: str | Path | None = None,
    language: str | None = None,
    faction: str = "",
) -> WarscrollSession:
    """Start a session; the background begins loading immediately."""
    background = BackgroundLoader(background_path) if background_path is not None else None
    return WarscrollSession(background=background, language=language, faction=faction)
