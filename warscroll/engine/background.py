"""Background art loading — resolved image or none.

Loading runs on a worker thread so the session stays responsive; consumers
only ever see the outcome: a loaded ``PIL.Image`` or ``None``.
"""

from __future__ import annotations

import io
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="warscroll-bg")

ImageSource = str | Path | bytes


def load_image(source: ImageSource) -> Image.Image | None:
    """Open and fully decode ``source``; None (with a warning) on any load failure."""
    try:
        if isinstance(source, bytes):
            image = Image.open(io.BytesIO(source))
        else:
            image = Image.open(Path(source))
        image.load()
        return image
    except Exception as e:
        # Corrupt files surface as assorted decoder errors, not only OSError
        logger.warning("Background image not available: %s", e)
        return None


class BackgroundLoader:
    """Pending background image, started at construction."""

    def __init__(self, source: ImageSource | None = None, future: Future | None = None) -> None:
        self.source = source
        if future is not None:
            self._future = future
        elif source is None:
            self._future = Future()
            self._future.set_result(None)
        else:
            self._future = _executor.submit(load_image, source)

    @classmethod
    def resolved(cls, image: Image.Image | None) -> BackgroundLoader:
        """A loader whose outcome is already known."""
        future: Future = Future()
        future.set_result(image)
        return cls(future=future)

    @property
    def href(self) -> str:
        if isinstance(self.source, (str, Path)):
            return Path(self.source).as_posix()
        return ""

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: float | None = None) -> Image.Image | None:
        """Wait up to ``timeout`` seconds; None if the load failed or is still pending."""
        try:
            return self._future.result(timeout=timeout)
        except FutureTimeout:
            logger.warning("Background image still loading after %ss, exporting without it", timeout)
            return None
        except Exception as e:
            logger.warning("Background image failed to load: %s", e)
            return None

    def peek(self) -> Image.Image | None:
        """The image if already resolved, without waiting."""
        future = self._future
        if not future.done() or future.cancelled() or future.exception() is not None:
            return None
        return future.result()

    def size(self) -> tuple[int, int] | None:
        image = self.peek()
        if image is None:
            return None
        return image.size
