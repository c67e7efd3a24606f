"""
ImageLoader - Async blueprint image loading with QThreadPool

Pattern: Background loading with QRunnable workers
"""

import logging
import time
from typing import Optional, Set

from PyQt6.QtCore import QObject, QRunnable, QThreadPool, pyqtSignal
from PyQt6.QtGui import QImage

from ..config import Config
from ..utils.image_utils import load_image_source

logger = logging.getLogger(__name__)


class ImageLoadSignals(QObject):
    """Signals for ImageLoadTask"""

    load_complete = pyqtSignal(str, QImage, float)  # source, image, elapsed_ms
    load_failed = pyqtSignal(str, str)  # source, error_message


class ImageLoadTask(QRunnable):
    """
    Background task decoding one image source.

    Usage:
        task = ImageLoadTask(source)
        threadpool.start(task)
    """

    def __init__(self, source: str):
        super().__init__()
        self.source = source
        self.signals = ImageLoadSignals()
        self.start_time = time.time()

    def run(self):
        """Execute image loading task"""
        try:
            image = load_image_source(self.source)
            if image is None:
                self.signals.load_failed.emit(self.source, f"Failed to load image: {self.source}")
                return

            elapsed_ms = (time.time() - self.start_time) * 1000
            self.signals.load_complete.emit(self.source, image, elapsed_ms)

        except Exception as e:
            self.signals.load_failed.emit(self.source, f"Image load error: {e}")


class ImageLoader(QObject):
    """
    Loads blueprint images off the UI thread.

    Duplicate requests for a source that is already loading are dropped.

    Usage:
        loader = ImageLoader()
        loader.image_loaded.connect(canvas.show_image)
        loader.load(source)
    """

    image_loaded = pyqtSignal(str, QImage)  # source, image
    image_failed = pyqtSignal(str, str)  # source, error_message

    def __init__(self, thread_pool: Optional[QThreadPool] = None, parent=None):
        super().__init__(parent)

        self.thread_pool = thread_pool or QThreadPool.globalInstance()
        self.thread_pool.setMaxThreadCount(
            max(self.thread_pool.maxThreadCount(), Config.IMAGE_LOADER_THREAD_COUNT)
        )
        self.pending_requests: Set[str] = set()

    def load(self, source: str) -> bool:
        """
        Start loading a source in the background.

        Returns:
            False if the source is already loading
        """
        if source in self.pending_requests:
            return False

        self.pending_requests.add(source)
        task = ImageLoadTask(source)
        task.signals.load_complete.connect(self._on_load_complete)
        task.signals.load_failed.connect(self._on_load_failed)
        self.thread_pool.start(task)
        return True

    def _on_load_complete(self, source: str, image: QImage, elapsed_ms: float):
        self.pending_requests.discard(source)
        logger.debug(f"Loaded {source} ({image.width()}x{image.height()}) in {elapsed_ms:.1f} ms")
        self.image_loaded.emit(source, image)

    def _on_load_failed(self, source: str, message: str):
        self.pending_requests.discard(source)
        logger.warning(message)
        self.image_failed.emit(source, message)


__all__ = ['ImageLoader', 'ImageLoadTask']
