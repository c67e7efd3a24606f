"""
Image utilities for loading blueprint images

Sources may be a filesystem path, a ``file://`` URL or an ``http(s)://`` URL.
"""

import logging
import urllib.error
import urllib.request
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote, urlparse

from PyQt6.QtGui import QImage

from ..config import Config

logger = logging.getLogger(__name__)


def is_remote_source(source: str) -> bool:
    return urlparse(str(source)).scheme in ('http', 'https')


def source_to_path(source: Union[str, Path]) -> Path:
    """Convert a path or file URL to a Path."""
    text = str(source)
    parsed = urlparse(text)
    if parsed.scheme == 'file':
        return Path(unquote(parsed.path))
    return Path(text)


def load_image_as_qimage(image_path: Path) -> Optional[QImage]:
    """
    Load image file as QImage

    Args:
        image_path: Path to image file

    Returns:
        QImage or None if load failed
    """
    if not image_path.exists():
        return None

    image = QImage(str(image_path))
    if image.isNull():
        return None

    return image


def fetch_image(url: str, timeout: int = Config.IMAGE_FETCH_TIMEOUT_SEC) -> Optional[QImage]:
    """
    Download and decode an image.

    Returns:
        QImage or None if the download or decode failed
    """
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            data = response.read()
    except (urllib.error.URLError, OSError) as e:
        logger.warning(f"Could not fetch image {url}: {e}")
        return None

    image = QImage.fromData(data)
    if image.isNull():
        return None
    return image


def load_image_source(source: Union[str, Path]) -> Optional[QImage]:
    """Load an image from any supported source."""
    if is_remote_source(str(source)):
        return fetch_image(str(source))
    return load_image_as_qimage(source_to_path(source))


__all__ = ['load_image_source', 'load_image_as_qimage', 'fetch_image', 'source_to_path', 'is_remote_source']
