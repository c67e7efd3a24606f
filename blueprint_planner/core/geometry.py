"""
Geometry/projection between screen coordinates and image natural-pixel space.

The frame is measured from the rendered image rectangle inside its container
and the image's intrinsic size. Annotation points are always stored in
natural-pixel space; screen positions are derived on every render.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt6.QtCore import QPointF, QRectF, QSizeF

from ..models.annotation import Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometryFrame:
    """
    Current mapping data for coordinate conversion.

    Attributes:
        container_rect: Container bounds in pointer coordinates
        image_rect: Rendered image bounds in pointer coordinates
        natural_size: Intrinsic decoded image size in pixels
    """
    container_rect: QRectF
    image_rect: QRectF
    natural_size: QSizeF

    @property
    def scale_x(self) -> float:
        """Natural pixels per rendered pixel along x."""
        return self.natural_size.width() / self.image_rect.width()

    @property
    def scale_y(self) -> float:
        """Natural pixels per rendered pixel along y."""
        return self.natural_size.height() / self.image_rect.height()

    @property
    def image_offset(self) -> QPointF:
        """Image position relative to the container's top-left corner."""
        return self.image_rect.topLeft() - self.container_rect.topLeft()


def clamp_pan(container_size: QSizeF, image_size: QSizeF, pan: QPointF) -> QPointF:
    """
    Limit a pan offset so a zoomed image keeps covering the container.

    An image no larger than the container along an axis cannot be panned
    along it.
    """
    max_x = max(0.0, (image_size.width() - container_size.width()) / 2.0)
    max_y = max(0.0, (image_size.height() - container_size.height()) / 2.0)
    return QPointF(
        min(max(pan.x(), -max_x), max_x),
        min(max(pan.y(), -max_y), max_y),
    )


def fit_image_rect(container_size: QSizeF, natural_size: QSizeF,
                   zoom: float = 1.0, keep_aspect: bool = True,
                   pan: Optional[QPointF] = None) -> QRectF:
    """
    Compute where an image is rendered inside its container.

    The image is fitted ("contain") and centred, then scaled by ``zoom``
    about the container centre and shifted by ``pan``. With ``keep_aspect``
    disabled the image is stretched to fill, giving independent x/y scale
    factors.

    Args:
        container_size: Container size in screen pixels
        natural_size: Intrinsic image size
        zoom: Zoom factor applied on top of the fit
        keep_aspect: Preserve the image aspect ratio
        pan: Offset from the centred position, clamped by :func:`clamp_pan`

    Returns:
        Rendered image rect in container coordinates (empty if sizes are invalid)
    """
    cw, ch = container_size.width(), container_size.height()
    nw, nh = natural_size.width(), natural_size.height()
    if cw <= 0 or ch <= 0 or nw <= 0 or nh <= 0:
        return QRectF()

    if keep_aspect:
        scale = min(cw / nw, ch / nh)
        width, height = nw * scale, nh * scale
    else:
        width, height = cw, ch

    width *= zoom
    height *= zoom
    rect = QRectF((cw - width) / 2.0, (ch - height) / 2.0, width, height)
    if pan is not None:
        offset = clamp_pan(container_size, rect.size(), pan)
        rect.translate(offset)
    return rect


class ImageProjection:
    """
    Bidirectional mapping between pointer coordinates and natural pixels.

    The frame is None until :meth:`measure` succeeds and is cleared by
    :meth:`invalidate` whenever the image source changes, so a stale mapping
    is never used while a new image loads.
    """

    def __init__(self):
        self._frame: Optional[GeometryFrame] = None

    @property
    def frame(self) -> Optional[GeometryFrame]:
        return self._frame

    @property
    def is_valid(self) -> bool:
        return self._frame is not None

    def invalidate(self):
        """Drop the current frame."""
        if self._frame is not None:
            logger.debug("Geometry frame invalidated")
        self._frame = None

    def measure(self, container_rect: Optional[QRectF], image_rect: Optional[QRectF],
                natural_size: Optional[QSizeF]) -> bool:
        """
        Update the frame from the current layout.

        Silently does nothing if the container is not mounted or the image has
        not finished decoding.

        Args:
            container_rect: Container bounds, or None if not mounted
            image_rect: Rendered image bounds
            natural_size: Intrinsic image size, or None if not decoded

        Returns:
            True if the frame was updated
        """
        if container_rect is None or image_rect is None or natural_size is None:
            return False
        if natural_size.width() <= 0 or natural_size.height() <= 0:
            return False
        if image_rect.width() <= 0 or image_rect.height() <= 0:
            return False

        self._frame = GeometryFrame(QRectF(container_rect), QRectF(image_rect), QSizeF(natural_size))
        return True

    def to_image_space(self, screen_x: float, screen_y: float) -> Point:
        """
        Convert a pointer position to natural-pixel space.

        Returns:
            Point in natural pixels, or Point(0, 0) if no frame is available
        """
        frame = self._frame
        if frame is None:
            return Point(0.0, 0.0)

        rel_x = screen_x - frame.container_rect.x()
        rel_y = screen_y - frame.container_rect.y()
        offset = frame.image_offset
        return Point(
            (rel_x - offset.x()) * frame.scale_x,
            (rel_y - offset.y()) * frame.scale_y,
        )

    def to_screen_space(self, point: Point) -> QPointF:
        """Convert a natural-pixel point to pointer coordinates."""
        frame = self._frame
        if frame is None:
            return QPointF(0.0, 0.0)

        return QPointF(
            frame.image_rect.x() + point[0] / frame.scale_x,
            frame.image_rect.y() + point[1] / frame.scale_y,
        )

    def delta_to_image_space(self, dx: float, dy: float) -> Tuple[float, float]:
        """Scale a screen-space displacement into natural pixels."""
        frame = self._frame
        if frame is None:
            return (0.0, 0.0)
        return (dx * frame.scale_x, dy * frame.scale_y)


__all__ = ['GeometryFrame', 'ImageProjection', 'clamp_pan', 'fit_image_rect']
