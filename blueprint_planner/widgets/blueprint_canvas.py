"""
BlueprintCanvas - Blueprint image with an interactive annotation overlay

Provides:
- Fitted, zoomable blueprint image (Ctrl + wheel zooms about the cursor,
  Ctrl+0 resets)
- Panning when zoomed in (middle-drag or wheel)
- Pipe/connection paths drawn over the image
- Click-to-add-point drawing with undo/redo (Ctrl+Z / Ctrl+Shift+Z)
- Double-click (or Enter) to finish, Escape to cancel
- Drag-to-reposition of finished paths

The canvas is a controlled component: it renders the annotation list it is
given and reports every change through signals. The owning page applies the
change and hands back a new list.
"""

import logging
from typing import Dict, List, Optional, Tuple

from PyQt6.QtWidgets import QGraphicsItem, QGraphicsPixmapItem, QGraphicsScene, QGraphicsView, QWidget
from PyQt6.QtCore import Qt, pyqtSignal, QPointF, QRectF, QSizeF
from PyQt6.QtGui import QColor, QCursor, QImage, QPainter, QPixmap, QTransform

from ..config import Config
from ..core.geometry import ImageProjection, clamp_pan, fit_image_rect
from ..core.interaction import InteractionController, InteractionState
from ..models.annotation import Annotation, Point, is_owned_by
from ..services.image_loader import ImageLoader
from .canvas.path_renderer import (
    AnnotationPathItem,
    annotation_color,
    create_annotation_item,
    create_rubber_band_item,
)

logger = logging.getLogger(__name__)


class BlueprintCanvas(QGraphicsView):
    """
    Interactive annotation canvas.

    Scene coordinates equal viewport coordinates; the image and every path
    are positioned through the projection and rebuilt when it changes.
    """

    # Signals
    path_updated = pyqtSignal(str, list)  # annotation_id, List[Point]
    drawing_finished = pyqtSignal(str)  # annotation_id
    drawing_abandoned = pyqtSignal(str)  # annotation_id (fewer than two points)
    drawing_cancelled = pyqtSignal(str)  # annotation_id
    object_selected = pyqtSignal(object)  # Annotation
    image_failed = pyqtSignal(str, str)  # source, error_message
    geometry_changed = pyqtSignal()

    def __init__(self, image_loader: Optional[ImageLoader] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._scene = QGraphicsScene(self)
        self._projection = ImageProjection()
        self._controller = InteractionController(
            self._projection,
            on_path_updated=self._emit_path_updated,
            on_drawing_finished=self.drawing_finished.emit,
            on_object_selected=self.object_selected.emit,
            on_drawing_abandoned=self.drawing_abandoned.emit,
            on_drawing_cancelled=self.drawing_cancelled.emit,
        )

        # Image state
        self._image_source: Optional[str] = None
        self._natural_size: Optional[QSizeF] = None
        self._image_item: Optional[QGraphicsPixmapItem] = None
        self._zoom = Config.DEFAULT_ZOOM
        self._pan = QPointF(0.0, 0.0)
        self._pan_anchor: Optional[Tuple[QPointF, QPointF]] = None  # pointer, pan at press

        # Overlay state
        self._annotations: List[Annotation] = []
        self._annotation_items: Dict[str, AnnotationPathItem] = {}
        self._rubber_band: Optional[QGraphicsItem] = None
        self._selected_id: Optional[str] = None
        self._viewer_uid: Optional[str] = None

        self._loader = image_loader or ImageLoader(parent=self)
        self._loader.image_loaded.connect(self._on_image_loaded)
        self._loader.image_failed.connect(self._on_image_failed)

        self._setup_view()

    def _setup_view(self):
        """Configure the graphics view."""
        self.setScene(self._scene)
        self.setRenderHint(QPainter.RenderHint.Antialiasing)
        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setFrameShape(QGraphicsView.Shape.NoFrame)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setBackgroundBrush(QColor("#1E1E1E"))
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setMouseTracking(True)

    # ==================== Properties ====================

    @property
    def projection(self) -> ImageProjection:
        return self._projection

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def image_source(self) -> Optional[str]:
        return self._image_source

    @property
    def natural_size(self) -> Optional[QSizeF]:
        return self._natural_size

    @property
    def read_only(self) -> bool:
        return self._controller.read_only

    @read_only.setter
    def read_only(self, value: bool):
        self._controller.set_read_only(value)
        self._render_annotations()

    @property
    def viewer_uid(self) -> Optional[str]:
        return self._viewer_uid

    @viewer_uid.setter
    def viewer_uid(self, value: Optional[str]):
        self._viewer_uid = value or None
        self._render_annotations()

    @property
    def zoom(self) -> float:
        return self._zoom

    def set_zoom(self, zoom: float):
        """Set the zoom factor relative to the fitted size."""
        zoom = max(Config.MIN_ZOOM, min(Config.MAX_ZOOM, zoom))
        if zoom == self._zoom:
            return
        self._zoom = zoom
        self.measure()

    def zoom_at(self, pos: QPointF, zoom: float):
        """Zoom keeping the image pixel under a viewport position in place."""
        zoom = max(Config.MIN_ZOOM, min(Config.MAX_ZOOM, zoom))
        if zoom == self._zoom:
            return
        if not self._projection.is_valid:
            self.set_zoom(zoom)
            return

        anchor = self._projection.to_image_space(pos.x(), pos.y())
        self._zoom = zoom
        self.measure()
        moved = self._projection.to_screen_space(anchor)
        self.pan_by(pos.x() - moved.x(), pos.y() - moved.y())

    @property
    def pan(self) -> QPointF:
        """Offset of the image from its centred position."""
        return QPointF(self._pan)

    def pan_by(self, dx: float, dy: float):
        """Shift the image; limited so a zoomed image keeps covering the view."""
        self._pan = QPointF(self._pan.x() + dx, self._pan.y() + dy)
        self.measure()

    def reset_view(self):
        self._pan = QPointF(0.0, 0.0)
        self._zoom = Config.DEFAULT_ZOOM
        self.measure()

    # ==================== Image ====================

    def set_image_source(self, source: Optional[str]):
        """
        Display a new image.

        The geometry frame is cleared immediately and the overlay stays
        hidden until the new image has loaded and been measured. Setting the
        current source again retries it if it has not decoded.
        """
        source = source or None
        if source == self._image_source and (source is None or self._natural_size is not None):
            return

        self._image_source = source
        self._pan = QPointF(0.0, 0.0)
        self._clear_image()
        if source:
            self._loader.load(source)

    def show_image(self, image: QImage, source: Optional[str] = None):
        """
        Display a decoded image.

        Args:
            image: Decoded image
            source: Source it was loaded from; results for a source that is
                no longer current are ignored
        """
        if source is not None and source != self._image_source:
            logger.debug(f"Ignoring stale image for {source}")
            return
        if image.isNull():
            return

        self._clear_image()
        self._natural_size = QSizeF(image.width(), image.height())
        self._image_item = QGraphicsPixmapItem(QPixmap.fromImage(image))
        self._image_item.setTransformationMode(Qt.TransformationMode.SmoothTransformation)
        self._image_item.setZValue(0)
        self._image_item.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
        self._scene.addItem(self._image_item)
        self.measure()

    def _clear_image(self):
        self._projection.invalidate()
        self._natural_size = None
        if self._image_item is not None:
            self._scene.removeItem(self._image_item)
            self._image_item = None
        self._render_annotations()

    def _on_image_loaded(self, source: str, image: QImage):
        self.show_image(image, source)

    def _on_image_failed(self, source: str, message: str):
        if source == self._image_source:
            self.image_failed.emit(source, message)

    # ==================== Geometry ====================

    def container_rect(self) -> Optional[QRectF]:
        """Viewport bounds in pointer coordinates, or None if not laid out."""
        size = self.viewport().size()
        if size.width() <= 0 or size.height() <= 0:
            return None
        return QRectF(0, 0, size.width(), size.height())

    def measure(self) -> bool:
        """
        Recompute the geometry frame from the current layout.

        No-op if no image is decoded or the viewport has no size yet.
        """
        container = self.container_rect()
        if container is None or self._natural_size is None:
            return False

        image_rect = fit_image_rect(container.size(), self._natural_size,
                                    self._zoom, Config.KEEP_ASPECT_RATIO, self._pan)
        if not self._projection.measure(container, image_rect, self._natural_size):
            return False
        self._pan = clamp_pan(container.size(), image_rect.size(), self._pan)

        self._scene.setSceneRect(container)
        if self._image_item is not None:
            frame = self._projection.frame
            self._image_item.setTransform(QTransform.fromScale(1.0 / frame.scale_x, 1.0 / frame.scale_y))
            self._image_item.setPos(image_rect.topLeft())

        self._render_annotations()
        self.geometry_changed.emit()
        return True

    # ==================== Annotations ====================

    def set_annotations(self, annotations: List[Annotation]):
        """Render a new annotation snapshot."""
        self._annotations = list(annotations)
        self._controller.set_annotations(self._annotations)
        self._render_annotations()

    def set_active_annotation_id(self, annotation_id: Optional[str]):
        """Enter drawing mode for an annotation, or leave it with None."""
        self._controller.set_active_annotation(annotation_id or None)
        self._update_cursor()
        if self._controller.state == InteractionState.DRAWING:
            self.setFocus()
        self._update_rubber_band()

    def _update_cursor(self):
        if self._pan_anchor is not None:
            shape = Qt.CursorShape.ClosedHandCursor
        elif self._controller.state == InteractionState.DRAWING:
            shape = Qt.CursorShape.CrossCursor
        else:
            shape = Qt.CursorShape.ArrowCursor
        self.viewport().setCursor(QCursor(shape))

    def set_selected_annotation_id(self, annotation_id: Optional[str]):
        self._selected_id = annotation_id or None
        self._render_annotations()

    def annotation_id_at(self, pos: QPointF) -> Optional[str]:
        """Topmost finished annotation under a viewport position."""
        for item in self._scene.items(self.mapToScene(pos.toPoint())):
            if isinstance(item, AnnotationPathItem):
                annotation = self._find(item.annotation_id)
                if annotation is not None and not annotation.drawing:
                    return annotation.id
        return None

    def _find(self, annotation_id: str) -> Optional[Annotation]:
        for annotation in self._annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    def _render_annotations(self):
        for item in self._annotation_items.values():
            self._scene.removeItem(item)
        self._annotation_items.clear()

        if self._projection.is_valid:
            for annotation in self._annotations:
                item = create_annotation_item(
                    annotation,
                    self._projection,
                    selected=annotation.id == self._selected_id,
                    owned=is_owned_by(annotation, self._viewer_uid),
                )
                if item is None:
                    continue
                if self.read_only:
                    item.unsetCursor()
                self._scene.addItem(item)
                self._annotation_items[annotation.id] = item

        self._update_rubber_band()

    def _update_rubber_band(self):
        if self._rubber_band is not None:
            self._scene.removeItem(self._rubber_band)
            self._rubber_band = None

        session = self._controller.drawing_session
        pointer = self._controller.last_pointer
        if session is None or pointer is None or not self._projection.is_valid:
            return
        points = session.points
        if not points:
            return

        active = self._find(session.annotation_id)
        color = annotation_color(active, False) if active else QColor(Config.PIPE_COLOR)
        self._rubber_band = create_rubber_band_item(
            self._projection.to_screen_space(points[-1]), QPointF(*pointer), color
        )
        self._scene.addItem(self._rubber_band)

    def _emit_path_updated(self, annotation_id: str, points: List[Point]):
        self.path_updated.emit(annotation_id, list(points))

    # ==================== Mouse Events ====================

    def _event_pos(self, event) -> QPointF:
        return self.mapToScene(event.position().toPoint())

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.MiddleButton:
            self._pan_anchor = (self._event_pos(event), QPointF(self._pan))
            self._update_cursor()
            event.accept()
            return

        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pos = self._event_pos(event)
        if self._controller.state == InteractionState.DRAWING:
            self._controller.primary_click(pos.x(), pos.y())
            self._update_rubber_band()
            event.accept()
            return

        annotation_id = self.annotation_id_at(pos)
        if annotation_id and self._controller.pointer_down_on_annotation(annotation_id, pos.x(), pos.y()):
            event.accept()
            return

        super().mousePressEvent(event)

    def mouseDoubleClickEvent(self, event):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseDoubleClickEvent(event)
            return

        if self._controller.state != InteractionState.DRAWING:
            self.mousePressEvent(event)
            return

        # Qt replaces the gesture's second press with this event; deliver it
        # as a click so the trimming rule sees both activations.
        pos = self._event_pos(event)
        self._controller.primary_click(pos.x(), pos.y())
        self._controller.double_click(pos.x(), pos.y())
        self._update_rubber_band()
        event.accept()

    def mouseMoveEvent(self, event):
        pos = self._event_pos(event)
        if self._pan_anchor is not None:
            start_pos, start_pan = self._pan_anchor
            self._pan = start_pan
            self.pan_by(pos.x() - start_pos.x(), pos.y() - start_pos.y())
            event.accept()
            return

        self._controller.pointer_move(pos.x(), pos.y())
        if self._controller.state == InteractionState.DRAWING:
            self._update_rubber_band()
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.MiddleButton and self._pan_anchor is not None:
            self._pan_anchor = None
            self._update_cursor()
            event.accept()
            return
        if event.button() == Qt.MouseButton.LeftButton:
            self._controller.pointer_release()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        self._controller.pointer_leave()
        self._update_rubber_band()
        super().leaveEvent(event)

    def wheelEvent(self, event):
        """Ctrl + wheel zooms about the cursor; the plain wheel pans when zoomed in."""
        delta = event.angleDelta()
        if event.modifiers() & Qt.KeyboardModifier.ControlModifier:
            steps = delta.y() / 120.0
            if steps:
                self.zoom_at(self._event_pos(event), self._zoom * (Config.ZOOM_STEP ** steps))
            event.accept()
            return

        if self._zoom > 1.0 and (delta.x() or delta.y()):
            step = Config.WHEEL_PAN_STEP_PX / 120.0
            self.pan_by(delta.x() * step, delta.y() * step)
            event.accept()
            return
        super().wheelEvent(event)

    # ==================== Keyboard ====================

    def keyPressEvent(self, event):
        key = event.key()
        modifiers = event.modifiers()

        if key == Qt.Key.Key_Z and modifiers & Qt.KeyboardModifier.ControlModifier:
            if modifiers & Qt.KeyboardModifier.ShiftModifier:
                self._controller.redo()
            else:
                self._controller.undo()
            self._update_rubber_band()
            event.accept()
            return

        if key == Qt.Key.Key_0 and modifiers & Qt.KeyboardModifier.ControlModifier:
            self.reset_view()
            event.accept()
            return

        if key == Qt.Key.Key_Escape and self._controller.cancel():
            self._update_rubber_band()
            event.accept()
            return

        if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter) and self._controller.confirm():
            self._update_rubber_band()
            event.accept()
            return

        super().keyPressEvent(event)

    # ==================== Resize ====================

    def resizeEvent(self, event):
        """Re-measure so paths stay on the same image pixels."""
        super().resizeEvent(event)
        container = self.container_rect()
        if container is not None:
            self._scene.setSceneRect(container)
        self.measure()

    def showEvent(self, event):
        super().showEvent(event)
        self.measure()


__all__ = ['BlueprintCanvas']
