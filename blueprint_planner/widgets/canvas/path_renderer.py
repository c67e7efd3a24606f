"""
Path renderer for creating graphics items from annotations.

Annotations hold natural-pixel points; items are built in screen space through
the current projection and rebuilt whenever the geometry frame changes.
"""

from typing import Optional, Sequence

from PyQt6.QtWidgets import QGraphicsItem, QGraphicsLineItem, QGraphicsPathItem
from PyQt6.QtCore import Qt, QPointF
from PyQt6.QtGui import QColor, QPainterPath, QPainterPathStroker, QPen

from ...config import Config
from ...core.geometry import ImageProjection
from ...models.annotation import Annotation, AnnotationKind, Point

# QGraphicsItem data key holding the annotation id
ANNOTATION_ID_KEY = 0

KIND_COLORS = {
    AnnotationKind.PIPE: Config.PIPE_COLOR,
    AnnotationKind.CONNECTION: Config.CONNECTION_COLOR,
}


class AnnotationPathItem(QGraphicsPathItem):
    """Path item whose hit area extends a few pixels around the stroke."""

    def __init__(self, path: QPainterPath, hit_tolerance: float):
        super().__init__(path)
        self._hit_tolerance = hit_tolerance

    @property
    def annotation_id(self) -> str:
        return self.data(ANNOTATION_ID_KEY) or ""

    def shape(self) -> QPainterPath:
        stroker = QPainterPathStroker()
        stroker.setWidth(max(self.pen().widthF(), self._hit_tolerance * 2.0))
        stroker.setCapStyle(Qt.PenCapStyle.RoundCap)
        stroker.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
        return stroker.createStroke(self.path())


def annotation_color(annotation: Annotation, owned: bool) -> QColor:
    """
    Pick the display color.

    Completed elements are green; elements assigned to the viewer are yellow;
    everything else uses its kind color.
    """
    if annotation.completed:
        return QColor(Config.COMPLETED_COLOR)
    if owned:
        return QColor(Config.OWN_COLOR)
    return QColor(KIND_COLORS.get(annotation.kind, Config.PIPE_COLOR))


def create_pen(color: QColor, width: float, dashed: bool = False) -> QPen:
    pen = QPen(color, width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    pen.setCosmetic(True)
    if dashed:
        pen.setStyle(Qt.PenStyle.DashLine)
    return pen


def build_screen_path(points: Sequence[Point], projection: ImageProjection) -> QPainterPath:
    """Polyline through the points in screen space."""
    path = QPainterPath()
    if not points:
        return path

    screen_points = [projection.to_screen_space(p) for p in points]
    path.moveTo(screen_points[0])
    for pos in screen_points[1:]:
        path.lineTo(pos)
    return path


def add_vertex_markers(path: QPainterPath, points: Sequence[Point],
                       projection: ImageProjection, radius: float):
    """Add small circles at each vertex (used for paths being drawn)."""
    for point in points:
        path.addEllipse(projection.to_screen_space(point), radius, radius)


def create_annotation_item(
    annotation: Annotation,
    projection: ImageProjection,
    selected: bool = False,
    owned: bool = False,
    hit_tolerance: float = Config.HIT_TOLERANCE_PX,
) -> Optional[AnnotationPathItem]:
    """
    Create a graphics item for an annotation.

    Args:
        annotation: Annotation to render
        projection: Current projection (must be valid)
        selected: Draw with the selection width
        owned: Annotation is assigned to the viewer
        hit_tolerance: Extra hit area around the stroke in pixels

    Returns:
        AnnotationPathItem, or None if there is nothing to draw
    """
    if not annotation.points or not projection.is_valid:
        return None

    path = build_screen_path(annotation.points, projection)
    if annotation.drawing:
        add_vertex_markers(path, annotation.points, projection, Config.VERTEX_RADIUS)

    item = AnnotationPathItem(path, hit_tolerance)
    width = Config.SELECTED_PATH_WIDTH if selected else Config.PATH_WIDTH
    item.setPen(create_pen(annotation_color(annotation, owned), width, dashed=annotation.drawing))
    item.setData(ANNOTATION_ID_KEY, annotation.id)
    item.setZValue(2 if selected else 1)
    if not annotation.drawing:
        item.setCursor(Qt.CursorShape.PointingHandCursor)
    return item


def create_rubber_band_item(start: QPointF, end: QPointF, color: QColor) -> QGraphicsItem:
    """Dashed segment from the last placed point to the pointer."""
    band_color = QColor(color)
    band_color.setAlphaF(Config.RUBBER_BAND_OPACITY)
    item = QGraphicsLineItem(start.x(), start.y(), end.x(), end.y())
    item.setPen(create_pen(band_color, Config.PATH_WIDTH, dashed=True))
    item.setZValue(3)
    item.setAcceptedMouseButtons(Qt.MouseButton.NoButton)
    return item


__all__ = [
    'ANNOTATION_ID_KEY',
    'AnnotationPathItem',
    'annotation_color',
    'create_pen',
    'build_screen_path',
    'create_annotation_item',
    'create_rubber_band_item',
]
