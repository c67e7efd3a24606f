"""
Drawing session - in-progress point buffer with single-generation redo.
"""

from typing import List, Optional, Sequence

from ..models.annotation import Point

MIN_PATH_POINTS = 2


def trim_double_activation(points: Sequence[Point]) -> List[Point]:
    """
    Drop the point appended by the confirming double-activation.

    A double-activation arrives after two single activations, so the second
    of them appended a point the user never intended. Input backends that do
    not deliver that second activation must feed it explicitly before
    finishing so this rule stays the same everywhere.
    """
    return list(points[:-1])


class DrawingSession:
    """
    Point buffer for the annotation currently being drawn.

    Undo moves the last point onto the redo buffer; redo moves it back.
    Any directly added point clears the redo buffer.
    """

    def __init__(self, annotation_id: str):
        self.annotation_id = annotation_id
        self._points: List[Point] = []
        self._redo: List[Point] = []

    @property
    def points(self) -> List[Point]:
        return list(self._points)

    @property
    def redo_points(self) -> List[Point]:
        return list(self._redo)

    @property
    def can_undo(self) -> bool:
        return bool(self._points)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def add_point(self, point: Point):
        self._points.append(Point(float(point[0]), float(point[1])))
        self._redo.clear()

    def undo(self) -> bool:
        """Move the last point to the redo buffer. Returns False if empty."""
        if not self._points:
            return False
        self._redo.append(self._points.pop())
        return True

    def redo(self) -> bool:
        """Restore the most recently undone point. Returns False if empty."""
        if not self._redo:
            return False
        self._points.append(self._redo.pop())
        return True

    def finish(self) -> Optional[List[Point]]:
        """
        Finalize after a double-activation.

        Returns:
            The trimmed path, or None if fewer than MIN_PATH_POINTS remain
        """
        points = trim_double_activation(self._points)
        if len(points) < MIN_PATH_POINTS:
            return None
        return points

    def commit(self) -> Optional[List[Point]]:
        """Finalize without trimming (keyboard confirm has no gesture artifact)."""
        if len(self._points) < MIN_PATH_POINTS:
            return None
        return list(self._points)


__all__ = ['DrawingSession', 'MIN_PATH_POINTS', 'trim_double_activation']
