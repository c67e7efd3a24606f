"""
Drag session - translate a finished path by pointer movement.

Every move is computed from the snapshot captured at drag start, so
intermediate moves never accumulate rounding error.
"""

from typing import List, Sequence

from ..models.annotation import Point
from .geometry import ImageProjection


class DragSession:
    """Snapshot of a path and the pointer position where the drag began."""

    def __init__(self, annotation_id: str, start_x: float, start_y: float,
                 snapshot: Sequence[Point]):
        self.annotation_id = annotation_id
        self.start_x = start_x
        self.start_y = start_y
        self.snapshot = tuple(Point(float(p[0]), float(p[1])) for p in snapshot)

    def translated(self, screen_x: float, screen_y: float,
                   projection: ImageProjection) -> List[Point]:
        """
        Path translated by the screen delta from the drag start.

        Args:
            screen_x: Current pointer x
            screen_y: Current pointer y
            projection: Projection supplying the current scale factors

        Returns:
            New path in natural pixels (unchanged snapshot if no frame)
        """
        dx, dy = projection.delta_to_image_space(screen_x - self.start_x,
                                                 screen_y - self.start_y)
        return [Point(p.x + dx, p.y + dy) for p in self.snapshot]


__all__ = ['DragSession']
