"""
Interaction controller for the blueprint canvas.

Consumes pointer and keyboard input (already translated out of the widget
toolkit) and drives three states:

- IDLE: nothing in progress
- DRAWING: the page marked an annotation active; clicks append points
- DRAGGING: a finished annotation is being translated

All changes are reported through callbacks. The annotation list belongs to
the owning page and is never mutated here; new snapshots arrive through
:meth:`InteractionController.set_annotations`.
"""

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models.annotation import Annotation, Point
from .drag_session import DragSession
from .drawing_session import DrawingSession
from .geometry import ImageProjection

logger = logging.getLogger(__name__)

PathUpdatedCallback = Callable[[str, List[Point]], None]
IdCallback = Callable[[str], None]
SelectedCallback = Callable[[Annotation], None]


class InteractionState(Enum):
    """Interaction states. Drawing and dragging are mutually exclusive."""
    IDLE = "idle"
    DRAWING = "drawing"
    DRAGGING = "dragging"


def _noop(*args):
    pass


class InteractionController:
    """
    Draw/undo/redo/drag state machine.

    Preconditions that are not met (no geometry frame, no drag snapshot,
    unknown annotation) turn operations into no-ops; nothing here raises
    for malformed or out-of-order input.
    """

    def __init__(
        self,
        projection: ImageProjection,
        on_path_updated: Optional[PathUpdatedCallback] = None,
        on_drawing_finished: Optional[IdCallback] = None,
        on_object_selected: Optional[SelectedCallback] = None,
        on_drawing_abandoned: Optional[IdCallback] = None,
        on_drawing_cancelled: Optional[IdCallback] = None,
    ):
        self._projection = projection
        self._on_path_updated = on_path_updated or _noop
        self._on_drawing_finished = on_drawing_finished or _noop
        self._on_object_selected = on_object_selected or _noop
        self._on_drawing_abandoned = on_drawing_abandoned or _noop
        self._on_drawing_cancelled = on_drawing_cancelled or _noop

        self._annotations: Dict[str, Annotation] = {}
        self._active_id: Optional[str] = None
        self._drawing: Optional[DrawingSession] = None
        self._drag: Optional[DragSession] = None
        self._last_pointer: Optional[Tuple[float, float]] = None
        self._read_only = False

    # ==================== State ====================

    @property
    def state(self) -> InteractionState:
        if self._drawing is not None:
            return InteractionState.DRAWING
        if self._drag is not None:
            return InteractionState.DRAGGING
        return InteractionState.IDLE

    @property
    def active_annotation_id(self) -> Optional[str]:
        return self._active_id

    @property
    def dragged_annotation_id(self) -> Optional[str]:
        return self._drag.annotation_id if self._drag else None

    @property
    def drawing_session(self) -> Optional[DrawingSession]:
        return self._drawing

    @property
    def last_pointer(self) -> Optional[Tuple[float, float]]:
        """Last known pointer position in screen coordinates."""
        return self._last_pointer

    @property
    def read_only(self) -> bool:
        return self._read_only

    # ==================== Inputs from the page ====================

    def set_annotations(self, annotations: Iterable[Annotation]):
        """Replace the annotation snapshot used for hit results and drag snapshots."""
        self._annotations = {a.id: a for a in annotations}

    def set_active_annotation(self, annotation_id: Optional[str]):
        """
        Enter or leave the drawing state.

        Every change of the active identifier starts from an empty point
        buffer, empty redo buffer and no known pointer position.
        """
        annotation_id = annotation_id or None
        if annotation_id == self._active_id:
            return

        self._drag = None
        self._last_pointer = None
        self._active_id = annotation_id
        self._drawing = DrawingSession(annotation_id) if annotation_id else None
        logger.debug("Active annotation changed: %s", annotation_id)

    def set_read_only(self, read_only: bool):
        self._read_only = bool(read_only)
        if self._read_only:
            self._drag = None

    # ==================== Pointer input ====================

    def pointer_move(self, screen_x: float, screen_y: float):
        """Track the pointer; while dragging, report the translated path."""
        self._last_pointer = (screen_x, screen_y)
        if self._drag is None:
            return

        points = self._drag.translated(screen_x, screen_y, self._projection)
        self._on_path_updated(self._drag.annotation_id, points)

    def primary_click(self, screen_x: float, screen_y: float) -> bool:
        """
        Append the pointer position to the drawing.

        Returns:
            True if a point was added
        """
        self._last_pointer = (screen_x, screen_y)
        if self._drawing is None or not self._projection.is_valid:
            return False

        self._drawing.add_point(self._projection.to_image_space(screen_x, screen_y))
        self._report_drawing_path()
        return True

    def double_click(self, screen_x: float, screen_y: float) -> bool:
        """
        Finish the drawing after a confirming double-activation.

        The caller must already have delivered both single activations of
        the gesture through :meth:`primary_click`; the last one is trimmed.
        """
        self._last_pointer = (screen_x, screen_y)
        if self._drawing is None:
            return False
        return self._finish(trim=True)

    def confirm(self) -> bool:
        """Finish the drawing from a keyboard confirm (no point is trimmed)."""
        if self._drawing is None:
            return False
        return self._finish(trim=False)

    def pointer_down_on_annotation(self, annotation_id: str,
                                   screen_x: float, screen_y: float) -> bool:
        """
        Select a finished annotation and open a drag session on it.

        Ignored while drawing or for an annotation still in progress.
        Read-only viewers get the selection but never a drag.

        Returns:
            True if the annotation was selected
        """
        annotation = self._annotations.get(annotation_id)
        if annotation is None or annotation.drawing or self._drawing is not None:
            return False

        self._on_object_selected(annotation)

        if self._read_only or not self._projection.is_valid:
            return True

        self._drag = DragSession(annotation_id, screen_x, screen_y, annotation.points)
        self._last_pointer = (screen_x, screen_y)
        logger.debug("Drag started: %s", annotation_id)
        return True

    def pointer_release(self):
        self._end_drag()

    def pointer_leave(self):
        self._end_drag()
        self._last_pointer = None

    # ==================== Keyboard input ====================

    def undo(self) -> bool:
        if self._drawing is None or not self._drawing.undo():
            return False
        self._report_drawing_path()
        return True

    def redo(self) -> bool:
        if self._drawing is None or not self._drawing.redo():
            return False
        self._report_drawing_path()
        return True

    def cancel(self) -> bool:
        """Ask the page to cancel the current drawing."""
        if self._drawing is None:
            return False

        annotation_id = self._drawing.annotation_id
        self._clear_drawing()
        logger.debug("Drawing cancelled: %s", annotation_id)
        self._on_drawing_cancelled(annotation_id)
        return True

    # ==================== Helpers ====================

    def _report_drawing_path(self):
        self._on_path_updated(self._drawing.annotation_id, self._drawing.points)

    def _finish(self, trim: bool) -> bool:
        session = self._drawing
        annotation_id = session.annotation_id
        points = session.finish() if trim else session.commit()

        if points is None:
            logger.debug("Drawing abandoned (too few points): %s", annotation_id)
            self._clear_drawing()
            self._on_drawing_abandoned(annotation_id)
            return False

        # Path first, then the finish notification, then local cleanup
        self._on_path_updated(annotation_id, points)
        self._on_drawing_finished(annotation_id)
        if self._drawing is session:
            self._clear_drawing()
        logger.debug("Drawing finished: %s (%d points)", annotation_id, len(points))
        return True

    def _clear_drawing(self):
        self._drawing = None
        self._active_id = None
        self._last_pointer = None

    def _end_drag(self):
        if self._drag is not None:
            logger.debug("Drag ended: %s", self._drag.annotation_id)
            self._drag = None


__all__ = ['InteractionController', 'InteractionState']
