"""
Core annotation logic (toolkit independent).

- geometry: screen <-> natural-pixel projection
- drawing_session: point buffer with undo/redo
- drag_session: snapshot-based path translation
- interaction: idle/drawing/dragging state machine
- ids: injectable identifier generators
"""

from .geometry import GeometryFrame, ImageProjection, clamp_pan, fit_image_rect
from .drawing_session import DrawingSession, MIN_PATH_POINTS, trim_double_activation
from .drag_session import DragSession
from .interaction import InteractionController, InteractionState
from .ids import IdGenerator, sequential_ids, uuid_ids

__all__ = [
    'GeometryFrame',
    'ImageProjection',
    'clamp_pan',
    'fit_image_rect',
    'DrawingSession',
    'MIN_PATH_POINTS',
    'trim_double_activation',
    'DragSession',
    'InteractionController',
    'InteractionState',
    'IdGenerator',
    'sequential_ids',
    'uuid_ids',
]
