"""
Annotation models - drawn regions overlaid on a blueprint image

All points are stored in the image's natural pixel space so annotations stay
stable across zoom, resize and layout changes.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """A coordinate pair in natural pixel space."""
    x: float
    y: float


class AnnotationKind(Enum):
    """Categories of drawn elements."""
    PIPE = "pipe"
    CONNECTION = "connection"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def worker_role(self) -> str:
        """Worker role that may be assigned to this kind of element."""
        return _KIND_WORKER_ROLES[self]


_KIND_WORKER_ROLES = {
    AnnotationKind.PIPE: "plumber",
    AnnotationKind.CONNECTION: "electrician",
}


@dataclass(frozen=True)
class WorkerRef:
    """Reference to the worker responsible for an annotation."""
    uid: str
    name: str


@dataclass(frozen=True)
class Annotation:
    """
    One drawn region on a blueprint.

    Attributes:
        id: Stable identifier for the object's lifetime
        kind: Pipe or connection
        points: Path in natural pixel space (empty while newly created)
        assignee: Responsible worker, or None
        completed: Whether the assignee marked the work done
        drawing: True only while the path is being drawn; never serialized
    """
    id: str
    kind: AnnotationKind
    points: Tuple[Point, ...] = field(default_factory=tuple)
    assignee: Optional[WorkerRef] = None
    completed: bool = False
    drawing: bool = False

    def with_points(self, points: Iterable[Point]) -> 'Annotation':
        return replace(self, points=tuple(Point(float(p[0]), float(p[1])) for p in points))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the record shape stored by the hosting backend."""
        return {
            'type': self.kind.value,
            'pathPoints': [{'x': p.x, 'y': p.y} for p in self.points],
            'assignedTo': self.assignee.uid if self.assignee else None,
            'assignedToName': self.assignee.name if self.assignee else None,
            'completed': self.completed,
        }

    @classmethod
    def from_dict(cls, annotation_id: str, data: Dict[str, Any]) -> 'Annotation':
        """Build an annotation from a stored record. Never in-progress."""
        points = tuple(
            Point(float(p['x']), float(p['y'])) for p in data.get('pathPoints') or []
        )
        assignee = None
        if data.get('assignedTo'):
            assignee = WorkerRef(data['assignedTo'], data.get('assignedToName') or '')
        return cls(
            id=annotation_id,
            kind=AnnotationKind(data.get('type', AnnotationKind.PIPE.value)),
            points=points,
            assignee=assignee,
            completed=bool(data.get('completed', False)),
            drawing=False,
        )


def is_owned_by(annotation: Annotation, viewer_uid: Optional[str]) -> bool:
    """Whether the viewer is the annotation's assignee. Derived at render time."""
    if not viewer_uid or annotation.assignee is None:
        return False
    return annotation.assignee.uid == viewer_uid


__all__ = ['Point', 'AnnotationKind', 'WorkerRef', 'Annotation', 'is_owned_by']
