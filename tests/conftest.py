import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtCore import QRectF, QSizeF

from blueprint_planner.core.geometry import ImageProjection
from blueprint_planner.core.interaction import InteractionController
from blueprint_planner.models.annotation import Annotation, AnnotationKind, Point


@pytest.fixture
def projection():
    """400x300 container showing an 800x600 image: 2 natural pixels per screen pixel."""
    proj = ImageProjection()
    proj.measure(QRectF(0, 0, 400, 300), QRectF(0, 0, 400, 300), QSizeF(800, 600))
    return proj


class EventRecorder:
    """Collects controller notifications in the order they are emitted."""

    def __init__(self):
        self.events = []

    def path_updated(self, annotation_id, points):
        self.events.append(("path", annotation_id, list(points)))

    def finished(self, annotation_id):
        self.events.append(("finished", annotation_id))

    def selected(self, annotation):
        self.events.append(("selected", annotation.id))

    def abandoned(self, annotation_id):
        self.events.append(("abandoned", annotation_id))

    def cancelled(self, annotation_id):
        self.events.append(("cancelled", annotation_id))

    def of_kind(self, kind):
        return [e for e in self.events if e[0] == kind]

    @property
    def last_path(self):
        paths = self.of_kind("path")
        return paths[-1][2] if paths else None


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def controller(projection, recorder):
    return InteractionController(
        projection,
        on_path_updated=recorder.path_updated,
        on_drawing_finished=recorder.finished,
        on_object_selected=recorder.selected,
        on_drawing_abandoned=recorder.abandoned,
        on_drawing_cancelled=recorder.cancelled,
    )


@pytest.fixture
def finished_pipe():
    return Annotation(
        id="pipe-1",
        kind=AnnotationKind.PIPE,
        points=(Point(200.0, 200.0), Point(600.0, 200.0)),
    )
