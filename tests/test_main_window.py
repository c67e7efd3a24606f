import pytest
from PyQt6.QtGui import QImage
from PyQt6.QtCore import Qt

from blueprint_planner.core.ids import sequential_ids
from blueprint_planner.models.annotation import AnnotationKind, Point
from blueprint_planner.services.blueprint_document import BlueprintDocument
from blueprint_planner.services.blueprint_store import BlueprintStore
from blueprint_planner.services.worker_roster import Worker, WorkerRoster
from blueprint_planner.widgets.blueprint_canvas import BlueprintCanvas
from blueprint_planner.widgets.element_panel import describe_annotation
from blueprint_planner.widgets.main_window import BlueprintViewerWindow
from tests.test_blueprint_canvas import FakeImageLoader


@pytest.fixture
def window(qtbot, tmp_path):
    loader = FakeImageLoader()
    document = BlueprintDocument(
        "admin", "boss",
        WorkerRoster([Worker("p1", "Pat", "plumber")]),
        sequential_ids(clock=lambda: 0),
    )
    win = BlueprintViewerWindow(document, BlueprintCanvas(image_loader=loader),
                                BlueprintStore(tmp_path))
    qtbot.addWidget(win)
    win.show()
    qtbot.waitExposed(win)

    document.set_image_source("plan.png")
    image = QImage(1000, 500, QImage.Format.Format_RGB32)
    image.fill(Qt.GlobalColor.white)
    loader.image_loaded.emit("plan.png", image)
    return win


def click_at(canvas, point):
    pos = canvas.projection.to_screen_space(point)
    canvas.controller.primary_click(pos.x(), pos.y())
    return pos


def test_drawing_flows_into_document(window):
    doc, canvas = window.document, window.canvas
    assert canvas.projection.is_valid

    annotation_id = doc.start_drawing(AnnotationKind.PIPE)
    assert canvas.controller.active_annotation_id == annotation_id

    click_at(canvas, Point(100, 100))
    click_at(canvas, Point(400, 100))
    last = click_at(canvas, Point(400, 300))
    canvas.controller.primary_click(last.x(), last.y())
    canvas.controller.double_click(last.x(), last.y())

    annotation = doc.get(annotation_id)
    assert not annotation.drawing
    assert len(annotation.points) == 3
    assert annotation.points[2].x == pytest.approx(400, abs=1e-6)
    assert annotation.points[2].y == pytest.approx(300, abs=1e-6)
    assert doc.active_id is None
    assert doc.is_dirty
    doc.mark_saved()


def test_abandoned_drawing_is_removed(window):
    doc, canvas = window.document, window.canvas
    annotation_id = doc.start_drawing(AnnotationKind.CONNECTION)

    pos = click_at(canvas, Point(10, 10))
    canvas.controller.double_click(pos.x(), pos.y())

    assert doc.get(annotation_id) is None
    doc.mark_saved()


def test_describe_annotation_marks_own_elements(window):
    doc = window.document
    annotation_id = doc.start_drawing(AnnotationKind.PIPE)
    doc.update_path(annotation_id, [Point(0, 0), Point(5, 5)])
    doc.finish_drawing(annotation_id)
    doc.assign_worker("p1")

    annotation = doc.get(annotation_id)
    assert describe_annotation(annotation, "p1") == "Pipe - You - Pending (2 pts)"
    assert describe_annotation(annotation, "boss") == "Pipe - Pat - Pending (2 pts)"
    doc.mark_saved()


def draw_finished_pipe(doc):
    annotation_id = doc.start_drawing(AnnotationKind.PIPE)
    doc.update_path(annotation_id, [Point(0, 0), Point(50, 0)])
    doc.finish_drawing(annotation_id)
    return annotation_id


def test_save_clears_unsaved_flag_and_title_marker(window):
    doc = window.document
    draw_finished_pipe(doc)
    assert window.windowTitle().endswith(" *")

    blueprint_id = window.save_blueprint()

    assert blueprint_id == doc.blueprint_id
    assert not doc.is_dirty
    assert not window.windowTitle().endswith(" *")
    assert window.store.load(blueprint_id)["name"] == "plan"


def test_open_replaces_current_blueprint(window):
    doc = window.document
    annotation_id = draw_finished_pipe(doc)
    blueprint_id = window.save_blueprint()

    doc.set_image_source("other.png")
    assert doc.annotations == []

    assert window.open_blueprint(blueprint_id)
    assert doc.blueprint_id == blueprint_id
    assert doc.image_source == "plan.png"
    assert [a.id for a in doc.annotations] == [annotation_id]
    assert window.canvas.image_source == "plan.png"


def test_delete_open_blueprint_closes_it(window):
    doc = window.document
    draw_finished_pipe(doc)
    blueprint_id = window.save_blueprint()

    assert window.delete_blueprint(blueprint_id)
    assert window.store.list_blueprints() == []
    assert doc.image_source is None
    assert window.canvas.image_source is None


def test_worker_completion_is_written_to_store(window, qtbot):
    doc = window.document
    annotation_id = draw_finished_pipe(doc)
    doc.select(annotation_id)
    doc.assign_worker("p1")
    blueprint_id = window.save_blueprint()

    worker_doc = BlueprintDocument("plumber", "p1", doc.roster)
    worker = BlueprintViewerWindow(worker_doc, BlueprintCanvas(image_loader=FakeImageLoader()),
                                   window.store)
    qtbot.addWidget(worker)
    assert worker.open_blueprint(blueprint_id)
    assert worker.canvas.read_only

    worker_doc.toggle_complete(annotation_id)

    stored = window.store.load(blueprint_id)["objects"][annotation_id]
    assert stored["completed"] is True
    assert not worker_doc.is_dirty
