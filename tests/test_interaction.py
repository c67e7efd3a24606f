from dataclasses import replace

from blueprint_planner.core.interaction import InteractionState
from blueprint_planner.models.annotation import Annotation, AnnotationKind, Point


def start_drawing(controller, annotation_id="obj-1"):
    controller.set_annotations([Annotation(annotation_id, AnnotationKind.PIPE, drawing=True)])
    controller.set_active_annotation(annotation_id)


def test_activation_enters_drawing_with_empty_buffers(controller):
    start_drawing(controller)
    assert controller.state == InteractionState.DRAWING
    assert controller.drawing_session.points == []
    assert controller.last_pointer is None


def test_changing_active_id_resets_buffers(controller):
    start_drawing(controller)
    controller.primary_click(10, 10)
    controller.primary_click(20, 20)
    controller.undo()

    controller.set_active_annotation("obj-2")
    session = controller.drawing_session
    assert session.annotation_id == "obj-2"
    assert session.points == []
    assert session.redo_points == []


def test_clicks_append_image_space_points(controller, recorder):
    start_drawing(controller)
    controller.primary_click(10, 20)
    controller.primary_click(50, 60)

    assert recorder.last_path == [Point(20, 40), Point(100, 120)]
    assert len(recorder.of_kind("path")) == 2


def test_clicks_ignored_when_idle_or_unmeasured(controller, projection, recorder):
    assert not controller.primary_click(10, 10)

    start_drawing(controller)
    projection.invalidate()
    assert not controller.primary_click(10, 10)
    assert recorder.events == []


def test_double_click_trims_and_reports_path_before_finish(controller, recorder):
    start_drawing(controller)
    for x in (10, 50, 90, 90):
        controller.primary_click(x, 10)
    controller.double_click(90, 10)

    assert recorder.events[-2] == ("path", "obj-1", [Point(20, 20), Point(100, 20), Point(180, 20)])
    assert recorder.events[-1] == ("finished", "obj-1")
    assert controller.state == InteractionState.IDLE
    assert controller.active_annotation_id is None


def test_double_click_with_single_point_abandons(controller, recorder):
    start_drawing(controller)
    controller.primary_click(10, 10)
    controller.double_click(10, 10)

    assert recorder.of_kind("finished") == []
    assert recorder.events[-1] == ("abandoned", "obj-1")
    assert controller.state == InteractionState.IDLE


def test_confirm_keeps_last_point(controller, recorder):
    start_drawing(controller)
    controller.primary_click(10, 10)
    controller.primary_click(20, 10)
    assert controller.confirm()

    assert recorder.events[-2] == ("path", "obj-1", [Point(20, 20), Point(40, 20)])
    assert recorder.events[-1] == ("finished", "obj-1")


def test_undo_redo_report_paths(controller, recorder):
    start_drawing(controller)
    controller.primary_click(10, 10)
    controller.primary_click(20, 10)

    assert controller.undo()
    assert recorder.last_path == [Point(20, 20)]
    assert controller.redo()
    assert recorder.last_path == [Point(20, 20), Point(40, 20)]
    assert not controller.redo()


def test_undo_redo_ignored_when_not_drawing(controller, finished_pipe, recorder):
    assert not controller.undo()
    assert not controller.redo()

    controller.set_annotations([finished_pipe])
    controller.pointer_down_on_annotation("pipe-1", 100, 100)
    assert controller.state == InteractionState.DRAGGING
    assert not controller.undo()
    assert recorder.of_kind("path") == []


def test_cancel_notifies_and_returns_to_idle(controller, recorder):
    start_drawing(controller)
    controller.primary_click(10, 10)
    assert controller.cancel()

    assert recorder.events[-1] == ("cancelled", "obj-1")
    assert controller.state == InteractionState.IDLE
    assert not controller.cancel()


def test_drag_translates_snapshot(controller, finished_pipe, recorder):
    controller.set_annotations([finished_pipe])
    assert controller.pointer_down_on_annotation("pipe-1", 150, 100)
    assert recorder.events == [("selected", "pipe-1")]

    controller.pointer_move(160, 105)
    controller.pointer_move(170, 110)
    assert recorder.last_path == [Point(240, 220), Point(640, 220)]

    controller.pointer_release()
    assert controller.state == InteractionState.IDLE
    controller.pointer_move(300, 300)
    assert len(recorder.of_kind("path")) == 2


def test_zero_distance_drag_is_harmless(controller, finished_pipe, recorder):
    controller.set_annotations([finished_pipe])
    controller.pointer_down_on_annotation("pipe-1", 150, 100)
    controller.pointer_move(150, 100)
    controller.pointer_release()

    assert recorder.last_path == list(finished_pipe.points)


def test_pointer_leave_ends_drag(controller, finished_pipe):
    controller.set_annotations([finished_pipe])
    controller.pointer_down_on_annotation("pipe-1", 150, 100)
    controller.pointer_leave()
    assert controller.state == InteractionState.IDLE
    assert controller.last_pointer is None


def test_no_drag_while_drawing(controller, finished_pipe, recorder):
    controller.set_annotations([finished_pipe, Annotation("obj-1", AnnotationKind.PIPE, drawing=True)])
    controller.set_active_annotation("obj-1")

    assert not controller.pointer_down_on_annotation("pipe-1", 150, 100)
    assert controller.state == InteractionState.DRAWING
    assert recorder.events == []


def test_in_progress_annotation_cannot_be_dragged(controller, finished_pipe, recorder):
    controller.set_annotations([replace(finished_pipe, drawing=True)])
    assert not controller.pointer_down_on_annotation("pipe-1", 150, 100)
    assert controller.state == InteractionState.IDLE


def test_read_only_selects_without_drag(controller, finished_pipe, recorder):
    controller.set_read_only(True)
    controller.set_annotations([finished_pipe])

    assert controller.pointer_down_on_annotation("pipe-1", 150, 100)
    assert controller.state == InteractionState.IDLE
    controller.pointer_move(200, 200)
    assert recorder.events == [("selected", "pipe-1")]


def test_read_only_cancels_open_drag(controller, finished_pipe):
    controller.set_annotations([finished_pipe])
    controller.pointer_down_on_annotation("pipe-1", 150, 100)
    controller.set_read_only(True)
    assert controller.state == InteractionState.IDLE


def test_unknown_annotation_is_ignored(controller, recorder):
    assert not controller.pointer_down_on_annotation("missing", 0, 0)
    assert recorder.events == []
