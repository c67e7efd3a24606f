from blueprint_planner.models.annotation import (
    Annotation, AnnotationKind, Point, WorkerRef, is_owned_by
)


def test_to_dict_omits_drawing_flag():
    annotation = Annotation(
        "obj-1", AnnotationKind.CONNECTION, (Point(1, 2), Point(3, 4)),
        assignee=WorkerRef("w1", "Ana"), completed=True, drawing=True,
    )
    assert annotation.to_dict() == {
        "type": "connection",
        "pathPoints": [{"x": 1, "y": 2}, {"x": 3, "y": 4}],
        "assignedTo": "w1",
        "assignedToName": "Ana",
        "completed": True,
    }


def test_from_dict_is_never_in_progress():
    annotation = Annotation.from_dict("obj-9", {
        "type": "pipe",
        "pathPoints": [{"x": 10, "y": 20}],
        "assignedTo": None,
        "assignedToName": None,
        "completed": False,
    })
    assert annotation.kind is AnnotationKind.PIPE
    assert annotation.points == (Point(10.0, 20.0),)
    assert annotation.assignee is None
    assert annotation.drawing is False


def test_with_points_returns_new_instance():
    original = Annotation("obj-1", AnnotationKind.PIPE)
    updated = original.with_points([(1, 2), (3, 4)])

    assert original.points == ()
    assert updated.points == (Point(1.0, 2.0), Point(3.0, 4.0))


def test_is_owned_by():
    assigned = Annotation("obj-1", AnnotationKind.PIPE, assignee=WorkerRef("w1", "Ana"))
    assert is_owned_by(assigned, "w1")
    assert not is_owned_by(assigned, "w2")
    assert not is_owned_by(assigned, None)
    assert not is_owned_by(Annotation("obj-2", AnnotationKind.PIPE), "w1")


def test_kind_worker_roles():
    assert AnnotationKind.PIPE.worker_role == "plumber"
    assert AnnotationKind.CONNECTION.worker_role == "electrician"
    assert AnnotationKind.CONNECTION.label == "Connection"
