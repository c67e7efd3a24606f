from blueprint_planner.core.drawing_session import DrawingSession, trim_double_activation
from blueprint_planner.models.annotation import Point

P0, P1, P2 = Point(1.0, 1.0), Point(5.0, 2.0), Point(9.0, 7.0)


def make_session(*points):
    session = DrawingSession("obj-1")
    for p in points:
        session.add_point(p)
    return session


def test_undo_then_redo_restores_buffer():
    session = make_session(P0, P1, P2)
    before = session.points

    assert session.undo()
    assert len(session.points) == 2
    assert session.redo_points == [P2]

    assert session.redo()
    assert session.points == before
    assert session.redo_points == []


def test_new_point_clears_redo_buffer():
    session = make_session(P0, P1, P2)
    session.undo()
    session.undo()
    assert session.can_redo

    session.add_point(Point(3.0, 3.0))
    assert not session.can_redo
    assert session.points == [P0, Point(3.0, 3.0)]


def test_undo_and_redo_on_empty_buffers_are_noops():
    session = DrawingSession("obj-1")
    assert not session.undo()
    assert not session.redo()
    assert session.points == []


def test_finish_discards_double_activation_point():
    session = make_session(P0, P1, P2, P2)
    assert session.finish() == [P0, P1, P2]


def test_finish_with_too_few_points_returns_none():
    assert make_session(P0).finish() is None
    assert make_session(P0, P0).finish() is None


def test_commit_keeps_every_point():
    assert make_session(P0, P1).commit() == [P0, P1]
    assert make_session(P0).commit() is None


def test_trim_double_activation_drops_only_last():
    assert trim_double_activation([P0, P1, P2]) == [P0, P1]
    assert trim_double_activation([]) == []
