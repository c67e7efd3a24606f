import pytest

from blueprint_planner.core.drag_session import DragSession
from blueprint_planner.core.geometry import ImageProjection
from blueprint_planner.models.annotation import Point


def test_translated_applies_scaled_delta(projection):
    drag = DragSession("pipe-1", 100, 100, [Point(200, 200), Point(600, 200)])

    assert drag.translated(110, 95, projection) == [Point(220, 190), Point(620, 190)]


def test_intermediate_moves_do_not_compound(projection):
    snapshot = [Point(200.1, 200.7), Point(600.3, 199.9)]
    drag = DragSession("pipe-1", 100, 100, snapshot)

    for x, y in [(101.3, 99.1), (140.7, 123.3), (99.9, 77.7), (133.3, 111.1)]:
        drag.translated(x, y, projection)
    final = drag.translated(133.3, 111.1, projection)

    direct = DragSession("pipe-1", 100, 100, snapshot).translated(133.3, 111.1, projection)
    assert final == direct
    assert final[0].x == pytest.approx(200.1 + 33.3 * 2)
    assert list(drag.snapshot) == snapshot


def test_translated_without_frame_keeps_snapshot():
    drag = DragSession("pipe-1", 0, 0, [Point(1, 2)])
    assert drag.translated(50, 50, ImageProjection()) == [Point(1, 2)]
