import pytest
from PyQt6.QtCore import QPointF, QRectF, QSizeF

from blueprint_planner.core.geometry import ImageProjection, clamp_pan, fit_image_rect
from blueprint_planner.models.annotation import Point


def test_fit_image_rect_contains_and_centres():
    rect = fit_image_rect(QSizeF(400, 300), QSizeF(800, 800))
    assert rect == QRectF(50, 0, 300, 300)


def test_fit_image_rect_applies_zoom_about_centre():
    rect = fit_image_rect(QSizeF(400, 300), QSizeF(800, 600), zoom=2.0)
    assert rect == QRectF(-200, -150, 800, 600)


def test_pan_is_limited_to_the_zoomed_overhang():
    container = QSizeF(400, 300)
    assert clamp_pan(container, QSizeF(800, 600), QPointF(50, 1000)) == QPointF(50, 150)
    assert clamp_pan(container, QSizeF(800, 600), QPointF(-500, -10)) == QPointF(-200, -10)
    assert clamp_pan(container, QSizeF(400, 300), QPointF(30, 30)) == QPointF(0, 0)


def test_fit_image_rect_applies_pan_after_zoom():
    rect = fit_image_rect(QSizeF(400, 300), QSizeF(800, 600), zoom=2.0, pan=QPointF(50, 1000))
    assert rect == QRectF(-150, 0, 800, 600)

    unzoomed = fit_image_rect(QSizeF(400, 300), QSizeF(800, 600), pan=QPointF(50, 50))
    assert unzoomed == QRectF(0, 0, 400, 300)


def test_fit_image_rect_stretches_without_aspect():
    rect = fit_image_rect(QSizeF(400, 300), QSizeF(800, 800), keep_aspect=False)
    assert rect == QRectF(0, 0, 400, 300)


def test_fit_image_rect_empty_for_invalid_sizes():
    assert fit_image_rect(QSizeF(0, 300), QSizeF(800, 600)).isEmpty()
    assert fit_image_rect(QSizeF(400, 300), QSizeF(0, 0)).isEmpty()


def test_unmeasured_projection_returns_origin():
    proj = ImageProjection()
    assert not proj.is_valid
    assert proj.to_image_space(123, 45) == Point(0.0, 0.0)
    assert proj.delta_to_image_space(10, 10) == (0.0, 0.0)


def test_measure_is_noop_without_container_or_decoded_image():
    proj = ImageProjection()
    assert not proj.measure(None, QRectF(0, 0, 10, 10), QSizeF(10, 10))
    assert not proj.measure(QRectF(0, 0, 10, 10), QRectF(0, 0, 10, 10), QSizeF(0, 0))
    assert not proj.measure(QRectF(0, 0, 10, 10), QRectF(0, 0, 0, 0), QSizeF(10, 10))
    assert proj.frame is None


def test_to_image_space_subtracts_container_and_image_offset():
    proj = ImageProjection()
    proj.measure(QRectF(10, 20, 400, 300), QRectF(60, 20, 300, 300), QSizeF(600, 600))

    assert proj.to_image_space(60, 20) == Point(0.0, 0.0)
    assert proj.to_image_space(210, 170) == Point(300.0, 300.0)


def test_non_uniform_scaling_uses_independent_axes():
    proj = ImageProjection()
    proj.measure(QRectF(0, 0, 400, 200), QRectF(0, 0, 400, 200), QSizeF(800, 800))

    assert proj.frame.scale_x == 2.0
    assert proj.frame.scale_y == 4.0
    assert proj.to_image_space(100, 50) == Point(200.0, 200.0)


@pytest.mark.parametrize("screen", [(0.0, 0.0), (12.5, 99.25), (399.0, 1.0), (217.3, 140.9)])
def test_screen_image_round_trip(screen):
    proj = ImageProjection()
    proj.measure(QRectF(5, 7, 400, 300), QRectF(55, 7, 300, 300), QSizeF(1024, 768))

    back = proj.to_screen_space(proj.to_image_space(*screen))
    assert back.x() == pytest.approx(screen[0])
    assert back.y() == pytest.approx(screen[1])


def test_invalidate_clears_frame(projection):
    assert projection.is_valid
    projection.invalidate()
    assert not projection.is_valid
    assert projection.to_image_space(100, 100) == Point(0.0, 0.0)


def test_delta_to_image_space_scales_only(projection):
    assert projection.delta_to_image_space(10, -5) == (20.0, -10.0)
