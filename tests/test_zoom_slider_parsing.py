from __future__ import annotations

import pytest

from rackview.ZoomSlider import ZoomSlider
from rackview.input_convert import parse_real


def test_parse_real_accepts_numbers_and_expressions() -> None:
    assert parse_real(3) == 3.0
    assert parse_real(" 7.5 ") == 7.5
    assert parse_real("15/2") == pytest.approx(7.5)
    assert parse_real("2*pi") == pytest.approx(6.283185307179586)


@pytest.mark.parametrize("value", ["", "   ", "I", "oo", "x + 1", True, None, [1]])
def test_parse_real_rejects_non_real_input(value) -> None:
    with pytest.raises(ValueError):
        parse_real(value)


def test_zoom_slider_defaults_to_camera_range() -> None:
    slider = ZoomSlider()
    assert slider.value == 6.0
    assert (slider.min, slider.max) == (2.0, 15.0)
    assert slider.slider.step == pytest.approx(0.1)
    assert slider.number.value == "6"


def test_zoom_slider_accepts_expression_input() -> None:
    slider = ZoomSlider()
    slider.number.value = "15/2"
    assert slider.value == pytest.approx(7.5)
    assert slider.slider.value == pytest.approx(7.5)


def test_zoom_slider_clamps_typed_values() -> None:
    slider = ZoomSlider()
    slider.number.value = "100"
    assert slider.value == 15.0
    assert slider.number.value == "15"


def test_zoom_slider_invalid_text_reverts_to_previous_value() -> None:
    slider = ZoomSlider(value=4.25)
    slider.number.value = "not a number"
    assert slider.value == 4.25
    assert slider.number.value == "4.25"


def test_zoom_slider_initial_value_is_clamped() -> None:
    assert ZoomSlider(value=0.5).value == 2.0


def test_zoom_slider_reset_restores_initial_value() -> None:
    slider = ZoomSlider(value=3.0)
    slider.value = 9.0
    slider._reset(None)
    assert slider.value == 3.0


def test_observe_zoom_reports_changes_until_closed() -> None:
    slider = ZoomSlider()
    seen = []
    sub = slider.observe_zoom(seen.append)

    slider.slider.value = 8.0
    sub.close()
    slider.slider.value = 9.0

    assert seen == [8.0]


def test_zoom_slider_rejects_empty_range() -> None:
    with pytest.raises(ValueError):
        ZoomSlider(min=5, max=5)
