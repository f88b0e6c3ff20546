import cv2
import numpy as np
import pytest

import filters
from filters import STAGE_ORDER, FramePipeline
from parameters import ProcessingParameters
from toggles import ToggleState


def run_pipeline(frame, params=None, **flags):
    return FramePipeline(ToggleState(**flags), params or ProcessingParameters()).apply(frame)


# ----------------------------------------------------------------------
# Single stages
# ----------------------------------------------------------------------
def test_gaussian_blur_keeps_shape_and_smooths(bgr_frame):
    blurred = filters.gaussian_blur(bgr_frame, 5)
    assert blurred.shape == bgr_frame.shape
    assert blurred.dtype == np.uint8
    assert blurred.std() < bgr_frame.std()


def test_canny_output_is_single_channel_binary(bgr_frame):
    edges = filters.canny_edges(bgr_frame, 100)
    assert edges.shape == bgr_frame.shape[:2]
    assert set(np.unique(edges)) <= {0, 255}


def test_sobel_keeps_depth_and_channels(bgr_frame):
    grad = filters.sobel_gradient(bgr_frame)
    assert grad.shape == bgr_frame.shape
    assert grad.dtype == np.uint8


def test_sobel_of_flat_image_is_zero():
    flat = np.full((20, 20, 3), 90, dtype=np.uint8)
    assert not filters.sobel_gradient(flat).any()


def test_brightness_is_additive_and_saturates():
    frame = np.full((4, 4, 3), 100, dtype=np.uint8)
    assert (filters.adjust_brightness(frame, 50) == 150).all()
    assert (filters.adjust_brightness(frame, -200) == 0).all()
    assert (filters.adjust_brightness(frame, 255) == 255).all()


def test_contrast_is_multiplicative_and_saturates():
    frame = np.array([[0, 100, 200]], dtype=np.uint8)
    assert filters.adjust_contrast(frame, 2.0).tolist() == [[0, 200, 255]]
    assert filters.adjust_contrast(frame, 0.5).tolist() == [[0, 50, 100]]


def test_negative_inverts(bgr_frame):
    assert np.array_equal(filters.negative(bgr_frame), 255 - bgr_frame)


def test_grayscale_converts_color(bgr_frame):
    gray = filters.to_grayscale(bgr_frame)
    assert gray.shape == bgr_frame.shape[:2]


def test_grayscale_is_idempotent(gray_frame):
    assert filters.to_grayscale(gray_frame) is gray_frame
    once = filters.to_grayscale(np.dstack([gray_frame] * 3))
    assert np.array_equal(filters.to_grayscale(once), once)


def test_half_resizes_touch_one_axis(bgr_frame):
    assert filters.half_width(bgr_frame).shape == (60, 40, 3)
    assert filters.half_height(bgr_frame).shape == (30, 80, 3)


@pytest.mark.parametrize("turns", [0, 1, 2, 3])
def test_rotation_swaps_dimensions_on_odd_turns(bgr_frame, turns):
    rotated = filters.rotate_quarter_turns(bgr_frame, turns)
    height, width = bgr_frame.shape[:2]
    expected = (width, height) if turns % 2 else (height, width)
    assert rotated.shape[:2] == expected


def test_rotation_is_clockwise():
    frame = np.array([[1, 2], [3, 4]], dtype=np.uint8)
    assert filters.rotate_quarter_turns(frame, 1).tolist() == [[3, 1], [4, 2]]


def test_four_single_turns_are_identity(bgr_frame):
    frame = bgr_frame
    for _ in range(4):
        frame = filters.rotate_quarter_turns(frame, 1)
    assert np.array_equal(frame, bgr_frame)


def test_mirror_single_axes(bgr_frame):
    assert np.array_equal(filters.mirror(bgr_frame, True, False), bgr_frame[::-1])
    assert np.array_equal(filters.mirror(bgr_frame, False, True), bgr_frame[:, ::-1])
    assert filters.mirror(bgr_frame, False, False) is bgr_frame


def test_mirror_both_axes_matches_double_flip(bgr_frame):
    combined = filters.mirror(bgr_frame, True, True)
    reference = cv2.flip(cv2.flip(bgr_frame, 0), 1)
    assert np.array_equal(combined, reference)
    assert np.array_equal(combined, filters.rotate_quarter_turns(bgr_frame, 2))


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------
def test_no_toggles_leaves_frame_untouched(bgr_frame):
    assert run_pipeline(bgr_frame) is bgr_frame


def test_stage_list_is_in_fixed_order():
    everything = {name: True for name in ToggleState().as_dict() if name not in ("rotations",)}
    pipeline = FramePipeline(ToggleState(rotations=1, **everything), ProcessingParameters())
    assert [name for name, _stage in pipeline.stages()] == list(STAGE_ORDER)


def test_stage_list_uses_current_parameters(bgr_frame):
    toggles = ToggleState(gaussian=True)
    params = ProcessingParameters()
    pipeline = FramePipeline(toggles, params)
    params.gaussian_size = 20
    (_name, stage), = pipeline.stages()
    assert np.array_equal(stage(bgr_frame), filters.gaussian_blur(bgr_frame, 21))


def test_grayscale_and_half_width_end_to_end(bgr_frame):
    out = run_pipeline(bgr_frame, grayscale=True, half_size_x=True)
    height, width = bgr_frame.shape[:2]
    assert out.ndim == 2
    assert out.shape == (height, width // 2)


def test_canny_then_grayscale_stays_single_channel(bgr_frame):
    out = run_pipeline(bgr_frame, canny=True, grayscale=True)
    assert out.shape == bgr_frame.shape[:2]


def test_geometry_runs_after_intensity(bgr_frame):
    out = run_pipeline(bgr_frame, negative=True, rotations=1, mirror_y=True)
    expected = cv2.flip(cv2.rotate(255 - bgr_frame, cv2.ROTATE_90_CLOCKWISE), 1)
    assert np.array_equal(out, expected)


def test_empty_frame_error_propagates():
    empty = np.zeros((0, 0, 3), dtype=np.uint8)
    with pytest.raises(cv2.error):
        run_pipeline(empty, grayscale=True)
