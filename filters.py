# filters.py
"""
Frame filter stages and the fixed-order pipeline.

Provides:
- One function per stage (each returns a new frame)
- STAGE_ORDER, the order stages are applied in
- A FramePipeline class that builds the list of enabled stages from a
  ToggleState and ProcessingParameters and runs a frame through it

Order matters: colour/intensity stages run before the geometric ones, so
resizing, rotation and mirroring always work on the final pixel values.
"""

from functools import partial
from typing import Callable, List, Tuple

import cv2
import numpy as np

from parameters import ProcessingParameters
from toggles import ToggleState

Stage = Tuple[str, Callable[[np.ndarray], np.ndarray]]

STAGE_ORDER = (
    "gaussian",
    "canny",
    "sobel",
    "brightness",
    "contrast",
    "negative",
    "grayscale",
    "half_size_x",
    "half_size_y",
    "rotate",
    "mirror",
)

_ROTATIONS = {
    1: cv2.ROTATE_90_CLOCKWISE,
    2: cv2.ROTATE_180,
    3: cv2.ROTATE_90_COUNTERCLOCKWISE,
}


# ----------------------------------------------------------------------
# Intensity stages
# ----------------------------------------------------------------------
def gaussian_blur(frame: np.ndarray, size: int) -> np.ndarray:
    """Smooth with a square ``size`` x ``size`` kernel (sigma from size)."""
    return cv2.GaussianBlur(frame, (size, size), 0, borderType=cv2.BORDER_DEFAULT)


def canny_edges(frame: np.ndarray, threshold: int) -> np.ndarray:
    """
    Binary edge map using ``threshold`` as high and a third of it as low.

    The result is always single-channel.
    """
    return cv2.Canny(frame, threshold / 3.0, threshold, apertureSize=3, L2gradient=True)


def sobel_gradient(frame: np.ndarray) -> np.ndarray:
    """Blend the x and y derivatives 50/50, keeping the source depth."""
    grad_x = cv2.Sobel(frame, -1, 1, 0, ksize=3, borderType=cv2.BORDER_DEFAULT)
    grad_y = cv2.Sobel(frame, -1, 0, 1, ksize=3, borderType=cv2.BORDER_DEFAULT)
    return cv2.addWeighted(grad_x, 0.5, grad_y, 0.5, 0)


def _scale_offset(frame: np.ndarray, scale: float, offset: float) -> np.ndarray:
    # saturate(frame * scale + offset), same depth as the input
    return cv2.addWeighted(frame, scale, frame, 0.0, offset)


def adjust_brightness(frame: np.ndarray, offset: int) -> np.ndarray:
    return _scale_offset(frame, 1.0, offset)


def adjust_contrast(frame: np.ndarray, scale: float) -> np.ndarray:
    return _scale_offset(frame, scale, 0.0)


def negative(frame: np.ndarray) -> np.ndarray:
    return _scale_offset(frame, -1.0, 255.0)


def to_grayscale(frame: np.ndarray) -> np.ndarray:
    """Convert BGR to luminance; single-channel frames pass through."""
    if frame.ndim == 3 and frame.shape[2] == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    return frame


# ----------------------------------------------------------------------
# Geometric stages
# ----------------------------------------------------------------------
def half_width(frame: np.ndarray) -> np.ndarray:
    return cv2.resize(frame, (0, 0), fx=0.5, fy=1.0, interpolation=cv2.INTER_LINEAR)


def half_height(frame: np.ndarray) -> np.ndarray:
    return cv2.resize(frame, (0, 0), fx=1.0, fy=0.5, interpolation=cv2.INTER_LINEAR)


def rotate_quarter_turns(frame: np.ndarray, turns: int) -> np.ndarray:
    """Rotate clockwise by ``turns`` x 90 degrees."""
    code = _ROTATIONS.get(turns % 4)
    if code is None:
        return frame
    return cv2.rotate(frame, code)


def mirror(frame: np.ndarray, mirror_x: bool, mirror_y: bool) -> np.ndarray:
    """
    Flip around the x axis, the y axis or both.

    Both axes are done as one flip (a 180 degree point reflection).
    """
    if mirror_x and mirror_y:
        return cv2.flip(frame, -1)
    if mirror_x:
        frame = cv2.flip(frame, 0)
    if mirror_y:
        frame = cv2.flip(frame, 1)
    return frame


# ----------------------------------------------------------------------
# Pipeline
# ----------------------------------------------------------------------
class FramePipeline:
    """
    Apply the enabled stages to frames in STAGE_ORDER.

    The stage list is rebuilt for every frame so slider changes take effect
    immediately.
    """

    def __init__(self, toggles: ToggleState, params: ProcessingParameters):
        self.toggles = toggles
        self.params = params

    def _bind(self, name: str) -> Callable[[np.ndarray], np.ndarray]:
        params = self.params
        toggles = self.toggles
        if name == "gaussian":
            return partial(gaussian_blur, size=params.gaussian_size)
        if name == "canny":
            return partial(canny_edges, threshold=params.canny_threshold)
        if name == "sobel":
            return sobel_gradient
        if name == "brightness":
            return partial(adjust_brightness, offset=params.brightness_offset)
        if name == "contrast":
            return partial(adjust_contrast, scale=params.contrast_scale)
        if name == "negative":
            return negative
        if name == "grayscale":
            return to_grayscale
        if name == "half_size_x":
            return half_width
        if name == "half_size_y":
            return half_height
        if name == "rotate":
            return partial(rotate_quarter_turns, turns=toggles.rotations)
        if name == "mirror":
            return partial(mirror, mirror_x=toggles.mirror_x, mirror_y=toggles.mirror_y)
        raise KeyError(f"Unknown stage: {name}")

    def stages(self) -> List[Stage]:
        """Ordered (name, callable) pairs for the currently enabled stages."""
        enabled = set(self.toggles.enabled_stages())
        return [(name, self._bind(name)) for name in STAGE_ORDER if name in enabled]

    def apply(self, frame: np.ndarray) -> np.ndarray:
        """
        Run ``frame`` through every enabled stage.

        :param frame: BGR or single-channel frame.
        :return: Processed frame (may have a different size or channel count).
        """
        for _name, stage in self.stages():
            frame = stage(frame)
        return frame
