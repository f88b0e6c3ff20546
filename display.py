# display.py
"""
OpenCV HighGUI display surface.

Shows the raw and the processed frame in two windows and puts one trackbar
per processing parameter on the processed window. Trackbar callbacks write
straight into the ProcessingParameters store, which corrects invalid values.
"""

import logging

import cv2
import numpy as np

from parameters import (
    BRIGHTNESS_MAX,
    CANNY_MAX,
    CONTRAST_MAX,
    GAUSSIAN_MAX,
    ProcessingParameters,
)

LOGGER = logging.getLogger(__name__)

INPUT_WINDOW = "This is you, smile! :)"
OUTPUT_WINDOW = "You, but processed!"

# trackbar name -> (parameter attribute, slider maximum)
TRACKBARS = {
    "Gaussian Blur": ("gaussian_size", GAUSSIAN_MAX),
    "Canny High Threshold": ("canny_threshold", CANNY_MAX),
    "Brightness (+255)": ("brightness", BRIGHTNESS_MAX),
    "Contrast (x100)": ("contrast", CONTRAST_MAX),
}


def to_rgb(frame: np.ndarray) -> np.ndarray:
    """Convert a BGR or single-channel frame to RGB."""
    if frame.ndim == 2 or frame.shape[2] == 1:
        return cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    return cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)


class HighGuiDisplay:
    """
    Two HighGUI windows plus parameter trackbars.

    :param params: Store updated by the trackbars.
    """

    def __init__(self, params: ProcessingParameters):
        self.params = params
        self._trackbars_ready = False

    def spawn_trackbars(self, frame: np.ndarray) -> None:
        """Show ``frame`` in the output window and attach the trackbars to it."""
        cv2.imshow(OUTPUT_WINDOW, frame)
        for name, (attr, maximum) in TRACKBARS.items():
            cv2.createTrackbar(
                name,
                OUTPUT_WINDOW,
                min(getattr(self.params, attr), maximum),
                maximum,
                self._make_callback(attr),
            )
        self._trackbars_ready = True

    def _make_callback(self, attr: str):
        name, maximum = next(
            (title, top) for title, (field, top) in TRACKBARS.items() if field == attr
        )

        def on_change(pos: int) -> None:
            setattr(self.params, attr, pos)
            value = getattr(self.params, attr)
            if value == pos:
                return
            LOGGER.debug("%s: %d corrected to %d", attr, pos, value)
            # a corrected value above the slider range (100 -> 101) stays
            # in the store only; the slider would clamp it back to 100
            if self._trackbars_ready and value <= maximum:
                cv2.setTrackbarPos(name, OUTPUT_WINDOW, value)

        return on_change

    def show_input(self, frame: np.ndarray) -> None:
        cv2.imshow(INPUT_WINDOW, frame)

    def show_output(self, frame: np.ndarray) -> None:
        cv2.imshow(OUTPUT_WINDOW, frame)

    def poll_key(self, delay_ms: int = 1) -> int:
        return cv2.waitKey(delay_ms)

    def close(self) -> None:
        cv2.destroyAllWindows()
