# input_handler.py
"""
Keyboard input for the capture loop.

Each polled key maps to exactly one toggle mutation. Unknown keys and
"no key pressed" leave the state untouched.

Keys:
    ESC     stop capturing
    1..9    gaussian, canny, sobel, brightness, contrast, negative,
            grayscale, half size x, half size y
    A       rotate 90 degrees clockwise
    B / C   mirror x / mirror y
    D       record
"""

import logging
from typing import Callable, Optional

import cv2

from toggles import ToggleState

LOGGER = logging.getLogger(__name__)

NO_KEY = -1
ESC = 27
ROTATE = "rotations"
STOP = "capture"

KEY_BINDINGS = {
    ord("1"): "gaussian",
    ord("2"): "canny",
    ord("3"): "sobel",
    ord("4"): "brightness",
    ord("5"): "contrast",
    ord("6"): "negative",
    ord("7"): "grayscale",
    ord("8"): "half_size_x",
    ord("9"): "half_size_y",
    ord("A"): ROTATE,
    ord("B"): "mirror_x",
    ord("C"): "mirror_y",
    ord("D"): "record",
}
# lowercase letters behave like their uppercase keys
KEY_BINDINGS.update(
    {code + 32: name for code, name in list(KEY_BINDINGS.items()) if ord("A") <= code <= ord("Z")}
)
KEY_BINDINGS[ESC] = STOP


def handle_key(toggles: ToggleState, key: int) -> Optional[str]:
    """
    Apply the mutation bound to ``key``.

    :return: Name of the changed field, or None if nothing changed.
    """
    name = KEY_BINDINGS.get(key)
    if name is None:
        return None

    if name == STOP:
        toggles.stop()
        LOGGER.info("Stop requested")
    elif name == ROTATE:
        turns = toggles.rotate()
        LOGGER.info("Rotation: %d x 90 degrees", turns)
    else:
        value = toggles.flip(name)
        LOGGER.info("%s %s", name, "on" if value else "off")
    return name


class KeyboardInput:
    """
    Single-slot key poller.

    :param wait_key: Callable taking a delay in ms and returning a key code
        (-1 when nothing was pressed). Defaults to ``cv2.waitKey``.
    :param delay_ms: Maximum wait per poll.
    """

    def __init__(self, wait_key: Callable[[int], int] = cv2.waitKey, delay_ms: int = 1):
        self.wait_key = wait_key
        self.delay_ms = delay_ms

    def poll(self, toggles: ToggleState) -> Optional[str]:
        key = self.wait_key(self.delay_ms)
        if key == NO_KEY:
            return None
        return handle_key(toggles, key & 0xFF)
