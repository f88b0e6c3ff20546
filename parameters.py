# parameters.py
"""
Tunable filter parameters.

Every write stores the raw value first and then corrects it in place, so a
slider can hand over anything in its range and the store stays valid:

- gaussian_size: odd, at least 3
- canny_threshold: 0..255
- brightness: 0..510, applied as an offset of ``brightness - 255``
- contrast: 0..200 percent, applied as a scale of ``contrast / 100``
"""

# Slider maxima (all sliders start at 0).
GAUSSIAN_MAX = 100
CANNY_MAX = 255
BRIGHTNESS_MAX = 510
CONTRAST_MAX = 200

BRIGHTNESS_ZERO = 255


def valid_gaussian_size(size: int) -> int:
    """Round an even kernel size up to the next odd one and floor it at 3."""
    size = int(size)
    if size % 2 == 0:
        size += 1
    if size < 3:
        size = 3
    return size


def valid_canny_threshold(threshold: int) -> int:
    threshold = int(threshold)
    if threshold < 0:
        return 0
    if threshold > CANNY_MAX:
        return CANNY_MAX
    return threshold


def _clamp(value: int, upper: int) -> int:
    return max(0, min(upper, int(value)))


class ProcessingParameters:
    """
    Parameter store shared by the sliders and the pipeline.

    :param gaussian_size: Blur kernel size.
    :param canny_threshold: High threshold for edge detection.
    :param brightness: Encoded brightness (255 means no change).
    :param contrast: Contrast in percent (100 means no change).
    """

    def __init__(
        self,
        gaussian_size: int = 3,
        canny_threshold: int = 255,
        brightness: int = BRIGHTNESS_ZERO,
        contrast: int = 100,
    ):
        self.gaussian_size = gaussian_size
        self.canny_threshold = canny_threshold
        self.brightness = brightness
        self.contrast = contrast

    # ------------------------------------------------------------------
    @property
    def gaussian_size(self) -> int:
        return self._gaussian_size

    @gaussian_size.setter
    def gaussian_size(self, value: int) -> None:
        self._gaussian_size = int(value)
        self._gaussian_size = valid_gaussian_size(self._gaussian_size)

    @property
    def canny_threshold(self) -> int:
        return self._canny_threshold

    @canny_threshold.setter
    def canny_threshold(self, value: int) -> None:
        self._canny_threshold = int(value)
        self._canny_threshold = valid_canny_threshold(self._canny_threshold)

    @property
    def brightness(self) -> int:
        return self._brightness

    @brightness.setter
    def brightness(self, value: int) -> None:
        self._brightness = _clamp(value, BRIGHTNESS_MAX)

    @property
    def contrast(self) -> int:
        return self._contrast

    @contrast.setter
    def contrast(self, value: int) -> None:
        self._contrast = _clamp(value, CONTRAST_MAX)

    # ------------------------------------------------------------------
    @property
    def brightness_offset(self) -> int:
        """Additive offset in pixel units (-255..255)."""
        return self._brightness - BRIGHTNESS_ZERO

    @property
    def contrast_scale(self) -> float:
        """Multiplicative scale (0.0..2.0)."""
        return self._contrast / 100.0

    def __repr__(self) -> str:
        return (
            f"ProcessingParameters(gaussian_size={self.gaussian_size}, "
            f"canny_threshold={self.canny_threshold}, "
            f"brightness={self.brightness}, contrast={self.contrast})"
        )
