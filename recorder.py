# recorder.py
"""
Video recording of processed frames.

The output file is opened once with a fixed FourCC, frame rate, size and
colour flag. Frames are converted to match it before they are written:
single-channel frames are expanded to BGR for a colour file, and frames
whose size changed (half-size, rotation) are resized to the file's size.
"""

import logging
from typing import Optional, Tuple

import cv2
import numpy as np

LOGGER = logging.getLogger(__name__)

DEFAULT_PATH = "footage.avi"
DEFAULT_FOURCC = "XVID"
DEFAULT_FPS = 32.0

Size = Tuple[int, int]


def frame_size(frame: np.ndarray) -> Size:
    """Return (width, height) of a frame."""
    height, width = frame.shape[:2]
    return width, height


def is_color(frame: np.ndarray) -> bool:
    return frame.ndim == 3 and frame.shape[2] == 3


class VideoRecorder:
    """
    Append-only video writer with a fixed layout.

    Parameters
    ----------
    path : str
        Output file.
    fps : float
        Frame rate stored in the container.
    size : (int, int)
        Frame width and height of the file.
    color : bool
        Whether the file holds 3-channel frames.
    fourcc : str
        Four-character codec code.
    writer : optional
        Object with ``write(frame)`` and ``release()``. A ``cv2.VideoWriter``
        is created when omitted.
    """

    def __init__(
        self,
        path: str = DEFAULT_PATH,
        fps: float = DEFAULT_FPS,
        size: Size = (640, 480),
        color: bool = True,
        fourcc: str = DEFAULT_FOURCC,
        writer=None,
    ) -> None:
        self.path = path
        self.fps = float(fps)
        self.size = (int(size[0]), int(size[1]))
        self.color = bool(color)
        self.fourcc = fourcc
        self.frames_written = 0

        if writer is None:
            code = cv2.VideoWriter_fourcc(*fourcc)
            writer = cv2.VideoWriter(path, code, self.fps, self.size, self.color)
            if not writer.isOpened():
                LOGGER.error("Could not open video writer for %s (%s)", path, fourcc)
                writer.release()
                self._writer = None
                return
        self._writer = writer
        LOGGER.info(
            "Recorder ready: %s (%s, %.1f fps, %dx%d, %s)",
            path,
            fourcc,
            self.fps,
            self.size[0],
            self.size[1],
            "color" if self.color else "gray",
        )

    @classmethod
    def for_frame(
        cls,
        frame: np.ndarray,
        path: str = DEFAULT_PATH,
        fps: float = DEFAULT_FPS,
        fourcc: str = DEFAULT_FOURCC,
        size: Optional[Size] = None,
        writer=None,
    ) -> "VideoRecorder":
        """Open a recorder shaped after a sample frame from the source."""
        return cls(
            path=path,
            fps=fps,
            size=size or frame_size(frame),
            color=is_color(frame),
            fourcc=fourcc,
            writer=writer,
        )

    # ------------------------------------------------------------------
    def prepare(self, frame: np.ndarray) -> np.ndarray:
        """Convert ``frame`` to the channel count and size of the file."""
        if self.color and not is_color(frame):
            frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        elif not self.color and is_color(frame):
            frame = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)

        if frame_size(frame) != self.size:
            frame = cv2.resize(frame, self.size, interpolation=cv2.INTER_LINEAR)
        return frame

    def write(self, frame: np.ndarray) -> np.ndarray:
        """Append one frame and return what was actually written."""
        if self._writer is None:
            raise RuntimeError(f"Recorder for {self.path} is not open")
        prepared = self.prepare(frame)
        self._writer.write(prepared)
        self.frames_written += 1
        return prepared

    def release(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None
            LOGGER.info("Recorder closed: %s (%d frames)", self.path, self.frames_written)
