# capture_loop.py
"""
Capture -> process -> display -> record -> poll loop.

One frame is processed per iteration, on a single thread. The loop ends
when the stop key clears ``toggles.capture`` or when the source stops
delivering frames. The capture device, the display and the session's
recorder and log are released on every exit path.
"""

import logging
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from config import AppConfig
from filters import FramePipeline
from input_handler import KeyboardInput
from parameters import ProcessingParameters
from recorder import VideoRecorder
from session_logger import SessionLogger
from stats import FrameStats
from toggles import ToggleState

LOGGER = logging.getLogger(__name__)


class CameraUnavailableError(RuntimeError):
    """Raised when the capture source cannot be opened or read at startup."""


def open_capture(source: Union[int, str]) -> cv2.VideoCapture:
    """Open a camera index or a video file."""
    cap = cv2.VideoCapture(source)
    if not cap.isOpened():
        cap.release()
        raise CameraUnavailableError(f"Could not open video source: {source}")
    LOGGER.info("Opened video source %s", source)
    return cap


def read_frame(capture) -> Optional[np.ndarray]:
    """Return the next frame, or None at end of stream / failed read."""
    ok, frame = capture.read()
    if not ok or frame is None or frame.size == 0:
        return None
    return frame


def read_priming_frame(capture) -> np.ndarray:
    """First frame, used to shape the recorder and the output window."""
    frame = read_frame(capture)
    if frame is None:
        raise CameraUnavailableError("Video source delivered no frames")
    return frame


class FilterSession:
    """
    State shared by one capture session.

    :param toggles: Stage toggles, mutated by keyboard input.
    :param params: Filter parameters, mutated by sliders.
    :param recorder: Optional output video, written while ``toggles.record``.
    :param session_logger: Optional per-frame CSV log.
    """

    def __init__(
        self,
        toggles: Optional[ToggleState] = None,
        params: Optional[ProcessingParameters] = None,
        recorder: Optional[VideoRecorder] = None,
        session_logger: Optional[SessionLogger] = None,
        stats: Optional[FrameStats] = None,
    ):
        self.toggles = toggles or ToggleState()
        self.params = params or ProcessingParameters()
        self.pipeline = FramePipeline(self.toggles, self.params)
        self.recorder = recorder
        self.session_logger = session_logger
        self.stats = stats or FrameStats()

    def process(self, frame: np.ndarray) -> np.ndarray:
        return self.pipeline.apply(frame)

    def record(self, frame: np.ndarray) -> bool:
        """Append ``frame`` to the output video if recording is on."""
        if not self.toggles.record:
            return False
        if self.recorder is None:
            LOGGER.warning("Recording requested but no recorder is open")
            return False
        self.recorder.write(frame)
        return True

    def finish_frame(self, frame: np.ndarray, recorded: bool) -> None:
        self.stats.update(recorded)
        if self.session_logger is not None:
            self.session_logger.log(
                frame_index=self.stats.frames,
                frame=frame,
                stages=self.toggles.enabled_stages(),
                fps=self.stats.fps,
                recorded=recorded,
            )

    def close(self) -> None:
        if self.recorder is not None:
            self.recorder.release()
            self.recorder = None
        if self.session_logger is not None:
            self.session_logger.close()
            self.session_logger = None


def start_session(capture, config: AppConfig) -> Tuple[np.ndarray, FilterSession]:
    """
    Read the priming frame and open the recorder and the session log.

    If any step fails the capture and every output opened so far are
    released before the error propagates.

    :return: The priming frame and the ready session.
    """
    recorder = None
    try:
        first = read_priming_frame(capture)
        recorder = VideoRecorder.for_frame(
            first,
            path=config.output_path,
            fps=config.fps,
            fourcc=config.fourcc,
            size=config.record_size,
        )
        session_logger = SessionLogger(config.log_path) if config.log_path else None
    except Exception:
        capture.release()
        if recorder is not None:
            recorder.release()
        raise
    return first, FilterSession(recorder=recorder, session_logger=session_logger)


def run(capture, display, session: FilterSession, keyboard: Optional[KeyboardInput] = None) -> int:
    """
    Run the loop until stopped or out of frames.

    :param capture: Object with ``read()`` and ``release()`` (cv2.VideoCapture).
    :param display: Object with ``show_input``, ``show_output``, ``poll_key``
        and ``close`` (HighGuiDisplay).
    :param session: Toggles, parameters and outputs.
    :param keyboard: Key poller; defaults to one reading ``display.poll_key``.
    :return: Number of frames processed.
    """
    if keyboard is None:
        keyboard = KeyboardInput(display.poll_key)

    toggles = session.toggles
    processed_count = 0
    try:
        while toggles.capture:
            frame = read_frame(capture)
            if frame is None:
                LOGGER.info("End of video stream")
                break

            display.show_input(frame)
            processed = session.process(frame)
            display.show_output(processed)

            recorded = session.record(processed)
            session.finish_frame(processed, recorded)
            processed_count += 1

            keyboard.poll(toggles)
    finally:
        capture.release()
        session.close()
        display.close()

    LOGGER.info(
        "Capture finished: %d frames processed, %d recorded",
        processed_count,
        session.stats.recorded,
    )
    return processed_count
