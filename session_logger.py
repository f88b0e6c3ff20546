# session_logger.py
"""
CSV log of a capture session.

Each row describes one processed frame:
- Frame index
- FPS
- Active stages
- Output width, height and channel count
- Whether the frame was recorded
"""

import csv
import os
from typing import Iterable

import numpy as np

HEADER = ["frame", "fps", "stages", "width", "height", "channels", "recorded"]


class SessionLogger:
    """
    Append per-frame rows to a CSV file.
    """

    def __init__(self, filename: str = "filter_cam_log.csv"):
        """
        :param filename: Path to the CSV file. A header is written only when
            the file does not exist yet.
        """
        self.filename = filename
        need_header = not os.path.exists(filename)

        self._file = open(filename, mode="a", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        if need_header:
            self._writer.writerow(HEADER)

    def log(
        self,
        frame_index: int,
        frame: np.ndarray,
        stages: Iterable[str],
        fps: float,
        recorded: bool,
    ) -> None:
        if self._writer is None:
            return
        height, width = frame.shape[:2]
        channels = 1 if frame.ndim == 2 else frame.shape[2]
        self._writer.writerow(
            [
                frame_index,
                f"{fps:.3f}",
                "+".join(stages),
                width,
                height,
                channels,
                int(recorded),
            ]
        )

    def close(self) -> None:
        """Close the underlying file handle."""
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None
