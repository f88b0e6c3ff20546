# stats.py
"""
Statistics for the capture loop.

Tracks:
- Frames processed and frames recorded
- Elapsed time (seconds)
- FPS, smoothed with an exponential moving average
"""

import time
from typing import Callable


class FrameStats:
    """
    Frame counters and a smoothed frame rate.

    :param smoothing: EMA weight of the previous FPS value (0 disables it).
    :param clock: Time source in seconds, ``time.monotonic`` by default.
    """

    def __init__(self, smoothing: float = 0.9, clock: Callable[[], float] = time.monotonic):
        self.smoothing = float(smoothing)
        self._clock = clock
        self.start_time = clock()
        self.last_time = self.start_time
        self.frames = 0
        self.recorded = 0
        self.fps = 0.0

    def update(self, recorded: bool = False) -> None:
        """Call once per processed frame."""
        self.frames += 1
        if recorded:
            self.recorded += 1

        now = self._clock()
        dt = now - self.last_time
        self.last_time = now
        if dt <= 0:
            return

        instant = 1.0 / dt
        if self.fps == 0.0:
            self.fps = instant
        else:
            self.fps = self.smoothing * self.fps + (1.0 - self.smoothing) * instant

    @property
    def elapsed(self) -> float:
        return self._clock() - self.start_time

    @property
    def average_fps(self) -> float:
        """Frames per second over the whole session."""
        elapsed = self.elapsed
        return self.frames / elapsed if elapsed > 0 else 0.0
