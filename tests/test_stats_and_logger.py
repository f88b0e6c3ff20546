import csv

import numpy as np
import pytest

from session_logger import HEADER, SessionLogger
from stats import FrameStats


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_stats_count_frames_and_recordings():
    clock = FakeClock()
    stats = FrameStats(smoothing=0.0, clock=clock)
    clock.now += 0.5
    stats.update(recorded=True)
    clock.now += 0.25
    stats.update()

    assert stats.frames == 2
    assert stats.recorded == 1
    assert stats.fps == pytest.approx(4.0)
    assert stats.elapsed == pytest.approx(0.75)
    assert stats.average_fps == pytest.approx(2 / 0.75)


def test_stats_fps_is_smoothed():
    clock = FakeClock()
    stats = FrameStats(smoothing=0.5, clock=clock)
    clock.now += 0.1
    stats.update()
    clock.now += 0.05
    stats.update()
    assert stats.fps == pytest.approx(0.5 * 10.0 + 0.5 * 20.0)


def test_stats_ignore_zero_interval():
    clock = FakeClock()
    stats = FrameStats(clock=clock)
    stats.update()
    assert stats.frames == 1
    assert stats.fps == 0.0


def test_logger_writes_header_once(tmp_path):
    path = str(tmp_path / "session.csv")
    gray = np.zeros((30, 40), dtype=np.uint8)

    logger = SessionLogger(path)
    logger.log(1, gray, ["canny", "rotate"], 29.97, recorded=True)
    logger.close()
    logger = SessionLogger(path)
    logger.log(2, gray, [], 30.0, recorded=False)
    logger.close()

    with open(path, newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    assert rows[0] == HEADER
    assert rows[1] == ["1", "29.970", "canny+rotate", "40", "30", "1", "1"]
    assert rows[2] == ["2", "30.000", "", "40", "30", "1", "0"]


def test_logger_ignores_rows_after_close(tmp_path):
    logger = SessionLogger(str(tmp_path / "closed.csv"))
    logger.close()
    logger.log(1, np.zeros((2, 2, 3), dtype=np.uint8), [], 0.0, recorded=False)
    logger.close()
