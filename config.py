# config.py
"""Application settings for filter-cam."""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from recorder import DEFAULT_FOURCC, DEFAULT_FPS, DEFAULT_PATH

FRONTENDS = ("highgui", "tk")


@dataclass
class AppConfig:
    """
    Settings resolved from the command line.

    ``record_size`` of None means the size of the first captured frame.
    """

    source: Union[int, str] = 0
    output_path: str = DEFAULT_PATH
    fourcc: str = DEFAULT_FOURCC
    fps: float = DEFAULT_FPS
    record_size: Optional[Tuple[int, int]] = None
    log_path: Optional[str] = None
    frontend: str = "highgui"
    key_delay_ms: int = 1
    snapshot_dir: str = "snapshots"

    def __post_init__(self):
        if self.frontend not in FRONTENDS:
            raise ValueError(f"Unknown frontend: {self.frontend}")
        if len(self.fourcc) != 4:
            raise ValueError(f"FourCC must be 4 characters, got {self.fourcc!r}")
        if self.fps <= 0:
            raise ValueError("fps must be greater than zero")


def parse_source(value: str) -> Union[int, str]:
    """Camera index if ``value`` is numeric, otherwise a file path or URL."""
    return int(value) if value.isdigit() else value
