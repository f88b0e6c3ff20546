import numpy as np
import pytest

from fakes import FakeWriter


@pytest.fixture
def bgr_frame():
    """Deterministic 3-channel 80x60 test frame."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8)


@pytest.fixture
def gray_frame():
    rng = np.random.default_rng(42)
    return rng.integers(0, 256, size=(60, 80), dtype=np.uint8)


@pytest.fixture
def fake_writer():
    return FakeWriter()
