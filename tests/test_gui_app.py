from types import SimpleNamespace

import numpy as np
import pytest

pytest.importorskip("tkinter")
pytest.importorskip("PIL.ImageTk")

import gui_app  # noqa: E402
from capture_loop import CameraUnavailableError  # noqa: E402
from config import AppConfig  # noqa: E402
from fakes import FakeCapture, patch_video_writer  # noqa: E402
from gui_app import FilterStudioApp  # noqa: E402
from toggles import ToggleState  # noqa: E402


def test_priming_failure_releases_camera(monkeypatch):
    capture = FakeCapture([])
    monkeypatch.setattr(gui_app, "open_capture", lambda source: capture)

    with pytest.raises(CameraUnavailableError):
        FilterStudioApp(config=AppConfig(frontend="tk"))
    assert capture.released


def test_window_failure_releases_camera_and_recorder(monkeypatch, tmp_path, fake_writer):
    capture = FakeCapture([np.zeros((60, 80, 3), dtype=np.uint8)])
    monkeypatch.setattr(gui_app, "open_capture", lambda source: capture)
    patch_video_writer(monkeypatch, fake_writer)

    def no_display():
        raise gui_app.tk.TclError("no display name and no $DISPLAY environment variable")

    monkeypatch.setattr(gui_app.tk, "Tk", no_display)

    with pytest.raises(gui_app.tk.TclError):
        FilterStudioApp(config=AppConfig(frontend="tk", output_path=str(tmp_path / "out.avi")))
    assert capture.released
    assert fake_writer.released


def key_target():
    synced = []
    app = SimpleNamespace(
        toggles=ToggleState(),
        _sync_vars=lambda: synced.append(True),
        _on_close=lambda: None,
    )
    return app, synced


def test_single_character_key_toggles():
    app, synced = key_target()
    FilterStudioApp._on_key(app, SimpleNamespace(keysym="7", char="7"))
    assert app.toggles.grayscale is True
    assert synced == [True]


def test_multi_character_input_is_ignored():
    app, synced = key_target()
    FilterStudioApp._on_key(app, SimpleNamespace(keysym="??", char="12"))
    FilterStudioApp._on_key(app, SimpleNamespace(keysym="Shift_L", char=""))
    assert app.toggles.enabled_stages() == []
    assert synced == []
