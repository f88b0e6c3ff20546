# gui_app.py
"""
Tkinter front-end for filter-cam.

This app:
- opens a camera or video file,
- runs every frame through the same fixed filter pipeline as the
  OpenCV-window mode,
- shows the raw and the processed image side by side,
- exposes the toggles as check buttons and the parameters as sliders,
- accepts the same keyboard shortcuts (1-9, A-D, ESC),
- records the processed stream and saves snapshots.
"""

import logging
import os
import tkinter as tk
from datetime import datetime
from tkinter import messagebox, ttk

import cv2
from PIL import Image, ImageTk

from capture_loop import open_capture, read_frame, start_session
from config import AppConfig
from display import TRACKBARS, to_rgb
from input_handler import ESC, handle_key
from toggles import MIRROR_FLAGS, STAGE_FLAGS

LOGGER = logging.getLogger(__name__)

TOGGLE_LABELS = {
    "gaussian": "1  Gaussian blur",
    "canny": "2  Canny edges",
    "sobel": "3  Sobel gradient",
    "brightness": "4  Brightness",
    "contrast": "5  Contrast",
    "negative": "6  Negative",
    "grayscale": "7  Grayscale",
    "half_size_x": "8  Half width",
    "half_size_y": "9  Half height",
    "mirror_x": "B  Mirror X",
    "mirror_y": "C  Mirror Y",
}


class FilterStudioApp:
    """
    Main GUI application class.

    Uses Tkinter for the interface and OpenCV for capture and filtering.
    """

    def __init__(self, root=None, config=None):
        self.config = config or AppConfig(frontend="tk")

        # Capture and outputs are opened before any widget exists so a
        # missing camera fails fast.
        self.cap = open_capture(self.config.source)
        _first, self.session = start_session(self.cap, self.config)
        self.toggles = self.session.toggles
        self.params = self.session.params
        self.running = True
        self.raw_label = None
        self.processed_label = None
        self.last_output_frame = None

        try:
            self._setup_window(root)
        except Exception:
            self.cap.release()
            self.cap = None
            self.session.close()
            raise

    def _setup_window(self, root):
        self.root = root or tk.Tk()
        self.root.title("filter-cam")

        # Tk mirrors of the session state
        self.toggle_vars = {
            name: tk.BooleanVar(value=getattr(self.toggles, name))
            for name in STAGE_FLAGS + MIRROR_FLAGS + ("record",)
        }
        self.param_vars = {
            attr: tk.IntVar(value=getattr(self.params, attr))
            for attr, _maximum in TRACKBARS.values()
        }
        self.rotation_var = tk.StringVar(value="Rotation: 0°")
        self.status_var = tk.StringVar(value="Running")
        self.fps_var = tk.StringVar(value="FPS: 0.0")
        self.stages_var = tk.StringVar(value="Stages: none")

        self._build_ui()
        self._bind_shortcuts()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.root.after(15, self._update_loop)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self):
        main = ttk.Frame(self.root, padding=5)
        main.grid(row=0, column=0, sticky="nsew")
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)

        videos = ttk.Frame(main)
        videos.grid(row=0, column=0, sticky="nsew", padx=(0, 5))
        self.raw_label = ttk.Label(videos, relief="sunken")
        self.raw_label.grid(row=0, column=0, sticky="nsew")
        self.processed_label = ttk.Label(videos, relief="sunken")
        self.processed_label.grid(row=0, column=1, sticky="nsew", padx=(5, 0))

        control = ttk.Frame(main)
        control.grid(row=0, column=1, sticky="nsew")
        control.columnconfigure(0, weight=1)
        control.columnconfigure(1, weight=1)

        ttk.Button(control, text="Start", command=self._on_start).grid(
            row=0, column=0, sticky="ew"
        )
        ttk.Button(control, text="Pause", command=self._on_pause).grid(
            row=0, column=1, sticky="ew"
        )

        filters_frame = ttk.LabelFrame(control, text="Filters")
        filters_frame.grid(row=1, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        for row, (name, label) in enumerate(TOGGLE_LABELS.items()):
            ttk.Checkbutton(
                filters_frame,
                text=label,
                variable=self.toggle_vars[name],
                command=lambda n=name: self._on_toggle(n),
            ).grid(row=row, column=0, sticky="w")

        ttk.Button(control, text="A  Rotate 90°", command=self._on_rotate).grid(
            row=2, column=0, sticky="ew", pady=(6, 0)
        )
        ttk.Label(control, textvariable=self.rotation_var).grid(
            row=2, column=1, sticky="w", pady=(6, 0)
        )

        params_frame = ttk.LabelFrame(control, text="Parameters")
        params_frame.grid(row=3, column=0, columnspan=2, sticky="ew", pady=(8, 0))
        params_frame.columnconfigure(1, weight=1)
        for row, (title, (attr, maximum)) in enumerate(TRACKBARS.items()):
            ttk.Label(params_frame, text=title).grid(row=row, column=0, sticky="w")
            ttk.Scale(
                params_frame,
                from_=0,
                to=maximum,
                variable=self.param_vars[attr],
                orient="horizontal",
                command=lambda v, a=attr: self._on_param_change(a, v),
            ).grid(row=row, column=1, sticky="ew")
            ttk.Label(params_frame, textvariable=self.param_vars[attr], width=4).grid(
                row=row, column=2, sticky="e"
            )

        ttk.Checkbutton(
            control,
            text="D  Record output video",
            variable=self.toggle_vars["record"],
            command=lambda: self._on_toggle("record"),
        ).grid(row=4, column=0, columnspan=2, sticky="w", pady=(8, 0))

        ttk.Button(control, text="Save Snapshot", command=self._on_save_snapshot).grid(
            row=5, column=0, columnspan=2, sticky="ew", pady=(8, 0)
        )

        stats_frame = ttk.LabelFrame(control, text="Statistics")
        stats_frame.grid(row=6, column=0, columnspan=2, sticky="ew", pady=(10, 0))
        ttk.Label(stats_frame, textvariable=self.fps_var).grid(row=0, column=0, sticky="w")
        ttk.Label(stats_frame, textvariable=self.stages_var, wraplength=220).grid(
            row=1, column=0, sticky="w"
        )

        ttk.Label(
            self.root,
            textvariable=self.status_var,
            relief="sunken",
            anchor="w",
            padding=(4, 2),
        ).grid(row=1, column=0, sticky="ew")

    def _bind_shortcuts(self):
        self.root.bind("<Key>", self._on_key)
        self.root.bind("<space>", self._on_space_toggle)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def _on_start(self):
        self.running = True
        self.status_var.set("Running")

    def _on_pause(self):
        self.running = False
        self.status_var.set("Paused")

    def _on_space_toggle(self, _event):
        if self.running:
            self._on_pause()
        else:
            self._on_start()
        return "break"

    def _on_toggle(self, name):
        setattr(self.toggles, name, self.toggle_vars[name].get())

    def _on_rotate(self):
        self.toggles.rotate()
        self._sync_vars()

    def _on_param_change(self, attr, value):
        setattr(self.params, attr, int(float(value)))
        # show the corrected value, not the raw slider position
        self.param_vars[attr].set(getattr(self.params, attr))

    def _on_key(self, event):
        if event.keysym == "Escape":
            key = ESC
        elif len(event.char) == 1:
            # IME / compose input can deliver several characters at once
            key = ord(event.char)
        else:
            return
        if handle_key(self.toggles, key) is None:
            return
        self._sync_vars()
        if not self.toggles.capture:
            self._on_close()

    def _sync_vars(self):
        """Copy toggle state into the Tk variables (after keyboard changes)."""
        for name, var in self.toggle_vars.items():
            var.set(getattr(self.toggles, name))
        self.rotation_var.set(f"Rotation: {self.toggles.rotations * 90}°")

    # ------------------------------------------------------------------
    # Main update loop
    # ------------------------------------------------------------------
    def _update_loop(self):
        if self.cap is None:
            return
        if self.running:
            frame = read_frame(self.cap)
            if frame is None:
                self.running = False
                self.status_var.set("No more frames / capture closed")
            else:
                self._process_frame(frame)

        self.root.after(15, self._update_loop)

    def _process_frame(self, frame):
        processed = self.session.process(frame)
        recorded = self.session.record(processed)
        self.session.finish_frame(processed, recorded)
        self.last_output_frame = processed

        stats = self.session.stats
        self.fps_var.set(f"FPS: {stats.fps:.2f}")
        self.stages_var.set(
            "Stages: " + (", ".join(self.toggles.enabled_stages()) or "none")
        )

        self._show(self.raw_label, frame)
        self._show(self.processed_label, processed)

    def _show(self, label, frame):
        img = ImageTk.PhotoImage(Image.fromarray(to_rgb(frame)))
        label.imgtk = img
        label.configure(image=img)

    # ------------------------------------------------------------------
    # Snapshot / cleanup
    # ------------------------------------------------------------------
    def _on_save_snapshot(self):
        if self.last_output_frame is None:
            messagebox.showinfo("Info", "No frame available to save.")
            return

        os.makedirs(self.config.snapshot_dir, exist_ok=True)
        name = datetime.now().strftime("snapshot_%Y%m%d_%H%M%S.png")
        path = os.path.join(self.config.snapshot_dir, name)
        cv2.imwrite(path, self.last_output_frame)
        self.status_var.set(f"Snapshot saved: {path}")
        LOGGER.info("Snapshot saved: %s", path)

    def _on_close(self):
        """Release capture and outputs and close the window."""
        self.running = False
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        self.session.close()
        self.root.destroy()

    def run(self):
        """Start the Tkinter main loop."""
        self.root.mainloop()


if __name__ == "__main__":
    FilterStudioApp().run()
