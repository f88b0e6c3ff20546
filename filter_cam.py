# filter_cam.py
"""
Command-line entry point.

Opens the camera, prepares the recorder and the parameter trackbars, then
runs the capture loop in OpenCV windows (or in the Tk front-end).
"""

import argparse
import logging
from typing import List, Optional

from capture_loop import CameraUnavailableError, open_capture, run, start_session
from config import FRONTENDS, AppConfig, parse_source
from display import HighGuiDisplay
from input_handler import KeyboardInput

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="filter-cam",
        description="Live webcam filters. Keys: 1-9 filters, A rotate, "
        "B/C mirror, D record, ESC quit.",
    )
    ap.add_argument("--camera", default="0", help="camera index or video file")
    ap.add_argument("--output", default=AppConfig.output_path, help="recording file")
    ap.add_argument("--fourcc", default=AppConfig.fourcc)
    ap.add_argument("--fps", type=float, default=AppConfig.fps)
    ap.add_argument("--width", type=int, help="recording width (default: camera width)")
    ap.add_argument("--height", type=int, help="recording height (default: camera height)")
    ap.add_argument("--log", dest="log_path", help="write a per-frame CSV log")
    ap.add_argument("--gui", choices=FRONTENDS, default="highgui")
    ap.add_argument("--snapshots", default=AppConfig.snapshot_dir, help="snapshot folder (tk)")
    ap.add_argument("-v", "--verbose", action="store_true")
    return ap


def config_from_args(args: argparse.Namespace) -> AppConfig:
    record_size = None
    if args.width or args.height:
        if not (args.width and args.height):
            raise SystemExit("--width and --height must be given together")
        record_size = (args.width, args.height)

    try:
        return AppConfig(
            source=parse_source(args.camera),
            output_path=args.output,
            fourcc=args.fourcc,
            fps=args.fps,
            record_size=record_size,
            log_path=args.log_path,
            frontend=args.gui,
            snapshot_dir=args.snapshots,
        )
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc


def run_highgui(config: AppConfig) -> int:
    """Run the OpenCV-window loop; returns the number of processed frames."""
    capture = open_capture(config.source)
    first, session = start_session(capture, config)
    try:
        display = HighGuiDisplay(session.params)
        display.spawn_trackbars(first)
    except Exception:
        # run() owns cleanup only once the loop starts
        capture.release()
        session.close()
        raise

    keyboard = KeyboardInput(display.poll_key, config.key_delay_ms)
    return run(capture, display, session, keyboard)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(args)

    try:
        if config.frontend == "tk":
            from gui_app import FilterStudioApp

            FilterStudioApp(config=config).run()
        else:
            run_highgui(config)
    except CameraUnavailableError as exc:
        LOGGER.error("%s", exc)
        raise SystemExit(f"Cannot open camera: {exc}") from exc


if __name__ == "__main__":
    main()
