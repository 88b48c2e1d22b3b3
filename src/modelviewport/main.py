"""
Application Initialization
==========================
Command line entry point of the viewer.

Why is this file needed?
------------------------
1. Parses the command line and sets up logging (console + optional file).
2. Headless mode: loads one model (with recovery) on an off-screen scene and
   prints the outcome and the recovery log. Exit code 0 when the model was
   framed, 1 otherwise.
3. Interactive mode: creates the Qt application and the viewer window.
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from modelviewport import config
from modelviewport.logging_config import setup_logging

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modelviewport",
        description="Open a building model or point cloud and frame it in the viewport.",
    )
    parser.add_argument("ref", nargs="?", help="Model path or http(s) URL")
    parser.add_argument("--headless", action="store_true", help="Load without a window and print the outcome")
    parser.add_argument("--fov", type=float, default=config.DEFAULT_FOV, help="Vertical field of view in degrees")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser


def run_headless(ref: str, fov_degrees: float) -> int:
    from modelviewport.viewer import build_viewer

    viewer = build_viewer(fov_degrees=fov_degrees)
    try:
        result = asyncio.run(viewer.open(ref))
    finally:
        viewer.close()

    for line in result.summary():
        print(line)
    if result.reload_required:
        print("Model could not be displayed; reload required.")
    return 0 if result.recovered else 1


def run_gui(ref: Optional[str], fov_degrees: float) -> int:
    from PySide6.QtWidgets import QApplication
    from modelviewport.view.main_window import VISIBLE_APP_NAME, ViewerWindow

    app = QApplication(sys.argv)
    app.setApplicationName(VISIBLE_APP_NAME)

    window = ViewerWindow(fov_degrees=fov_degrees)
    window.show()
    if ref:
        window.open_model(ref)

    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    if args.headless:
        if not args.ref:
            logger.error("--headless requires a model reference")
            sys.exit(2)
        sys.exit(run_headless(args.ref, args.fov))

    sys.exit(run_gui(args.ref, args.fov))


if __name__ == "__main__":
    main()
