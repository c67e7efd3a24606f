"""
Blueprint Planner - Main Entry Point

Usage:
    python -m blueprint_planner.main [image] [--role ROLE] [--uid UID]
                                     [--blueprint ID] [--log-level LEVEL]

Managers (``--role admin``, the default) may pass an image to start a new
blueprint. Workers (``--role plumber`` / ``--role electrician``) open a saved
blueprint read-only with ``--blueprint``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from .config import Config
from .services.blueprint_document import BlueprintDocument
from .services.blueprint_store import BlueprintStore
from .services.permissions import ROLE_LEVELS, BlueprintPermissions
from .services.worker_roster import WorkerRoster
from .utils.logging_config import LoggingConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint-planner",
        description="Draw, assign and track pipes and connections on blueprint images.",
    )
    parser.add_argument("image", nargs="?", help="Blueprint image to start from (managers only)")
    parser.add_argument("--role", default=Config.DEFAULT_VIEWER_ROLE,
                        help=f"Viewer role: {', '.join(ROLE_LEVELS)}")
    parser.add_argument("--uid", default=None,
                        help="Viewer id; workers see elements assigned to this id")
    parser.add_argument("--blueprint", default=None, help="Saved blueprint id to open")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Console log level")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse and validate command line arguments.

    Exits with a usage error for unknown roles, workers without a uid, or
    workers given an image.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not BlueprintPermissions.is_known_role(args.role):
        parser.error(f"unknown role {args.role!r} (choose from {', '.join(ROLE_LEVELS)})")
    args.role = args.role.lower()

    if BlueprintPermissions.is_admin(args.role):
        args.uid = args.uid or Config.DEFAULT_VIEWER_UID
    else:
        if not args.uid:
            parser.error("--uid is required for worker roles")
        if args.image:
            parser.error("workers cannot start a blueprint from an image")
    return args


def setup_application(argv: List[str]) -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(argv)
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)
    return app


def create_document(image_source: Optional[str] = None,
                    role: str = Config.DEFAULT_VIEWER_ROLE,
                    uid: Optional[str] = Config.DEFAULT_VIEWER_UID,
                    roster: Optional[WorkerRoster] = None) -> BlueprintDocument:
    """Create the page document for a viewer."""
    if roster is None:
        roster = WorkerRoster.from_json(Config.get_roster_path())
    document = BlueprintDocument(viewer_role=role, viewer_uid=uid, roster=roster)
    if image_source:
        document.set_image_source(image_source)
    return document


def main(argv: Optional[List[str]] = None):
    """
    Main entry point for Blueprint Planner

    Creates the application, sets up the main window, and runs the event loop.
    """
    args = parse_args(argv)

    # Setup logging first
    LoggingConfig.setup_logging(Config.get_log_dir(),
                                console_level=getattr(logging, args.log_level))

    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")
    logger.info(f"Log file: {LoggingConfig.get_log_file_path()}")

    app = setup_application(sys.argv[:1])

    document = create_document(args.image, args.role, args.uid)
    logger.info(f"Viewer: {args.uid} ({BlueprintPermissions.get_role_label(args.role)}), "
                f"roster: {len(document.roster)} workers")
    if args.uid and not BlueprintPermissions.is_admin(args.role) \
            and document.roster.find(args.uid) is None:
        logger.warning(f"Worker {args.uid} is not in the roster")

    from .widgets.main_window import BlueprintViewerWindow
    window = BlueprintViewerWindow(document, store=BlueprintStore())
    if args.blueprint:
        window.open_blueprint(args.blueprint)
    window.show()

    logger.info("Application started successfully!")

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
