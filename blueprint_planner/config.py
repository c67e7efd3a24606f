"""
Global configuration for Blueprint Planner
"""

import os
import sys
from pathlib import Path
from typing import Final


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "Blueprint Planner"
    APP_VERSION: Final[str] = "0.3.0"
    APP_AUTHOR: Final[str] = "ConstructFlow"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent
    ROSTER_FILE_NAME: Final[str] = "workers.json"
    LOG_FILE_NAME: Final[str] = "blueprint_planner.log"
    BLUEPRINTS_FOLDER_NAME: Final[str] = "blueprints"

    # Logging
    LOG_MAX_BYTES: Final[int] = 2 * 1024 * 1024
    LOG_BACKUP_COUNT: Final[int] = 3

    # Image loading
    IMAGE_LOADER_THREAD_COUNT: Final[int] = 2
    IMAGE_FETCH_TIMEOUT_SEC: Final[int] = 15

    # Canvas geometry
    KEEP_ASPECT_RATIO: Final[bool] = True
    DEFAULT_ZOOM: Final[float] = 1.0
    MIN_ZOOM: Final[float] = 0.25
    MAX_ZOOM: Final[float] = 8.0
    ZOOM_STEP: Final[float] = 1.15  # Multiplier per wheel notch
    WHEEL_PAN_STEP_PX: Final[float] = 60.0  # Pan distance per wheel notch when zoomed in
    HIT_TOLERANCE_PX: Final[float] = 8.0  # Screen pixels around a path that count as a hit

    # Annotation styling
    PIPE_COLOR: Final[str] = "#3B82F6"
    CONNECTION_COLOR: Final[str] = "#F97316"
    COMPLETED_COLOR: Final[str] = "#10B981"
    OWN_COLOR: Final[str] = "#FACC15"  # Elements assigned to the current viewer
    PATH_WIDTH: Final[float] = 3.0
    SELECTED_PATH_WIDTH: Final[float] = 5.0
    VERTEX_RADIUS: Final[float] = 3.5
    RUBBER_BAND_OPACITY: Final[float] = 0.6

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 1400
    DEFAULT_WINDOW_HEIGHT: Final[int] = 900
    DEFAULT_SPLITTER_SIZES: Final[list] = [1050, 350]  # Canvas, sidebar

    # Viewer defaults (used when launched without a session)
    DEFAULT_VIEWER_ROLE: Final[str] = "admin"
    DEFAULT_VIEWER_UID: Final[str] = "local-admin"

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows) or .local/share (Linux)
        so logs and the worker roster survive application updates.
        """
        portable_flag = cls.APP_ROOT.parent / 'portable.txt'
        if portable_flag.exists():
            user_dir = cls.APP_ROOT.parent / 'data'
        elif sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / 'BlueprintPlanner'
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / 'BlueprintPlanner'
        else:
            user_dir = Path.home() / '.local' / 'share' / 'BlueprintPlanner'

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get the log folder path."""
        return cls.get_user_data_dir() / 'logs'

    @classmethod
    def get_blueprints_dir(cls) -> Path:
        """Get the saved blueprints folder path."""
        return cls.get_user_data_dir() / cls.BLUEPRINTS_FOLDER_NAME

    @classmethod
    def get_roster_path(cls) -> Path:
        """Get the worker roster JSON path (may not exist)."""
        return cls.get_user_data_dir() / cls.ROSTER_FILE_NAME


__all__ = ['Config']
