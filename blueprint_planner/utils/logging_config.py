"""
Logging setup for Blueprint Planner

Everything goes to a size-rotated log file in the user data folder; INFO and
above (or the level chosen on the command line) is echoed to the terminal.
Qt's own warnings are routed into the same log.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from PyQt6.QtCore import QtMsgType, qInstallMessageHandler

from ..config import Config

FILE_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
CONSOLE_FORMAT = '[%(levelname)s] %(message)s'

_QT_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def _qt_message_handler(msg_type, context, message):
    logging.getLogger('qt').log(_QT_LEVELS.get(msg_type, logging.WARNING), message)


class LoggingConfig:
    """Owns the handlers installed on the root logger."""

    _handlers: List[logging.Handler] = []
    _log_file_path: Optional[Path] = None

    @classmethod
    def setup_logging(cls, log_dir: Path, log_file_name: str = Config.LOG_FILE_NAME,
                      console_level: int = logging.INFO,
                      max_bytes: int = Config.LOG_MAX_BYTES,
                      backup_count: int = Config.LOG_BACKUP_COUNT) -> Path:
        """
        Install file and console handlers. Later calls are no-ops.

        Args:
            log_dir: Folder for the log file (created if missing)
            log_file_name: Log file name inside log_dir
            console_level: Minimum level echoed to stdout
            max_bytes: Rotate the file once it reaches this size
            backup_count: Rotated files to keep

        Returns:
            Path of the active log file
        """
        if cls._handlers:
            return cls._log_file_path

        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / log_file_name

        file_handler = RotatingFileHandler(
            cls._log_file_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

        root = logging.getLogger()
        root.setLevel(logging.DEBUG)
        for handler in (file_handler, console_handler):
            root.addHandler(handler)
            cls._handlers.append(handler)

        qInstallMessageHandler(_qt_message_handler)
        root.info(f"Logging to {cls._log_file_path}")
        return cls._log_file_path

    @classmethod
    def shutdown(cls):
        """Remove and close the installed handlers."""
        qInstallMessageHandler(None)
        root = logging.getLogger()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []
        cls._log_file_path = None

    @classmethod
    def get_logger(cls, name: str):
        return logging.getLogger(name)

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        return cls._log_file_path


__all__ = ['LoggingConfig']
