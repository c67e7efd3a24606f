"""
JSON Utilities - Safe JSON file operations for blueprint records

Provides:
- Loading with a fallback value for missing or corrupt files
- Writing through a temporary file so a crash never leaves half a record
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


def safe_json_load(path: Union[str, Path], default: Any = None) -> Any:
    """
    Load JSON from a file.

    Args:
        path: Path to JSON file
        default: Value returned if the file is missing or unreadable

    Returns:
        Parsed JSON data, or default on error
    """
    file_path = Path(path)
    if not file_path.exists():
        return default

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid JSON in {file_path}: {e}")
    except OSError as e:
        logger.warning(f"Could not read {file_path}: {e}")
    return default


def safe_json_save(path: Union[str, Path], data: Any, indent: int = 2) -> bool:
    """
    Write data as JSON, replacing the file atomically.

    Returns:
        True if the file was written
    """
    file_path = Path(path)
    tmp_path = file_path.with_name(file_path.name + '.tmp')
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(tmp_path, file_path)
        return True
    except TypeError as e:
        logger.error(f"Data not JSON serializable for {file_path}: {e}")
    except OSError as e:
        logger.error(f"Could not write to {file_path}: {e}")

    if tmp_path.exists():
        tmp_path.unlink()
    return False


__all__ = ['safe_json_load', 'safe_json_save']
