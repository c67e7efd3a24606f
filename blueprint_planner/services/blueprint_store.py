"""
BlueprintStore - File storage for saved blueprints

One JSON record per blueprint:

    <user data>/blueprints/
    ├── bp_1a2b3c4d5e6f.json
    └── bp_9f8e7d6c5b4a.json

Record layout (matches BlueprintDocument.to_dict plus timestamps):

    {"name": ..., "imageUrl": ..., "objects": {id: {...}},
     "createdAt": ISO-8601, "updatedAt": ISO-8601}
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import Config
from ..core.ids import IdGenerator, uuid_ids
from ..utils.json_utils import safe_json_load, safe_json_save
from .errors import BlueprintError

logger = logging.getLogger(__name__)


class BlueprintStore:
    """
    Manages saved blueprint records on disk.

    Usage:
        store = BlueprintStore()
        blueprint_id = store.save(document.to_dict())
        record = store.load(blueprint_id)
    """

    def __init__(self, base_path: Optional[Path] = None,
                 id_generator: Optional[IdGenerator] = None):
        self._base = Path(base_path) if base_path is not None else Config.get_blueprints_dir()
        self._base.mkdir(parents=True, exist_ok=True)
        self._next_id = id_generator or uuid_ids("bp")

    @property
    def base_path(self) -> Path:
        return self._base

    def get_blueprint_path(self, blueprint_id: str) -> Path:
        """Get path for a blueprint record."""
        if not blueprint_id or '/' in blueprint_id or '\\' in blueprint_id:
            raise BlueprintError(f"Invalid blueprint id: {blueprint_id!r}")
        return self._base / f"{blueprint_id}.json"

    # ==================== Save/Load ====================

    def save(self, record: Dict[str, Any], blueprint_id: Optional[str] = None) -> str:
        """
        Create or update a blueprint record.

        Args:
            record: Blueprint record (name, imageUrl, objects)
            blueprint_id: Existing id to update, or None to create

        Returns:
            Id of the stored blueprint

        Raises:
            BlueprintError: The record could not be written
        """
        now = datetime.now().isoformat(timespec='seconds')
        created_at = now
        if blueprint_id:
            existing = self.load(blueprint_id)
            if existing and existing.get('createdAt'):
                created_at = existing['createdAt']
        else:
            blueprint_id = self._next_id()

        data = dict(record)
        data['createdAt'] = created_at
        data['updatedAt'] = now

        if not safe_json_save(self.get_blueprint_path(blueprint_id), data):
            raise BlueprintError("Failed to save blueprint.")

        logger.info(f"Saved blueprint {blueprint_id} ({data.get('name', '')})")
        return blueprint_id

    def load(self, blueprint_id: str) -> Optional[Dict[str, Any]]:
        """Load a blueprint record, or None if missing or unreadable."""
        data = safe_json_load(self.get_blueprint_path(blueprint_id))
        if not isinstance(data, dict):
            return None
        return data

    def delete(self, blueprint_id: str) -> bool:
        """
        Delete a blueprint record.

        Returns:
            True if a record was removed
        """
        path = self.get_blueprint_path(blueprint_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise BlueprintError(f"Failed to delete blueprint: {e}") from e
        logger.info(f"Deleted blueprint {blueprint_id}")
        return True

    def update_completion(self, blueprint_id: str, annotation_id: str, completed: bool) -> bool:
        """
        Persist one element's completed flag without touching the rest.

        Used for workers, whose other edits are never saved.

        Returns:
            True if the stored element was updated
        """
        data = self.load(blueprint_id)
        if data is None:
            return False
        objects = data.get('objects') or {}
        if annotation_id not in objects:
            return False

        objects[annotation_id] = dict(objects[annotation_id], completed=completed)
        data['objects'] = objects
        if not safe_json_save(self.get_blueprint_path(blueprint_id), data):
            raise BlueprintError("Failed to save completion.")
        return True

    # ==================== Listing ====================

    def list_blueprints(self) -> List[Dict[str, Any]]:
        """
        Summaries of all saved blueprints, newest first.

        Returns:
            List of dicts with id, name, createdAt, updatedAt
        """
        summaries = []
        for path in self._base.glob('*.json'):
            data = safe_json_load(path)
            if not isinstance(data, dict):
                continue
            summaries.append({
                'id': path.stem,
                'name': data.get('name') or path.stem,
                'createdAt': data.get('createdAt', ''),
                'updatedAt': data.get('updatedAt', ''),
            })
        summaries.sort(key=lambda s: s['createdAt'], reverse=True)
        return summaries


__all__ = ['BlueprintStore']
