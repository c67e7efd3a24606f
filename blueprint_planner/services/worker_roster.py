"""
Worker roster - workers that can be assigned to blueprint elements
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from ..models.annotation import AnnotationKind, WorkerRef
from .permissions import WORKER_ROLES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Worker:
    """A worker account."""
    uid: str
    name: str
    role: str

    def to_ref(self) -> WorkerRef:
        return WorkerRef(self.uid, self.name)


class WorkerRoster:
    """In-memory list of workers, grouped by trade."""

    def __init__(self, workers: Iterable[Worker] = ()):
        self._workers: List[Worker] = [w for w in workers if w.role in WORKER_ROLES]

    def __len__(self) -> int:
        return len(self._workers)

    def all(self) -> List[Worker]:
        return list(self._workers)

    def find(self, uid: str) -> Optional[Worker]:
        for worker in self._workers:
            if worker.uid == uid:
                return worker
        return None

    def workers_for_kind(self, kind: AnnotationKind) -> List[Worker]:
        """Workers whose trade matches the element kind."""
        return [w for w in self._workers if w.role == kind.worker_role]

    @classmethod
    def from_json(cls, path: Path) -> 'WorkerRoster':
        """
        Load a roster from a JSON list of ``{"uid", "name", "role"}`` objects.

        Missing or unreadable files give an empty roster.
        """
        if not path.exists():
            return cls()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read worker roster {path}: {e}")
            return cls()

        workers = []
        for entry in data if isinstance(data, list) else []:
            try:
                workers.append(Worker(str(entry['uid']), str(entry['name']), str(entry['role']).lower()))
            except (KeyError, TypeError):
                logger.warning(f"Skipping malformed roster entry: {entry!r}")
        return cls(workers)


__all__ = ['Worker', 'WorkerRoster']
