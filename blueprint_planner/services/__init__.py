"""Page-level services: document state, storage, permissions, roster, image loading."""

from .errors import BlueprintError, PermissionDeniedError
from .permissions import BlueprintPermissions
from .worker_roster import Worker, WorkerRoster
from .blueprint_document import BlueprintDocument
from .blueprint_store import BlueprintStore
from .image_loader import ImageLoader

__all__ = [
    'BlueprintError',
    'PermissionDeniedError',
    'BlueprintPermissions',
    'Worker',
    'WorkerRoster',
    'BlueprintDocument',
    'BlueprintStore',
    'ImageLoader',
]
