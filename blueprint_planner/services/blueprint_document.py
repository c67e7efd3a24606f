"""
BlueprintDocument - page state for the blueprint viewer

Owns the annotation list, the active (being drawn) and selected identifiers
and the unsaved-changes flag. The canvas never edits annotations itself; it
reports changes and this document produces the next snapshot.

Usage:
    document = BlueprintDocument(viewer_role="admin", viewer_uid="u1")
    document.annotations_changed.connect(canvas.set_annotations)
    canvas.path_updated.connect(document.update_path)
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..core.ids import IdGenerator, sequential_ids
from ..models.annotation import Annotation, AnnotationKind, Point
from .errors import BlueprintError, PermissionDeniedError
from .permissions import BlueprintPermissions
from .worker_roster import WorkerRoster

logger = logging.getLogger(__name__)


class BlueprintDocument(QObject):
    """
    Single source of truth for one open blueprint.

    Signals carry "" in place of None for identifiers.
    """

    annotations_changed = pyqtSignal(list)  # List[Annotation]
    active_changed = pyqtSignal(str)  # annotation_id being drawn
    selection_changed = pyqtSignal(str)  # selected annotation_id
    dirty_changed = pyqtSignal(bool)
    image_source_changed = pyqtSignal(str)
    name_changed = pyqtSignal(str)
    completion_changed = pyqtSignal(str, bool)  # annotation_id, completed

    def __init__(
        self,
        viewer_role: str = "admin",
        viewer_uid: Optional[str] = None,
        roster: Optional[WorkerRoster] = None,
        id_generator: Optional[IdGenerator] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)

        self._viewer_role = viewer_role
        self._viewer_uid = viewer_uid
        self._roster = roster or WorkerRoster()
        self._next_id = id_generator or sequential_ids()

        # State storage
        self._blueprint_id: Optional[str] = None
        self._name = ""
        self._image_source: Optional[str] = None
        self._annotations: List[Annotation] = []
        self._active_id: Optional[str] = None
        self._selected_id: Optional[str] = None
        self._dirty = False

    # ==================== Getters ====================

    @property
    def viewer_role(self) -> str:
        return self._viewer_role

    @property
    def viewer_uid(self) -> Optional[str]:
        return self._viewer_uid

    @property
    def is_admin(self) -> bool:
        return BlueprintPermissions.is_admin(self._viewer_role)

    @property
    def read_only(self) -> bool:
        return not BlueprintPermissions.can_edit(self._viewer_role)

    @property
    def roster(self) -> WorkerRoster:
        return self._roster

    @property
    def blueprint_id(self) -> Optional[str]:
        return self._blueprint_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def image_source(self) -> Optional[str]:
        return self._image_source

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._annotations)

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def get(self, annotation_id: Optional[str]) -> Optional[Annotation]:
        for annotation in self._annotations:
            if annotation.id == annotation_id:
                return annotation
        return None

    def selected_annotation(self) -> Optional[Annotation]:
        return self.get(self._selected_id)

    def active_annotation(self) -> Optional[Annotation]:
        return self.get(self._active_id)

    # ==================== Blueprint lifecycle ====================

    def load(self, name: str, image_source: Optional[str],
             objects: Optional[Dict[str, Dict[str, Any]]] = None,
             blueprint_id: Optional[str] = None):
        """
        Replace the document with a stored blueprint.

        Args:
            name: Blueprint display name
            image_source: Image path or URL
            objects: Mapping of annotation id -> stored record
            blueprint_id: Identifier of the stored blueprint
        """
        self._set_active(None)
        self._set_selected(None)
        self._blueprint_id = blueprint_id
        self._set_name(name or "")
        self._set_image_source(image_source)
        annotations = [Annotation.from_dict(oid, data) for oid, data in (objects or {}).items()]
        self._replace_annotations(annotations, mark_dirty=False)
        self._set_dirty(False)
        logger.info(f"Loaded blueprint '{self._name}' ({len(annotations)} elements)")

    def set_image_source(self, image_source: str):
        """
        Start a new blueprint from an uploaded image.

        Clears all elements and the stored-blueprint link.
        Re-uploading the current source reloads it.
        """
        self._require_edit()
        self._set_active(None)
        self._set_selected(None)
        self._blueprint_id = None
        self._set_image_source(image_source, force=True)
        self._replace_annotations([], mark_dirty=False)
        self._set_dirty(False)
        if not self._name and image_source:
            self._set_name(Path(str(image_source).split('?')[0]).stem)

    def set_name(self, name: str):
        self._require_edit()
        self._set_name(name)

    def close(self):
        """Return to an empty document with no image."""
        self.load("", None)

    def mark_saved(self, blueprint_id: Optional[str] = None):
        """Record that the external store accepted the current state."""
        if blueprint_id:
            self._blueprint_id = blueprint_id
        self._set_dirty(False)

    def to_dict(self) -> Dict[str, Any]:
        """Blueprint record for the external store."""
        return {
            'name': self._name.strip(),
            'imageUrl': self._image_source,
            'objects': {a.id: a.to_dict() for a in self._annotations},
        }

    def save(self, store) -> str:
        """
        Write the blueprint to a store and clear the unsaved-changes flag.

        A drawing in progress is stopped first so it is stored finished.

        Args:
            store: BlueprintStore to write to

        Returns:
            Id of the stored blueprint

        Raises:
            BlueprintError: No image or name, or the store failed
        """
        self._require_edit()
        if not self._image_source or not self._name.strip():
            raise BlueprintError("Please upload an image and provide a name.")

        self.cancel_active_drawing()
        blueprint_id = store.save(self.to_dict(), self._blueprint_id)
        self.mark_saved(blueprint_id)
        return blueprint_id

    def open(self, store, blueprint_id: str):
        """
        Load a saved blueprint from a store.

        Raises:
            BlueprintError: The blueprint does not exist
        """
        record = store.load(blueprint_id)
        if record is None:
            raise BlueprintError(f"Blueprint not found: {blueprint_id}")
        self.load(record.get('name', ''), record.get('imageUrl'),
                  record.get('objects'), blueprint_id)

    # ==================== Drawing ====================

    def start_drawing(self, kind: AnnotationKind) -> str:
        """
        Append an empty in-progress element and make it active and selected.

        Any drawing already in progress is cancelled first.

        Returns:
            Identifier of the new element
        """
        self._require_edit()
        if not self._image_source:
            raise BlueprintError("Upload a blueprint image first.")

        if self._active_id:
            self.cancel_active_drawing()

        annotation = Annotation(id=self._next_id(), kind=kind, drawing=True)
        self._replace_annotations(self._annotations + [annotation])
        self._set_active(annotation.id)
        self._set_selected(annotation.id)
        logger.debug(f"Started drawing {kind.value}: {annotation.id}")
        return annotation.id

    def cancel_active_drawing(self):
        """
        Stop the active drawing.

        An element with no points is removed; otherwise it is kept with its
        current path and no longer in progress.
        """
        active = self.active_annotation()
        if active is not None:
            if not active.points:
                self._replace_annotations([a for a in self._annotations if a.id != active.id])
                if self._selected_id == active.id:
                    self._set_selected(None)
            else:
                self._update(active.id, drawing=False)
        self._set_active(None)

    def update_path(self, annotation_id: str, points: Iterable[Point]):
        """Store a path reported by the canvas."""
        annotation = self.get(annotation_id)
        if annotation is None:
            return
        self._replace_annotations([
            a.with_points(points) if a.id == annotation_id else a for a in self._annotations
        ])

    def finish_drawing(self, annotation_id: str):
        self._update(annotation_id, drawing=False)
        if self._active_id == annotation_id:
            self._set_active(None)

    def abandon_drawing(self, annotation_id: str):
        """Remove an element whose drawing ended with too few points."""
        self._remove(annotation_id)

    def cancel_drawing(self, annotation_id: str):
        """Cancel a drawing if it is the active one."""
        if annotation_id and annotation_id == self._active_id:
            self.cancel_active_drawing()

    def delete_annotation(self, annotation_id: str):
        self._require_edit()
        self._remove(annotation_id)

    # ==================== Selection / assignment / completion ====================

    def select(self, annotation_id: Optional[str]) -> bool:
        """Select an element. Ignored while a drawing is active."""
        if self._active_id:
            return False
        if annotation_id and self.get(annotation_id) is None:
            return False
        self._set_selected(annotation_id)
        return True

    def assign_worker(self, worker_uid: Optional[str]):
        """
        Assign the selected element to a worker, or unassign with None.

        Raises:
            BlueprintError: No finished element is selected, the worker is
                unknown, or the worker's trade does not match the element
        """
        self._require_edit()
        selected = self.selected_annotation()
        if selected is None or selected.drawing:
            raise BlueprintError("Select a finished element to assign.")

        if not worker_uid:
            self._update(selected.id, assignee=None)
            return

        worker = self._roster.find(worker_uid)
        if worker is None:
            raise BlueprintError(f"Unknown worker: {worker_uid}")
        if worker.role != selected.kind.worker_role:
            raise BlueprintError(
                f"A {worker.role} cannot be assigned to a {selected.kind.value}."
            )
        self._update(selected.id, assignee=worker.to_ref())
        logger.info(f"Assigned {selected.id} to {worker.name}")

    def toggle_complete(self, annotation_id: str) -> bool:
        """
        Flip the completed flag.

        Returns:
            The new completed value

        Raises:
            PermissionDeniedError: The viewer may not change this element
        """
        annotation = self.get(annotation_id)
        if annotation is None:
            raise BlueprintError(f"Unknown element: {annotation_id}")
        if not BlueprintPermissions.can_toggle_complete(self._viewer_role, annotation,
                                                        self._viewer_uid):
            raise PermissionDeniedError("This element is not assigned to you.")

        completed = not annotation.completed
        self._update(annotation_id, completed=completed)
        self.completion_changed.emit(annotation_id, completed)
        return completed

    # ==================== Internal setters ====================

    def _require_edit(self):
        if not BlueprintPermissions.can_edit(self._viewer_role):
            raise PermissionDeniedError("Only managers can edit blueprints.")

    def _update(self, annotation_id: str, **changes):
        if self.get(annotation_id) is None:
            return
        self._replace_annotations([
            replace(a, **changes) if a.id == annotation_id else a for a in self._annotations
        ])

    def _remove(self, annotation_id: str):
        if self.get(annotation_id) is None:
            return
        if self._active_id == annotation_id:
            self._set_active(None)
        if self._selected_id == annotation_id:
            self._set_selected(None)
        self._replace_annotations([a for a in self._annotations if a.id != annotation_id])

    def _replace_annotations(self, annotations: List[Annotation], mark_dirty: bool = True):
        self._annotations = list(annotations)
        if mark_dirty and self.is_admin:
            self._set_dirty(True)
        self.annotations_changed.emit(self.annotations)

    def _set_active(self, annotation_id: Optional[str]):
        if self._active_id != annotation_id:
            self._active_id = annotation_id
            self.active_changed.emit(annotation_id or "")

    def _set_selected(self, annotation_id: Optional[str]):
        if self._selected_id != annotation_id:
            self._selected_id = annotation_id
            self.selection_changed.emit(annotation_id or "")

    def _set_dirty(self, dirty: bool):
        if self._dirty != dirty:
            self._dirty = dirty
            self.dirty_changed.emit(dirty)

    def _set_name(self, name: str):
        if self._name != name:
            self._name = name
            self.name_changed.emit(name)

    def _set_image_source(self, image_source: Optional[str], force: bool = False):
        if force or self._image_source != image_source:
            self._image_source = image_source
            self.image_source_changed.emit(image_source or "")


__all__ = ['BlueprintDocument']
