"""
BlueprintViewerWindow - Main application window

Pattern: QMainWindow with splitter layout

Layout:
    +------------------------------------------+
    |  Toolbar (name, open, save, draw, hint)  |
    +------------------------------------------+
    |  BlueprintCanvas          | ElementPanel |
    +------------------------------------------+
    |  StatusBar                               |
    +------------------------------------------+
"""

import logging
from typing import Optional

from PyQt6.QtWidgets import (
    QFileDialog, QInputDialog, QLabel, QLineEdit, QMainWindow, QMessageBox, QSplitter, QToolBar
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QCloseEvent

from ..config import Config
from ..models.annotation import AnnotationKind
from ..services.blueprint_document import BlueprintDocument
from ..services.blueprint_store import BlueprintStore
from ..services.errors import BlueprintError
from ..services.permissions import BlueprintPermissions
from .blueprint_canvas import BlueprintCanvas
from .element_panel import ElementPanel

logger = logging.getLogger(__name__)

DRAWING_HINT = "Click to add points - Double-click to finish - Ctrl+Z undo - Ctrl+Shift+Z redo - Esc cancel"
WORKER_HINT = "Yellow = assigned to you - Select an element to mark it complete"


class BlueprintViewerWindow(QMainWindow):
    """
    Role-aware blueprint page.

    Managers upload an image, draw, assign, delete and mark complete.
    Workers see the blueprint read-only and mark their own elements complete.
    """

    def __init__(self, document: BlueprintDocument,
                 canvas: Optional[BlueprintCanvas] = None,
                 store: Optional[BlueprintStore] = None, parent=None):
        super().__init__(parent)

        self._document = document
        self._canvas = canvas or BlueprintCanvas()
        self._store = store or BlueprintStore()
        self._draw_actions = {}

        self._setup_window()
        self._create_widgets()
        self._create_layout()
        self._connect_signals()
        self._sync_from_document()

    @property
    def document(self) -> BlueprintDocument:
        return self._document

    @property
    def canvas(self) -> BlueprintCanvas:
        return self._canvas

    @property
    def store(self) -> BlueprintStore:
        return self._store

    def _setup_window(self):
        """Configure window properties"""
        self.setWindowTitle(f"{Config.APP_NAME} {Config.APP_VERSION}")
        self.setGeometry(100, 100, Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)

    def _create_widgets(self):
        """Create UI widgets"""
        doc = self._document

        self._canvas.read_only = doc.read_only
        self._canvas.viewer_uid = doc.viewer_uid

        self._panel = ElementPanel(doc.viewer_role, doc.viewer_uid, doc.roster)

        self._toolbar = QToolBar("Blueprint")
        self._toolbar.setMovable(False)

        self._name_edit = QLineEdit()
        self._name_edit.setPlaceholderText("Blueprint Name")
        self._name_edit.setReadOnly(doc.read_only)
        self._name_edit.setMaximumWidth(260)
        self._toolbar.addWidget(self._name_edit)

        self._open_blueprint_action = QAction("Open Blueprint", self)
        self._open_blueprint_action.triggered.connect(self._on_open_blueprint)
        self._toolbar.addAction(self._open_blueprint_action)

        if not doc.read_only:
            self._upload_action = QAction("Upload Image", self)
            self._upload_action.triggered.connect(self._on_open_image)
            self._toolbar.addAction(self._upload_action)

            self._save_action = QAction("Save", self)
            self._save_action.setShortcut("Ctrl+S")
            self._save_action.triggered.connect(lambda: self.save_blueprint())
            self._toolbar.addAction(self._save_action)

            self._delete_blueprint_action = QAction("Delete Blueprint", self)
            self._delete_blueprint_action.triggered.connect(self._on_delete_blueprint)
            self._toolbar.addAction(self._delete_blueprint_action)

            self._toolbar.addSeparator()

            for kind in AnnotationKind:
                action = QAction(f"Draw {kind.label}", self)
                action.setCheckable(True)
                action.triggered.connect(lambda checked, k=kind: self._on_draw_toggled(k, checked))
                self._toolbar.addAction(action)
                self._draw_actions[kind] = action

        self._hint_label = QLabel()
        self._toolbar.addWidget(self._hint_label)

    def _create_layout(self):
        """Create window layout"""
        self.addToolBar(Qt.ToolBarArea.TopToolBarArea, self._toolbar)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._canvas)
        splitter.addWidget(self._panel)
        splitter.setStretchFactor(0, 1)
        splitter.setSizes(Config.DEFAULT_SPLITTER_SIZES)
        self.setCentralWidget(splitter)

        role_label = BlueprintPermissions.get_role_label(self._document.viewer_role)
        self.statusBar().showMessage(f"Signed in as {role_label}")

    def _connect_signals(self):
        """Wire document, canvas and panel"""
        doc = self._document
        canvas = self._canvas

        # Page -> canvas
        doc.annotations_changed.connect(canvas.set_annotations)
        doc.active_changed.connect(canvas.set_active_annotation_id)
        doc.selection_changed.connect(canvas.set_selected_annotation_id)
        doc.image_source_changed.connect(canvas.set_image_source)

        # Canvas -> page
        canvas.path_updated.connect(doc.update_path)
        canvas.drawing_finished.connect(doc.finish_drawing)
        canvas.drawing_abandoned.connect(doc.abandon_drawing)
        canvas.drawing_cancelled.connect(doc.cancel_drawing)
        canvas.object_selected.connect(lambda annotation: doc.select(annotation.id))
        canvas.image_failed.connect(self._on_image_failed)

        # Panel
        doc.annotations_changed.connect(self._panel.set_annotations)
        doc.selection_changed.connect(self._panel.set_selected_id)
        self._panel.element_clicked.connect(doc.select)
        self._panel.toggle_complete_requested.connect(
            lambda annotation_id: self._run(doc.toggle_complete, annotation_id))
        self._panel.delete_requested.connect(
            lambda annotation_id: self._run(doc.delete_annotation, annotation_id))
        self._panel.worker_chosen.connect(
            lambda uid: self._run(doc.assign_worker, uid or None))

        # Window chrome
        doc.active_changed.connect(self._update_hint)
        doc.image_source_changed.connect(self._update_hint)
        doc.dirty_changed.connect(self._update_title)
        doc.completion_changed.connect(self._on_completion_changed)
        doc.name_changed.connect(self._on_document_name_changed)
        self._name_edit.textEdited.connect(lambda text: self._run(doc.set_name, text))

    def _sync_from_document(self):
        doc = self._document
        self._name_edit.setText(doc.name)
        self._canvas.set_image_source(doc.image_source)
        self._canvas.set_annotations(doc.annotations)
        self._canvas.set_selected_annotation_id(doc.selected_id)
        self._canvas.set_active_annotation_id(doc.active_id)
        self._panel.set_annotations(doc.annotations)
        self._panel.set_selected_id(doc.selected_id)
        self._update_hint()
        self._update_title()

    # ==================== Actions ====================

    def _run(self, operation, *args):
        """Run a document operation, reporting failures to the user."""
        try:
            return operation(*args)
        except BlueprintError as e:
            logger.info(f"Operation refused: {e}")
            QMessageBox.warning(self, Config.APP_NAME, str(e))
            return None

    def save_blueprint(self) -> Optional[str]:
        """Save or update the current blueprint in the store."""
        blueprint_id = self._run(self._document.save, self._store)
        if blueprint_id:
            self.statusBar().showMessage(f"Blueprint saved: {self._document.name}", 5000)
        return blueprint_id

    def open_blueprint(self, blueprint_id: str) -> bool:
        """Replace the current blueprint with a saved one."""
        try:
            self._document.open(self._store, blueprint_id)
        except BlueprintError as e:
            QMessageBox.warning(self, Config.APP_NAME, str(e))
            return False
        return True

    def delete_blueprint(self, blueprint_id: str) -> bool:
        """Delete a saved blueprint, closing it if it is the open one."""
        if not self._run(self._store.delete, blueprint_id):
            return False
        if self._document.blueprint_id == blueprint_id:
            self._document.close()
        self.statusBar().showMessage("Blueprint deleted", 5000)
        return True

    def _choose_saved_blueprint(self, title: str) -> Optional[str]:
        summaries = self._store.list_blueprints()
        if not summaries:
            QMessageBox.information(self, Config.APP_NAME, "No saved blueprints yet.")
            return None
        labels = [f"{s['name']}  ({s['updatedAt'][:10]})" for s in summaries]
        label, ok = QInputDialog.getItem(self, title, "Blueprint:", labels, 0, False)
        if not ok:
            return None
        return summaries[labels.index(label)]['id']

    def _on_open_blueprint(self):
        if not self._confirm_discard("Load a different blueprint?"):
            return
        blueprint_id = self._choose_saved_blueprint("Open Blueprint")
        if blueprint_id:
            self.open_blueprint(blueprint_id)

    def _on_delete_blueprint(self):
        blueprint_id = self._choose_saved_blueprint("Delete Blueprint")
        if not blueprint_id:
            return
        reply = QMessageBox.question(
            self, Config.APP_NAME, "Delete this blueprint permanently?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        if reply == QMessageBox.StandardButton.Yes:
            self.delete_blueprint(blueprint_id)

    def _on_completion_changed(self, annotation_id: str, completed: bool):
        # Worker completion changes go straight to the store
        doc = self._document
        if doc.read_only and doc.blueprint_id:
            self._run(self._store.update_completion, doc.blueprint_id, annotation_id, completed)

    def _on_open_image(self):
        if not self._confirm_discard("Open a different image?"):
            return
        path, _ = QFileDialog.getOpenFileName(
            self, "Upload Blueprint Image", "", "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"
        )
        if path:
            self._run(self._document.set_image_source, path)

    def _on_draw_toggled(self, kind: AnnotationKind, checked: bool):
        active = self._document.active_annotation()
        if not checked and active is not None and active.kind == kind:
            self._document.cancel_active_drawing()
        else:
            self._run(self._document.start_drawing, kind)
        self._update_hint()

    def _on_image_failed(self, source: str, message: str):
        QMessageBox.warning(self, Config.APP_NAME, f"Failed to load image.\n{message}")

    def _on_document_name_changed(self, name: str):
        if self._name_edit.text() != name:
            self._name_edit.setText(name)

    # ==================== Display ====================

    def _update_hint(self, *args):
        active = self._document.active_annotation()
        for kind, action in self._draw_actions.items():
            drawing_kind = active is not None and active.kind == kind
            action.setChecked(drawing_kind)
            action.setText(f"{'Cancel' if drawing_kind else 'Draw'} {kind.label}")
            action.setEnabled(bool(self._document.image_source))

        if active is not None:
            self._hint_label.setText(DRAWING_HINT)
        elif self._document.read_only and self._document.image_source:
            self._hint_label.setText(WORKER_HINT)
        else:
            self._hint_label.setText("")

    def _update_title(self, *args):
        marker = " *" if self._document.is_dirty else ""
        self.setWindowTitle(f"{Config.APP_NAME} {Config.APP_VERSION}{marker}")

    def _confirm_discard(self, question: str) -> bool:
        if not self._document.is_dirty:
            return True
        reply = QMessageBox.question(
            self,
            Config.APP_NAME,
            f"You have unsaved changes. {question}",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
        )
        return reply == QMessageBox.StandardButton.Yes

    def closeEvent(self, event: QCloseEvent):
        """Guard unsaved changes"""
        if self._confirm_discard("Leave without saving?"):
            event.accept()
        else:
            event.ignore()


__all__ = ['BlueprintViewerWindow']
