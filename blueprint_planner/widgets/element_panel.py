"""
ElementPanel - Sidebar listing the blueprint's pipes and connections

Features:
- One row per element with status, assignee and point count
- Mark done / pending and delete for the selected element
- Worker assignment for the selected element (managers only)
"""

from typing import List, Optional

from PyQt6.QtWidgets import (
    QComboBox, QFrame, QHBoxLayout, QLabel, QListWidget, QListWidgetItem,
    QPushButton, QVBoxLayout, QWidget
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor

from ..config import Config
from ..models.annotation import Annotation, is_owned_by
from ..services.permissions import BlueprintPermissions
from ..services.worker_roster import WorkerRoster


def describe_annotation(annotation: Annotation, viewer_uid: Optional[str]) -> str:
    """One-line summary shown in the element list."""
    parts = [annotation.kind.label]
    if annotation.drawing:
        parts.append("(drawing)")
    if is_owned_by(annotation, viewer_uid):
        parts.append("- You")
    elif annotation.assignee:
        parts.append(f"- {annotation.assignee.name}")
    else:
        parts.append("- Unassigned")
    parts.append("- Done" if annotation.completed else "- Pending")
    if annotation.points:
        parts.append(f"({len(annotation.points)} pts)")
    return " ".join(parts)


class ElementPanel(QFrame):
    """
    Element list and actions for the blueprint viewer.

    Signals:
        element_clicked(str): Annotation id clicked in the list
        toggle_complete_requested(str): Annotation id to mark done/pending
        delete_requested(str): Annotation id to delete
        worker_chosen(str): Worker uid for the selected element ("" = unassign)
    """

    element_clicked = pyqtSignal(str)
    toggle_complete_requested = pyqtSignal(str)
    delete_requested = pyqtSignal(str)
    worker_chosen = pyqtSignal(str)

    def __init__(self, viewer_role: str, viewer_uid: Optional[str],
                 roster: WorkerRoster, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._viewer_role = viewer_role
        self._viewer_uid = viewer_uid
        self._roster = roster
        self._annotations: List[Annotation] = []
        self._selected_id: Optional[str] = None
        self._updating = False

        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self._title = QLabel("Elements (0)")
        layout.addWidget(self._title)

        self._list = QListWidget()
        self._list.itemClicked.connect(self._on_item_clicked)
        layout.addWidget(self._list, 1)

        buttons = QHBoxLayout()
        self._complete_btn = QPushButton("Mark Done")
        self._complete_btn.clicked.connect(self._on_complete_clicked)
        buttons.addWidget(self._complete_btn)

        self._delete_btn = QPushButton("Delete")
        self._delete_btn.clicked.connect(self._on_delete_clicked)
        self._delete_btn.setVisible(BlueprintPermissions.can_edit(self._viewer_role))
        buttons.addWidget(self._delete_btn)
        layout.addLayout(buttons)

        self._assign_label = QLabel()
        layout.addWidget(self._assign_label)

        self._worker_combo = QComboBox()
        self._worker_combo.currentIndexChanged.connect(self._on_worker_changed)
        layout.addWidget(self._worker_combo)

        self._hint = QLabel()
        self._hint.setWordWrap(True)
        layout.addWidget(self._hint)

        self._refresh_actions()

    # ==================== Inputs ====================

    def set_annotations(self, annotations: List[Annotation]):
        self._annotations = list(annotations)
        self._title.setText(f"Elements ({len(self._annotations)})")

        self._list.clear()
        for annotation in self._annotations:
            item = QListWidgetItem(describe_annotation(annotation, self._viewer_uid))
            item.setData(Qt.ItemDataRole.UserRole, annotation.id)
            if is_owned_by(annotation, self._viewer_uid):
                item.setForeground(QColor(Config.OWN_COLOR))
            self._list.addItem(item)
            if annotation.id == self._selected_id:
                item.setSelected(True)

        if not self._annotations:
            self._hint.setText(
                "No elements yet. Upload an image then draw pipes or connections."
                if BlueprintPermissions.can_edit(self._viewer_role)
                else "Select a blueprint to view elements."
            )
        self._refresh_actions()

    def set_selected_id(self, annotation_id: Optional[str]):
        self._selected_id = annotation_id or None
        for row in range(self._list.count()):
            item = self._list.item(row)
            item.setSelected(item.data(Qt.ItemDataRole.UserRole) == self._selected_id)
        self._refresh_actions()

    # ==================== Display ====================

    def _selected(self) -> Optional[Annotation]:
        for annotation in self._annotations:
            if annotation.id == self._selected_id:
                return annotation
        return None

    def _refresh_actions(self):
        selected = self._selected()
        can_edit = BlueprintPermissions.can_edit(self._viewer_role)

        can_complete = selected is not None and BlueprintPermissions.can_toggle_complete(
            self._viewer_role, selected, self._viewer_uid
        )
        self._complete_btn.setEnabled(can_complete)
        self._complete_btn.setText("Mark Pending" if selected and selected.completed else "Mark Done")
        self._delete_btn.setEnabled(selected is not None)

        show_assign = can_edit and selected is not None and not selected.drawing
        self._assign_label.setVisible(show_assign)
        self._worker_combo.setVisible(show_assign)

        if show_assign:
            self._populate_workers(selected)
        elif selected is not None and not can_edit and not selected.drawing \
                and not is_owned_by(selected, self._viewer_uid):
            self._hint.setText("This element is not assigned to you.")
        elif self._annotations:
            self._hint.setText("")

    def _populate_workers(self, selected: Annotation):
        workers = self._roster.workers_for_kind(selected.kind)
        trade = selected.kind.worker_role
        self._assign_label.setText(f"Assign {selected.kind.label} ({trade.capitalize()}s)")

        self._updating = True
        self._worker_combo.clear()
        self._worker_combo.addItem("- Select Worker -", "")
        for worker in workers:
            self._worker_combo.addItem(worker.name, worker.uid)
        current = selected.assignee.uid if selected.assignee else ""
        index = self._worker_combo.findData(current)
        self._worker_combo.setCurrentIndex(max(index, 0))
        self._updating = False

        self._hint.setText("" if workers else f"No {trade}s in the system.")

    # ==================== Handlers ====================

    def _on_item_clicked(self, item: QListWidgetItem):
        self.element_clicked.emit(item.data(Qt.ItemDataRole.UserRole))

    def _on_complete_clicked(self):
        if self._selected_id:
            self.toggle_complete_requested.emit(self._selected_id)

    def _on_delete_clicked(self):
        if self._selected_id:
            self.delete_requested.emit(self._selected_id)

    def _on_worker_changed(self, index: int):
        if self._updating or index < 0:
            return
        self.worker_chosen.emit(self._worker_combo.itemData(index) or "")


__all__ = ['ElementPanel', 'describe_annotation']
