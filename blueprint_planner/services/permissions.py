"""
Permissions - Role-based permission system for blueprint editing

Admins (managers) edit everything. Workers (plumbers, electricians) see the
blueprint read-only and may only toggle completion on their own elements.
"""

from enum import IntEnum
from typing import Optional

from ..models.annotation import Annotation, is_owned_by


class RoleLevel(IntEnum):
    """Role hierarchy levels."""
    WORKER = 1
    ADMIN = 2


ROLE_LEVELS = {
    'plumber': RoleLevel.WORKER,
    'electrician': RoleLevel.WORKER,
    'admin': RoleLevel.ADMIN,
}

ROLE_LABELS = {
    'plumber': 'Plumber',
    'electrician': 'Electrician',
    'admin': 'Manager',
}

WORKER_ROLES = ('plumber', 'electrician')


class BlueprintPermissions:
    """Permission checks for blueprint operations."""

    @staticmethod
    def get_role_level(role: str) -> int:
        """Get numeric level for a role. Unknown roles are treated as workers."""
        return ROLE_LEVELS.get((role or '').lower(), RoleLevel.WORKER)

    @staticmethod
    def is_known_role(role: str) -> bool:
        return (role or '').lower() in ROLE_LEVELS

    @staticmethod
    def get_role_label(role: str) -> str:
        return ROLE_LABELS.get((role or '').lower(), 'Worker')

    @staticmethod
    def is_admin(role: str) -> bool:
        return BlueprintPermissions.get_role_level(role) >= RoleLevel.ADMIN

    @staticmethod
    def can_edit(role: str) -> bool:
        """Draw, delete, assign, upload and save."""
        return BlueprintPermissions.is_admin(role)

    @staticmethod
    def can_toggle_complete(role: str, annotation: Annotation,
                            viewer_uid: Optional[str]) -> bool:
        """
        Check if the viewer can mark an annotation done or pending.

        Admins: any finished element
        Workers: only elements assigned to them
        """
        if annotation.drawing:
            return False
        if BlueprintPermissions.is_admin(role):
            return True
        return is_owned_by(annotation, viewer_uid)


__all__ = ['BlueprintPermissions', 'RoleLevel', 'ROLE_LEVELS', 'WORKER_ROLES']
