"""
Blueprint canvas subpackage.

- path_renderer: Graphics item creation from annotations
"""

from .path_renderer import (
    ANNOTATION_ID_KEY,
    AnnotationPathItem,
    annotation_color,
    create_annotation_item,
    create_rubber_band_item,
)

__all__ = [
    'ANNOTATION_ID_KEY',
    'AnnotationPathItem',
    'annotation_color',
    'create_annotation_item',
    'create_rubber_band_item',
]
