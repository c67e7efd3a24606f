"""Data models for blueprint annotations."""

from .annotation import (
    Point,
    AnnotationKind,
    WorkerRef,
    Annotation,
    is_owned_by,
)

__all__ = ['Point', 'AnnotationKind', 'WorkerRef', 'Annotation', 'is_owned_by']
