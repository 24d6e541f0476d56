"""Join stored annotations against a freshly built path map."""

from __future__ import annotations

from typing import List

from .models import AnnotationFile, ResolvedAnnotation, SemanticPathResult


def resolve_annotations(
    annotation_file: AnnotationFile,
    path_result: SemanticPathResult,
) -> List[ResolvedAnnotation]:
    """Emit one record per stored annotation, in stored order.

    Paths missing from *path_result* (deleted or renamed declarations, or
    keys that were never valid paths) resolve with ``orphaned=True``.
    """
    resolved: List[ResolvedAnnotation] = []
    for path, annotations in annotation_file.annotations.items():
        node = path_result.path_map.get(path)
        for annotation in annotations:
            resolved.append(ResolvedAnnotation(
                annotation=annotation,
                path=path,
                node=node,
                orphaned=node is None,
            ))
    return resolved
