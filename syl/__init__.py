"""Structural code annotations keyed by semantic path."""

from .languages import LanguagePathConfig, LanguageRegistry, default_registry
from .models import (
    Annotation,
    AnnotationFile,
    OrphanReport,
    ResolvedAnnotation,
    SemanticNode,
    SemanticPathResult,
)
from .orphans import detect_orphans
from .resolver import resolve_annotations
from .semantic_paths import build_semantic_paths

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "AnnotationFile",
    "LanguagePathConfig",
    "LanguageRegistry",
    "OrphanReport",
    "ResolvedAnnotation",
    "SemanticNode",
    "SemanticPathResult",
    "build_semantic_paths",
    "default_registry",
    "detect_orphans",
    "resolve_annotations",
]
