"""Persistence for path-keyed annotations.

Each annotated source file gets one JSON document under the project's
``.syl`` directory, mirroring the source tree::

    .syl/src/parser.ts.json

Every mutation loads the document, changes it in memory and rewrites it
whole. A path whose last annotation is removed is dropped from the
document so empty lists are never written.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional

from .models import Annotation, AnnotationFile

logger = logging.getLogger(__name__)

ANNOTATION_SUFFIX = ".json"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return uuid.uuid4().hex[:8]


class AnnotationStore:
    """Load/add/update/remove annotations for source files under *syl_dir*."""

    def __init__(
        self,
        syl_dir: Path,
        clock: Callable[[], str] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self.syl_dir = syl_dir
        self._clock = clock
        self._id_factory = id_factory

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def annotation_path(self, source_file: str) -> Path:
        rel = PurePosixPath(source_file.replace("\\", "/"))
        if rel.is_absolute() or ".." in rel.parts or not rel.parts:
            raise ValueError(f"Source file must be relative to the project root: {source_file!r}")
        return self.syl_dir.joinpath(*rel.parts[:-1], rel.name + ANNOTATION_SUFFIX)

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self, source_file: str) -> AnnotationFile:
        path = self.annotation_path(source_file)
        if not path.exists():
            return AnnotationFile(source_file=source_file)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable annotation file %s: %s", path, exc)
            return AnnotationFile(source_file=source_file)
        if not isinstance(payload, dict):
            logger.warning("Annotation file %s is not a JSON object", path)
            return AnnotationFile(source_file=source_file)
        return AnnotationFile.from_dict(payload, source_file=source_file)

    def save(self, annotation_file: AnnotationFile) -> None:
        path = self.annotation_path(annotation_file.source_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(annotation_file.to_dict(), indent=2), encoding="utf-8")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, source_file: str, semantic_path: str, body: str, author: str) -> Annotation:
        annotation_file = self.load(source_file)
        now = self._clock()
        annotation = Annotation(
            id=self._id_factory(),
            body=body,
            author=author,
            created=now,
            updated=now,
        )
        annotation_file.annotations.setdefault(semantic_path, []).append(annotation)
        self.save(annotation_file)
        logger.debug("Added annotation %s at %s:%s", annotation.id, source_file, semantic_path)
        return annotation

    def update(
        self,
        source_file: str,
        semantic_path: str,
        annotation_id: str,
        body: str,
    ) -> Optional[Annotation]:
        annotation_file = self.load(source_file)
        annotation = _find(annotation_file.annotations.get(semantic_path, []), annotation_id)
        if annotation is None:
            return None
        annotation.body = body
        annotation.updated = max(self._clock(), annotation.updated, annotation.created)
        self.save(annotation_file)
        return annotation

    def remove(self, source_file: str, semantic_path: str, annotation_id: str) -> bool:
        annotation_file = self.load(source_file)
        items = annotation_file.annotations.get(semantic_path)
        if not items:
            return False
        annotation = _find(items, annotation_id)
        if annotation is None:
            return False
        items.remove(annotation)
        if not items:
            del annotation_file.annotations[semantic_path]
        self.save(annotation_file)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_paths(self, source_file: str) -> List[str]:
        return list(self.load(source_file).annotations)

    def get_for_path(self, source_file: str, semantic_path: str) -> List[Annotation]:
        return list(self.load(source_file).annotations.get(semantic_path, []))

    def list_annotated_files(self) -> List[str]:
        """Source files (relative, POSIX separators) that have stored annotations."""
        if not self.syl_dir.exists():
            return []
        files: List[str] = []
        for path in sorted(self.syl_dir.rglob(f"*{ANNOTATION_SUFFIX}")):
            if not path.is_file():
                continue
            rel = path.relative_to(self.syl_dir).as_posix()
            files.append(rel[: -len(ANNOTATION_SUFFIX)])
        return files


def _find(items: List[Annotation], annotation_id: str) -> Optional[Annotation]:
    for item in items:
        if item.id == annotation_id:
            return item
    return None
