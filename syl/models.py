"""Core data models shared by the path builder, resolver, and store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ANNOTATION_FILE_VERSION = 1


@dataclass
class SemanticNode:
    path: str
    name: str
    kind: str
    start_line: int
    end_line: int
    children: List["SemanticNode"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "name": self.name,
            "kind": self.kind,
            "startLine": self.start_line,
            "endLine": self.end_line,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class SemanticPathResult:
    """Output of one path build.

    ``path_map`` is flat, ``roots`` holds top-level declarations in source
    order, and ``line_to_path`` lists every path covering a 1-based line,
    outermost first.
    """

    path_map: Dict[str, SemanticNode] = field(default_factory=dict)
    roots: List[SemanticNode] = field(default_factory=list)
    line_to_path: Dict[int, List[str]] = field(default_factory=dict)


@dataclass
class Annotation:
    id: str
    body: str
    author: str
    created: str
    updated: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "body": self.body,
            "author": self.author,
            "created": self.created,
            "updated": self.updated,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Annotation":
        created = str(payload.get("created", ""))
        return cls(
            id=str(payload.get("id", "")),
            body=str(payload.get("body", "")),
            author=str(payload.get("author", "")),
            created=created,
            updated=str(payload.get("updated", created)),
        )


@dataclass
class AnnotationFile:
    source_file: str
    annotations: Dict[str, List[Annotation]] = field(default_factory=dict)
    version: int = ANNOTATION_FILE_VERSION

    def count(self) -> int:
        return sum(len(items) for items in self.annotations.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "sourceFile": self.source_file,
            "annotations": {
                path: [a.to_dict() for a in items]
                for path, items in self.annotations.items()
                if items
            },
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], source_file: str = "") -> "AnnotationFile":
        """Build from the persisted JSON shape.

        Entries that are not lists of objects are dropped instead of raising,
        and empty lists are pruned.
        """
        raw = payload.get("annotations")
        annotations: Dict[str, List[Annotation]] = {}
        if isinstance(raw, dict):
            for path, items in raw.items():
                if not isinstance(items, list):
                    continue
                parsed = [Annotation.from_dict(item) for item in items if isinstance(item, dict)]
                if parsed:
                    annotations[str(path)] = parsed
        version = payload.get("version", ANNOTATION_FILE_VERSION)
        return cls(
            source_file=str(payload.get("sourceFile") or source_file),
            annotations=annotations,
            version=version if isinstance(version, int) else ANNOTATION_FILE_VERSION,
        )


@dataclass
class ResolvedAnnotation:
    annotation: Annotation
    path: str
    node: Optional[SemanticNode]
    orphaned: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "annotation": self.annotation.to_dict(),
            "path": self.path,
            "node": self.node.to_dict() if self.node is not None else None,
            "orphaned": self.orphaned,
        }


@dataclass
class OrphanReport:
    orphans: List[ResolvedAnnotation]
    total: int
    orphan_count: int
