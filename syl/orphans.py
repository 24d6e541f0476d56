"""Orphan detection over resolved annotations."""

from __future__ import annotations

from typing import Dict, List

from .models import Annotation, OrphanReport, ResolvedAnnotation


def detect_orphans(resolved: List[ResolvedAnnotation]) -> OrphanReport:
    orphans = [item for item in resolved if item.orphaned]
    return OrphanReport(orphans=orphans, total=len(resolved), orphan_count=len(orphans))


def group_orphans_by_path(report: OrphanReport) -> Dict[str, List[Annotation]]:
    """Orphaned annotations grouped under their stale path, order preserved."""
    grouped: Dict[str, List[Annotation]] = {}
    for item in report.orphans:
        grouped.setdefault(item.path, []).append(item.annotation)
    return grouped
