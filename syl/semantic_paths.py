"""Semantic path builder.

Walks a tree-sitter syntax tree and gives every named path-bearing
declaration a dot-delimited path such as ``Foo.bar``. Sibling
declarations sharing a name are disambiguated as ``name[1]``,
``name[2]``... in source order; a name that is unique within its scope
stays bare.

Two passes are made over the tree. The first counts names per scope, the
second builds nodes knowing the totals up front, so no emitted path ever
has to be rewritten. Scopes are identified by the pre-order ordinal of
their declaration node, which both passes compute identically.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from .languages import LanguagePathConfig
from .models import SemanticNode, SemanticPathResult

logger = logging.getLogger(__name__)

TOP_SCOPE = -1


def _root_of(tree: Any) -> Any:
    return getattr(tree, "root_node", tree)


def _line_span(node: Any, wrapper: Optional[Any]) -> Tuple[int, int]:
    outer = wrapper if wrapper is not None else node
    return outer.start_point[0] + 1, outer.end_point[0] + 1


# ===================================================================
# Pass 1: name totals per scope
# ===================================================================

def count_sibling_names(root: Any, config: LanguagePathConfig) -> Dict[int, Dict[str, int]]:
    """Return ``{scope ordinal: {name: occurrences}}`` for the whole tree."""
    totals: Dict[int, Dict[str, int]] = {}
    ordinal = 0
    stack: List[Tuple[Any, int]] = [(root, TOP_SCOPE)]

    while stack:
        node, scope = stack.pop()
        child_scope = scope
        if config.is_path_node(node.type):
            name = config.get_node_name(node)
            if name is not None:
                scope_counts = totals.setdefault(scope, {})
                scope_counts[name] = scope_counts.get(name, 0) + 1
                child_scope = ordinal
                ordinal += 1
        for child in reversed(node.children):
            stack.append((child, child_scope))

    return totals


# ===================================================================
# Pass 2: build nodes, paths and the line index
# ===================================================================

class _Scope:
    """Per-scope state carried down the walk."""

    __slots__ = ("ordinal", "path", "children", "seen")

    def __init__(self, ordinal: int, path: str, children: List[SemanticNode]) -> None:
        self.ordinal = ordinal
        self.path = path
        self.children = children
        self.seen: Dict[str, int] = {}


def build_semantic_paths(
    tree: Any,
    source_text: str,
    config: LanguagePathConfig,
) -> SemanticPathResult:
    """Compute the path map, root nodes and line index for *tree*.

    *tree* may be a tree-sitter ``Tree`` or a bare root node. Anything
    exposing ``type``, ``start_point``, ``end_point``, ``children`` and
    ``child_by_field_name`` works.
    """
    root = _root_of(tree)
    totals = count_sibling_names(root, config)
    result = SemanticPathResult()

    ordinal = 0
    top = _Scope(TOP_SCOPE, "", result.roots)
    stack: List[Tuple[Any, _Scope, Optional[Any]]] = [(root, top, None)]

    while stack:
        node, scope, wrapper = stack.pop()
        inner_scope = scope

        if config.is_path_node(node.type):
            name = config.get_node_name(node)
            if name is not None:
                total = totals.get(scope.ordinal, {}).get(name, 1)
                seen = scope.seen.get(name, 0) + 1
                scope.seen[name] = seen
                segment = f"{name}[{seen}]" if total > 1 else name
                path = f"{scope.path}.{segment}" if scope.path else segment

                start_line, end_line = _line_span(node, wrapper)
                semantic_node = SemanticNode(
                    path=path,
                    name=name,
                    kind=node.type,
                    start_line=start_line,
                    end_line=end_line,
                )
                scope.children.append(semantic_node)
                result.path_map[path] = semantic_node
                for line in range(start_line, end_line + 1):
                    result.line_to_path.setdefault(line, []).append(path)

                inner_scope = _Scope(ordinal, path, semantic_node.children)
                ordinal += 1

        child_wrapper = node if node.type in config.span_wrappers else None
        for child in reversed(node.children):
            stack.append((child, inner_scope, child_wrapper))

    logger.debug(
        "Built %d semantic paths (%d roots) for %s source",
        len(result.path_map), len(result.roots), config.id,
    )
    return result


# ===================================================================
# Lookup helpers
# ===================================================================

def paths_at_line(result: SemanticPathResult, line: int) -> List[str]:
    """Paths covering 1-based *line*, outermost first."""
    return list(result.line_to_path.get(line, []))


def innermost_path_at_line(result: SemanticPathResult, line: int) -> Optional[str]:
    paths = result.line_to_path.get(line)
    return paths[-1] if paths else None


def node_source(source_text: str, node: SemanticNode) -> str:
    """Return the source lines spanned by *node*.

    Lines are split on newline characters only, the way tree-sitter counts rows.
    """
    lines = [line.rstrip("\r") for line in source_text.split("\n")]
    return "\n".join(lines[node.start_line - 1: node.end_line])
