"""Language path configurations and the registry that maps files to them."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LanguagePathConfig:
    """Describes which syntax nodes of a language form semantic path segments.

    ``grammar_module`` names the tree-sitter grammar wheel and
    ``grammar_function`` the callable in it that returns the language
    capsule. ``span_wrappers`` are node kinds (such as Python's
    ``decorated_definition``) whose span is used for the declaration they
    directly wrap.
    """

    id: str
    extensions: Tuple[str, ...]
    path_node_types: Tuple[str, ...]
    grammar_module: str
    grammar_function: str = "language"
    name_field: str = "name"
    span_wrappers: Tuple[str, ...] = ()

    def is_path_node(self, node_type: str) -> bool:
        return node_type in self.path_node_types

    def get_node_name(self, node: Any) -> Optional[str]:
        name_node = node.child_by_field_name(self.name_field)
        if name_node is None:
            return None
        text = name_node.text
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        return text or None


PYTHON = LanguagePathConfig(
    id="python",
    extensions=(".py",),
    path_node_types=("function_definition", "class_definition"),
    grammar_module="tree_sitter_python",
    span_wrappers=("decorated_definition",),
)

JAVASCRIPT = LanguagePathConfig(
    id="javascript",
    extensions=(".js", ".jsx", ".mjs", ".cjs"),
    path_node_types=(
        "function_declaration",
        "class_declaration",
        "method_definition",
        "variable_declarator",
    ),
    grammar_module="tree_sitter_javascript",
)

_TS_PATH_NODES = (
    "function_declaration",
    "class_declaration",
    "method_definition",
    "interface_declaration",
    "enum_declaration",
    "type_alias_declaration",
    "variable_declarator",
)

TYPESCRIPT = LanguagePathConfig(
    id="typescript",
    extensions=(".ts",),
    path_node_types=_TS_PATH_NODES,
    grammar_module="tree_sitter_typescript",
    grammar_function="language_typescript",
)

TSX = LanguagePathConfig(
    id="tsx",
    extensions=(".tsx",),
    path_node_types=_TS_PATH_NODES,
    grammar_module="tree_sitter_typescript",
    grammar_function="language_tsx",
)

BUILTIN_LANGUAGES: Tuple[LanguagePathConfig, ...] = (TYPESCRIPT, TSX, JAVASCRIPT, PYTHON)


def file_extension(file_path: str) -> Optional[str]:
    """Return ``.ext`` for the text after the last dot of the file name."""
    name = PurePosixPath(file_path.replace("\\", "/")).name
    idx = name.rfind(".")
    if idx == -1 or idx == len(name) - 1:
        return None
    return name[idx:].lower()


class LanguageRegistry:
    """Extension -> config lookup table.

    Registration overwrites silently (last writer wins). Build one per
    process at startup, or one per test.
    """

    def __init__(self) -> None:
        self._by_extension: Dict[str, LanguagePathConfig] = {}

    def register(self, config: LanguagePathConfig) -> None:
        for ext in config.extensions:
            self._by_extension[ext.lower()] = config

    def lookup(self, file_path: str) -> Optional[LanguagePathConfig]:
        ext = file_extension(file_path)
        if ext is None:
            return None
        return self._by_extension.get(ext)

    def list_all(self) -> List[LanguagePathConfig]:
        seen = set()
        configs: List[LanguagePathConfig] = []
        for config in self._by_extension.values():
            if config.id in seen:
                continue
            seen.add(config.id)
            configs.append(config)
        return configs

    def supported_extensions(self) -> List[str]:
        return sorted(self._by_extension)


def default_registry() -> LanguageRegistry:
    registry = LanguageRegistry()
    for config in BUILTIN_LANGUAGES:
        registry.register(config)
    return registry
