"""Tree-sitter parse capability.

Grammars come from the per-language wheels (``tree-sitter-python``,
``tree-sitter-javascript``, ``tree-sitter-typescript``), each exposing a
function that returns the language capsule. Parsers are created lazily
and cached per language id.
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from tree_sitter import Language, Parser as TSParser

from .languages import LanguagePathConfig, LanguageRegistry
from .models import SemanticPathResult
from .semantic_paths import build_semantic_paths

logger = logging.getLogger(__name__)


class GrammarUnavailableError(RuntimeError):
    """Raised when the grammar wheel for a language cannot be loaded."""

    def __init__(self, config: LanguagePathConfig, reason: str) -> None:
        self.language = config.id
        self.grammar_module = config.grammar_module
        super().__init__(
            f"Grammar '{config.grammar_module}' for language '{config.id}' "
            f"is unavailable: {reason}"
        )


class TreeSitterParser:
    """Turns source text into a tree-sitter ``Tree`` for a language config."""

    def __init__(self) -> None:
        self._parsers: Dict[str, TSParser] = {}
        self._failures: Dict[str, str] = {}

    def _load(self, config: LanguagePathConfig) -> Optional[TSParser]:
        if config.id in self._parsers:
            return self._parsers[config.id]
        if config.id in self._failures:
            return None

        try:
            mod = importlib.import_module(config.grammar_module)
            capsule = getattr(mod, config.grammar_function)()
            parser = TSParser(Language(capsule))
        except ImportError:
            reason = f"install with: pip install {config.grammar_module.replace('_', '-')}"
            logger.warning(
                "Grammar package '%s' not installed for language '%s'. %s",
                config.grammar_module, config.id, reason,
            )
            self._failures[config.id] = reason
            return None
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("Could not load tree-sitter grammar for %s: %s", config.id, exc)
            self._failures[config.id] = str(exc)
            return None

        self._parsers[config.id] = parser
        logger.debug("Loaded tree-sitter parser for %s", config.id)
        return parser

    def supports(self, config: LanguagePathConfig) -> bool:
        return self._load(config) is not None

    def parse(self, source_text: str, config: LanguagePathConfig) -> Any:
        parser = self._load(config)
        if parser is None:
            raise GrammarUnavailableError(config, self._failures.get(config.id, "unknown error"))
        return parser.parse(source_text.encode("utf-8"))


def analyze_source(
    source_text: str,
    file_path: str,
    registry: LanguageRegistry,
    parser: TreeSitterParser,
) -> Optional[SemanticPathResult]:
    """Look up the language, parse, and build paths.

    Returns ``None`` when no language is registered for *file_path*.
    """
    config = registry.lookup(file_path)
    if config is None:
        return None
    tree = parser.parse(source_text, config)
    return build_semantic_paths(tree, source_text, config)


def analyze_file(
    file_path: Path,
    registry: LanguageRegistry,
    parser: TreeSitterParser,
) -> Optional[SemanticPathResult]:
    if registry.lookup(str(file_path)) is None:
        return None
    source = file_path.read_text(encoding="utf-8", errors="ignore")
    return analyze_source(source, str(file_path), registry, parser)
