"""Pytest configuration and fixtures for syl tests."""

import itertools
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional

import pytest

from syl.languages import LanguagePathConfig, LanguageRegistry, default_registry
from syl.storage import AnnotationStore


class FakeNode:
    """Minimal stand-in for a tree-sitter node.

    Rows are 0-based like tree-sitter's ``start_point``/``end_point``.
    """

    def __init__(
        self,
        type: str,
        start_row: int,
        end_row: int,
        children: Optional[List["FakeNode"]] = None,
        fields: Optional[Dict[str, "FakeNode"]] = None,
        text: bytes = b"",
    ) -> None:
        self.type = type
        self.start_point = (start_row, 0)
        self.end_point = (end_row, 0)
        self.children = list(children or [])
        self._fields = dict(fields or {})
        self.text = text

    def child_by_field_name(self, name: str) -> Optional["FakeNode"]:
        return self._fields.get(name)


class FakeTree:
    def __init__(self, root_node: FakeNode) -> None:
        self.root_node = root_node


FAKE_LANGUAGE = LanguagePathConfig(
    id="fake",
    extensions=(".fake",),
    path_node_types=("function", "class", "method"),
    grammar_module="tree_sitter_fake",
    span_wrappers=("decorated",),
)


@pytest.fixture
def fake_language() -> LanguagePathConfig:
    return FAKE_LANGUAGE


@pytest.fixture
def decl() -> Callable[..., FakeNode]:
    """Build a declaration node spanning 1-based *start*..*end*.

    Pass ``name=None`` for a declaration without a name child.
    """

    def _decl(kind: str, name: Optional[str], start: int, end: int, *children: FakeNode) -> FakeNode:
        fields = {}
        all_children = list(children)
        if name is not None:
            ident = FakeNode("identifier", start - 1, start - 1, text=name.encode("utf-8"))
            fields["name"] = ident
            all_children.insert(0, ident)
        return FakeNode(kind, start - 1, end - 1, children=all_children, fields=fields)

    return _decl


@pytest.fixture
def block() -> Callable[..., FakeNode]:
    """Build a non-path-bearing node wrapping *children*."""

    def _block(kind: str, start: int, end: int, *children: FakeNode) -> FakeNode:
        return FakeNode(kind, start - 1, end - 1, children=list(children))

    return _block


@pytest.fixture
def module() -> Callable[..., FakeTree]:
    def _module(*children: FakeNode, lines: int = 100) -> FakeTree:
        return FakeTree(FakeNode("module", 0, lines - 1, children=list(children)))

    return _module


@pytest.fixture
def registry() -> LanguageRegistry:
    return default_registry()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def fixed_clock() -> Callable[[], str]:
    """Clock returning increasing second-resolution timestamps."""
    ticks = itertools.count()
    return lambda: f"2024-01-01T00:00:{next(ticks):02d}.000Z"


@pytest.fixture
def store(temp_dir: Path, fixed_clock) -> AnnotationStore:
    ids = (f"id{n}" for n in itertools.count(1))
    return AnnotationStore(temp_dir / ".syl", clock=fixed_clock, id_factory=lambda: next(ids))


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample test project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_project(temp_dir: Path, sample_project_path: Path) -> Path:
    """Writable copy of the sample project."""
    dest = temp_dir / "project"
    shutil.copytree(sample_project_path, dest)
    return dest


@pytest.fixture
def sample_python_code() -> str:
    return '''"""Geometry helpers."""


def helper(x):
    return x


class Shape:
    """Base shape."""

    def area(self):
        return 0

    @property
    def name(self):
        return "shape"


def helper(x, y):
    def inner():
        return y
    return inner()


def main():
    return helper(1, 2)
'''
