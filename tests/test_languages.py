"""Tests for language path configurations and the registry."""

from syl.languages import (
    JAVASCRIPT,
    PYTHON,
    TSX,
    TYPESCRIPT,
    LanguagePathConfig,
    LanguageRegistry,
    default_registry,
    file_extension,
)


def _config(lang_id, *extensions):
    return LanguagePathConfig(
        id=lang_id,
        extensions=extensions,
        path_node_types=("function",),
        grammar_module=f"tree_sitter_{lang_id}",
    )


class _Named:
    def __init__(self, fields):
        self._fields = fields

    def child_by_field_name(self, name):
        return self._fields.get(name)


class _Text:
    def __init__(self, text):
        self.text = text


def test_lookup_by_extension():
    registry = default_registry()

    assert registry.lookup("src/parser.ts") is TYPESCRIPT
    assert registry.lookup("src/App.tsx") is TSX
    assert registry.lookup("lib/index.mjs") is JAVASCRIPT
    assert registry.lookup("pkg/module.py") is PYTHON


def test_lookup_unsupported_returns_none():
    registry = default_registry()

    assert registry.lookup("README.md") is None
    assert registry.lookup("Makefile") is None
    assert registry.lookup("weird.") is None
    assert registry.lookup("dir.d/Makefile") is None


def test_lookup_uses_last_dot():
    registry = default_registry()
    assert registry.lookup("archive.test.py") is PYTHON
    assert registry.lookup("types.d.ts") is TYPESCRIPT


def test_last_registration_wins():
    registry = LanguageRegistry()
    first = _config("alpha", ".x")
    second = _config("beta", ".x")
    registry.register(first)
    registry.register(second)

    assert registry.lookup("file.x") is second


def test_list_all_dedupes_by_id():
    registry = LanguageRegistry()
    registry.register(_config("one", ".a", ".b", ".c"))
    registry.register(_config("two", ".d"))

    assert [c.id for c in registry.list_all()] == ["one", "two"]


def test_list_all_drops_fully_overwritten_language():
    registry = LanguageRegistry()
    registry.register(_config("old", ".q"))
    registry.register(_config("new", ".q"))

    assert [c.id for c in registry.list_all()] == ["new"]


def test_default_registry_contents():
    registry = default_registry()

    assert [c.id for c in registry.list_all()] == ["typescript", "tsx", "javascript", "python"]
    assert ".py" in registry.supported_extensions()
    assert ".cjs" in registry.supported_extensions()


def test_registries_are_isolated():
    a = LanguageRegistry()
    b = LanguageRegistry()
    a.register(_config("only_a", ".oa"))

    assert a.lookup("x.oa") is not None
    assert b.lookup("x.oa") is None


def test_file_extension():
    assert file_extension("a/b/c.PY") == ".py"
    assert file_extension("C:\\src\\main.ts") == ".ts"
    assert file_extension(".bashrc") == ".bashrc"
    assert file_extension("noext") is None


def test_get_node_name_decodes_bytes():
    node = _Named({"name": _Text(b"parse_file")})
    assert PYTHON.get_node_name(node) == "parse_file"


def test_get_node_name_missing_or_empty():
    assert PYTHON.get_node_name(_Named({})) is None
    assert PYTHON.get_node_name(_Named({"name": _Text(b"")})) is None


def test_is_path_node():
    assert PYTHON.is_path_node("class_definition")
    assert not PYTHON.is_path_node("decorated_definition")
    assert TYPESCRIPT.is_path_node("interface_declaration")
    assert not JAVASCRIPT.is_path_node("interface_declaration")
