"""Typer-based CLI for syl structural annotations."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from . import __version__, config
from .config_manager import load_project_config, save_project_config
from .languages import LanguagePathConfig, LanguageRegistry, default_registry
from .models import SemanticNode, SemanticPathResult
from .orphans import detect_orphans, group_orphans_by_path
from .parser import GrammarUnavailableError, TreeSitterParser
from .resolver import resolve_annotations
from .semantic_paths import build_semantic_paths, paths_at_line
from .storage import AnnotationStore

console = Console()

app = typer.Typer(
    help="syl: notes anchored to code by semantic path, not line number.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

annotate_app = typer.Typer(help="Add, edit, remove and list annotations.", no_args_is_help=True)
app.add_typer(annotate_app, name="annotate")


@dataclass
class _State:
    root: Path
    registry: LanguageRegistry
    parser: TreeSitterParser
    store: AnnotationStore
    author: str


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"syl v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    root: Path = typer.Option(
        config.PROJECT_ROOT,
        "--root",
        "-r",
        file_okay=False,
        help="Project root (env: SYL_PROJECT_ROOT).",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
):
    """syl: structural code annotations that survive edits."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    resolved_root = root.expanduser().resolve()
    syl_dir = config.syl_dir_for(resolved_root)
    settings = load_project_config(syl_dir)
    ctx.obj = _State(
        root=resolved_root,
        registry=default_registry(),
        parser=TreeSitterParser(),
        store=AnnotationStore(syl_dir),
        author=str(settings.get("author") or config.DEFAULT_AUTHOR),
    )


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _relative_source(state: _State, file: str) -> str:
    path = Path(file)
    if not path.is_absolute():
        path = state.root / path
    try:
        return path.resolve().relative_to(state.root).as_posix()
    except ValueError:
        raise typer.BadParameter(f"'{file}' is outside the project root {state.root}.")


def _language_for(state: _State, rel_file: str) -> LanguagePathConfig:
    lang = state.registry.lookup(rel_file)
    if lang is None:
        typer.echo(f"Unsupported file type: {rel_file}", err=True)
        raise typer.Exit(code=2)
    return lang


def _analyze(state: _State, rel_file: str) -> SemanticPathResult:
    """Parse the current text of *rel_file* and build its semantic paths."""
    lang = _language_for(state, rel_file)
    source_path = state.root / rel_file
    if not source_path.is_file():
        raise typer.BadParameter(f"File '{rel_file}' not found under {state.root}.")
    source = source_path.read_text(encoding="utf-8", errors="ignore")
    try:
        tree = state.parser.parse(source, lang)
    except GrammarUnavailableError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    return build_semantic_paths(tree, source, lang)


def _add_branch(branch: Tree, node: SemanticNode) -> None:
    child = branch.add(f"[bold]{escape(node.path)}[/bold]  [dim]{node.kind} {node.start_line}-{node.end_line}[/dim]")
    for sub in node.children:
        _add_branch(child, sub)


def _iter_project_files(root: Path, registry: LanguageRegistry) -> List[str]:
    found: List[str] = []
    for path in sorted(root.rglob("*")):
        rel_parts = path.relative_to(root).parts
        if any(part in config.SKIP_DIRS or part.startswith(".") for part in rel_parts[:-1]):
            continue
        if path.is_file() and registry.lookup(path.name) is not None:
            found.append(path.relative_to(root).as_posix())
    return found


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------

@app.command("init")
def init_project(
    ctx: typer.Context,
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Default author for new annotations."),
):
    """Create the .syl directory and its config.toml."""
    state: _State = ctx.obj
    syl_dir = config.ensure_syl_dir(state.root)
    section = save_project_config(syl_dir, version=1, root_dir=".", author=author or state.author)
    typer.echo(f"Initialised {syl_dir} (author: {section['author']})")


@app.command("languages")
def languages(ctx: typer.Context):
    """List languages with semantic path support."""
    state: _State = ctx.obj
    table = Table(title="Languages")
    table.add_column("Language")
    table.add_column("Extensions")
    table.add_column("Path-bearing nodes")
    for lang in state.registry.list_all():
        table.add_row(lang.id, " ".join(lang.extensions), ", ".join(lang.path_node_types))
    console.print(table)


@app.command("files")
def files(ctx: typer.Context):
    """List annotatable source files under the project root."""
    state: _State = ctx.obj
    found = _iter_project_files(state.root, state.registry)
    if not found:
        typer.echo("No supported source files found.")
        raise typer.Exit(code=0)
    annotated = set(state.store.list_annotated_files())
    for rel in found:
        marker = "*" if rel in annotated else " "
        typer.echo(f"{marker} {rel}")


@app.command("paths")
def paths(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    as_json: bool = typer.Option(False, "--json", help="Print the node tree as JSON."),
):
    """Show the semantic path tree of a file."""
    state: _State = ctx.obj
    rel = _relative_source(state, file)
    result = _analyze(state, rel)
    if as_json:
        typer.echo(json.dumps([node.to_dict() for node in result.roots], indent=2))
        return
    if not result.roots:
        typer.echo("No path-bearing declarations found.")
        return
    tree = Tree(escape(rel))
    for node in result.roots:
        _add_branch(tree, node)
    console.print(tree)


@app.command("at")
def at_line(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    line: int = typer.Argument(..., min=1, help="1-based line number."),
):
    """Print the semantic paths covering a line, outermost first."""
    state: _State = ctx.obj
    result = _analyze(state, _relative_source(state, file))
    covering = paths_at_line(result, line)
    if not covering:
        typer.echo(f"No declaration covers line {line}.")
        return
    for path in covering:
        typer.echo(path)


@app.command("resolve")
def resolve(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    as_json: bool = typer.Option(False, "--json", help="Print annotations, nodes and orphans as JSON."),
):
    """Resolve stored annotations against the current source."""
    state: _State = ctx.obj
    rel = _relative_source(state, file)
    result = _analyze(state, rel)
    annotation_file = state.store.load(rel)
    resolved = resolve_annotations(annotation_file, result)

    if as_json:
        report = detect_orphans(resolved)
        payload = {
            "annotations": annotation_file.to_dict()["annotations"],
            "nodes": [node.to_dict() for node in result.roots],
            "orphans": [
                {"path": path, "annotations": [a.to_dict() for a in items]}
                for path, items in group_orphans_by_path(report).items()
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if not resolved:
        typer.echo(f"No annotations stored for {rel}.")
        return
    table = Table(title=rel)
    table.add_column("Path")
    table.add_column("Lines")
    table.add_column("Id")
    table.add_column("Author")
    table.add_column("Note")
    for item in resolved:
        lines = "orphaned" if item.node is None else f"{item.node.start_line}-{item.node.end_line}"
        table.add_row(escape(item.path), lines, item.annotation.id, escape(item.annotation.author), escape(item.annotation.body))
    console.print(table)


@app.command("orphans")
def orphans(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    strict: bool = typer.Option(False, "--strict", help="Exit with code 1 when orphans exist."),
):
    """Report annotations whose declaration no longer exists."""
    state: _State = ctx.obj
    rel = _relative_source(state, file)
    result = _analyze(state, rel)
    report = detect_orphans(resolve_annotations(state.store.load(rel), result))

    typer.echo(f"Orphans: {report.orphan_count} of {report.total} annotations")
    for path, items in group_orphans_by_path(report).items():
        typer.echo(f"- {path}")
        for annotation in items:
            typer.echo(f"    [{annotation.id}] {annotation.body}")
    if strict and report.orphan_count:
        raise typer.Exit(code=1)


# ------------------------------------------------------------------
# annotate sub-commands
# ------------------------------------------------------------------

@annotate_app.command("add")
def annotate_add(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    path: str = typer.Argument(..., help="Semantic path, e.g. Foo.bar"),
    body: str = typer.Argument(..., help="Annotation text."),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Author name."),
):
    """Attach a note to a semantic path."""
    state: _State = ctx.obj
    if not body.strip():
        raise typer.BadParameter("Annotation body must not be empty.")
    annotation = state.store.add(_relative_source(state, file), path, body, author or state.author)
    typer.echo(f"Added {annotation.id} to {path}")


@annotate_app.command("update")
def annotate_update(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    path: str = typer.Argument(..., help="Semantic path the note is stored under."),
    annotation_id: str = typer.Argument(..., help="Annotation id."),
    body: str = typer.Argument(..., help="New annotation text."),
):
    """Replace the text of a note."""
    state: _State = ctx.obj
    if not body.strip():
        raise typer.BadParameter("Annotation body must not be empty.")
    annotation = state.store.update(_relative_source(state, file), path, annotation_id, body)
    if annotation is None:
        typer.echo(f"Annotation '{annotation_id}' not found at {path}.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Updated {annotation.id}")


@annotate_app.command("remove")
def annotate_remove(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
    path: str = typer.Argument(..., help="Semantic path the note is stored under."),
    annotation_id: str = typer.Argument(..., help="Annotation id."),
):
    """Delete a note."""
    state: _State = ctx.obj
    if not state.store.remove(_relative_source(state, file), path, annotation_id):
        typer.echo(f"Annotation '{annotation_id}' not found at {path}.", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Removed {annotation_id}")


@annotate_app.command("list")
def annotate_list(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Source file, relative to the project root."),
):
    """List stored notes for a file without parsing it."""
    state: _State = ctx.obj
    annotation_file = state.store.load(_relative_source(state, file))
    if not annotation_file.annotations:
        typer.echo("No annotations.")
        return
    for path, items in annotation_file.annotations.items():
        typer.echo(path)
        for annotation in items:
            typer.echo(f"  [{annotation.id}] {annotation.author}: {annotation.body}")


if __name__ == "__main__":
    app()
