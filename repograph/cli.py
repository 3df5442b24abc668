"""Typer-based CLI for repograph structure scanning."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.text import Text
from rich.tree import Tree

from . import __version__
from .cli_common import load_settings
from .cli_watch import watch
from .config_manager import load_scan_config, save_scan_config
from .errors import ConfigError, NodeNotFoundError
from .excerpt import snapshot_excerpt
from .graph_export import render_dot, render_json
from .models import GraphSnapshot, NodeType
from .walker import RepositoryWalker, WalkResult

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Repository structure graphs: folders, files, classes and functions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Inspect and edit scan configuration.", no_args_is_help=True)
app.add_typer(config_app, name="config")
app.command("watch")(watch)

FORMATS = ("tree", "json", "dot")

_TREE_STYLES = {
    NodeType.FOLDER: "bold blue",
    NodeType.FILE: "cyan",
    NodeType.CLASS: "magenta",
    NodeType.FUNCTION: "green",
}


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"repograph v{__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route the package's log records to stderr through rich."""
    pkg_logger = logging.getLogger("repograph")
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        handler = RichHandler(console=err_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        pkg_logger.addHandler(handler)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    """repograph: indentation-based structure index of a source tree."""
    configure_logging(verbose)


def render_tree(snapshot: GraphSnapshot) -> Tree:
    """Build a rich tree mirroring the containment edges."""
    root = snapshot.root
    if root is None:
        return Tree(Text("(empty)"))

    def label_for(node) -> Text:
        text = Text(node.label, style=_TREE_STYLES.get(node.node_type, ""))
        if node.node_type in NodeType.DEFINITIONS:
            text.append(f"  {node.node_type} {node.start_line}-{node.end_line}", style="dim")
        return text

    branches = {root.node_id: Tree(label_for(root))}
    for node in snapshot.nodes[1:]:
        parent = branches[node.parent_id]
        branches[node.node_id] = parent.add(label_for(node))
    return branches[root.node_id]


def _report_skipped(result: WalkResult) -> None:
    count = len(result.skipped)
    if count:
        noun = "entry" if count == 1 else "entries"
        err_console.print(f"[yellow]Skipped {count} unreadable {noun}[/yellow]")


@app.command("scan")
def scan(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Directory to scan."),
    fmt: str = typer.Option("tree", "--format", "-f", help="Output format: tree, json or dot."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output to this file."),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Extra entry name to exclude (repeatable)."),
    snippet_lines: Optional[int] = typer.Option(None, "--snippet-lines", min=0, help="Lines kept per definition snippet."),
    tab_width: Optional[int] = typer.Option(None, "--tab-width", min=1, help="Indentation width of one tab."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate config.toml."),
):
    """Scan a directory and print its structure graph."""
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise typer.BadParameter(f"Format must be one of: {', '.join(FORMATS)}")

    settings = load_settings(config_path, exclude, snippet_lines, tab_width)
    result = RepositoryWalker(settings).walk(path.resolve())
    snapshot = result.snapshot

    if fmt == "json":
        rendered = render_json(snapshot)
    elif fmt == "dot":
        rendered = render_dot(snapshot)
    else:
        rendered = None

    if output is not None:
        if rendered is None:
            with open(output, "w", encoding="utf-8") as f:
                Console(file=f, width=120, no_color=True).print(render_tree(snapshot))
        else:
            output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Wrote {len(snapshot.nodes)} nodes and {len(snapshot.edges)} edges to {output}")
    elif rendered is None:
        console.print(render_tree(snapshot))
    else:
        typer.echo(rendered)

    _report_skipped(result)


@app.command("show")
def show(
    path: Path = typer.Argument(..., exists=True, file_okay=False, help="Directory to scan."),
    node_id: str = typer.Argument(..., help="Node id as printed by 'repograph scan -f json'."),
    context: int = typer.Option(0, "--context", "-c", min=0, help="Extra lines around the block."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate config.toml."),
):
    """Print the source lines spanned by one definition node."""
    settings = load_settings(config_path)
    snapshot = RepositoryWalker(settings).walk(path.resolve()).snapshot
    try:
        excerpt = snapshot_excerpt(snapshot, node_id, context=context, settings=settings)
    except NodeNotFoundError as exc:
        err_console.print(f"[red]✗[/red] {exc}")
        raise typer.Exit(code=1)
    except (OSError, UnicodeDecodeError) as exc:
        err_console.print(f"[red]✗[/red] Could not read {snapshot.get_node(node_id).source_path}: {exc}")
        raise typer.Exit(code=1)

    typer.echo(f"{excerpt.source_path}:{excerpt.first_line + 1}-{excerpt.last_line + 1}")
    console.print(Syntax(
        excerpt.text,
        "python",
        line_numbers=True,
        start_line=excerpt.first_line + 1,
    ))


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate config.toml."),
):
    """Print the effective scan settings."""
    settings = load_settings(config_path)
    typer.echo(f"exclude:        {', '.join(settings.exclude)}")
    typer.echo(f"extensions:     {', '.join(settings.extensions)}")
    typer.echo(f"snippet_lines:  {settings.snippet_lines}")
    typer.echo(f"tab_width:      {settings.tab_width}")
    typer.echo(f"encoding:       {settings.encoding}")
    typer.echo(f"follow_symlinks: {settings.follow_symlinks}")


@config_app.command("set-exclude")
def config_set_exclude(
    names: List[str] = typer.Argument(..., help="Entry names to add to the exclude list."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate config.toml."),
):
    """Persist extra excluded names in the [scan] section."""
    try:
        current = list(load_scan_config(config_path).get("exclude", []))
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
    for name in names:
        if name not in current:
            current.append(name)
    written = save_scan_config({"exclude": current}, config_path)
    typer.echo(f"Saved exclude list ({len(current)} entries) to {written}")


if __name__ == "__main__":
    app()
