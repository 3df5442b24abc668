"""Snapshot export helpers for JSON and Graphviz DOT outputs."""

from __future__ import annotations

import json
from pathlib import Path

from .models import GraphSnapshot

_DOT_SHAPES = {
    "folder": "folder",
    "file": "note",
    "class": "box",
    "function": "ellipse",
}


def render_json(snapshot: GraphSnapshot, indent: int = 2) -> str:
    return json.dumps(snapshot.to_dict(), indent=indent)


def export_json(snapshot: GraphSnapshot, output_file: Path) -> None:
    output_file.write_text(render_json(snapshot), encoding="utf-8")


def render_dot(snapshot: GraphSnapshot) -> str:
    lines = ["digraph RepoGraph {"]
    lines.append("  rankdir=LR;")

    for node in snapshot.nodes:
        parts = [node.node_type, node.label]
        if node.end_line is not None:
            parts.append(f"{node.start_line}-{node.end_line}")
        label = "\\n".join(_esc(p) for p in parts)
        shape = _DOT_SHAPES.get(node.node_type, "box")
        lines.append(f'  "{_esc(node.node_id)}" [label="{label}", shape={shape}];')

    for edge in snapshot.edges:
        lines.append(
            f'  "{_esc(edge.src)}" -> "{_esc(edge.dst)}" [label="{_esc(edge.edge_type)}"];'
        )

    lines.append("}")
    return "\n".join(lines)


def export_dot(snapshot: GraphSnapshot, output_file: Path) -> None:
    output_file.write_text(render_dot(snapshot), encoding="utf-8")


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')
