"""Core data models for repository structure snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import GraphInvariantError, NodeNotFoundError


class NodeType:
    FOLDER = "folder"
    FILE = "file"
    CLASS = "class"
    FUNCTION = "function"

    DEFINITIONS = (CLASS, FUNCTION)


CONTAINS = "contains"


@dataclass(frozen=True)
class Node:
    node_id: str
    label: str
    node_type: str
    source_path: str
    start_line: int = 0
    end_line: Optional[int] = None
    parent_id: Optional[str] = None
    snippet: Optional[str] = None

    @property
    def is_definition(self) -> bool:
        return self.node_type in NodeType.DEFINITIONS

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            "id": self.node_id,
            "label": self.label,
            "kind": self.node_type,
            "sourcePath": self.source_path,
            "startLine": self.start_line,
            "parentId": self.parent_id,
        }
        if self.end_line is not None:
            data["endLine"] = self.end_line
        if self.snippet is not None:
            data["snippet"] = self.snippet
        return data


@dataclass(frozen=True)
class Edge:
    src: str
    dst: str
    edge_type: str = CONTAINS

    def to_dict(self) -> Dict[str, str]:
        return {"source": self.src, "target": self.dst, "relationship": self.edge_type}


def folder_id(path: str) -> str:
    return f"{NodeType.FOLDER}:{path}"


def file_id(path: str) -> str:
    return f"{NodeType.FILE}:{path}"


def definition_id(node_type: str, path: str, start_line: int, name: str) -> str:
    return f"{node_type}:{path}:{start_line}:{name}"


@dataclass(frozen=True)
class SnapshotDiff:
    added: Tuple[str, ...]
    removed: Tuple[str, ...]

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable result of one full scan.

    ``nodes`` are in visitation order, so every parent precedes its
    children. ``edges`` mirror ``Node.parent_id`` one-to-one.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    _index: Dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {n.node_id: n for n in self.nodes})

    @property
    def root(self) -> Optional[Node]:
        return self.nodes[0] if self.nodes else None

    @property
    def node_ids(self) -> frozenset:
        return frozenset(self._index)

    def get_node(self, node_id: str) -> Node:
        try:
            return self._index[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def children_of(self, node_id: str) -> List[Node]:
        return [n for n in self.nodes if n.parent_id == node_id]

    def diff(self, previous: "GraphSnapshot") -> SnapshotDiff:
        """Node ids present here but not in *previous*, and vice versa."""
        return SnapshotDiff(
            added=tuple(sorted(self.node_ids - previous.node_ids)),
            removed=tuple(sorted(previous.node_ids - self.node_ids)),
        )

    def to_dict(self) -> Dict[str, list]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


class GraphBuilder:
    """Append-only accumulator owned by a single scan.

    Adding a node derives its containment edge from ``parent_id``.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self._ids: set[str] = set()
        self._has_root = False

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: Node) -> Node:
        if node.node_id in self._ids:
            raise GraphInvariantError(f"Duplicate node id: {node.node_id}")
        if node.parent_id is None:
            if self._has_root:
                raise GraphInvariantError(f"Second root node: {node.node_id}")
            self._has_root = True
        elif node.parent_id not in self._ids:
            raise GraphInvariantError(
                f"Parent {node.parent_id} of {node.node_id} has not been emitted"
            )
        if node.end_line is not None and node.start_line > node.end_line:
            raise GraphInvariantError(
                f"{node.node_id} ends ({node.end_line}) before it starts ({node.start_line})"
            )

        self._ids.add(node.node_id)
        self._nodes.append(node)
        if node.parent_id is not None:
            self._edges.append(Edge(src=node.parent_id, dst=node.node_id))
        return node

    def extend(self, nodes: List[Node]) -> None:
        for node in nodes:
            self.add(node)

    def build(self) -> GraphSnapshot:
        return GraphSnapshot(nodes=tuple(self._nodes), edges=tuple(self._edges))
