"""Read code excerpts for definition nodes by line range."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config_manager import ScanSettings
from .models import GraphSnapshot, Node
from .parser import split_lines


@dataclass(frozen=True)
class Excerpt:
    source_path: str
    first_line: int
    lines: List[str]

    @property
    def last_line(self) -> int:
        return self.first_line + len(self.lines) - 1

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def numbered(self) -> str:
        """Lines prefixed with their 1-based line numbers."""
        width = len(str(self.last_line + 1))
        return "\n".join(
            f"{self.first_line + offset + 1:>{width}}  {line}"
            for offset, line in enumerate(self.lines)
        )


def read_excerpt(
    node: Node,
    context: int = 0,
    settings: Optional[ScanSettings] = None,
) -> Excerpt:
    """Return the lines spanned by *node*, widened by *context* lines.

    Folder and file nodes have no line range; a file node yields the whole
    file and a folder node raises ``IsADirectoryError`` from the read.
    The file is decoded with the encoding from *settings*. Read errors
    propagate to the caller.
    """
    encoding = (settings or ScanSettings()).encoding
    lines = split_lines(Path(node.source_path).read_text(encoding=encoding))
    if not lines:
        return Excerpt(source_path=node.source_path, first_line=0, lines=[])

    if node.end_line is None:
        start, end = 0, len(lines) - 1
    else:
        start, end = node.start_line, node.end_line

    first = max(start - context, 0)
    last = min(end + context, len(lines) - 1)
    return Excerpt(source_path=node.source_path, first_line=first, lines=lines[first:last + 1])


def snapshot_excerpt(
    snapshot: GraphSnapshot,
    node_id: str,
    context: int = 0,
    settings: Optional[ScanSettings] = None,
) -> Excerpt:
    """Look up *node_id* in *snapshot* and read its excerpt.

    Raises:
        NodeNotFoundError: if the id is not part of the snapshot.
    """
    node = snapshot.get_node(node_id)
    return read_excerpt(node, context=context, settings=settings)
