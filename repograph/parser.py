"""Indentation-driven structure scanner for Python source files.

This is a best-effort line classifier, not a parser. Each line is checked
for a leading ``class`` or ``def`` token; nesting and block extent are
inferred purely from leading whitespace. Known blind spots:

- ``async def`` lines are not recognized; decorators are ignored.
- Multi-line signatures whose continuation lines sit at or below the
  definition's indentation end the block early.
- Lines inside multi-line strings that start with ``class``/``def`` are
  taken as definitions.
- Blocks terminated by anything other than dedentation are mis-sized.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, NamedTuple, Optional

from . import config
from .models import Node, NodeType, definition_id

COMMENT_PREFIX = "#"

_DEFINITION_RE = re.compile(r"^(class|def)\s+([^\W\d]\w*)")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

_KEYWORD_TYPES = {
    "class": NodeType.CLASS,
    "def": NodeType.FUNCTION,
}


# ===================================================================
# Line helpers
# ===================================================================

def split_lines(text: str) -> List[str]:
    """Split *text* on ``\\r\\n``, ``\\r`` or ``\\n``.

    A trailing line break does not produce an extra empty line, so indices
    match the line numbers an editor shows (minus one).
    """
    if not text:
        return []
    lines = _LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def indentation_of(line: str, tab_width: int = config.DEFAULT_TAB_WIDTH) -> int:
    """Width of the leading spaces and tabs of *line*."""
    depth = 0
    for ch in line:
        if ch == " ":
            depth += 1
        elif ch == "\t":
            depth += tab_width
        else:
            break
    return depth


def is_code_line(line: str) -> bool:
    """False for blank and comment-only lines."""
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_PREFIX)


# ===================================================================
# Definition matching
# ===================================================================

class DefinitionMatch(NamedTuple):
    keyword: str
    name: str


def match_definition(line: str) -> Optional[DefinitionMatch]:
    """Return the definition opened by *line*, if any.

    ``keyword`` is ``"class"`` or ``"function"``.
    """
    if not is_code_line(line):
        return None
    m = _DEFINITION_RE.match(line.strip())
    if m is None:
        return None
    return DefinitionMatch(keyword=_KEYWORD_TYPES[m.group(1)], name=m.group(2))


# ===================================================================
# Block extent
# ===================================================================

def resolve_block_end(
    lines: List[str],
    start_index: int,
    depth: int,
    tab_width: int = config.DEFAULT_TAB_WIDTH,
) -> int:
    """Last line index of the block opened at *start_index*.

    The block ends just before the first later code line indented at or
    below *depth*, or at the last line of the file.
    """
    for index in range(start_index + 1, len(lines)):
        line = lines[index]
        if not is_code_line(line):
            continue
        if indentation_of(line, tab_width) <= depth:
            return index - 1
    return max(len(lines) - 1, start_index)


# ===================================================================
# Scope stack
# ===================================================================

@dataclass
class ScopeFrame:
    depth: int
    node_id: str
    end_line: Optional[int] = None


@dataclass
class ScopeStack:
    """Open scopes ordered by indentation, bottomed by the file itself."""

    file_id: str
    frames: List[ScopeFrame] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.frames:
            self.frames.append(ScopeFrame(depth=-1, node_id=self.file_id))

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def top(self) -> ScopeFrame:
        return self.frames[-1]

    def parent_for(self, depth: int) -> str:
        """Close scopes at *depth* or deeper and return the enclosing id.

        Equal depth means sibling, so only strictly shallower frames survive.
        """
        while len(self.frames) > 1 and self.frames[-1].depth >= depth:
            self.frames.pop()
        return self.frames[-1].node_id

    def push(self, depth: int, node_id: str, end_line: Optional[int] = None) -> None:
        self.frames.append(ScopeFrame(depth=depth, node_id=node_id, end_line=end_line))


# ===================================================================
# File scanner
# ===================================================================

@dataclass(frozen=True)
class FileScan:
    """Outcome of scanning one file.

    ``skip_reason`` is set when the file could not be read; ``nodes`` is
    then empty.
    """

    path: str
    nodes: List[Node]
    skip_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None


class FileScanner:
    """Turns one file's text into class/function nodes."""

    def __init__(
        self,
        tab_width: int = config.DEFAULT_TAB_WIDTH,
        snippet_lines: int = config.DEFAULT_SNIPPET_LINES,
        encoding: str = config.DEFAULT_ENCODING,
    ) -> None:
        self.tab_width = tab_width
        self.snippet_lines = snippet_lines
        self.encoding = encoding

    def scan_file(self, file_path: Path, file_id: str) -> FileScan:
        path = str(file_path)
        try:
            text = Path(file_path).read_text(encoding=self.encoding)
        except UnicodeDecodeError as exc:
            return FileScan(path=path, nodes=[], skip_reason=f"undecodable as {self.encoding}: {exc.reason}")
        except OSError as exc:
            return FileScan(path=path, nodes=[], skip_reason=exc.strerror or str(exc))
        return FileScan(path=path, nodes=self.scan_source(text, path, file_id))

    def scan_source(self, source: str, source_path: str, file_id: str) -> List[Node]:
        lines = split_lines(source)
        scopes = ScopeStack(file_id)
        nodes: List[Node] = []

        for index, line in enumerate(lines):
            match = match_definition(line)
            if match is None:
                continue

            depth = indentation_of(line, self.tab_width)
            end = resolve_block_end(lines, index, depth, self.tab_width)
            parent_id = scopes.parent_for(depth)
            node_id = definition_id(match.keyword, source_path, index, match.name)

            nodes.append(Node(
                node_id=node_id,
                label=match.name,
                node_type=match.keyword,
                source_path=source_path,
                start_line=index,
                end_line=end,
                parent_id=parent_id,
                snippet=self._snippet(lines, index, end),
            ))
            scopes.push(depth, node_id, end)

        return nodes

    def _snippet(self, lines: List[str], start: int, end: int) -> str:
        stop = min(end + 1, start + self.snippet_lines)
        return "\n".join(lines[start:stop])


def scan_source(
    source: str,
    source_path: str,
    file_id: str,
    tab_width: int = config.DEFAULT_TAB_WIDTH,
    snippet_lines: int = config.DEFAULT_SNIPPET_LINES,
) -> List[Node]:
    """Convenience wrapper around :meth:`FileScanner.scan_source`."""
    return FileScanner(tab_width=tab_width, snippet_lines=snippet_lines).scan_source(
        source, source_path, file_id,
    )
