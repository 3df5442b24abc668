"""Directory walker producing folder/file/definition snapshots."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from .config_manager import ScanSettings
from .models import GraphBuilder, GraphSnapshot, Node, NodeType, file_id, folder_id
from .parser import FileScanner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedEntry:
    path: str
    reason: str


@dataclass(frozen=True)
class WalkResult:
    snapshot: GraphSnapshot
    skipped: Tuple[SkippedEntry, ...] = ()


class RepositoryWalker:
    """Pre-order walk of a directory tree.

    Each :meth:`walk` call owns a fresh :class:`GraphBuilder`, so a walker
    instance can be reused and called from several threads.
    """

    def __init__(self, settings: Optional[ScanSettings] = None) -> None:
        self.settings = settings or ScanSettings()
        self.file_scanner = FileScanner(
            tab_width=self.settings.tab_width,
            snippet_lines=self.settings.snippet_lines,
            encoding=self.settings.encoding,
        )

    def walk(self, root: Union[str, Path]) -> WalkResult:
        root_path = Path(os.path.abspath(root))
        builder = GraphBuilder()
        skipped: List[SkippedEntry] = []
        ancestors: Set[str] = set()

        root_node = builder.add(Node(
            node_id=folder_id(str(root_path)),
            label=root_path.name or str(root_path),
            node_type=NodeType.FOLDER,
            source_path=str(root_path),
        ))
        self._walk_dir(root_path, root_node.node_id, builder, skipped, ancestors)

        snapshot = builder.build()
        logger.debug(
            "Scanned %s: %d nodes, %d edges, %d skipped",
            root_path, len(snapshot.nodes), len(snapshot.edges), len(skipped),
        )
        return WalkResult(snapshot=snapshot, skipped=tuple(skipped))

    # ------------------------------------------------------------------
    # Recursion
    # ------------------------------------------------------------------

    def _walk_dir(
        self,
        directory: Path,
        parent_id: str,
        builder: GraphBuilder,
        skipped: List[SkippedEntry],
        ancestors: Set[str],
    ) -> None:
        """Emit the contents of *directory*.

        *ancestors* holds the real paths of the directories currently being
        walked; re-entering one of them through a symlink is a cycle.
        """
        real = os.path.realpath(directory)
        if real in ancestors:
            self._skip(skipped, directory, "symlink cycle back to an enclosing directory")
            return
        ancestors.add(real)
        try:
            self._walk_entries(directory, parent_id, builder, skipped, ancestors)
        finally:
            ancestors.discard(real)

    def _walk_entries(
        self,
        directory: Path,
        parent_id: str,
        builder: GraphBuilder,
        skipped: List[SkippedEntry],
        ancestors: Set[str],
    ) -> None:
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            self._skip(skipped, directory, exc.strerror or str(exc))
            return

        for entry in entries:
            if self.settings.is_excluded(entry.name):
                continue
            entry_path = directory / entry.name
            try:
                is_link = entry.is_symlink()
                is_dir = entry.is_dir(follow_symlinks=self.settings.follow_symlinks)
                is_file = not is_dir and entry.is_file()
                if is_link and not os.path.exists(entry_path):
                    raise FileNotFoundError(0, "broken symlink", str(entry_path))
            except OSError as exc:
                self._skip(skipped, entry_path, exc.strerror or str(exc))
                continue

            if is_dir:
                node = builder.add(Node(
                    node_id=folder_id(str(entry_path)),
                    label=entry.name,
                    node_type=NodeType.FOLDER,
                    source_path=str(entry_path),
                    parent_id=parent_id,
                ))
                self._walk_dir(entry_path, node.node_id, builder, skipped, ancestors)
            elif is_file and self.settings.is_supported(entry.name):
                self._add_file(entry_path, parent_id, builder, skipped)

    def _add_file(
        self,
        path: Path,
        parent_id: str,
        builder: GraphBuilder,
        skipped: List[SkippedEntry],
    ) -> None:
        node = builder.add(Node(
            node_id=file_id(str(path)),
            label=path.name,
            node_type=NodeType.FILE,
            source_path=str(path),
            parent_id=parent_id,
        ))
        scan = self.file_scanner.scan_file(path, node.node_id)
        if scan.skipped:
            self._skip(skipped, path, scan.skip_reason or "unreadable")
            return
        builder.extend(scan.nodes)

    @staticmethod
    def _skip(skipped: List[SkippedEntry], path: Path, reason: str) -> None:
        logger.warning("Skipping %s: %s", path, reason)
        skipped.append(SkippedEntry(path=str(path), reason=reason))


def scan_repository(
    root: Union[str, Path],
    settings: Optional[ScanSettings] = None,
) -> GraphSnapshot:
    """Scan *root* and return its structure snapshot."""
    return RepositoryWalker(settings).walk(root).snapshot
