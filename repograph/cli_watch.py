"""Watch mode: re-scan a directory when its source files change."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .cli_common import load_settings
from .config_manager import ScanSettings
from .models import GraphSnapshot
from .walker import RepositoryWalker

console = Console()
logger = logging.getLogger(__name__)


class RescanScheduler:
    """Debounce change notifications and run one scan at a time.

    ``notify`` may be called from watchdog's thread; ``poll`` runs the
    pending re-scan once *debounce_seconds* have passed without new
    changes. Overlapping scans are serialized by a lock and each scan
    builds its own snapshot.
    """

    def __init__(
        self,
        root: Path,
        settings: ScanSettings,
        on_snapshot: Callable[[GraphSnapshot, GraphSnapshot], None],
        debounce_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.root = root
        self.settings = settings
        self.walker = RepositoryWalker(settings)
        self.on_snapshot = on_snapshot
        self.debounce_seconds = debounce_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._scan_lock = threading.Lock()
        self._last_change: Optional[float] = None
        self.snapshot = self.walker.walk(root).snapshot
        self.scan_count = 0

    def is_relevant(self, src_path: str, is_directory: bool = False) -> bool:
        """Whether a change at *src_path* can alter the snapshot.

        Directory changes only need to sit under the root outside any
        excluded entry; file changes must also have a scanned extension.
        """
        path = Path(src_path)
        try:
            parts = path.relative_to(self.root).parts
        except ValueError:
            return False
        if any(self.settings.is_excluded(part) for part in parts):
            return False
        if is_directory:
            return True
        return self.settings.is_supported(path.name)

    def notify(self, src_path: str, is_directory: bool = False) -> None:
        if not self.is_relevant(src_path, is_directory):
            return
        with self._lock:
            self._last_change = self._clock()

    def poll(self) -> bool:
        """Run the pending re-scan if the debounce window has elapsed."""
        with self._lock:
            if self._last_change is None:
                return False
            if self._clock() - self._last_change < self.debounce_seconds:
                return False
            self._last_change = None
        self.rescan()
        return True

    def rescan(self) -> GraphSnapshot:
        with self._scan_lock:
            previous = self.snapshot
            self.snapshot = self.walker.walk(self.root).snapshot
            self.scan_count += 1
        self.on_snapshot(previous, self.snapshot)
        return self.snapshot


class _ChangeHandler(FileSystemEventHandler):
    def __init__(self, scheduler: RescanScheduler) -> None:
        super().__init__()
        self.scheduler = scheduler

    def on_any_event(self, event: FileSystemEvent) -> None:
        self.scheduler.notify(str(event.src_path), event.is_directory)
        dest = getattr(event, "dest_path", "")
        if dest:
            self.scheduler.notify(str(dest), event.is_directory)


def _print_change(previous: GraphSnapshot, current: GraphSnapshot) -> None:
    diff = current.diff(previous)
    if not diff.changed:
        console.print("  [dim]No structural changes[/dim]")
        return
    console.print(
        f"  [green]✓[/green] Re-scanned: {len(current.nodes)} nodes "
        f"([green]+{len(diff.added)}[/green] / [red]-{len(diff.removed)}[/red])"
    )
    for node_id in diff.added[:10]:
        logger.debug("added %s", node_id)
    for node_id in diff.removed[:10]:
        logger.debug("removed %s", node_id)


def watch(
    path: Path = typer.Argument(Path("."), exists=True, file_okay=False, help="Directory to watch."),
    interval: float = typer.Option(2.0, "--interval", "-i", min=0.0, help="Debounce interval in seconds."),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Alternate config.toml."),
):
    """👀 Re-scan the structure graph whenever source files change.

    Example:
      repograph watch
      repograph watch ./src --interval 5
    """
    watch_path = path.resolve()
    settings = load_settings(config_path)
    scheduler = RescanScheduler(watch_path, settings, _print_change, debounce_seconds=interval)

    console.print(f"\n[bold green]👀 Watching[/bold green] [cyan]{watch_path}[/cyan]")
    console.print(f"[dim]  Initial scan: {len(scheduler.snapshot.nodes)} nodes")
    console.print(f"  Debounce:     {interval}s")
    console.print("  Press Ctrl+C to stop[/dim]\n")

    observer = Observer()
    observer.schedule(_ChangeHandler(scheduler), str(watch_path), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(0.25)
            scheduler.poll()
    except KeyboardInterrupt:
        console.print(f"\n[yellow]Stopped watching.[/yellow] Re-scanned {scheduler.scan_count} time(s).")
    finally:
        observer.stop()
        observer.join()
