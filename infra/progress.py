"""Rich-based progress display for transcription runs.

RichProgressSink receives (completed, total) notifications from the
pipeline. update() is lock-guarded so it can be called from any worker
thread, and it never moves backwards.
"""

import threading
import time
from typing import Optional

from rich.console import Console
from rich.progress import (
    Progress,
    BarColumn,
    TextColumn,
    TaskProgressColumn,
    TimeRemainingColumn,
)


def format_seconds(seconds: float) -> str:
    """Format seconds into human-readable time string.

    Args:
        seconds: Time in seconds

    Returns:
        Formatted string like "2m 15s" or "45s"
    """
    if seconds < 60:
        return f"{int(seconds)}s"

    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}m {secs}s"


class RichProgressSink:
    def __init__(
        self,
        total: int = 0,
        prefix: str = "Processing images",
        width: int = 40,
        unit: str = "images",
        console: Optional[Console] = None,
    ):
        self.total = total
        self.prefix = prefix
        self.unit = unit
        self.completed = 0

        self._progress = Progress(
            TextColumn(f"[bold cyan]{prefix}[/bold cyan]"),
            BarColumn(bar_width=width),
            TaskProgressColumn(),
            TextColumn("•"),
            TextColumn("{task.completed}/{task.total}"),
            TextColumn("•"),
            TextColumn("{task.fields[rate]}", justify="right"),
            TextColumn("•"),
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

        self._lock = threading.Lock()
        self._task_id = None
        self._started = False
        self._start_time = time.time()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *args):
        self.stop()
        return False

    def start(self):
        with self._lock:
            if self._started:
                return
            self._progress.start()
            self._task_id = self._progress.add_task("", total=self.total or None, rate="")
            self._start_time = time.time()
            self._started = True

    def stop(self):
        with self._lock:
            if not self._started:
                return
            self._progress.stop()
            self._started = False

    def update(self, completed: int, total: int):
        """Progress callback: (completed, total)."""
        with self._lock:
            if completed < self.completed:
                return
            self.completed = completed
            self.total = total

            if not self._started:
                return

            elapsed = time.time() - self._start_time
            rate = f"{completed / elapsed:.1f} {self.unit}/sec" if elapsed > 0 else ""

            self._progress.update(
                self._task_id,
                completed=completed,
                total=total,
                rate=rate
            )
