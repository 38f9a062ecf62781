"""
Wraps a Rich Progress display for HTTP transfers (dependency binaries, subtitles).
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class TransferProgress:
    """A transient progress bar, one task per file being fetched."""

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}", justify="left"),
            BarColumn(bar_width=30),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
            "•",
            TimeRemainingColumn(),
            console=console,
            transient=True,
        )

    def add_task(self, description: str, total: int | None) -> TaskID | None:
        if not self.enabled:
            return None
        if len(description) > 40:
            description = description[:37] + "..."
        return self.progress.add_task(description, total=total, start=True)

    def update_task_progress(self, task_id: TaskID | None, completed: int):
        if task_id is not None and self.enabled:
            self.progress.update(task_id, completed=completed)

    def remove_task(self, task_id: TaskID | None):
        if task_id is None or not self.enabled:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            pass

    def __enter__(self):
        if self.enabled:
            self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            self.progress.stop()
        return False
