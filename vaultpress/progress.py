"""Console progress bar backed by rich."""

from __future__ import annotations

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn


class RichProgress:
    """ProgressSink that renders a transient bar.

    ``finish`` is safe to call without a prior ``start``.
    """

    def __init__(self, description: str = "Publishing", console: Console | None = None) -> None:
        self.description = description
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            console=console,
            transient=True,
        )
        self._task_id = None

    def start(self, total: int) -> None:
        self._progress.start()
        self._task_id = self._progress.add_task(self.description, total=total)

    def advance(self, count: int = 1) -> None:
        if self._task_id is not None:
            self._progress.advance(self._task_id, count)

    def finish(self) -> None:
        if self._task_id is not None:
            self._progress.stop()
            self._task_id = None
