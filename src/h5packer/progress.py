"""Console progress bar for packing."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn

from h5packer.archive.types import ProgressState


class PackProgress:
    """Render ``ProgressState`` updates as a single bar.

    Use as a context manager and pass the instance as ``on_progress``.
    """

    def __init__(self, console: Console | None = None, *, enabled: bool = True) -> None:
        self.enabled = enabled
        self._progress = Progress(
            TextColumn("Progress:"),
            BarColumn(bar_width=50),
            TextColumn("{task.fields[percent]:>3}%"),
            console=console,
            transient=False,
            disable=not enabled,
        )
        self._task: TaskID | None = None

    def __enter__(self) -> PackProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def __call__(self, state: ProgressState) -> None:
        if self._task is None:
            self._task = self._progress.add_task("pack", total=state.total, percent=0)
        self._progress.update(self._task, completed=state.processed, percent=state.percent)
