"""
Progress reporting for restore-saved-albums.

The synchronization engine never draws anything itself. Every component
receives a ProgressObserver and calls on_progress(stage, completed, total)
as it works. The default observer does nothing, which keeps the engine
testable without a terminal; the CLI passes a RichProgressObserver.

Usage:
    from restore_saved_albums.core.progress import RichProgressObserver, Stage

    with RichProgressObserver() as progress:
        progress.on_progress(Stage.READ_TRACKS, 50, 1200)
"""

from enum import Enum

from rich import get_console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
)
from rich.theme import Theme


PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


class Stage(str, Enum):
    """Stages of a run, in the order they normally happen."""
    READ_TRACKS = "Reading tracks"
    BACKUP = "Backing up"
    READ_ALBUMS = "Reading albums"
    DELETE_ALBUMS = "Unsaving albums"
    ADD_ALBUMS = "Saving albums"
    DELETE_SPILLOVER = "Unsaving spillover"


class ProgressObserver:
    """
    Receives progress updates from the synchronization engine.

    The base implementation ignores every update. Subclasses override
    on_progress() to display or record progress.
    """

    def on_progress(self, stage: Stage, completed: int, total: int | None) -> None:
        """
        Report progress of a stage.

        Args:
            stage: The stage being reported.
            completed: Items processed so far in this stage.
            total: Total items expected, or None when unknown.
        """


NULL_PROGRESS = ProgressObserver()


class RichProgressObserver(ProgressObserver):
    """
    Shows one Rich progress bar per stage.

    A stage that runs again (saved tracks are re-read during overflow
    recovery) restarts its bar from zero.

    Example:
        Saving albums   ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━  312/540
    """

    def __init__(self) -> None:
        self.console = get_console()

        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[white]{task.description:<20}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )
        self._tasks: dict[Stage, TaskID] = {}
        self._completed: dict[Stage, int] = {}
        self._started = False

    def __enter__(self) -> "RichProgressObserver":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self._started = True

    def stop(self) -> None:
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def on_progress(self, stage: Stage, completed: int, total: int | None) -> None:
        task_id = self._tasks.get(stage)
        previous = self._completed.get(stage, 0)
        self._completed[stage] = completed

        if task_id is None:
            self._tasks[stage] = self.progress.add_task(
                stage.value, total=total, completed=completed
            )
            return

        if completed < previous:
            self.progress.reset(task_id, total=total, completed=completed)
        else:
            self.progress.update(task_id, total=total, completed=completed)


__all__ = [
    "PROGRESS_THEME",
    "Stage",
    "ProgressObserver",
    "NULL_PROGRESS",
    "RichProgressObserver",
]
