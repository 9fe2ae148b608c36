"""Rich-based bootstrap progress display."""

from __future__ import annotations

from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from attendance_sync.core.contracts.entity import EntityType
from attendance_sync.core.engine.progress import BootstrapProgress


class RichBootstrapProgress(BootstrapProgress):
    """Live terminal spinner per entity type, powered by Rich.

    Use as a context manager so the live display is properly started/stopped::

        with RichBootstrapProgress() as progress:
            result = await service.run_once()
    """

    _TYPE_LABELS: ClassVar[dict[EntityType, str]] = {
        EntityType.MEMBER: "[cyan]Members[/]",
        EntityType.CONCERT: "[green]Concerts[/]",
        EntityType.REHEARSAL: "[magenta]Rehearsals[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>14}"),
            TextColumn("{task.fields[status]}"),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._task_ids: dict[EntityType, RichTaskID] = {}

    def __enter__(self) -> RichBootstrapProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def type_start(self, entity_type: EntityType) -> None:
        label = self._TYPE_LABELS.get(entity_type, str(entity_type))
        self._task_ids[entity_type] = self._progress.add_task(label, total=None, status="fetching")

    def type_done(self, entity_type: EntityType, stored: int) -> None:
        task_id = self._task_ids.get(entity_type)
        if task_id is None:
            return
        self._progress.update(task_id, total=1, completed=1, status=f"{stored} stored")

    def type_error(self, entity_type: EntityType, error: BaseException) -> None:
        task_id = self._task_ids.get(entity_type)
        if task_id is None:
            return
        self._progress.update(task_id, description=f"[red]✗[/red] {entity_type:>10}", status="[red]failed[/red]")
        self._progress.stop_task(task_id)
