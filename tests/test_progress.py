from __future__ import annotations

import io

from rich.console import Console

from attendance_sync.cli.progress.rich import RichBootstrapProgress
from attendance_sync.core.contracts.entity import EntityType
from attendance_sync.core.engine.progress import NullBootstrapProgress


def _progress() -> RichBootstrapProgress:
    return RichBootstrapProgress(console=Console(file=io.StringIO(), force_terminal=False, width=100))


def test_rich_progress_tracks_one_task_per_type() -> None:
    with _progress() as progress:
        for entity_type in EntityType:
            progress.type_start(entity_type)
        progress.type_done(EntityType.MEMBER, 12)
        progress.type_error(EntityType.CONCERT, RuntimeError("down"))

        tasks = {task.id: task for task in progress._progress.tasks}
        member_task = tasks[progress._task_ids[EntityType.MEMBER]]
        concert_task = tasks[progress._task_ids[EntityType.CONCERT]]

    assert len(tasks) == 3
    assert member_task.finished
    assert member_task.fields["status"] == "12 stored"
    assert concert_task.fields["status"] == "[red]failed[/red]"


def test_rich_progress_ignores_unknown_types() -> None:
    with _progress() as progress:
        progress.type_done(EntityType.REHEARSAL, 1)
        progress.type_error(EntityType.REHEARSAL, RuntimeError("x"))

        assert progress._progress.tasks == []


def test_null_progress_accepts_every_event() -> None:
    progress = NullBootstrapProgress()

    progress.type_start(EntityType.MEMBER)
    progress.type_done(EntityType.MEMBER, 0)
    progress.type_error(EntityType.MEMBER, RuntimeError("ignored"))
