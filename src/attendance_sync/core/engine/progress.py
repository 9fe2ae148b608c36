"""Progress reporting protocol for bootstrap sync.

The orchestrator emits per-entity-type lifecycle events; consumers (e.g. the
CLI's Rich display) implement ``BootstrapProgress`` to render feedback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from attendance_sync.core.contracts.entity import EntityType


class BootstrapProgress(ABC):
    """Observer interface for bootstrap sync progress events."""

    @abstractmethod
    def type_start(self, entity_type: EntityType) -> None:
        """Fetching *entity_type* is starting."""
        ...  # pragma: no cover

    @abstractmethod
    def type_done(self, entity_type: EntityType, stored: int) -> None:
        """All *stored* entities of *entity_type* were written."""
        ...  # pragma: no cover

    @abstractmethod
    def type_error(self, entity_type: EntityType, error: BaseException) -> None:
        """Syncing *entity_type* was interrupted by *error*."""
        ...  # pragma: no cover


class NullBootstrapProgress(BootstrapProgress):
    """No-op implementation used when no progress display is requested."""

    def type_start(self, entity_type: EntityType) -> None:
        pass

    def type_done(self, entity_type: EntityType, stored: int) -> None:
        pass

    def type_error(self, entity_type: EntityType, error: BaseException) -> None:
        pass
