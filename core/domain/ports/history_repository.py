from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from core.domain.models.history import HistorySnapshot


class HistoryRepository(ABC):
    @abstractmethod
    def add(self, snapshot: HistorySnapshot) -> None:
        raise NotImplementedError

    @abstractmethod
    def latest_valid(
        self, task_id: UUID, user_id: str, now: datetime
    ) -> HistorySnapshot | None:
        """Snapshot más reciente de la tarea con `expires_at > now`."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, snapshot_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_for_task(self, task_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        raise NotImplementedError
