from abc import ABC, abstractmethod
from datetime import datetime
from typing import Sequence
from uuid import UUID

from core.domain.models.task import (
    Task,
    TaskFilter,
    TaskPriority,
    TaskStatistics,
    TaskStatus,
)


class TaskRepository(ABC):
    @abstractmethod
    def save(self, task: Task) -> None:
        raise NotImplementedError

    @abstractmethod
    def get(self, task_id: UUID) -> Task | None:
        raise NotImplementedError

    @abstractmethod
    def list(self, user_id: str, filters: TaskFilter | None = None) -> list[Task]:
        """Tareas del usuario, de la más reciente a la más antigua."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, task_id: UUID) -> None:
        raise NotImplementedError

    @abstractmethod
    def batch_update(
        self,
        task_ids: Sequence[UUID],
        user_id: str,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        updated_at: datetime | None = None,
    ) -> int:
        """
        Actualiza solo las tareas del usuario; retorna cuántas cambiaron.

        Si el nuevo estado es completed, `completed_at` toma `updated_at`
        en las tareas que aún no lo tienen.
        """
        raise NotImplementedError

    @abstractmethod
    def statistics(self, user_id: str) -> TaskStatistics:
        raise NotImplementedError
