from copy import deepcopy
from datetime import datetime, timedelta, timezone
from typing import Sequence
from uuid import UUID

from core.domain.models.history import HistorySnapshot
from core.domain.models.task import (
    Task,
    TaskFilter,
    TaskPriority,
    TaskStatistics,
    TaskStatus,
)
from core.domain.ports.history_repository import HistoryRepository
from core.domain.ports.task_repository import TaskRepository

T0 = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Reloj manual para controlar la ventana de deshacer."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class InMemoryTaskRepository(TaskRepository):
    """Guarda copias, como haría una base de datos real."""

    def __init__(self) -> None:
        self._data: dict[UUID, Task] = {}

    def save(self, task: Task) -> None:
        self._data[task.id] = deepcopy(task)

    def get(self, task_id: UUID) -> Task | None:
        task = self._data.get(task_id)
        return deepcopy(task) if task is not None else None

    def list(self, user_id: str, filters: TaskFilter | None = None) -> list[Task]:
        filters = filters or TaskFilter()
        result = []
        for task in self._data.values():
            if task.user_id != user_id:
                continue
            if filters.status is not None and task.status != filters.status:
                continue
            if filters.priority is not None and task.priority != filters.priority:
                continue
            if filters.due_before is not None and (
                task.due_date is None or task.due_date > filters.due_before
            ):
                continue
            if filters.text:
                text = filters.text.lower()
                if text not in task.title.lower() and text not in task.description.lower():
                    continue
            result.append(deepcopy(task))
        return sorted(result, key=lambda t: t.created_at, reverse=True)

    def delete(self, task_id: UUID) -> None:
        self._data.pop(task_id, None)

    def batch_update(
        self,
        task_ids: Sequence[UUID],
        user_id: str,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        updated_at: datetime | None = None,
    ) -> int:
        modified = 0
        for task_id in task_ids:
            task = self._data.get(task_id)
            if task is None or task.user_id != user_id:
                continue
            changed = False
            if status is not None and task.status != status:
                task.status = status
                if status is TaskStatus.COMPLETED and task.completed_at is None:
                    task.completed_at = updated_at
                changed = True
            if priority is not None and task.priority != priority:
                task.priority = priority
                changed = True
            if changed:
                task.updated_at = updated_at
                modified += 1
        return modified

    def statistics(self, user_id: str) -> TaskStatistics:
        tasks = [t for t in self._data.values() if t.user_id == user_id]
        return TaskStatistics(
            total_tasks=len(tasks),
            completed_tasks=sum(t.status is TaskStatus.COMPLETED for t in tasks),
            pending_tasks=sum(t.status is TaskStatus.PENDING for t in tasks),
            high_priority_tasks=sum(t.priority is TaskPriority.HIGH for t in tasks),
        )


class InMemoryHistoryRepository(HistoryRepository):
    def __init__(self) -> None:
        self.snapshots: list[HistorySnapshot] = []

    def add(self, snapshot: HistorySnapshot) -> None:
        self.snapshots.append(deepcopy(snapshot))

    def latest_valid(
        self, task_id: UUID, user_id: str, now: datetime
    ) -> HistorySnapshot | None:
        candidates = [
            s
            for s in self.snapshots
            if s.task_id == task_id and s.user_id == user_id and s.is_valid_at(now)
        ]
        if not candidates:
            return None
        return deepcopy(max(candidates, key=lambda s: s.created_at))

    def delete(self, snapshot_id: UUID) -> None:
        self.snapshots = [s for s in self.snapshots if s.id != snapshot_id]

    def delete_for_task(self, task_id: UUID) -> None:
        self.snapshots = [s for s in self.snapshots if s.task_id != task_id]

    def purge_expired(self, now: datetime) -> int:
        before = len(self.snapshots)
        self.snapshots = [s for s in self.snapshots if s.expires_at > now]
        return before - len(self.snapshots)
