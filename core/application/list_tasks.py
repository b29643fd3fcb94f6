from uuid import UUID

from core.application.common import load_owned_task
from core.domain.clock import as_utc
from core.domain.models.task import Task, TaskFilter, TaskStatistics
from core.domain.ports.task_repository import TaskRepository


class ListTasksUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, user_id: str, filters: TaskFilter | None = None) -> list[Task]:
        if filters is not None:
            filters.due_before = as_utc(filters.due_before)
            if filters.text is not None:
                filters.text = filters.text.strip() or None
        return self._repository.list(user_id, filters)


class GetTaskUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, task_id: UUID, user_id: str) -> Task:
        return load_owned_task(self._repository, task_id, user_id)


class TaskStatisticsUseCase:
    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def execute(self, user_id: str) -> TaskStatistics:
        return self._repository.statistics(user_id)
