"""
Casos de uso sobre las subtareas embebidas de una tarea.

Cada cambio vuelve a pasar por el evaluador del ciclo de vida (dependencias,
progreso y estado) antes de guardar el snapshot y persistir.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from core.application.common import load_owned_task
from core.application.create_task import SubtaskInput, build_subtask
from core.application.undo import UndoCoordinator
from core.domain.clock import Clock, as_utc, utcnow
from core.domain.errors import NotFoundError, ValidationError
from core.domain.lifecycle import apply_lifecycle
from core.domain.models.task import Reminder, Subtask, Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository
from core.domain.validation import parse_priority, parse_status

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpdateSubtaskCommand:
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    dependencies: list[UUID] | None = None
    reminder: Reminder | None = None


class _SubtaskUseCase:
    def __init__(
        self,
        repository: TaskRepository,
        undo: UndoCoordinator,
        clock: Clock = utcnow,
    ) -> None:
        self._repository = repository
        self._undo = undo
        self._clock = clock

    def _commit(self, task: Task, now: datetime) -> Task:
        apply_lifecycle(task, now)
        task.updated_at = now
        self._undo.snapshot_before_update(task.id, task.user_id)
        self._repository.save(task)
        logger.info(
            f"Subtareas de {task.id} actualizadas: {task.progress}% ({task.status.value})"
        )
        return task

    @staticmethod
    def _find(task: Task, subtask_id: UUID) -> Subtask:
        subtask = task.find_subtask(subtask_id)
        if subtask is None:
            raise NotFoundError(f"Subtask {subtask_id} not found")
        return subtask


class AddSubtaskUseCase(_SubtaskUseCase):
    def execute(self, task_id: UUID, user_id: str, data: SubtaskInput) -> Task:
        task = load_owned_task(self._repository, task_id, user_id)
        now = self._clock()
        task.subtasks.append(build_subtask(data, now))
        return self._commit(task, now)


class UpdateSubtaskUseCase(_SubtaskUseCase):
    def execute(
        self,
        task_id: UUID,
        subtask_id: UUID,
        user_id: str,
        cmd: UpdateSubtaskCommand,
    ) -> Task:
        task = load_owned_task(self._repository, task_id, user_id)
        subtask = self._find(task, subtask_id)
        now = self._clock()

        if cmd.title is not None:
            title = cmd.title.strip()
            if not title:
                raise ValidationError("Subtask title is required")
            subtask.title = title
        if cmd.description is not None:
            subtask.description = cmd.description
        if cmd.status is not None:
            subtask.status = parse_status(cmd.status)
        if cmd.priority is not None:
            subtask.priority = parse_priority(cmd.priority)
        if cmd.due_date is not None:
            subtask.due_date = as_utc(cmd.due_date)
        if cmd.dependencies is not None:
            subtask.dependencies = list(dict.fromkeys(cmd.dependencies))
        if cmd.reminder is not None:
            subtask.reminder = cmd.reminder
        subtask.updated_at = now

        return self._commit(task, now)


class RemoveSubtaskUseCase(_SubtaskUseCase):
    def execute(self, task_id: UUID, subtask_id: UUID, user_id: str) -> Task:
        task = load_owned_task(self._repository, task_id, user_id)
        removed = self._find(task, subtask_id)
        task.subtasks.remove(removed)
        for sibling in task.subtasks:
            if subtask_id in sibling.dependencies:
                sibling.dependencies.remove(subtask_id)
        return self._commit(task, self._clock())
