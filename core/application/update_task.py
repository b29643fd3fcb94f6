import logging
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from core.application.common import load_owned_task
from core.application.undo import UndoCoordinator
from core.domain.clock import Clock, as_utc, utcnow
from core.domain.lifecycle import apply_lifecycle
from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository
from core.domain.validation import (
    clean_description,
    clean_title,
    parse_priority,
    parse_status,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UpdateTaskCommand:
    title: str
    description: str
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None


class UpdateTaskUseCase:
    """
    Edita una tarea completa.

    Estado y prioridad ausentes vuelven a pending / medium; una fecha ausente
    deja la actual. Se validan y recalculan los campos derivados antes de
    tomar el snapshot, de modo que un cambio inválido no deja rastro.
    """

    def __init__(
        self,
        repository: TaskRepository,
        undo: UndoCoordinator,
        clock: Clock = utcnow,
    ) -> None:
        self._repository = repository
        self._undo = undo
        self._clock = clock

    def execute(self, task_id: UUID, user_id: str, cmd: UpdateTaskCommand) -> Task:
        task = load_owned_task(self._repository, task_id, user_id)
        now = self._clock()

        task.title = clean_title(cmd.title)
        task.description = clean_description(cmd.description)
        task.status = parse_status(cmd.status or TaskStatus.PENDING)
        task.priority = parse_priority(cmd.priority or TaskPriority.MEDIUM)
        if cmd.due_date is not None:
            task.due_date = as_utc(cmd.due_date)
        apply_lifecycle(task, now)
        task.updated_at = now

        self._undo.snapshot_before_update(task_id, user_id)
        self._repository.save(task)
        logger.info(f"✏️ Tarea {task_id} actualizada ({task.status.value}, {task.progress}%)")
        return task
