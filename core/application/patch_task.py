"""
Cambios directos de un solo campo: estado, prioridad y etiquetas.

No recalculan el progreso, por lo que el estado puede quedar desalineado
respecto a las subtareas. Sí guardan snapshot para poder deshacerse.
"""

import logging
from uuid import UUID

from core.application.common import load_owned_task
from core.application.undo import UndoCoordinator
from core.domain.clock import Clock, utcnow
from core.domain.models.task import Task, TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository
from core.domain.validation import clean_tags, parse_priority, parse_status

logger = logging.getLogger(__name__)


class _PatchUseCase:
    def __init__(
        self,
        repository: TaskRepository,
        undo: UndoCoordinator,
        clock: Clock = utcnow,
    ) -> None:
        self._repository = repository
        self._undo = undo
        self._clock = clock

    def _persist(self, task: Task) -> Task:
        task.updated_at = self._clock()
        self._undo.snapshot_before_update(task.id, task.user_id)
        self._repository.save(task)
        return task


class UpdateStatusUseCase(_PatchUseCase):
    def execute(self, task_id: UUID, user_id: str, status: TaskStatus | str) -> Task:
        status = parse_status(status)
        task = load_owned_task(self._repository, task_id, user_id)
        task.status = status
        if status is TaskStatus.COMPLETED and task.completed_at is None:
            task.completed_at = self._clock()
        logger.info(f"Estado de la tarea {task_id} → {status.value}")
        return self._persist(task)


class UpdatePriorityUseCase(_PatchUseCase):
    def execute(
        self, task_id: UUID, user_id: str, priority: TaskPriority | str
    ) -> Task:
        priority = parse_priority(priority)
        task = load_owned_task(self._repository, task_id, user_id)
        task.priority = priority
        logger.info(f"Prioridad de la tarea {task_id} → {priority.value}")
        return self._persist(task)


class AddTagsUseCase(_PatchUseCase):
    def execute(self, task_id: UUID, user_id: str, tags: list[str]) -> Task:
        task = load_owned_task(self._repository, task_id, user_id)
        task.tags = clean_tags(task.tags + list(tags))
        return self._persist(task)
