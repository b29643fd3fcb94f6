import logging
from uuid import UUID

from core.application.common import load_owned_task
from core.application.undo import UndoCoordinator
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)


class DeleteTaskUseCase:
    def __init__(self, repository: TaskRepository, undo: UndoCoordinator) -> None:
        self._repository = repository
        self._undo = undo

    def execute(self, task_id: UUID, user_id: str) -> None:
        load_owned_task(self._repository, task_id, user_id)
        self._repository.delete(task_id)
        self._undo.discard(task_id)
        logger.info(f"🗑️ Tarea {task_id} eliminada")
