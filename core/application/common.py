from uuid import UUID

from core.domain.errors import NotFoundError
from core.domain.models.task import Task
from core.domain.ports.task_repository import TaskRepository


def load_owned_task(repository: TaskRepository, task_id: UUID, user_id: str) -> Task:
    """
    Obtiene la tarea solo si pertenece al usuario.

    Una tarea ajena se reporta igual que una inexistente.
    """
    task = repository.get(task_id)
    if task is None or task.user_id != user_id:
        raise NotFoundError(f"Task {task_id} not found")
    return task
