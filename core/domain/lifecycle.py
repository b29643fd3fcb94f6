"""
Evaluador del ciclo de vida de una tarea.

Funciones puras que derivan `progress`, `status` y `completed_at` a partir
de las subtareas, y validan que las dependencias entre subtareas apunten a
hermanas de la misma tarea.

Reglas:
    - Sin subtareas → progress = 0, el estado explícito se mantiene.
    - progress == 100 → completed.
    - 0 < progress < 100 → in-progress (también si antes estaba completed).
    - progress == 0 → el estado explícito se mantiene.
    - Si el estado resultante es completed y no hay completed_at, se fija a `now`.
      completed_at nunca se borra automáticamente.
"""

import math
from dataclasses import dataclass
from datetime import datetime

from core.domain.errors import ValidationError
from core.domain.models.task import Subtask, Task, TaskStatus

INVALID_DEPENDENCY = "Invalid dependency reference"


@dataclass(frozen=True, slots=True)
class Evaluation:
    progress: int
    status: TaskStatus
    completed_at: datetime | None


def calculate_progress(subtasks: list[Subtask]) -> int:
    """Porcentaje de subtareas completadas, redondeado hacia arriba en .5."""
    if not subtasks:
        return 0
    completed = sum(1 for s in subtasks if s.status is TaskStatus.COMPLETED)
    return math.floor(completed * 100 / len(subtasks) + 0.5)


def evaluate(task: Task, now: datetime) -> Evaluation:
    progress = calculate_progress(task.subtasks)

    status = task.status
    if progress == 100:
        status = TaskStatus.COMPLETED
    elif progress > 0:
        status = TaskStatus.IN_PROGRESS

    completed_at = task.completed_at
    if status is TaskStatus.COMPLETED and completed_at is None:
        completed_at = now

    return Evaluation(progress=progress, status=status, completed_at=completed_at)


def validate_dependencies(subtasks: list[Subtask]) -> None:
    """
    Cada id en `dependencies` debe ser el de otra subtarea de la misma tarea.

    Raises:
        ValidationError: Si alguna dependencia no existe o es la propia subtarea.
    """
    ids = {s.id for s in subtasks}
    for subtask in subtasks:
        for dependency_id in subtask.dependencies:
            if dependency_id == subtask.id or dependency_id not in ids:
                raise ValidationError(INVALID_DEPENDENCY)


def stamp_subtask_completion(subtask: Subtask, now: datetime) -> None:
    if subtask.status is TaskStatus.COMPLETED and subtask.completed_at is None:
        subtask.completed_at = now


def apply_lifecycle(task: Task, now: datetime) -> Task:
    """Valida dependencias y escribe la evaluación sobre la tarea."""
    validate_dependencies(task.subtasks)
    for subtask in task.subtasks:
        stamp_subtask_completion(subtask, now)

    result = evaluate(task, now)
    task.progress = result.progress
    task.status = result.status
    task.completed_at = result.completed_at
    return task
