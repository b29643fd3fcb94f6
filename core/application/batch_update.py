import logging
from dataclasses import dataclass, field
from uuid import UUID

from core.domain.clock import Clock, utcnow
from core.domain.errors import ValidationError
from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.ports.task_repository import TaskRepository
from core.domain.validation import parse_priority, parse_status

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchUpdateCommand:
    task_ids: list[UUID] = field(default_factory=list)
    status: TaskStatus | None = None
    priority: TaskPriority | None = None


class BatchUpdateUseCase:
    """
    Cambia estado y/o prioridad de varias tareas a la vez.

    Las tareas de otros usuarios quedan fuera del filtro y no se tocan.
    No recalcula progreso ni guarda snapshots.
    """

    def __init__(self, repository: TaskRepository, clock: Clock = utcnow) -> None:
        self._repository = repository
        self._clock = clock

    def execute(self, user_id: str, cmd: BatchUpdateCommand) -> int:
        status = parse_status(cmd.status) if cmd.status is not None else None
        priority = parse_priority(cmd.priority) if cmd.priority is not None else None
        if status is None and priority is None:
            raise ValidationError("Nothing to update: provide status or priority")
        if not cmd.task_ids:
            return 0

        modified = self._repository.batch_update(
            list(dict.fromkeys(cmd.task_ids)),
            user_id,
            status=status,
            priority=priority,
            updated_at=self._clock(),
        )
        logger.info(
            f"Actualización masiva de {len(cmd.task_ids)} tareas para {user_id}: "
            f"{modified} modificadas"
        )
        return modified
