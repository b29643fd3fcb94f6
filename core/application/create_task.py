import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from uuid import uuid4

from core.domain.clock import Clock, as_utc, utcnow
from core.domain.errors import ValidationError
from core.domain.lifecycle import apply_lifecycle
from core.domain.models.task import (
    DEFAULT_COLOR,
    Reminder,
    Subtask,
    Task,
    TaskPriority,
    TaskStatus,
)
from core.domain.ports.task_repository import TaskRepository
from core.domain.validation import (
    clean_description,
    clean_tags,
    clean_title,
    parse_priority,
    parse_status,
)

logger = logging.getLogger(__name__)

DEFAULT_DUE_IN = timedelta(days=7)


@dataclass(slots=True)
class SubtaskInput:
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    reminder: Reminder | None = None


@dataclass(slots=True)
class CreateTaskCommand:
    title: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    target_date: datetime | None = None
    color: str | None = None
    tags: list[str] = field(default_factory=list)
    subtasks: list[SubtaskInput] = field(default_factory=list)


def build_subtask(data: SubtaskInput, now: datetime) -> Subtask:
    title = (data.title or "").strip()
    if not title:
        raise ValidationError("Subtask title is required")
    return Subtask(
        title=title,
        description=data.description,
        status=parse_status(data.status),
        priority=parse_priority(data.priority),
        due_date=as_utc(data.due_date),
        reminder=data.reminder or Reminder(),
        created_at=now,
        updated_at=now,
    )


class CreateTaskUseCase:
    def __init__(
        self,
        repository: TaskRepository,
        clock: Clock = utcnow,
        default_due_in: timedelta = DEFAULT_DUE_IN,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._default_due_in = default_due_in

    def execute(self, user_id: str, cmd: CreateTaskCommand) -> Task:
        now = self._clock()
        task = Task(
            id=uuid4(),
            user_id=user_id,
            title=clean_title(cmd.title),
            description=clean_description(cmd.description),
            status=parse_status(cmd.status),
            priority=parse_priority(cmd.priority),
            due_date=as_utc(cmd.due_date) or now + self._default_due_in,
            target_date=as_utc(cmd.target_date) or now + self._default_due_in,
            color=cmd.color or DEFAULT_COLOR,
            subtasks=[build_subtask(s, now) for s in cmd.subtasks],
            tags=clean_tags(cmd.tags),
            created_at=now,
            updated_at=now,
        )
        apply_lifecycle(task, now)

        self._repository.save(task)
        logger.info(f"✅ Tarea {task.id} creada para el usuario {user_id}")
        return task
