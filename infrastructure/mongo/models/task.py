from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from core.domain.models.task import (
    DEFAULT_COLOR,
    Reminder,
    Subtask,
    Task,
    TaskPriority,
    TaskState,
    TaskStatus,
)


class ReminderMongo(BaseModel):
    enabled: bool = False
    date: datetime | None = None
    notified: bool = False


class SubtaskMongo(BaseModel):
    """Subtarea embebida dentro del documento de la tarea."""

    id: str = Field(alias="_id")
    title: str
    description: str | None = None
    status: str = TaskStatus.PENDING.value
    priority: str = TaskPriority.MEDIUM.value
    due_date: datetime | None = None
    completed_at: datetime | None = None
    dependencies: list[str] = Field(default_factory=list)
    reminder: ReminderMongo = Field(default_factory=ReminderMongo)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"populate_by_name": True}

    def to_domain(self) -> Subtask:
        return Subtask(
            id=UUID(self.id),
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status),
            priority=TaskPriority(self.priority),
            due_date=self.due_date,
            completed_at=self.completed_at,
            dependencies=[UUID(d) for d in self.dependencies],
            reminder=Reminder(**self.reminder.model_dump()),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, subtask: Subtask) -> "SubtaskMongo":
        return cls(
            id=str(subtask.id),
            title=subtask.title,
            description=subtask.description,
            status=subtask.status.value,
            priority=subtask.priority.value,
            due_date=subtask.due_date,
            completed_at=subtask.completed_at,
            dependencies=[str(d) for d in subtask.dependencies],
            reminder=ReminderMongo(
                enabled=subtask.reminder.enabled,
                date=subtask.reminder.date,
                notified=subtask.reminder.notified,
            ),
            created_at=subtask.created_at,
            updated_at=subtask.updated_at,
        )


class TaskStateMongo(BaseModel):
    """
    Campos mutables de la tarea. Es la parte común entre el documento de la
    tarea y el `previous_state` del historial.
    """

    title: str
    description: str
    status: str
    priority: str
    due_date: datetime | None = None
    target_date: datetime | None = None
    completed_at: datetime | None = None
    progress: int = 0
    color: str = DEFAULT_COLOR
    subtasks: list[SubtaskMongo] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def to_state(self) -> TaskState:
        return TaskState(
            title=self.title,
            description=self.description,
            status=TaskStatus(self.status),
            priority=TaskPriority(self.priority),
            due_date=self.due_date,
            target_date=self.target_date,
            completed_at=self.completed_at,
            progress=self.progress,
            color=self.color,
            subtasks=[s.to_domain() for s in self.subtasks],
            tags=list(self.tags),
        )

    @classmethod
    def from_state(cls, state: TaskState) -> "TaskStateMongo":
        return cls(
            title=state.title,
            description=state.description,
            status=state.status.value,
            priority=state.priority.value,
            due_date=state.due_date,
            target_date=state.target_date,
            completed_at=state.completed_at,
            progress=state.progress,
            color=state.color,
            subtasks=[SubtaskMongo.from_domain(s) for s in state.subtasks],
            tags=list(state.tags),
        )


class TaskMongo(TaskStateMongo):
    """
    Modelo de Tarea para MongoDB.
    Las subtareas se guardan embebidas, no en otra colección.
    """

    id: str = Field(alias="_id")
    user_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"populate_by_name": True}

    def to_domain(self) -> Task:
        task = Task(
            id=UUID(self.id),
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
        task.restore_state(self.to_state())
        return task

    @classmethod
    def from_domain(cls, task: Task) -> "TaskMongo":
        state = TaskStateMongo.from_state(task.capture_state())
        return cls(
            id=str(task.id),
            user_id=task.user_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
            **state.model_dump(),
        )
