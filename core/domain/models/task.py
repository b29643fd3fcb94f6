from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

DEFAULT_COLOR = "#3B82F6"


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(slots=True)
class Reminder:
    enabled: bool = False
    date: datetime | None = None
    notified: bool = False


@dataclass(slots=True)
class Subtask:
    title: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    completed_at: datetime | None = None
    dependencies: list[UUID] = field(default_factory=list)
    reminder: Reminder = field(default_factory=Reminder)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class TaskState:
    """
    Copia tipada de los campos mutables de una tarea.

    Es lo que guarda el historial para poder deshacer un cambio.
    """

    title: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None
    target_date: datetime | None
    completed_at: datetime | None
    progress: int
    color: str
    subtasks: list[Subtask]
    tags: list[str]


@dataclass(slots=True)
class Task:
    id: UUID
    user_id: str
    title: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    target_date: datetime | None = None
    completed_at: datetime | None = None
    progress: int = 0
    color: str = DEFAULT_COLOR
    subtasks: list[Subtask] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def capture_state(self) -> TaskState:
        """Devuelve una copia profunda del estado mutable actual."""
        return TaskState(
            title=self.title,
            description=self.description,
            status=self.status,
            priority=self.priority,
            due_date=self.due_date,
            target_date=self.target_date,
            completed_at=self.completed_at,
            progress=self.progress,
            color=self.color,
            subtasks=deepcopy(self.subtasks),
            tags=list(self.tags),
        )

    def restore_state(self, state: TaskState) -> None:
        """Reemplaza (no mezcla) todos los campos mutables con `state`."""
        self.title = state.title
        self.description = state.description
        self.status = state.status
        self.priority = state.priority
        self.due_date = state.due_date
        self.target_date = state.target_date
        self.completed_at = state.completed_at
        self.progress = state.progress
        self.color = state.color
        self.subtasks = deepcopy(state.subtasks)
        self.tags = list(state.tags)

    def find_subtask(self, subtask_id: UUID) -> Subtask | None:
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None


@dataclass(slots=True)
class TaskFilter:
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_before: datetime | None = None
    text: str | None = None


@dataclass(slots=True)
class TaskStatistics:
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    high_priority_tasks: int = 0

    @property
    def completion_rate(self) -> float:
        if not self.total_tasks:
            return 0.0
        return round(self.completed_tasks / self.total_tasks * 100, 1)
