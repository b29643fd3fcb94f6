from pydantic import BaseModel, Field

from core.domain.models.task import TaskPriority, TaskStatistics, TaskStatus


class StatusBody(BaseModel):
    status: TaskStatus


class PriorityBody(BaseModel):
    priority: TaskPriority


class TagsBody(BaseModel):
    tags: list[str] = Field(default_factory=list)


class BatchUpdateResponse(BaseModel):
    modified_count: int


class StatisticsResponse(BaseModel):
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
    high_priority_tasks: int
    completion_rate: float

    @classmethod
    def from_domain(cls, stats: TaskStatistics) -> "StatisticsResponse":
        return cls(
            total_tasks=stats.total_tasks,
            completed_tasks=stats.completed_tasks,
            pending_tasks=stats.pending_tasks,
            high_priority_tasks=stats.high_priority_tasks,
            completion_rate=stats.completion_rate,
        )
