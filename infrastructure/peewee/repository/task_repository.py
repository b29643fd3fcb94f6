import logging
import operator
from datetime import datetime
from functools import reduce
from typing import Any, Sequence
from uuid import UUID

from peewee import Case, Database, Value, fn

from core.domain.clock import utcnow
from core.domain.models.task import (
    Task,
    TaskFilter,
    TaskPriority,
    TaskStatistics,
    TaskStatus,
)
from core.domain.ports.task_repository import TaskRepository
from infrastructure.peewee.model.models import TaskModel, init_schema
from infrastructure.retry import retrying

logger = logging.getLogger(__name__)


def _to_row(task: Task) -> dict[str, Any]:
    return {
        "user_id": task.user_id,
        "title": task.title,
        "description": task.description,
        "status": task.status.value,
        "priority": task.priority.value,
        "due_date": task.due_date,
        "target_date": task.target_date,
        "completed_at": task.completed_at,
        "progress": task.progress,
        "color": task.color,
        "subtasks": task.subtasks,
        "tags": task.tags,
        "created_at": task.created_at,
        "updated_at": task.updated_at,
    }


def _to_domain(row: TaskModel) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        status=TaskStatus(row.status),
        priority=TaskPriority(row.priority),
        due_date=row.due_date,
        target_date=row.target_date,
        completed_at=row.completed_at,
        progress=row.progress,
        color=row.color,
        subtasks=row.subtasks or [],
        tags=row.tags or [],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class PeeweeTaskRepository(TaskRepository):
    """
    TaskRepository sobre SQL con Peewee.

    Las subtareas y etiquetas se guardan como columnas JSON para conservar la
    forma de documento de la tarea.
    """

    def __init__(self, database: Database) -> None:
        self._db = database
        init_schema(self._db)

    @retrying()
    def save(self, task: Task) -> None:
        row = _to_row(task)
        with self._db.atomic():
            exists = TaskModel.select().where(TaskModel.id == task.id).exists()
            if exists:
                TaskModel.update(**row).where(TaskModel.id == task.id).execute()
            else:
                TaskModel.insert(id=task.id, **row).execute()

    @retrying()
    def get(self, task_id: UUID) -> Task | None:
        try:
            return _to_domain(TaskModel.get(TaskModel.id == task_id))
        except TaskModel.DoesNotExist:
            return None

    @retrying()
    def list(self, user_id: str, filters: TaskFilter | None = None) -> list[Task]:
        query = TaskModel.select().where(TaskModel.user_id == user_id)
        if filters is not None:
            if filters.status is not None:
                query = query.where(TaskModel.status == filters.status.value)
            if filters.priority is not None:
                query = query.where(TaskModel.priority == filters.priority.value)
            if filters.due_before is not None:
                query = query.where(TaskModel.due_date <= filters.due_before)
            if filters.text:
                query = query.where(
                    TaskModel.title.contains(filters.text)
                    | TaskModel.description.contains(filters.text)
                )
        query = query.order_by(TaskModel.created_at.desc())
        return [_to_domain(row) for row in query]

    @retrying()
    def delete(self, task_id: UUID) -> None:
        TaskModel.delete().where(TaskModel.id == task_id).execute()

    @retrying()
    def batch_update(
        self,
        task_ids: Sequence[UUID],
        user_id: str,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        updated_at: datetime | None = None,
    ) -> int:
        now = updated_at or utcnow()
        changes: dict[Any, Any] = {}
        differs = []
        if status is not None:
            changes[TaskModel.status] = status.value
            differs.append(TaskModel.status != status.value)
            if status is TaskStatus.COMPLETED:
                stamp = Value(now, converter=TaskModel.completed_at.db_value)
                changes[TaskModel.completed_at] = fn.COALESCE(
                    TaskModel.completed_at, stamp
                )
        if priority is not None:
            changes[TaskModel.priority] = priority.value
            differs.append(TaskModel.priority != priority.value)
        if not changes:
            return 0
        changes[TaskModel.updated_at] = now

        query = TaskModel.update(changes).where(
            TaskModel.id.in_(task_ids),
            TaskModel.user_id == user_id,
            reduce(operator.or_, differs),
        )
        return query.execute()

    @retrying()
    def statistics(self, user_id: str) -> TaskStatistics:
        def count_if(condition: Any) -> Any:
            return fn.COALESCE(fn.SUM(Case(None, [(condition, 1)], 0)), 0)

        row = (
            TaskModel.select(
                fn.COUNT(TaskModel.id).alias("total_tasks"),
                count_if(TaskModel.status == TaskStatus.COMPLETED.value).alias(
                    "completed_tasks"
                ),
                count_if(TaskModel.status == TaskStatus.PENDING.value).alias(
                    "pending_tasks"
                ),
                count_if(TaskModel.priority == TaskPriority.HIGH.value).alias(
                    "high_priority_tasks"
                ),
            )
            .where(TaskModel.user_id == user_id)
            .dicts()
            .get()
        )
        return TaskStatistics(**{key: int(value or 0) for key, value in row.items()})
