import logging
import re
from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from core.domain.clock import utcnow
from core.domain.models.task import (
    Task,
    TaskFilter,
    TaskPriority,
    TaskStatistics,
    TaskStatus,
)
from core.domain.ports.task_repository import TaskRepository
from infrastructure.mongo.models.task import TaskMongo
from infrastructure.mongo.session.client import TASKS_COLLECTION
from infrastructure.retry import retrying

logger = logging.getLogger(__name__)


def build_query(user_id: str, filters: TaskFilter | None) -> dict[str, Any]:
    query: dict[str, Any] = {"user_id": user_id}
    if filters is None:
        return query
    if filters.status is not None:
        query["status"] = filters.status.value
    if filters.priority is not None:
        query["priority"] = filters.priority.value
    if filters.due_before is not None:
        query["due_date"] = {"$lte": filters.due_before}
    if filters.text:
        pattern = {"$regex": re.escape(filters.text), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"description": pattern}]
    return query


class MongoTaskRepository(TaskRepository):
    """
    Implementación de TaskRepository usando MongoDB (Synchronous).
    """

    def __init__(self, db: Database[Any]) -> None:
        self.collection: Collection[Any] = db[TASKS_COLLECTION]

    @retrying()
    def save(self, task: Task) -> None:
        """
        Guarda o actualiza una tarea (upsert del documento completo).

        Argumentos:
            task (Task): La tarea a guardar.
        """
        task_dict = TaskMongo.from_domain(task).model_dump(by_alias=True)
        self.collection.update_one(
            {"_id": task_dict["_id"]}, {"$set": task_dict}, upsert=True
        )

    @retrying()
    def get(self, task_id: UUID) -> Task | None:
        """
        Obtiene una tarea por su ID.

        Retorna:
            Task | None: La tarea encontrada o None si no existe.
        """
        doc = self.collection.find_one({"_id": str(task_id)})
        if not doc:
            return None
        return TaskMongo(**doc).to_domain()

    @retrying()
    def list(self, user_id: str, filters: TaskFilter | None = None) -> list[Task]:
        """
        Lista las tareas del usuario, más recientes primero.
        """
        query = build_query(user_id, filters)
        logger.debug(f"📋 Listando tareas con filtro {query}")
        docs = self.collection.find(query).sort("created_at", DESCENDING)
        return [TaskMongo(**doc).to_domain() for doc in docs]

    @retrying()
    def delete(self, task_id: UUID) -> None:
        self.collection.delete_one({"_id": str(task_id)})

    @retrying()
    def batch_update(
        self,
        task_ids: Sequence[UUID],
        user_id: str,
        status: TaskStatus | None = None,
        priority: TaskPriority | None = None,
        updated_at: datetime | None = None,
    ) -> int:
        """
        `$set` sobre las tareas del usuario cuyo valor realmente cambia.

        Se usa un pipeline de agregación para que `completed_at` solo se
        fije en los documentos que aún no lo tienen.

        Retorna:
            int: Número de documentos modificados.
        """
        now = updated_at or utcnow()
        changes: dict[str, Any] = {}
        differs: list[dict[str, Any]] = []
        if status is not None:
            changes["status"] = status.value
            differs.append({"status": {"$ne": status.value}})
            if status is TaskStatus.COMPLETED:
                changes["completed_at"] = {"$ifNull": ["$completed_at", now]}
        if priority is not None:
            changes["priority"] = priority.value
            differs.append({"priority": {"$ne": priority.value}})
        if not changes:
            return 0
        changes["updated_at"] = now

        result = self.collection.update_many(
            {
                "_id": {"$in": [str(task_id) for task_id in task_ids]},
                "user_id": user_id,
                "$or": differs,
            },
            [{"$set": changes}],
        )
        return result.modified_count

    @retrying()
    def statistics(self, user_id: str) -> TaskStatistics:
        """Conteos por usuario con una sola agregación."""
        pipeline = [
            {"$match": {"user_id": user_id}},
            {
                "$group": {
                    "_id": None,
                    "total_tasks": {"$sum": 1},
                    "completed_tasks": {
                        "$sum": {"$cond": [{"$eq": ["$status", "completed"]}, 1, 0]}
                    },
                    "pending_tasks": {
                        "$sum": {"$cond": [{"$eq": ["$status", "pending"]}, 1, 0]}
                    },
                    "high_priority_tasks": {
                        "$sum": {"$cond": [{"$eq": ["$priority", "high"]}, 1, 0]}
                    },
                }
            },
        ]
        rows = list(self.collection.aggregate(pipeline))
        if not rows:
            return TaskStatistics()
        row = rows[0]
        return TaskStatistics(
            total_tasks=row["total_tasks"],
            completed_tasks=row["completed_tasks"],
            pending_tasks=row["pending_tasks"],
            high_priority_tasks=row["high_priority_tasks"],
        )
