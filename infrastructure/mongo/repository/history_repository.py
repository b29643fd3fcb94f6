import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from core.domain.models.history import HistorySnapshot
from core.domain.ports.history_repository import HistoryRepository
from infrastructure.mongo.models.history import HistoryMongo
from infrastructure.mongo.session.client import HISTORY_COLLECTION
from infrastructure.retry import retrying

logger = logging.getLogger(__name__)

# BSON guarda milisegundos: `created_us` desempata y `_id` cierra el orden
LATEST_FIRST = [("created_us", DESCENDING), ("_id", DESCENDING)]


class MongoHistoryRepository(HistoryRepository):
    """
    Snapshots de deshacer en la colección `task_history`.

    La caducidad se aplica en cada consulta; el índice TTL solo limpia.
    """

    def __init__(self, db: Database[Any]) -> None:
        self.collection: Collection[Any] = db[HISTORY_COLLECTION]

    @retrying()
    def add(self, snapshot: HistorySnapshot) -> None:
        try:
            self.collection.insert_one(
                HistoryMongo.from_domain(snapshot).model_dump(by_alias=True)
            )
        except DuplicateKeyError:
            # un reintento tras AutoReconnect puede repetir un insert ya aplicado
            logger.debug(f"Snapshot {snapshot.id} ya estaba guardado")

    @retrying()
    def latest_valid(
        self, task_id: UUID, user_id: str, now: datetime
    ) -> HistorySnapshot | None:
        doc = self.collection.find_one(
            {
                "task_id": str(task_id),
                "user_id": user_id,
                "expires_at": {"$gt": now},
            },
            sort=LATEST_FIRST,
        )
        if not doc:
            return None
        return HistoryMongo(**doc).to_domain()

    @retrying()
    def delete(self, snapshot_id: UUID) -> None:
        self.collection.delete_one({"_id": str(snapshot_id)})

    @retrying()
    def delete_for_task(self, task_id: UUID) -> None:
        self.collection.delete_many({"task_id": str(task_id)})

    @retrying()
    def purge_expired(self, now: datetime) -> int:
        result = self.collection.delete_many({"expires_at": {"$lte": now}})
        return result.deleted_count
