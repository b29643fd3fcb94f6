from datetime import datetime, timedelta, timezone
from uuid import UUID

from pydantic import BaseModel, Field

from core.domain.models.history import HistorySnapshot
from infrastructure.mongo.models.task import TaskStateMongo

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_us(value: datetime) -> int:
    """Microsegundos desde epoch, exactos (sin pasar por float)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(microseconds=1)


class HistoryMongo(BaseModel):
    """
    Snapshot de una tarea en la colección `task_history`.

    `created_us` conserva la precisión que BSON pierde en `created_at` y se
    usa para ordenar.
    """

    id: str = Field(alias="_id")
    task_id: str
    user_id: str
    previous_state: TaskStateMongo
    created_at: datetime
    created_us: int = 0
    expires_at: datetime

    model_config = {"populate_by_name": True}

    def to_domain(self) -> HistorySnapshot:
        return HistorySnapshot(
            id=UUID(self.id),
            task_id=UUID(self.task_id),
            user_id=self.user_id,
            previous_state=self.previous_state.to_state(),
            created_at=self.created_at,
            expires_at=self.expires_at,
        )

    @classmethod
    def from_domain(cls, snapshot: HistorySnapshot) -> "HistoryMongo":
        return cls(
            id=str(snapshot.id),
            task_id=str(snapshot.task_id),
            user_id=snapshot.user_id,
            previous_state=TaskStateMongo.from_state(snapshot.previous_state),
            created_at=snapshot.created_at,
            created_us=to_epoch_us(snapshot.created_at),
            expires_at=snapshot.expires_at,
        )
