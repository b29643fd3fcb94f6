from datetime import datetime
from uuid import UUID

from peewee import Database

from core.domain.models.history import HistorySnapshot
from core.domain.ports.history_repository import HistoryRepository
from infrastructure.peewee.model.models import HistoryModel, init_schema
from infrastructure.retry import retrying


class PeeweeHistoryRepository(HistoryRepository):
    def __init__(self, database: Database) -> None:
        self._db = database
        init_schema(self._db)

    # on_conflict_ignore: un reintento no duplica ni falla por la clave primaria
    @retrying()
    def add(self, snapshot: HistorySnapshot) -> None:
        HistoryModel.insert(
            id=snapshot.id,
            task_id=snapshot.task_id,
            user_id=snapshot.user_id,
            previous_state=snapshot.previous_state,
            created_at=snapshot.created_at,
            expires_at=snapshot.expires_at,
        ).on_conflict_ignore().execute()

    @retrying()
    def latest_valid(
        self, task_id: UUID, user_id: str, now: datetime
    ) -> HistorySnapshot | None:
        row = (
            HistoryModel.select()
            .where(
                HistoryModel.task_id == task_id,
                HistoryModel.user_id == user_id,
                HistoryModel.expires_at > now,
            )
            .order_by(HistoryModel.created_at.desc())
            .first()
        )
        if row is None:
            return None
        return HistorySnapshot(
            id=row.id,
            task_id=row.task_id,
            user_id=row.user_id,
            previous_state=row.previous_state,
            created_at=row.created_at,
            expires_at=row.expires_at,
        )

    @retrying()
    def delete(self, snapshot_id: UUID) -> None:
        HistoryModel.delete().where(HistoryModel.id == snapshot_id).execute()

    @retrying()
    def delete_for_task(self, task_id: UUID) -> None:
        HistoryModel.delete().where(HistoryModel.task_id == task_id).execute()

    @retrying()
    def purge_expired(self, now: datetime) -> int:
        return HistoryModel.delete().where(HistoryModel.expires_at <= now).execute()
