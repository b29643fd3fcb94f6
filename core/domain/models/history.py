from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from core.domain.models.task import TaskState


@dataclass(slots=True)
class HistorySnapshot:
    task_id: UUID
    user_id: str
    previous_state: TaskState
    created_at: datetime
    expires_at: datetime
    id: UUID = field(default_factory=uuid4)

    def is_valid_at(self, now: datetime) -> bool:
        return self.expires_at > now
