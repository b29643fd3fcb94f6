"""
Coordinador de deshacer (un solo paso, con ventana de tiempo).

Antes de cada actualización se guarda una copia del estado persistido de la
tarea con caducidad `now + window`. Deshacer toma el snapshot válido más
reciente, reemplaza el estado de la tarea, lo persiste y borra el snapshot.
No hay pila de redo: restaurar no genera un snapshot nuevo.

No hay transacción entre snapshot y update; si dos requests se intercalan
gana la última escritura.
"""

import logging
from datetime import timedelta
from uuid import UUID

from core.application.common import load_owned_task
from core.domain.clock import Clock, utcnow
from core.domain.errors import NotFoundError
from core.domain.models.history import HistorySnapshot
from core.domain.models.task import Task
from core.domain.ports.history_repository import HistoryRepository
from core.domain.ports.task_repository import TaskRepository

logger = logging.getLogger(__name__)

DEFAULT_UNDO_WINDOW = timedelta(seconds=30)
NOTHING_TO_UNDO = "No recent changes to undo"


class UndoCoordinator:
    def __init__(
        self,
        repository: TaskRepository,
        history: HistoryRepository,
        clock: Clock = utcnow,
        window: timedelta = DEFAULT_UNDO_WINDOW,
    ) -> None:
        self._repository = repository
        self._history = history
        self._clock = clock
        self._window = window

    def snapshot_before_update(self, task_id: UUID, user_id: str) -> HistorySnapshot:
        """
        Guarda el estado persistido actual de la tarea.

        Debe llamarse antes de aplicar la actualización.

        Raises:
            NotFoundError: Si la tarea no existe o no pertenece al usuario.
        """
        current = load_owned_task(self._repository, task_id, user_id)
        now = self._clock()
        snapshot = HistorySnapshot(
            task_id=current.id,
            user_id=user_id,
            previous_state=current.capture_state(),
            created_at=now,
            expires_at=now + self._window,
        )
        self._history.add(snapshot)
        logger.debug(
            f"Snapshot {snapshot.id} de la tarea {task_id} "
            f"(expira {snapshot.expires_at.isoformat()})"
        )
        return snapshot

    def undo(self, task_id: UUID, user_id: str) -> Task:
        """
        Restaura la tarea al estado previo a la última actualización.

        Raises:
            NotFoundError: Si no hay snapshot vigente o la tarea ya no existe.
        """
        now = self._clock()
        snapshot = self._history.latest_valid(task_id, user_id, now)
        if snapshot is None:
            logger.info(f"Nada que deshacer para la tarea {task_id}")
            raise NotFoundError(NOTHING_TO_UNDO)

        task = load_owned_task(self._repository, task_id, user_id)
        task.restore_state(snapshot.previous_state)
        task.updated_at = now
        self._repository.save(task)
        self._history.delete(snapshot.id)

        logger.info(f"↩️ Tarea {task_id} restaurada desde el snapshot {snapshot.id}")
        return task

    def discard(self, task_id: UUID) -> None:
        self._history.delete_for_task(task_id)

    def purge_expired(self) -> int:
        removed = self._history.purge_expired(self._clock())
        if removed:
            logger.info(f"🧹 {removed} snapshots caducados eliminados")
        return removed
