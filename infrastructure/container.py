import logging
from datetime import timedelta
from typing import Callable

from core.application.batch_update import BatchUpdateUseCase
from core.application.create_task import CreateTaskUseCase
from core.application.delete_task import DeleteTaskUseCase
from core.application.list_tasks import (
    GetTaskUseCase,
    ListTasksUseCase,
    TaskStatisticsUseCase,
)
from core.application.patch_task import (
    AddTagsUseCase,
    UpdatePriorityUseCase,
    UpdateStatusUseCase,
)
from core.application.subtasks import (
    AddSubtaskUseCase,
    RemoveSubtaskUseCase,
    UpdateSubtaskUseCase,
)
from core.application.undo import UndoCoordinator
from core.application.update_task import UpdateTaskUseCase
from core.domain.clock import Clock, utcnow
from core.domain.ports.history_repository import HistoryRepository
from core.domain.ports.task_repository import TaskRepository
from infrastructure.mongo.repository.history_repository import MongoHistoryRepository
from infrastructure.mongo.repository.task_repository import MongoTaskRepository
from infrastructure.mongo.session.client import create_client, ensure_indexes, get_db
from infrastructure.peewee.repository.history_repository import (
    PeeweeHistoryRepository,
)
from infrastructure.peewee.repository.task_repository import PeeweeTaskRepository
from infrastructure.peewee.session.db import create_database
from infrastructure.settings import Settings

logger = logging.getLogger(__name__)


class Container:
    """
    Servicios de la aplicación con vida de proceso.

    Lo crea el punto de entrada (lifespan de FastAPI) y se inyecta en las
    rutas; no hay conexiones globales a nivel de módulo.
    """

    def __init__(
        self,
        repository: TaskRepository,
        history: HistoryRepository,
        clock: Clock = utcnow,
        undo_window: timedelta = timedelta(seconds=30),
        default_due_in: timedelta = timedelta(days=7),
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.repository = repository
        self.history = history
        self.undo = UndoCoordinator(repository, history, clock, undo_window)

        self.create_task = CreateTaskUseCase(repository, clock, default_due_in)
        self.update_task = UpdateTaskUseCase(repository, self.undo, clock)
        self.delete_task = DeleteTaskUseCase(repository, self.undo)
        self.get_task = GetTaskUseCase(repository)
        self.list_tasks = ListTasksUseCase(repository)
        self.statistics = TaskStatisticsUseCase(repository)
        self.update_status = UpdateStatusUseCase(repository, self.undo, clock)
        self.update_priority = UpdatePriorityUseCase(repository, self.undo, clock)
        self.add_tags = AddTagsUseCase(repository, self.undo, clock)
        self.batch_update = BatchUpdateUseCase(repository, clock)
        self.add_subtask = AddSubtaskUseCase(repository, self.undo, clock)
        self.update_subtask = UpdateSubtaskUseCase(repository, self.undo, clock)
        self.remove_subtask = RemoveSubtaskUseCase(repository, self.undo, clock)

        self._on_close = on_close

    def close(self) -> None:
        if self._on_close is not None:
            self._on_close()


def build_container(settings: Settings) -> Container:
    window = timedelta(seconds=settings.undo_window_seconds)
    due_in = timedelta(days=settings.default_due_days)

    if settings.orm == "peewee":
        database = create_database(settings.database_url)
        logger.info(f"Persistencia Peewee en {settings.database_url}")
        return Container(
            PeeweeTaskRepository(database),
            PeeweeHistoryRepository(database),
            undo_window=window,
            default_due_in=due_in,
            on_close=database.close,
        )

    if settings.orm == "mongo":
        client = create_client(settings.mongo_uri)
        db = get_db(client, settings.mongo_db_name)
        ensure_indexes(db)
        logger.info(f"Persistencia MongoDB en la base {settings.mongo_db_name}")
        return Container(
            MongoTaskRepository(db),
            MongoHistoryRepository(db),
            undo_window=window,
            default_due_in=due_in,
            on_close=client.close,
        )

    raise ValueError(f"ORM no soportado: {settings.orm!r} (usa 'mongo' o 'peewee')")
