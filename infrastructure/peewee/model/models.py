from peewee import CharField, Database, IntegerField, Model, TextField, UUIDField
from pydantic import TypeAdapter

from core.domain.models.task import Subtask, TaskState
from infrastructure.peewee.model.fields import JSONField, UTCDateTimeField

SUBTASKS = TypeAdapter(list[Subtask])
TAGS = TypeAdapter(list[str])
TASK_STATE = TypeAdapter(TaskState)


class TaskModel(Model):
    id = UUIDField(primary_key=True)
    user_id = CharField(index=True)
    title = CharField()
    description = TextField()
    status = CharField(index=True)
    priority = CharField()
    due_date = UTCDateTimeField(null=True)
    target_date = UTCDateTimeField(null=True)
    completed_at = UTCDateTimeField(null=True)
    progress = IntegerField(default=0)
    color = CharField()
    subtasks = JSONField(SUBTASKS, default=list)
    tags = JSONField(TAGS, default=list)
    created_at = UTCDateTimeField(null=True, index=True)
    updated_at = UTCDateTimeField(null=True)

    class Meta:
        table_name = "tasks"


class HistoryModel(Model):
    id = UUIDField(primary_key=True)
    task_id = UUIDField(index=True)
    user_id = CharField()
    previous_state = JSONField(TASK_STATE)
    created_at = UTCDateTimeField()
    expires_at = UTCDateTimeField(index=True)

    class Meta:
        table_name = "task_history"


MODELS = [TaskModel, HistoryModel]


def init_schema(database: Database) -> None:
    """Enlaza los modelos a `database` y crea las tablas si no existen."""
    database.bind(MODELS)
    database.create_tables(MODELS, safe=True)
