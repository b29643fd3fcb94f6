from typing import Any

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

TASKS_COLLECTION = "tasks"
HISTORY_COLLECTION = "task_history"


def create_client(mongo_uri: str) -> MongoClient[Any]:
    """
    Crea el cliente de MongoDB.

    Lo construye el contenedor una sola vez por proceso y lo cierra al apagar
    la aplicación. `tz_aware` hace que las fechas vuelvan con zona UTC.
    """
    return MongoClient(mongo_uri, tz_aware=True)


def get_db(client: MongoClient[Any], db_name: str) -> Database[Any]:
    return client[db_name]


def ensure_indexes(db: Database[Any]) -> None:
    """
    Índices de consulta y TTL del historial.

    El TTL solo es higiene de almacenamiento: las consultas ya filtran
    `expires_at > now`.
    """
    tasks = db[TASKS_COLLECTION]
    tasks.create_index([("user_id", ASCENDING), ("status", ASCENDING)])
    tasks.create_index([("user_id", ASCENDING), ("target_date", ASCENDING)])
    tasks.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])

    history = db[HISTORY_COLLECTION]
    history.create_index(
        [
            ("task_id", ASCENDING),
            ("user_id", ASCENDING),
            ("created_us", DESCENDING),
            ("_id", DESCENDING),
        ]
    )
    history.create_index("expires_at", expireAfterSeconds=0)
