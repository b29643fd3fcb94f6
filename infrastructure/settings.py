import os
from dataclasses import dataclass, field

from dotenv import load_dotenv


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(slots=True)
class Settings:
    """
    Configuración del proceso, leída de variables de entorno (y `.env`).
    """

    orm: str = "mongo"
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db_name: str = "task_manager"
    database_url: str = "sqlite:///tasks.db"
    undo_window_seconds: int = 30
    default_due_days: int = 7
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "info"
    host: str = "127.0.0.1"
    port: int = 8000
    reload: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            orm=os.getenv("ORM", "mongo").lower(),
            mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
            mongo_db_name=os.getenv("MONGO_DB_NAME", "task_manager"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///tasks.db"),
            undo_window_seconds=int(os.getenv("UNDO_WINDOW_SECONDS", "30")),
            default_due_days=int(os.getenv("DEFAULT_DUE_DAYS", "7")),
            cors_origins=_as_list(os.getenv("CORS_ORIGINS", "*")),
            cors_allow_credentials=_as_bool(os.getenv("CORS_ALLOW_CREDENTIALS", "true")),
            cors_allow_methods=_as_list(os.getenv("CORS_ALLOW_METHODS", "*")),
            cors_allow_headers=_as_list(os.getenv("CORS_ALLOW_HEADERS", "*")),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(os.getenv("PORT", "8000")),
            reload=_as_bool(os.getenv("RELOAD", "true")),
        )
