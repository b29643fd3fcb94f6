import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend_fastapi.api.errors import register_exception_handlers
from backend_fastapi.api.routes.tasks import router as tasks_router
from infrastructure.container import Container, build_container
from infrastructure.logging_setup import configure_logging
from infrastructure.settings import Settings

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, container: Container | None = None
) -> FastAPI:
    """
    Construye la aplicación.

    Si no se pasa `container`, se crea en el arranque a partir de `settings`
    y se cierra al apagar.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = container is None
        app.state.container = container or build_container(settings)
        app.state.container.undo.purge_expired()
        logger.info(f"🚀 API de tareas lista (ORM={settings.orm})")
        try:
            yield
        finally:
            if owned:
                app.state.container.close()

    app = FastAPI(title="Task Manager API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    register_exception_handlers(app)

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(tasks_router)
    return app


app = create_app()
