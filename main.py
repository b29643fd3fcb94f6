import logging

import uvicorn

from infrastructure.logging_setup import configure_logging
from infrastructure.settings import Settings

logger = logging.getLogger(__name__)


def run() -> None:
    """Arranca la API con uvicorn usando la configuración del entorno."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    logger.info(
        f"▶️ API de tareas en http://{settings.host}:{settings.port} "
        f"(ORM={settings.orm}, reload={settings.reload})"
    )

    uvicorn.run(
        "backend_fastapi.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
