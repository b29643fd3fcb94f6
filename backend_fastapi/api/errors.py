import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.domain.errors import NotFoundError, ValidationError
from core.domain.models.task import TaskPriority, TaskStatus
from core.domain.validation import invalid_choice_message

logger = logging.getLogger(__name__)

# Campos enumerados que responden 400 como cualquier otra regla de dominio
_CHOICE_FIELDS = {"status": TaskStatus, "priority": TaskPriority}


def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.info(f"404 {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.message}
    )


def _validation(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info(f"400 {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.message}
    )


async def _request_validation(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Un estado o prioridad desconocidos se reportan con 400 y el mismo mensaje
    que la validación de dominio; el resto de errores de forma siguen en 422.
    """
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = loc[-1] if loc else None
        if error.get("type") == "enum" and field in _CHOICE_FIELDS:
            return _validation(
                request,
                ValidationError(invalid_choice_message(_CHOICE_FIELDS[field], field)),
            )
    return await request_validation_exception_handler(request, exc)


def _unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Traduce las excepciones de dominio a respuestas HTTP."""
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _validation)
    app.add_exception_handler(RequestValidationError, _request_validation)
    app.add_exception_handler(Exception, _unexpected)
