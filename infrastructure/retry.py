"""
Reintentos con backoff exponencial para los adaptadores de persistencia.

Solo se reintentan errores TRANSITORIOS de red/conexión; los errores de
lógica (validación, claves duplicadas, etc.) se propagan al primer intento.
"""

import functools
import logging
import time
from typing import Any, Callable, TypeVar

from peewee import InterfaceError, OperationalError
from pymongo.errors import AutoReconnect, ConnectionFailure, ServerSelectionTimeoutError

logger = logging.getLogger(__name__)

RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    AutoReconnect,
    ConnectionFailure,
    ServerSelectionTimeoutError,
    OperationalError,
    InterfaceError,
)

F = TypeVar("F", bound=Callable[..., Any])


def retry_with_backoff(
    func: Callable[[], Any],
    max_retries: int = 2,
    base_delay: float = 0.5,
    retryable_exceptions: tuple[type[BaseException], ...] = RETRYABLE_EXCEPTIONS,
) -> Any:
    """
    Ejecuta `func()` reintentando hasta `max_retries` veces.

    El delay se duplica en cada intento (base_delay, 2*base_delay, ...).

    Raises:
        La última excepción transitoria si se agotan los reintentos, o la
        excepción original si no es reintentable.
    """
    for attempt in range(1, max_retries + 2):
        try:
            return func()
        except retryable_exceptions as e:
            if attempt > max_retries:
                logger.error(f"❌ Agotados {max_retries} reintentos. Último error: {e}")
                raise
            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                f"🔁 Retry {attempt}/{max_retries} tras error transitorio: {e}. "
                f"Esperando {delay:.1f}s..."
            )
            time.sleep(delay)


def retrying(max_retries: int = 2, base_delay: float = 0.5) -> Callable[[F], F]:
    """Versión decorador de `retry_with_backoff` para métodos de repositorio."""

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return retry_with_backoff(
                lambda: method(*args, **kwargs),
                max_retries=max_retries,
                base_delay=base_delay,
            )

        return wrapper  # type: ignore[return-value]

    return decorator
