"""
Excepciones de dominio.

La capa HTTP las traduce a respuestas (404 / 400); el núcleo no conoce
códigos de estado.
"""


class TaskError(Exception):
    """Error base del dominio de tareas."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(TaskError):
    """La tarea, subtarea o snapshot solicitado no existe para el usuario."""


class ValidationError(TaskError):
    """Los datos no cumplen una regla del dominio; no se persiste nada."""
