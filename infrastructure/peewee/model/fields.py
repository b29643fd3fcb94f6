import json
from datetime import datetime, timezone
from typing import Any

from peewee import DateTimeField, TextField
from pydantic import TypeAdapter

_DB_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class UTCDateTimeField(DateTimeField):
    """
    Guarda fechas en UTC sin zona y las devuelve con `tzinfo=UTC`.

    El formato tiene ancho fijo para que las comparaciones en SQLite sean
    correctas también como texto.
    """

    def db_value(self, value: Any) -> Any:
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc).replace(tzinfo=None)
            return value.strftime(_DB_FORMAT)
        return super().db_value(value)

    def python_value(self, value: Any) -> Any:
        value = super().python_value(value)
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class JSONField(TextField):
    """Columna de texto con JSON validado por un `TypeAdapter` de pydantic."""

    def __init__(self, adapter: TypeAdapter[Any], *args: Any, **kwargs: Any) -> None:
        self.adapter = adapter
        super().__init__(*args, **kwargs)

    def db_value(self, value: Any) -> Any:
        if value is None:
            return None
        return json.dumps(self.adapter.dump_python(value, mode="json"))

    def python_value(self, value: Any) -> Any:
        if value is None:
            return None
        return self.adapter.validate_python(json.loads(value))
