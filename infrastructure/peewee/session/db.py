from peewee import Database
from playhouse.db_url import connect


def create_database(database_url: str = "sqlite:///tasks.db") -> Database:
    """
    Crea la conexión Peewee a partir de una URL (sqlite, postgres, mysql).

    La instancia la mantiene el contenedor; los modelos se enlazan a ella en
    tiempo de ejecución con `Database.bind`.
    """
    return connect(database_url)
