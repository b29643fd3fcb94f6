import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "info") -> None:
    """Handler a stdout para los loggers de la aplicación."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # pymongo es muy verboso en DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("peewee").setLevel(logging.INFO)
