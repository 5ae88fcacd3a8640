import logging
import sys

from cert_registry.settings import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


def set_logger_and_children_level(logger_instance: logging.Logger, level: int):
    """Set the level of a logger, its handlers and every child logger below it."""
    logger_instance.setLevel(level)
    for handler in logger_instance.handlers:
        handler.setLevel(level)

    if not logger_instance.name or logger_instance.name == "root":
        return

    for name in list(logging.root.manager.loggerDict):
        if name.startswith(logger_instance.name + "."):
            child = logging.getLogger(name)
            child.setLevel(level)
            for handler in child.handlers:
                handler.setLevel(level)


def _build_logger() -> logging.Logger:
    app_logger = logging.getLogger("cert_registry")
    if not app_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(handler)
    app_logger.propagate = False
    set_logger_and_children_level(
        app_logger, logging.getLevelName(settings.LOG_LEVEL.upper())
    )
    return app_logger


logger = _build_logger()

uvicorn_logger = logging.getLogger("uvicorn")
uvicorn_access_logger = logging.getLogger("uvicorn.access")
fastapi_logger = logging.getLogger("fastapi")
