import logging
import sys
from logging.handlers import RotatingFileHandler


def setup_logging(settings) -> logging.Logger:
    """Console + rotating file logging, configured once per process"""
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.LOG_LEVEL))

    # Remove pre-existing handlers to avoid duplicate lines on re-configuration
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(settings.LOG_FORMAT, datefmt=settings.LOG_DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        settings.LOGS_DIR.mkdir(exist_ok=True, parents=True)
        file_handler = RotatingFileHandler(
            settings.LOGS_DIR / "taskboard.log",
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return root
