import logging
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Keeps a long-running device from filling its disk
LOG_FILE_MAX_BYTES = 2_000_000
LOG_FILE_BACKUPS = 5


def configure_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Console output, plus a rotating log file when ``log_file`` is set.

    Does nothing if the root logger already has handlers, so calling it
    again (or from an application that set up logging itself) never
    duplicates output.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
        )

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
