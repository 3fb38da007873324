import logging
import sys
import os
from src.ask_your_data.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _file_handler() -> logging.Handler:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    return logging.FileHandler(os.path.join(settings.LOG_DIR, "app.log"), mode='a')


def get_logger(name: str) -> logging.Logger:
    """
    Configures and returns a logger instance with the specified name.
    Console output always; the append-mode log file only when LOG_TO_FILE is set.
    """
    logger = logging.getLogger(name)

    # Avoid adding multiple handlers if logger is already configured
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_TO_FILE:
        handlers.append(_file_handler())

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
