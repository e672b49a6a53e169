import logging
import sys
from app.core.config import settings

def setup_logging():
    """
    Configure the application logger once and return it.
    """
    logger = logging.getLogger(settings.PROJECT_NAME.lower())
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ))
        logger.addHandler(handler)

    return logger

logger = setup_logging()
