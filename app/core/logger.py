import inspect
import logging
import sys

from loguru import logger

from app.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Libraries that log every request or retry at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "hpack", "stripe")


class InterceptHandler(logging.Handler):
    """Forwards stdlib log records (uvicorn, httpx, stripe) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real caller
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = None, error_log: str = None):
    level = level or settings.LOG_LEVEL
    error_log = error_log or settings.ERROR_LOG_FILE

    logger.remove()
    logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT)
    # No variable values in file tracebacks, they may hold tokens
    logger.add(
        error_log,
        level="ERROR",
        rotation="10 MB",
        retention="1 month",
        compression="zip",
        diagnose=False,
        format=FILE_FORMAT,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

__all__ = ["logger", "setup_logging"]
