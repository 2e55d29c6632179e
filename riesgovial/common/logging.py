"""
Logger helpers shared by the server, the feeds and the headless client.
Every logger lives under the "riesgovial" namespace so one config value
(`log_level`) can tune them all.
"""
import logging
import time
from functools import wraps
from typing import Callable

ROOT_LOGGER = "riesgovial"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Module logger with a stream handler attached once."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(level)
    return logger


def set_level(level_name: str) -> int:
    """
    Applies a level name such as "DEBUG" to the namespace logger and to
    every module logger created so far. Unknown names fall back to INFO.
    """
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger(ROOT_LOGGER).setLevel(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(ROOT_LOGGER + ".") and isinstance(logger, logging.Logger):
            logger.setLevel(level)
    return level


def log_execution_time(logger: logging.Logger, slow_seconds: float = 0.05):
    """
    Times a synchronous call. Slow calls are logged at INFO, the rest at
    DEBUG; a failing call is logged with its traceback and re-raised.
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.exception(f"{func.__name__} failed")
                raise
            elapsed = time.perf_counter() - started
            if elapsed > slow_seconds:
                logger.info(f"{func.__name__} took {elapsed:.3f}s")
            else:
                logger.debug(f"{func.__name__} took {elapsed * 1000:.1f}ms")
            return result
        return wrapper
    return decorator
