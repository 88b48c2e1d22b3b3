"""
Logging Configuration
Sets up the global logger for the viewer.

Every record carries the reference of the model being loaded or recovered
(`%(model_ref)s`, "-" outside a load), so interleaved loads of several models
can be told apart in the console and the log file.
"""
from contextlib import contextmanager
from contextvars import ContextVar
import logging
import sys
from typing import Iterator, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(model_ref)s] %(message)s'
NO_MODEL = "-"

_current_model: ContextVar[str] = ContextVar("current_model", default=NO_MODEL)


@contextmanager
def model_context(ref: str) -> Iterator[None]:
    """Tag records logged inside the block (and tasks started from it) with `ref`."""
    token = _current_model.set(ref)
    try:
        yield
    finally:
        _current_model.reset(token)


def current_model() -> str:
    return _current_model.get()


class ModelRefFilter(logging.Filter):
    """Adds the `model_ref` attribute used by LOG_FORMAT."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "model_ref"):
            record.model_ref = _current_model.get()
        return True


def make_formatter() -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'modelviewport' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("modelviewport")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = make_formatter()
    model_filter = ModelRefFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(model_filter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(model_filter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
    return logger
