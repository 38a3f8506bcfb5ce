"""Logging utilities for lspextract commands."""

from __future__ import annotations

import contextlib
import logging
from contextvars import ContextVar
from pathlib import Path
from typing import Iterator

_LOGGER_NAME = "lspextract"

_NO_MODULE = "-"

_current_module: ContextVar[str] = ContextVar("lspextract_config_module", default=_NO_MODULE)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the lspextract hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


@contextlib.contextmanager
def evaluating(module_name: str) -> Iterator[None]:
    """Attribute every record logged inside the block to configuration ``module_name``."""
    token = _current_module.set(module_name)
    try:
        yield
    finally:
        _current_module.reset(token)


class ConfigModuleFilter(logging.Filter):
    """Stamps ``record.config_module`` with the module under evaluation, or ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.config_module = _current_module.get()
        return True


class _ConsoleFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        module = getattr(record, "config_module", _NO_MODULE)
        if module == _NO_MODULE:
            return text
        return f"{text} (in {module})"


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the lspextract logger with console output and optional file sink.

    Messages logged while a configuration module is evaluated (``vim.notify``,
    deprecation notices) name that module in both sinks.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    module_filter = ConfigModuleFilter()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.addFilter(module_filter)
    stream_handler.setFormatter(_ConsoleFormatter("[lspextract] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(module_filter)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(config_module)s]: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ConfigModuleFilter", "configure_logging", "evaluating", "get_logger"]
