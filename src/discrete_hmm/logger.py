"""
Logging for the discrete_hmm package.

Everything logs under the 'discrete_hmm' root logger, which is configured
once from the 'logging' config section at import time. Inference code
logs to 'discrete_hmm.hmm' and the trainers to 'discrete_hmm.training'.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import get_config

ROOT_LOGGER_NAME = 'discrete_hmm'
HMM_COMPONENT = 'hmm'
TRAINING_COMPONENT = 'training'


def _root() -> logging.Logger:
    return logging.getLogger(ROOT_LOGGER_NAME)


def _level(level: Optional[str] = None) -> int:
    if level is None:
        level = get_config('logging', 'level') or 'INFO'
    return getattr(logging, level.upper())


def _file_handler(log_file: Optional[str], level: int,
                  formatter: Optional[logging.Formatter]) -> logging.FileHandler:
    if log_file is None:
        log_file = get_config('logging', 'log_file') or 'discrete_hmm.log'
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path)
    handler.setLevel(level)
    if formatter is not None:
        handler.setFormatter(formatter)
    return handler


def configure_logging() -> logging.Logger:
    """(Re)build the package handlers from the current configuration."""
    level = _level()
    formatter = logging.Formatter(get_config('logging', 'format'))

    root = _root()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if get_config('logging', 'file_logging'):
        root.addHandler(_file_handler(None, level, formatter))

    # Package output goes to our own handlers only
    root.propagate = False
    return root


def get_logger(name: str = 'main') -> logging.Logger:
    """Logger under the package root; names already under it are kept."""
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + '.'):
        name = f'{ROOT_LOGGER_NAME}.{name}'
    return logging.getLogger(name)


def get_hmm_logger() -> logging.Logger:
    """Logger shared by the inference algorithms and the model."""
    return get_logger(HMM_COMPONENT)


def get_training_logger() -> logging.Logger:
    """Logger shared by Baum-Welch and supervised estimation."""
    return get_logger(TRAINING_COMPONENT)


def set_log_level(level: str) -> None:
    """Set the level of the package root logger and all of its handlers."""
    log_level = _level(level)
    root = _root()
    root.setLevel(log_level)
    for handler in root.handlers:
        handler.setLevel(log_level)


def enable_file_logging(log_file: Optional[str] = None) -> None:
    """Add a file handler unless one is already attached."""
    root = _root()
    if any(isinstance(h, logging.FileHandler) for h in root.handlers):
        return

    formatter = root.handlers[0].formatter if root.handlers else None
    root.addHandler(_file_handler(log_file, root.level, formatter))


def disable_file_logging() -> None:
    """Detach and close every file handler."""
    root = _root()
    for handler in [h for h in root.handlers if isinstance(h, logging.FileHandler)]:
        root.removeHandler(handler)
        handler.close()


configure_logging()
