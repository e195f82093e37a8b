"""
Logging Configuration
Log records go to stderr so they never interleave with the batch progress
printed on stdout; an optional file keeps the full timestamped trail.
"""
import logging
import sys
from typing import Optional, Union

LOGGER_NAME = "pendulum_grid"

CONSOLE_FORMAT = '[%(levelname)s] %(name)s: %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(module: str) -> logging.Logger:
    """Child logger of the project namespace, e.g. get_logger('simulator')."""
    return logging.getLogger(f"{LOGGER_NAME}.{module}")


def resolve_level(level: Union[int, str]) -> int:
    """Accept logging constants or names such as 'debug' / 'INFO'."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'pendulum_grid' logger namespace.

    Args:
        level: Logging level, as a constant or a name ('debug', 'WARNING', ...)
        log_file: Optional path to save logs to a file.
    """
    level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Only our own handlers are replaced on repeated calls
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%H:%M:%S'))
        logger.addHandler(file_handler)

    logger.debug("Logging initialized at %s.", logging.getLevelName(level))
    return logger
