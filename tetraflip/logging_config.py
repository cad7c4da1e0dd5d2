"""
Logging configuration for the 'tetraflip' namespace.
The library itself only creates module loggers; call setup_logging() from scripts.
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the 'tetraflip' logger.

    Args:
        level: Logging level (logging.DEBUG, "INFO", ...)
        log_file: Optional path to save logs to a file.
    """
    if isinstance(level, str):
        numeric = getattr(logging, level.upper(), None)
        if not isinstance(numeric, int):
            raise ValueError(f"Invalid log level: {level}")
        level = numeric

    logger = logging.getLogger("tetraflip")
    logger.setLevel(level)

    # avoid duplicate handlers on repeated setup
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
