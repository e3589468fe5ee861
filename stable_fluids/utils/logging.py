"""
Logging setup for command line runs
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: Union[int, str] = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None,
                  log_format: str = DEFAULT_FORMAT):
    """
    Configure the root logger with a stdout handler and an optional file

    Args:
        level: Logging level, as a number or a name like 'DEBUG'
        log_file: Optional log file, parent directories are created
        log_format: Format string for every handler
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    formatter = logging.Formatter(log_format)
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def get_logger(name: Optional[str] = None, level: Optional[int] = None) -> logging.Logger:
    """
    Named logger, optionally with its own level
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
