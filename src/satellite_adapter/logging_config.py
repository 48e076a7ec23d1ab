"""
Logging setup for the Satellite adapter command line and embedding processes
"""

import logging
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Union[str, int] = "INFO", log_file: Optional[Path] = None) -> None:
    """
    Configure root logging with a console handler and an optional file handler

    Args:
        level: Logging level name or number (the connection's trace level)
        log_file: Optional path of a log file; its directory is created if needed

    Raises:
        ValueError: If level is not a known logging level name
    """
    if isinstance(level, str):
        numeric_level = logging.getLevelName(level.upper())
        if not isinstance(numeric_level, int):
            raise ValueError(f"Unknown log level: {level}")
    else:
        numeric_level = level

    handlers = [logging.StreamHandler()]
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
