"""Logger setup for scripts and notebooks driving the estimators."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


def setup_logger(
    name: str = "dominant_cycle",
    log_file: Optional[str] = None,
    level: int = logging.INFO,
) -> logging.Logger:
    """
    Configure a logger writing to the console and optionally to a file.

    Args:
        name: logger name (``dominant_cycle`` covers every module of the package)
        log_file: optional path of a UTF-8 log file
        level: level applied to the logger and its handlers

    Returns:
        the configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicated handlers on repeated calls
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


__all__ = ["setup_logger"]
