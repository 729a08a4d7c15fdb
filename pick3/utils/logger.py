"""
pick3/utils/logger.py
Module loggers hang off one "pick3" root: Rich console + a shared rotating file.
"""
import logging
import os
from logging.handlers import RotatingFileHandler

from rich.logging import RichHandler

ROOT_LOGGER = "pick3"
LOG_DIR = os.getenv("PICK3_LOG_DIR", "logs")
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.propagate = False

    root.addHandler(RichHandler(rich_tracebacks=True, show_path=False))

    # one file for every module, the record name tells them apart
    os.makedirs(LOG_DIR, exist_ok=True)
    file_handler = RotatingFileHandler(
        os.path.join(LOG_DIR, f"{ROOT_LOGGER}.log"),
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(file_handler)
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """
    get_logger("analysis.pairs") -> "pick3.analysis.pairs". Children carry no
    handlers of their own; level and output come from the root.
    """
    root = _root()
    if name == ROOT_LOGGER:
        return root
    return root.getChild(name)
