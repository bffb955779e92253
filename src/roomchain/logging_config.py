import logging
import os
import sys
from typing import Optional, TextIO

LOG_LEVEL_ENV = "ROOMCHAIN_LOG_LEVEL"


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Install a single stream handler on the root logger.

    Logs go to stderr by default so stdout stays clean for CLI output.
    Respects ROOMCHAIN_LOG_LEVEL if present.
    """
    level_name = os.getenv(LOG_LEVEL_ENV)
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    handler = logging.StreamHandler(stream=stream if stream is not None else sys.stderr)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
