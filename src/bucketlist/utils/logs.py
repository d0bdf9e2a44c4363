import logging
import sys
from typing import Optional, Union

from ..config import LOG_FORMAT, LOG_LEVEL


def setup_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger for the whole package."""
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
