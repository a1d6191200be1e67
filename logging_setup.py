import logging
from typing import Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure(level: Union[str, int] = "INFO") -> None:
    """Initialise standard logging with a consistent formatter."""
    if isinstance(level, str):
        logging_level = logging.getLevelName(level.upper())
    else:
        logging_level = level

    logging.basicConfig(level=logging_level, format=DEFAULT_FORMAT)
