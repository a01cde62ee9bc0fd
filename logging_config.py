"""
Logging Configuration
Sets up the loggers used by the demo.
"""
import logging
import sys
from typing import Optional

LOGGER_NAMES = ("signal_model", "main")


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the loggers of the demo modules.

    Streamlit re-executes the page script on every interaction, so this is
    called many times per session and must stay idempotent.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Drop handlers left over from a previous rerun
        for old_handler in list(logger.handlers):
            logger.removeHandler(old_handler)
            old_handler.close()
        for handler in handlers:
            logger.addHandler(handler)
        logger.propagate = False

    logging.getLogger("main").debug("Logging initialized.")
