"""
Logging helpers shared by the blueprints and services.
"""
import logging

ROOT_LOGGER = "taskboard"


def setup_logging(log_level="INFO"):
    """
    Configure the application logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The root application logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name):
    """Child logger of the application logger; inherits its level and handler."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
