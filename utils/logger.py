import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ROOT_LOGGER = "quiz_generator"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Configure basic logging for the service and return its root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper())
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
