import logging
import sys

LOGGER_NAME = "image_converter"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure the service logger; safe to call more than once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Format: Timestamp - Logger - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # avoid duplicate handlers when called again (tests, reload)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


logger = setup_logging()
