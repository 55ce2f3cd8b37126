import logging

LOGGER_NAME = "tonify"


def setup_logger(level: str | None = None) -> logging.Logger:
    """Configure the application logger once; later calls return it unchanged."""
    logger = logging.getLogger(LOGGER_NAME)
    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    logger.setLevel(log_level)

    # Avoid duplicate handlers on reload
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the application logger, e.g. ``tonify.relay``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
