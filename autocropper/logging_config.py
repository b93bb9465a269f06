import logging
import os

LOGGER_NAME = "autocropper"


def setup_logging(log_level=logging.INFO, log_dir="logs", console_level=logging.WARNING):
    """
    Sets up logging for the application.

    Args:
        log_level (int): Level for the log file (e.g., logging.INFO, logging.DEBUG).
        log_dir (str | None): Directory to store the log file; None disables the file handler.
        console_level (int): Level for the console handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(min(log_level, console_level))

    # Prevent adding multiple handlers if already set up
    if logger.handlers:
        return logger

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(os.path.join(log_dir, f"{LOGGER_NAME}.log"), encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

    # Only show warnings/errors in console by default
    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    return logger
