import logging
import os
import traceback
from datetime import datetime

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def setup_logging(level: str | int | None = None, log_dir: str | None = None) -> None:
    """
    Installs console (and optionally file) handlers on the root logger.

    Called implicitly by the first get_logger(); call it again explicitly to
    switch level or add a log directory after config is loaded.
    """
    global _configured

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    if log_dir is None:
        log_dir = os.getenv("LOG_DIR") or None

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if not _configured:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)
        _configured = True

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_filepath = os.path.join(
            log_dir, f"price_tracker_{datetime.now().strftime('%Y%m%d')}.log"
        )
        already = any(
            isinstance(h, logging.FileHandler)
            and h.baseFilename == os.path.abspath(log_filepath)
            for h in root.handlers
        )
        if not already:
            file_handler = logging.FileHandler(log_filepath, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    if not _configured:
        setup_logging()
    return logging.getLogger(name)


def full_log(logger: logging.Logger, where: str) -> None:
    """Logs the exception currently being handled, with traceback."""
    logger.error("Unhandled error in %s\n%s", where, traceback.format_exc())
