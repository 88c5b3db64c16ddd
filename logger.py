import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_NAME = "asstime"


def _drop_handler(logger: logging.Logger, name: str):
    for handler in list(logger.handlers):
        if handler.get_name() == name:
            logger.removeHandler(handler)
            handler.close()


def setup_logging(
        log_dir: Path,
        level=logging.INFO,
        verbose: bool = False,
        max_bytes: int = config.LOG_MAX_BYTES,
        backup_count: int = config.LOG_BACKUP_COUNT,
) -> logging.Logger:
    """Attach the file handler (and the stderr handler if verbose) to the app logger.

    Handlers are named, so calling this again swaps them out instead of
    stacking duplicates. The module loggers (store, session, cli) all
    propagate up to this one.

    An unusable log folder raises OSError right away; the stderr handler
    is already in place by then.
    """
    logger = logging.getLogger(ROOT_NAME)
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else level)

    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler_name = f"{ROOT_NAME}:console"
    _drop_handler(logger, console_handler_name)
    if verbose:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    file_handler_name = f"{ROOT_NAME}:file"
    log_file_path = log_dir / config.LOG_FILE_NAME
    existing = [h for h in logger.handlers if h.get_name() == file_handler_name]
    if not existing or Path(existing[0].baseFilename) != log_file_path:
        _drop_handler(logger, file_handler_name)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_file_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=False,
        )
        file_handler.setFormatter(fmt)
        file_handler.set_name(file_handler_name)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the app logger, e.g. get_logger("store") -> "asstime.store"."""
    return logging.getLogger(f"{ROOT_NAME}.{name}")
